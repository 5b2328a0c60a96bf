"""Analysis constants"""

from typing import Set, Tuple

# Column type inference
TYPE_SAMPLE_SIZE = 100
DATE_SAMPLE_SIZE = 50
DATE_COLUMN_RATIO = 0.7
BOOLEAN_TOKENS: Set[str] = {"true", "false", "1", "0", "yes", "no"}

# Missing value markers (besides null)
MISSING_MARKERS: Set[str] = {"", "N/A"}

# Anomaly detection
ANOMALY_MIN_VALUES = 3
ANOMALY_STD_MULTIPLIER = 2

# Correlation
CORRELATION_MIN_COLUMNS = 2
CORRELATION_MIN_PAIRS = 2

# Rounding
STATS_DECIMALS = 3
AGGREGATE_DECIMALS = 2
DEVIATION_DECIMALS = 2
MODE_DECIMALS = 2

# Percentiles reported by the statistics engine
PERCENTILES: Tuple[Tuple[str, float], ...] = (
    ("p25", 0.25),
    ("p75", 0.75),
    ("p90", 0.90),
    ("p95", 0.95),
    ("p99", 0.99),
)

# Dispatcher row limits
TEXT_TABLE_ROWS = 20
SQL_TABLE_ROWS = 50
SCATTER_MAX_POINTS = 100
FALLBACK_CHART_ROWS = 20

# Period grouping
PERIODS: Set[str] = {"day", "week", "month", "year"}
DEFAULT_PERIOD = "day"

# Filter operators that accept null cells
NULL_OPERATORS: Set[str] = {"isNull", "isEmpty"}

# Chart types
CHART_TYPES: Set[str] = {"line", "bar", "pie", "scatter"}
DEFAULT_CHART_TYPE = "line"
