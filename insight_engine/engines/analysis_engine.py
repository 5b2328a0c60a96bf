"""Analysis Engine - selects and composes computations for a classified intent"""

from typing import Any, Dict, List, Mapping, Optional, Sequence

from insight_engine.core.config import settings
from insight_engine.core.constants import (
    CHART_TYPES,
    DEFAULT_CHART_TYPE,
    DEFAULT_PERIOD,
    FALLBACK_CHART_ROWS,
    SCATTER_MAX_POINTS,
    SQL_TABLE_ROWS,
    TEXT_TABLE_ROWS
)
from insight_engine.core.keywords import KeywordTable, get_keyword_table
from insight_engine.engines.anomaly_detector import find_anomalies
from insight_engine.engines.correlation_engine import calculate_correlations
from insight_engine.engines.grouping import aggregate_groups, group_by, group_by_period
from insight_engine.engines.statistics_engine import calculate_statistics, column_values, count_missing_values
from insight_engine.engines.type_inference import detect_column_types, detect_date_columns, numeric_columns
from insight_engine.models.analysis import AnalysisResult, ChartSpec, Intent, IntentType
from insight_engine.models.dataset import ColumnType, Dataset, DatasetProfile
from insight_engine.utils.logger import log
from insight_engine.utils.parsing import round_half_up, try_parse_number
from insight_engine.utils.trace import TraceContext

# Columns of a statistics table row, in display order
STATISTICS_TABLE_FIELDS = [
    "count", "mean", "median", "mode", "std_dev", "variance",
    "min", "max", "sum", "q1", "q3", "iqr",
    "p25", "p75", "p90", "p95", "p99",
    "skewness", "kurtosis"
]

DEFAULT_MESSAGE = "Query processed"


class AnalysisError(Exception):
    """Request cannot be analysed"""

    def __init__(self, code: str, message: str, detail: Dict[str, Any] | None = None):
        super().__init__(message)
        self.code = code
        self.detail = detail or {}


class AnalysisDispatcher:
    """Runs the computations an intent asks for and assembles the result"""

    def __init__(self, keywords: Optional[KeywordTable] = None):
        self.keywords = keywords or get_keyword_table()

    def run(self, intent: Intent, query: str, dataset: Dataset, trace: Optional[TraceContext] = None) -> AnalysisResult:
        """
        Validate a request and dispatch it

        Raises:
            AnalysisError: empty query, no rows or too many rows
        """
        if not query or not query.strip():
            raise AnalysisError("EMPTY_QUERY", "Query is required")
        if not dataset.rows:
            raise AnalysisError("NO_DATA", "Data is required")
        if dataset.row_count > settings.max_request_rows:
            raise AnalysisError(
                "TOO_MANY_ROWS",
                f"Dataset exceeds row limit: {dataset.row_count} > {settings.max_request_rows}",
                {"row_count": dataset.row_count, "limit": settings.max_request_rows}
            )
        return self.dispatch(intent, query, dataset, trace=trace)

    def dispatch(
        self,
        intent: Intent,
        query: str,
        dataset: Dataset,
        column_types: Optional[Dict[str, ColumnType]] = None,
        date_columns: Optional[List[str]] = None,
        trace: Optional[TraceContext] = None
    ) -> AnalysisResult:
        """
        Compose the analysis result

        Order: intent branch, then correlation override when the query asks
        for it, then a synthesized bar chart when nothing produced one.

        Args:
            intent: classified intent
            query: raw user query, scanned for keywords
            dataset: rows and columns
            column_types: inferred types (computed when omitted)
            date_columns: detected date columns (computed when omitted)
            trace: optional step recorder

        Returns:
            AnalysisResult
        """
        trace = trace or TraceContext()
        rows = dataset.rows
        columns = dataset.columns
        log.info(f"Dispatching intent={intent.type.value}: {len(rows)} rows, {len(columns)} columns")

        with trace.timed("detect_types") as step:
            if column_types is None:
                column_types = detect_column_types(rows, columns)
            if date_columns is None:
                date_columns = detect_date_columns(rows, columns)
            numeric = numeric_columns(column_types)
            step["detail"] = f"numeric={len(numeric)}, date={len(date_columns)}"

        result = AnalysisResult(
            type=intent.type.value,
            message=intent.message or DEFAULT_MESSAGE,
            description=intent.description,
            insights=list(intent.insights)
        )

        with trace.timed(f"branch:{intent.type.value}"):
            if intent.type == IntentType.STATISTICS:
                self._statistics(result, rows, numeric)
            elif intent.type == IntentType.VISUALIZATION:
                self._visualization(result, intent, query, rows, columns, numeric, date_columns)
            elif intent.type == IntentType.SQL or intent.sql:
                self._sql(result, query, rows, numeric)
            else:
                result.table = list(rows[:TEXT_TABLE_ROWS])

        if self.keywords.wants_correlations(query):
            with trace.timed("correlations") as step:
                self._correlations(result, rows, numeric)
                step["detail"] = "computed" if result.correlations else "skipped"

        if result.chart is None and numeric:
            with trace.timed("fallback_chart"):
                self._fallback_chart(result, rows, numeric)

        log.info(f"Analysis done: type={result.type}, table={'yes' if result.table is not None else 'no'}, "
                 f"chart={result.chart.chart_type if result.chart else 'none'}")
        return result

    def profile(self, dataset: Dataset) -> DatasetProfile:
        """Column types, date columns and missing values of a dataset"""
        column_types = detect_column_types(dataset.rows, dataset.columns)
        return DatasetProfile(
            row_count=dataset.row_count,
            column_count=len(dataset.columns),
            column_types=column_types,
            numeric_columns=numeric_columns(column_types),
            date_columns=detect_date_columns(dataset.rows, dataset.columns),
            missing_values=count_missing_values(dataset.rows, dataset.columns)
        )

    def _statistics(self, result: AnalysisResult, rows: Sequence[Mapping[str, Any]], numeric: List[str]) -> None:
        stats = {}
        for col in numeric:
            stat = calculate_statistics(rows, col)
            if stat:
                stats[col] = stat
        log.info(f"Statistics computed for {len(stats)} columns")

        result.statistics = stats
        result.table = [
            {"column": col, **{field: getattr(stat, field) for field in STATISTICS_TABLE_FIELDS}}
            for col, stat in stats.items()
        ]
        if stats:
            result.chart = ChartSpec(
                chart_type="bar",
                data=[{"name": col, "value": stat.mean} for col, stat in stats.items()],
                x_key="name",
                y_key="value"
            )

    def _visualization(
        self,
        result: AnalysisResult,
        intent: Intent,
        query: str,
        rows: Sequence[Mapping[str, Any]],
        columns: List[str],
        numeric: List[str],
        date_columns: List[str]
    ) -> None:
        viz = intent.visualization
        chart_type = (viz and viz.chart_type) or DEFAULT_CHART_TYPE
        x_axis = (viz and viz.x_axis) or (columns[0] if columns else None)
        y_axis = (viz and viz.y_axis) or (numeric[0] if numeric else None)

        if not x_axis or not y_axis:
            log.warning(f"Cannot build {chart_type} chart: x={x_axis}, y={y_axis}")
            return

        if x_axis in date_columns:
            period = self.keywords.detect_period(query, DEFAULT_PERIOD)
            buckets = group_by_period(rows, x_axis, period)
            points = []
            for key in sorted(buckets):
                values = column_values(buckets[key], y_axis)
                mean = sum(values) / len(values) if values else 0.0
                points.append((key, round_half_up(mean, 2)))
            log.info(f"Date axis {x_axis} grouped by {period}: {len(points)} buckets")

            if chart_type == "pie":
                result.chart = ChartSpec(
                    chart_type="pie",
                    data=[{"name": key, "value": value} for key, value in points],
                    x_key=x_axis,
                    y_key="value"
                )
            else:
                result.chart = ChartSpec(
                    chart_type=chart_type,
                    data=[{x_axis: key, y_axis: value} for key, value in points],
                    x_key=x_axis,
                    y_key=y_axis
                )
        elif chart_type not in CHART_TYPES:
            log.warning(f"Unsupported chart type for a category axis: {chart_type}")
        elif chart_type == "pie":
            aggregated = aggregate_groups(group_by(rows, x_axis), y_axis, "sum")
            result.chart = ChartSpec(
                chart_type="pie",
                data=[{"name": item.group, "value": item.value} for item in aggregated],
                x_key=x_axis,
                y_key="value"
            )
        elif chart_type == "scatter":
            points = []
            for row in rows[:SCATTER_MAX_POINTS]:
                x = try_parse_number(row.get(x_axis))
                y = try_parse_number(row.get(y_axis))
                if x is not None and y is not None:
                    points.append({"x": x, "y": y})
            result.chart = ChartSpec(chart_type="scatter", data=points, x_key="x", y_key="y")
        else:
            aggregated = aggregate_groups(group_by(rows, x_axis), y_axis, "mean")
            result.chart = ChartSpec(
                chart_type=chart_type,
                data=[{x_axis: item.group, y_axis: item.value} for item in aggregated],
                x_key=x_axis,
                y_key=y_axis
            )

    def _sql(self, result: AnalysisResult, query: str, rows: Sequence[Mapping[str, Any]], numeric: List[str]) -> None:
        if not self.keywords.wants_anomalies(query):
            result.table = list(rows[:SQL_TABLE_ROWS])
            return

        table = []
        for col in numeric:
            for anomaly in find_anomalies(rows, col):
                table.append({
                    "column": col,
                    "row_index": anomaly.row_index,
                    "value": anomaly.value,
                    "deviation": anomaly.deviation
                })
        log.info(f"Anomalies found: {len(table)}")
        result.table = table

    def _correlations(self, result: AnalysisResult, rows: Sequence[Mapping[str, Any]], numeric: List[str]) -> None:
        if len(numeric) < 2:
            log.warning("Correlations need at least 2 numeric columns")
            return
        correlations = calculate_correlations(rows, numeric)
        if correlations:
            result.correlations = correlations
            result.type = IntentType.CORRELATIONS.value
            log.info(f"Correlations computed for {len(numeric)} columns")

    def _fallback_chart(self, result: AnalysisResult, rows: Sequence[Mapping[str, Any]], numeric: List[str]) -> None:
        if result.table is not None:
            table = result.table
            if not table:
                return
            first = table[0]
            value_col = next((col for col in numeric if col in first), None)
            if value_col is None:
                value_col = next((key for key in first if try_parse_number(first[key]) is not None), None)
            if value_col is None:
                return

            data = []
            for idx, row in enumerate(table[:FALLBACK_CHART_ROWS]):
                x_value = row[value_col] if value_col in row else idx
                y_value = try_parse_number(row.get(value_col))
                data.append({value_col: x_value, "value": y_value if y_value is not None else 0.0})
            result.chart = ChartSpec(chart_type="bar", data=data, x_key=value_col, y_key="value")
            return

        stats = calculate_statistics(rows, numeric[0])
        if stats:
            result.chart = ChartSpec(
                chart_type="bar",
                data=[{"name": numeric[0], "value": stats.mean}],
                x_key="name",
                y_key="value"
            )


# Global singleton
_analysis_dispatcher = None


def get_analysis_dispatcher() -> AnalysisDispatcher:
    """Get the AnalysisDispatcher singleton"""
    global _analysis_dispatcher
    if _analysis_dispatcher is None:
        _analysis_dispatcher = AnalysisDispatcher()
    return _analysis_dispatcher
