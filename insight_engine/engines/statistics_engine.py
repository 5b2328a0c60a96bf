"""Statistics Engine - descriptive statistics for numeric columns"""

import math
from typing import Any, Dict, List, Mapping, Optional, Sequence

from insight_engine.core.constants import (
    MISSING_MARKERS,
    MODE_DECIMALS,
    PERCENTILES,
    STATS_DECIMALS
)
from insight_engine.models.analysis import StatisticsResult
from insight_engine.models.dataset import MissingValueInfo
from insight_engine.utils.logger import log
from insight_engine.utils.parsing import round_half_up, try_parse_number


def column_values(rows: Sequence[Mapping[str, Any]], column: str) -> List[float]:
    """Numeric values of a column in row order, unparsable cells dropped"""
    values = []
    for row in rows:
        number = try_parse_number(row.get(column))
        if number is not None:
            values.append(number)
    return values


def nearest_rank(sorted_values: List[float], p: float) -> float:
    """sorted[floor(n * p)], clamped to the last element"""
    index = math.floor(len(sorted_values) * p)
    return sorted_values[min(index, len(sorted_values) - 1)]


def compute_mode(values: List[float]) -> float:
    """
    Most frequent value after rounding to 2 decimals.

    Ties go to the value that first appears in row order.
    """
    frequency: Dict[float, int] = {}
    for v in values:
        key = round_half_up(v, MODE_DECIMALS)
        frequency[key] = frequency.get(key, 0) + 1

    best_key = None
    best_count = 0
    for key, count in frequency.items():
        if count > best_count:
            best_key, best_count = key, count
    return best_key


def standardized_moment(values: List[float], mean: float, std_dev: float, order: int) -> float:
    return sum(((v - mean) / std_dev) ** order for v in values) / len(values)


def calculate_statistics(rows: Sequence[Mapping[str, Any]], column: str) -> Optional[StatisticsResult]:
    """
    Compute descriptive statistics for a column

    Args:
        rows: dataset rows
        column: column name

    Returns:
        StatisticsResult, or None when the column has no numeric values
    """
    values = column_values(rows, column)
    if not values:
        log.debug(f"No numeric values in column: {column}")
        return None

    n = len(values)
    sorted_values = sorted(values)
    total = sum(values)
    mean = total / n

    if n % 2 == 0:
        median = (sorted_values[n // 2 - 1] + sorted_values[n // 2]) / 2
    else:
        median = sorted_values[n // 2]

    variance = sum((v - mean) * (v - mean) for v in values) / n
    if not math.isfinite(mean) or not math.isfinite(variance):
        log.warning(f"Column {column} overflows float range, statistics skipped")
        return None
    # Identical values: float noise in the mean must not leave a tiny spread
    if sorted_values[0] == sorted_values[-1]:
        variance = 0.0
    std_dev = math.sqrt(variance)

    q1 = sorted_values[math.floor(n * 0.25)]
    q3 = sorted_values[math.floor(n * 0.75)]

    skewness = standardized_moment(values, mean, std_dev, 3) if n > 2 and std_dev > 0 else 0.0
    kurtosis = standardized_moment(values, mean, std_dev, 4) - 3 if n > 3 and std_dev > 0 else 0.0

    def r(x: float) -> float:
        return round_half_up(x, STATS_DECIMALS)

    percentiles = {name: r(nearest_rank(sorted_values, p)) for name, p in PERCENTILES}

    return StatisticsResult(
        column=column,
        count=n,
        mean=r(mean),
        median=r(median),
        mode=compute_mode(values),
        min=sorted_values[0],
        max=sorted_values[-1],
        sum=r(total),
        std_dev=r(std_dev),
        variance=r(variance),
        q1=r(q1),
        q3=r(q3),
        iqr=r(q3 - q1),
        skewness=r(skewness),
        kurtosis=r(kurtosis),
        **percentiles
    )


def count_missing_values(rows: Sequence[Mapping[str, Any]], columns: Sequence[str]) -> Dict[str, MissingValueInfo]:
    """Count null, empty and "N/A" cells per column"""
    total = len(rows)
    missing = {}
    for col in columns:
        count = 0
        for row in rows:
            value = row.get(col)
            if value is None or (isinstance(value, str) and value in MISSING_MARKERS):
                count += 1
        percentage = round_half_up(count / total * 100, 2) if total else 0.0
        missing[col] = MissingValueInfo(count=count, percentage=percentage)
    return missing
