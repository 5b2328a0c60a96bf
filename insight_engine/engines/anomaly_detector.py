"""Anomaly Detector - z-score outliers"""

import math
from typing import Any, List, Mapping, Sequence

from insight_engine.core.constants import (
    ANOMALY_MIN_VALUES,
    ANOMALY_STD_MULTIPLIER,
    DEVIATION_DECIMALS
)
from insight_engine.models.analysis import AnomalyRecord
from insight_engine.utils.logger import log
from insight_engine.utils.parsing import round_half_up, try_parse_number


def find_anomalies(rows: Sequence[Mapping[str, Any]], column: str) -> List[AnomalyRecord]:
    """
    Flag rows whose value lies more than 2 population standard deviations
    from the column mean.

    Rows with unparsable cells are skipped but keep their index. Fewer than 3
    numeric values yields no anomalies.
    """
    indexed = []
    for index, row in enumerate(rows):
        number = try_parse_number(row.get(column))
        if number is not None:
            indexed.append((index, number))

    if len(indexed) < ANOMALY_MIN_VALUES:
        return []

    numbers = [v for _, v in indexed]
    if min(numbers) == max(numbers):
        return []
    mean = sum(numbers) / len(numbers)
    std_dev = math.sqrt(sum((v - mean) * (v - mean) for v in numbers) / len(numbers))
    if not math.isfinite(std_dev):
        log.warning(f"Column {column} overflows float range, anomalies skipped")
        return []
    threshold = ANOMALY_STD_MULTIPLIER * std_dev

    return [
        AnomalyRecord(
            row_index=index,
            value=value,
            deviation=round_half_up((value - mean) / std_dev, DEVIATION_DECIMALS)
        )
        for index, value in indexed
        if abs(value - mean) > threshold
    ]
