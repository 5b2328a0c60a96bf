"""Correlation Engine - pairwise Pearson matrix"""

import math
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from insight_engine.core.constants import (
    CORRELATION_MIN_COLUMNS,
    CORRELATION_MIN_PAIRS,
    STATS_DECIMALS
)
from insight_engine.models.analysis import CorrelationMatrix
from insight_engine.utils.logger import log
from insight_engine.utils.parsing import round_half_up, try_parse_number


def aligned_pairs(rows: Sequence[Mapping[str, Any]], col_a: str, col_b: str) -> List[Tuple[float, float]]:
    """Rows where both columns parse as numbers (pairwise-complete)"""
    pairs = []
    for row in rows:
        x = try_parse_number(row.get(col_a))
        y = try_parse_number(row.get(col_b))
        if x is not None and y is not None:
            pairs.append((x, y))
    return pairs


def pearson(pairs: List[Tuple[float, float]]) -> float:
    """Pearson r by sums of products; 0 when undefined"""
    n = len(pairs)
    if n < CORRELATION_MIN_PAIRS:
        return 0.0
    xs = [x for x, _ in pairs]
    ys = [y for _, y in pairs]
    if min(xs) == max(xs) or min(ys) == max(ys):
        return 0.0

    sum_x = sum(x for x, _ in pairs)
    sum_y = sum(y for _, y in pairs)
    sum_xy = sum(x * y for x, y in pairs)
    sum_x2 = sum(x * x for x, _ in pairs)
    sum_y2 = sum(y * y for _, y in pairs)

    numerator = n * sum_xy - sum_x * sum_y
    spread = (n * sum_x2 - sum_x * sum_x) * (n * sum_y2 - sum_y * sum_y)
    # Float noise can push the product below 0; huge values overflow it
    if not math.isfinite(spread) or not math.isfinite(numerator) or spread <= 0:
        return 0.0

    r = numerator / math.sqrt(spread)
    if not math.isfinite(r):
        return 0.0
    return round_half_up(max(-1.0, min(1.0, r)), STATS_DECIMALS)


def calculate_correlations(
    rows: Sequence[Mapping[str, Any]],
    numeric_columns: Sequence[str]
) -> Optional[CorrelationMatrix]:
    """
    Build the correlation matrix of the given numeric columns

    Returns:
        CorrelationMatrix, or None with no rows or fewer than 2 columns
    """
    if not rows or len(numeric_columns) < CORRELATION_MIN_COLUMNS:
        log.warning(f"Correlation needs at least {CORRELATION_MIN_COLUMNS} numeric columns, got {len(numeric_columns)}")
        return None

    columns = list(numeric_columns)
    matrix: Dict[str, Dict[str, float]] = {col: {} for col in columns}

    for i, col_a in enumerate(columns):
        matrix[col_a][col_a] = 1.0
        for col_b in columns[i + 1:]:
            r = pearson(aligned_pairs(rows, col_a, col_b))
            matrix[col_a][col_b] = r
            matrix[col_b][col_a] = r

    # Keep inner dicts in column order
    ordered = {col_a: {col_b: matrix[col_a][col_b] for col_b in columns} for col_a in columns}
    return CorrelationMatrix(matrix=ordered, columns=columns)
