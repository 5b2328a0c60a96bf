"""Type Inference - column semantics from a data sample"""

from typing import Any, Dict, List, Mapping, Sequence

from insight_engine.core.constants import (
    BOOLEAN_TOKENS,
    DATE_COLUMN_RATIO,
    DATE_SAMPLE_SIZE,
    TYPE_SAMPLE_SIZE
)
from insight_engine.engines.date_parser import parse_date
from insight_engine.models.dataset import ColumnType
from insight_engine.utils.logger import log
from insight_engine.utils.parsing import cell_to_str, is_blank, is_strict_number


def _sample(rows: Sequence[Mapping[str, Any]], column: str, size: int) -> List[Any]:
    """Non-blank values of ``column`` within the first ``size`` rows"""
    return [row.get(column) for row in rows[:size] if not is_blank(row.get(column))]


def infer_column_type(values: List[Any]) -> ColumnType:
    """
    Classify a sample. Precedence: number > date > boolean > string.

    A single parseable date is enough for ``date``; a column of "1"/"0" is
    always ``number``.
    """
    if not values:
        return ColumnType.UNKNOWN
    if all(is_strict_number(v) for v in values):
        return ColumnType.NUMBER
    if any(parse_date(v) is not None for v in values):
        return ColumnType.DATE
    if all(cell_to_str(v).lower() in BOOLEAN_TOKENS for v in values):
        return ColumnType.BOOLEAN
    return ColumnType.STRING


def detect_column_types(rows: Sequence[Mapping[str, Any]], columns: Sequence[str]) -> Dict[str, ColumnType]:
    """Infer a ColumnType for every column"""
    types = {col: infer_column_type(_sample(rows, col, TYPE_SAMPLE_SIZE)) for col in columns}
    log.debug(f"Column types: {types}")
    return types


def detect_date_columns(rows: Sequence[Mapping[str, Any]], columns: Sequence[str]) -> List[str]:
    """Columns where more than 70% of sampled values parse as dates"""
    date_columns = []
    for col in columns:
        sample = _sample(rows, col, DATE_SAMPLE_SIZE)
        if not sample:
            continue
        parsed = sum(1 for v in sample if parse_date(v) is not None)
        if parsed / len(sample) > DATE_COLUMN_RATIO:
            date_columns.append(col)
    return date_columns


def numeric_columns(column_types: Mapping[str, ColumnType]) -> List[str]:
    """Columns typed as numbers, in column order"""
    return [col for col, col_type in column_types.items() if col_type == ColumnType.NUMBER]
