"""Column type inference tests"""

from insight_engine.engines.type_inference import (
    detect_column_types,
    detect_date_columns,
    infer_column_type,
    numeric_columns
)
from insight_engine.models import ColumnType


def test_number_before_boolean():
    """A 1/0 column is numeric, never boolean"""
    assert infer_column_type(["1", "0", "1"]) == ColumnType.NUMBER
    assert infer_column_type([1, 0]) == ColumnType.NUMBER


def test_boolean_tokens():
    """Boolean tokens, including mixed 1/0 and yes/no"""
    assert infer_column_type(["true", "False", "yes", "NO"]) == ColumnType.BOOLEAN
    assert infer_column_type(["1", "0", "yes"]) == ColumnType.BOOLEAN
    assert infer_column_type([True, False]) == ColumnType.BOOLEAN


def test_single_date_is_enough():
    """One parseable date makes the column a date column"""
    assert infer_column_type(["2024-01-01", "hello", "world"]) == ColumnType.DATE


def test_string_and_unknown():
    """Fallback types"""
    assert infer_column_type(["a", "b"]) == ColumnType.STRING
    assert infer_column_type(["12abc", "7"]) == ColumnType.STRING
    assert infer_column_type([]) == ColumnType.UNKNOWN


def test_detect_column_types_skips_blanks():
    """Null and empty cells are not sampled"""
    rows = [
        {"n": "", "s": "x", "e": None},
        {"n": "3.5", "s": None, "e": ""},
        {"n": 4, "s": "y"},
    ]
    types = detect_column_types(rows, ["n", "s", "e", "absent"])
    assert types == {
        "n": ColumnType.NUMBER,
        "s": ColumnType.STRING,
        "e": ColumnType.UNKNOWN,
        "absent": ColumnType.UNKNOWN,
    }
    assert numeric_columns(types) == ["n"]


def test_detect_column_types_samples_first_rows():
    """Only the first 100 rows are sampled"""
    rows = [{"v": i} for i in range(100)] + [{"v": "text"}]
    assert detect_column_types(rows, ["v"])["v"] == ColumnType.NUMBER


def test_detect_date_columns_threshold():
    """More than 70% parseable values are required"""
    eight = [{"d": "2024-01-0%d" % i} for i in range(1, 9)] + [{"d": "x"}, {"d": "y"}]
    seven = [{"d": "2024-01-0%d" % i} for i in range(1, 8)] + [{"d": "x"}, {"d": "y"}, {"d": "z"}]
    assert detect_date_columns(eight, ["d"]) == ["d"]
    assert detect_date_columns(seven, ["d"]) == []


def test_detect_date_columns_mixed_formats():
    """Supported layouts all count"""
    rows = [{"d": "2024-01-15"}, {"d": "15.01.2024"}, {"d": "2024/01/16"}, {"d": "01/17/2024"}, {"d": None}]
    assert detect_date_columns(rows, ["d", "missing"]) == ["d"]
