"""Filter Engine - multi-condition row filters"""

from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence

from insight_engine.core.constants import NULL_OPERATORS
from insight_engine.models.analysis import FilterCondition
from insight_engine.utils.logger import log
from insight_engine.utils.parsing import cell_to_str, try_parse_number


def _text(value: Any) -> str:
    return cell_to_str(value).lower()


def _as_list(value: Any) -> List[Any]:
    return list(value) if isinstance(value, (list, tuple)) else [value]


def _compare(cell: Any, value: Any, op: Callable[[float, float], bool]) -> bool:
    left = try_parse_number(cell)
    right = try_parse_number(value)
    if left is None or right is None:
        return False
    return op(left, right)


def _between(cell: Any, value: Any) -> bool:
    bounds = _as_list(value)
    if not bounds:
        return False
    if len(bounds) == 1:
        bounds = bounds * 2
    number = try_parse_number(cell)
    low = try_parse_number(bounds[0])
    high = try_parse_number(bounds[1])
    if number is None or low is None or high is None:
        return False
    return low <= number <= high


OPERATORS: Dict[str, Callable[[Any, Any], bool]] = {
    "equals": lambda cell, value: _text(cell) == _text(value),
    "notEquals": lambda cell, value: _text(cell) != _text(value),
    "contains": lambda cell, value: _text(value) in _text(cell),
    "notContains": lambda cell, value: _text(value) not in _text(cell),
    "startsWith": lambda cell, value: _text(cell).startswith(_text(value)),
    "endsWith": lambda cell, value: _text(cell).endswith(_text(value)),
    "greater": lambda cell, value: _compare(cell, value, lambda a, b: a > b),
    "greaterOrEqual": lambda cell, value: _compare(cell, value, lambda a, b: a >= b),
    "less": lambda cell, value: _compare(cell, value, lambda a, b: a < b),
    "lessOrEqual": lambda cell, value: _compare(cell, value, lambda a, b: a <= b),
    "between": _between,
    "in": lambda cell, value: any(_text(cell) == _text(v) for v in _as_list(value)),
    "isNull": lambda cell, value: cell == "",
    "isEmpty": lambda cell, value: cell == "",
}


def evaluate_condition(row: Mapping[str, Any], condition: FilterCondition) -> bool:
    """
    Evaluate one condition against a row

    A null or missing cell passes only isNull/isEmpty. Unknown operators
    never reject a row.
    """
    cell = row.get(condition.column)
    if cell is None:
        return condition.operator in NULL_OPERATORS

    check = OPERATORS.get(condition.operator)
    if check is None:
        return True
    return check(cell, condition.value)


def advanced_filter_data(
    rows: Sequence[Mapping[str, Any]],
    conditions: Optional[Sequence[FilterCondition]]
) -> List[Mapping[str, Any]]:
    """
    Keep rows that satisfy every condition

    The per-condition ``logic`` tag is not applied: conditions are always
    combined with AND.
    """
    if not conditions:
        return list(rows)

    unknown = {c.operator for c in conditions if c.operator not in OPERATORS}
    if unknown:
        log.warning(f"Unknown filter operators pass every row: {sorted(unknown)}")
    if any(c.logic == "OR" for c in conditions):
        log.debug("OR logic tag ignored, conditions combined with AND")

    return [row for row in rows if all(evaluate_condition(row, c) for c in conditions)]
