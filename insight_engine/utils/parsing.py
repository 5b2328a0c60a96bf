"""Cell coercion helpers

Row cells are one of None, bool, int/float or str. These helpers turn them into
numbers and strings with fixed rules so every engine agrees on what a
"numeric" cell is.
"""

import math
import re
from typing import Any, Optional

# Leading numeric prefix: "12.5kg" -> 12.5, "  -3e2" -> -300
_NUMBER_PREFIX_RE = re.compile(r"^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")
# Whole-string number (surrounding whitespace allowed)
_NUMBER_FULL_RE = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


def try_parse_number(value: Any) -> Optional[float]:
    """
    Parse a cell into a finite float.

    Strings are read up to the end of their leading numeric prefix, so
    ``"42 units"`` gives 42.0. Booleans, None, non-numeric strings and
    non-finite results give None.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
        return number if math.isfinite(number) else None
    if isinstance(value, str):
        match = _NUMBER_PREFIX_RE.match(value)
        if not match:
            return None
        try:
            number = float(match.group(1))
        except (ValueError, OverflowError):
            return None
        return number if math.isfinite(number) else None
    return None


def is_strict_number(value: Any) -> bool:
    """True when the whole cell is a finite number (no trailing text)"""
    if value is None or isinstance(value, bool):
        return False
    if isinstance(value, (int, float)):
        return math.isfinite(float(value))
    if isinstance(value, str):
        text = value.strip()
        if not _NUMBER_FULL_RE.fullmatch(text):
            return False
        return math.isfinite(float(text))
    return False


def cell_to_str(value: Any) -> str:
    """String form of a cell: None -> "null", True -> "true", 15.0 -> "15"."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if math.isfinite(value) and value.is_integer():
            return str(int(value))
        return repr(value)
    return str(value)


def is_blank(value: Any) -> bool:
    """None or empty string"""
    return value is None or value == ""


def round_half_up(value: float, digits: int) -> float:
    """
    Round with ties going towards +infinity (-2.345 -> -2.34)

    Values that cannot be scaled without leaving the float range are
    returned unchanged.
    """
    factor = 10 ** digits
    scaled = value * factor
    if not math.isfinite(scaled):
        return value
    return math.floor(scaled + 0.5) / factor
