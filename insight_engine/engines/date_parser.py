"""Date Parser - heterogeneous date strings to calendar dates"""

import re
from datetime import date, datetime
from typing import Any, Callable, List, Optional, Tuple


def _ymd(m: re.Match) -> Tuple[int, int, int]:
    return int(m.group(1)), int(m.group(2)), int(m.group(3))


def _dmy(m: re.Match) -> Tuple[int, int, int]:
    return int(m.group(3)), int(m.group(2)), int(m.group(1))


def _ym(m: re.Match) -> Tuple[int, int, int]:
    return int(m.group(1)), int(m.group(2)), 1


def _mdy(m: re.Match) -> Tuple[int, int, int]:
    return int(m.group(3)), int(m.group(1)), int(m.group(2))


# Tried in order after the ISO parse fails
DATE_PATTERNS: List[Tuple[re.Pattern, Callable[[re.Match], Tuple[int, int, int]]]] = [
    (re.compile(r"^(\d{4})-(\d{2})-(\d{2})$"), _ymd),    # YYYY-MM-DD
    (re.compile(r"^(\d{4})/(\d{2})/(\d{2})$"), _ymd),    # YYYY/MM/DD
    (re.compile(r"^(\d{2})\.(\d{2})\.(\d{4})$"), _dmy),  # DD.MM.YYYY
    (re.compile(r"^(\d{4})-(\d{2})$"), _ym),             # YYYY-MM
    (re.compile(r"^(\d{2})/(\d{2})/(\d{4})$"), _mdy),    # MM/DD/YYYY
]


def _parse_iso(text: str) -> Optional[date]:
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    except ValueError:
        return None


def parse_date(value: Any) -> Optional[date]:
    """
    Parse a cell into a calendar date

    Args:
        value: cell value; only non-empty strings can parse

    Returns:
        the date, or None when no format yields a valid date
    """
    if not isinstance(value, str):
        return None
    text = value.strip()
    if not text:
        return None

    parsed = _parse_iso(text)
    if parsed is not None:
        return parsed

    for pattern, extract in DATE_PATTERNS:
        match = pattern.match(text)
        if not match:
            continue
        year, month, day = extract(match)
        try:
            return date(year, month, day)
        except ValueError:
            continue

    return None


def iso_week_number(d: date) -> int:
    """ISO-8601 (Thursday anchored) week of year"""
    return d.isocalendar()[1]
