"""Grouping - category groups, calendar periods and group reductions"""

from typing import Any, Dict, List, Mapping, Sequence

from insight_engine.core.constants import AGGREGATE_DECIMALS, DEFAULT_PERIOD, PERIODS
from insight_engine.engines.date_parser import iso_week_number, parse_date
from insight_engine.models.analysis import AggregateRecord
from insight_engine.utils.logger import log
from insight_engine.utils.parsing import cell_to_str, round_half_up, try_parse_number

Groups = Dict[str, List[Mapping[str, Any]]]


def group_by(rows: Sequence[Mapping[str, Any]], column: str) -> Groups:
    """
    Group rows by the string value of a column

    Missing and null cells go to the "null" group. Keys keep first-occurrence
    order, rows keep dataset order.
    """
    groups: Groups = {}
    for row in rows:
        key = cell_to_str(row.get(column))
        groups.setdefault(key, []).append(row)
    return groups


def period_key(d, period: str) -> str:
    if period == "year":
        return f"{d.year}"
    if period == "month":
        return f"{d.year}-{d.month:02d}"
    if period == "week":
        # Calendar year with ISO week number, e.g. 2024-12-30 -> "2024-W01"
        return f"{d.year}-W{iso_week_number(d):02d}"
    return f"{d.year}-{d.month:02d}-{d.day:02d}"


def group_by_period(rows: Sequence[Mapping[str, Any]], date_column: str, period: str = DEFAULT_PERIOD) -> Groups:
    """
    Bucket rows by day, week, month or year of a date column

    Args:
        rows: dataset rows
        date_column: column holding date strings
        period: day, week, month or year (anything else means day)

    Returns:
        key -> rows, rows whose date does not parse are left out
    """
    if period not in PERIODS:
        log.warning(f"Unknown period '{period}', using {DEFAULT_PERIOD}")
        period = DEFAULT_PERIOD

    groups: Groups = {}
    for row in rows:
        parsed = parse_date(row.get(date_column))
        if parsed is None:
            continue
        groups.setdefault(period_key(parsed, period), []).append(row)
    return groups


def _reduce(values: List[float], operation: str) -> float:
    if operation == "sum":
        return sum(values)
    if operation in ("mean", "avg"):
        return sum(values) / len(values) if values else 0.0
    if operation == "min":
        return min(values) if values else 0.0
    if operation == "max":
        return max(values) if values else 0.0
    # "count" and unknown operations
    return float(len(values))


def aggregate_groups(groups: Groups, target_column: str, operation: str = "sum") -> List[AggregateRecord]:
    """
    Reduce ``target_column`` within each group

    Operations: sum, mean/avg, count, min, max; anything else counts numeric
    values. A group with no numeric values reduces to 0. ``count`` on the
    record is always the full row count of the group.
    """
    result = []
    for key, rows in groups.items():
        values = []
        for row in rows:
            number = try_parse_number(row.get(target_column))
            if number is not None:
                values.append(number)
        result.append(AggregateRecord(
            group=key,
            value=round_half_up(_reduce(values, operation), AGGREGATE_DECIMALS),
            count=len(rows)
        ))
    return result
