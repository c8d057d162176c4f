"""
Record table views: month grouping and date-range filtering.
"""

import calendar
import logging
from collections.abc import Iterable
from datetime import date, timedelta
from typing import Any

from modules.leave_analytics.core.exceptions import LeaveValidationError
from modules.leave_analytics.schemas.leave import LeaveRecord, MonthGroup, parse_leave_date
from modules.leave_analytics.services.aggregation import (
    RecordInput,
    month_label,
    normalize_records,
)

logger = logging.getLogger(__name__)


def _as_date(value: Any, field_name: str) -> date | None:
    if value is None or value == "":
        return None
    try:
        return parse_leave_date(value)
    except ValueError as e:
        raise LeaveValidationError(f"Invalid {field_name}: {value!r}") from e


def group_records_by_month(records: Iterable[RecordInput]) -> list[MonthGroup]:
    """
    Group records for the records table.

    Groups are newest month first; records inside a group are newest day
    first (records on the same day keep store order).
    """
    groups: dict[str, list[LeaveRecord]] = {}
    for record in normalize_records(records):
        groups.setdefault(record.month_key, []).append(record)

    result = []
    for month_year in sorted(groups, reverse=True):
        year, month = (int(part) for part in month_year.split("-"))
        month_records = sorted(groups[month_year], key=lambda r: r.leave_date, reverse=True)
        result.append(
            MonthGroup(
                month_year=month_year,
                display_name=month_label(date(year, month, 1)),
                records=month_records,
                total_days=len(month_records),
            )
        )
    return result


def filter_by_date_range(
    records: Iterable[RecordInput],
    from_date: date | str | None = None,
    to_date: date | str | None = None,
) -> list[LeaveRecord]:
    """
    Records whose leave date lies in ``[from_date, to_date]``.

    Either bound may be omitted. With neither, every record is returned.

    Raises:
        LeaveValidationError: If a bound is unparseable or from_date > to_date.
    """
    start = _as_date(from_date, "from date")
    end = _as_date(to_date, "to date")
    if start and end and start > end:
        raise LeaveValidationError("From date cannot be after to date")

    normalized = normalize_records(records)
    filtered = [
        record for record in normalized
        if (start is None or record.leave_date >= start)
        and (end is None or record.leave_date <= end)
    ]
    logger.debug(f"Date filter {start}..{end} kept {len(filtered)}/{len(normalized)} record(s)")
    return filtered


def last_days_range(days: int, today: date | None = None) -> tuple[date, date]:
    """Quick filter: the ``days`` days before today, through today."""
    if days < 0:
        raise LeaveValidationError("Days must not be negative")
    today = today or date.today()
    return today - timedelta(days=days), today


def current_month_range(today: date | None = None) -> tuple[date, date]:
    """Quick filter: first to last day of the current month."""
    today = today or date.today()
    last_day = calendar.monthrange(today.year, today.month)[1]
    return today.replace(day=1), today.replace(day=last_day)
