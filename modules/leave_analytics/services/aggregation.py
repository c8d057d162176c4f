"""
Leave Aggregation Service.

Turns a flat list of leave records into the monthly, overall and
per-employee summaries shown by the analytics views.

Every function here is pure: it takes the complete current record set,
keeps no state between calls and performs no I/O. Callers re-run the
functions after every change to the record set instead of patching
previous results.

Records may be passed as LeaveRecord models or as raw dicts (camelCase or
snake_case keys). Both go through normalize_records() exactly once per
call, which applies the "Annual Leave" / "Active" defaults.
"""

import logging
from collections.abc import Iterable, Mapping
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

from pydantic import ValidationError

from modules.leave_analytics.core.exceptions import DataError
from modules.leave_analytics.schemas.leave import (
    NO_DATA,
    EmployeeSummary,
    LeaveRecord,
    LeaveStatus,
    LeaveTypeShare,
    MonthlyBucket,
    MonthlyStats,
    MonthlyTrendPoint,
    OverallSummary,
    StatusShare,
    TotalStats,
)

logger = logging.getLogger(__name__)

RecordInput = LeaveRecord | Mapping[str, Any]

MonthKey = tuple[int, int]

# Labels are English whatever the process locale
MONTH_NAMES = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)


# =============================================================================
# Normalization
# =============================================================================


def normalize_records(records: Iterable[RecordInput]) -> list[LeaveRecord]:
    """
    Validate records and apply the leave type / status defaults.

    Args:
        records: LeaveRecord models or raw record dicts, in store order.

    Returns:
        list[LeaveRecord]: Records in the same order.

    Raises:
        DataError: If a record has no employee name or an unparseable date.
    """
    normalized: list[LeaveRecord] = []
    for position, raw in enumerate(records):
        if isinstance(raw, LeaveRecord):
            normalized.append(raw)
            continue
        try:
            normalized.append(LeaveRecord.model_validate(raw))
        except ValidationError as e:
            record_id = raw.get("id") if isinstance(raw, Mapping) else None
            problems = "; ".join(
                f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()
            )
            raise DataError(
                f"Invalid leave record at position {position}: {problems}",
                record_id=str(record_id) if record_id is not None else None,
            ) from e
    return normalized


# =============================================================================
# Helpers
# =============================================================================


def month_label(month_date: date) -> str:
    """Long month label, e.g. 'January 2024'."""
    return f"{MONTH_NAMES[month_date.month - 1]} {month_date.year}"


def short_month_label(month_date: date) -> str:
    """Short month label, e.g. 'Jan 2024'."""
    return f"{MONTH_NAMES[month_date.month - 1][:3]} {month_date.year}"


def _month_key(record: LeaveRecord) -> MonthKey:
    return (record.leave_date.year, record.leave_date.month)


def round_one_decimal(value: float) -> float:
    """
    One-decimal rounding of the exact binary value, ties rounded up.

    1.25 -> 1.3 and 1.15 (stored as 1.1499...) -> 1.1.
    """
    return float(Decimal(value).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def _percentage(count: int, total: int) -> float:
    if total == 0:
        return 0.0
    return 100 * count / total


def _rank_by_count(counts: Mapping[str, int]) -> list[tuple[str, int]]:
    """Entries by count descending; equal counts keep first-seen order."""
    return sorted(counts.items(), key=lambda item: item[1], reverse=True)


def _increment(counts: dict[str, int], key: str) -> None:
    counts[key] = counts.get(key, 0) + 1


# =============================================================================
# Aggregations
# =============================================================================


def compute_monthly(records: Iterable[RecordInput]) -> list[MonthlyBucket]:
    """
    Group records by calendar month.

    Buckets are ordered by (year, month), so December 2023 precedes
    January 2024 whatever the labels would sort to.
    """
    totals: dict[MonthKey, int] = {}
    type_counts: dict[MonthKey, dict[str, int]] = {}
    # dicts as ordered sets
    employees: dict[MonthKey, dict[str, None]] = {}

    for record in normalize_records(records):
        key = _month_key(record)
        totals[key] = totals.get(key, 0) + 1
        _increment(type_counts.setdefault(key, {}), record.leave_type)
        employees.setdefault(key, {})[record.employee_name] = None

    buckets = []
    for year, month in sorted(totals):
        first_day = date(year, month, 1)
        buckets.append(
            MonthlyBucket(
                month_key=f"{year:04d}-{month:02d}",
                month=month_label(first_day),
                month_date=first_day,
                total_leaves=totals[(year, month)],
                leave_types=type_counts[(year, month)],
                employees=list(employees[(year, month)]),
            )
        )

    logger.debug(f"Computed {len(buckets)} monthly bucket(s)")
    return buckets


def compute_overall(records: Iterable[RecordInput]) -> OverallSummary:
    """
    Distribution of all records by leave type and by status.

    Percentages are 0 for an empty record set. ``cancelledLeaves`` counts
    records whose status is exactly Cancelled.
    """
    normalized = normalize_records(records)
    total = len(normalized)

    type_counts: dict[str, int] = {}
    status_counts: dict[str, int] = {}
    for record in normalized:
        _increment(type_counts, record.leave_type)
        _increment(status_counts, record.status)

    leave_types = [
        LeaveTypeShare(leave_type=leave_type, count=count, percentage=_percentage(count, total))
        for leave_type, count in _rank_by_count(type_counts)
    ]
    status_distribution = [
        StatusShare(status=status, count=count, percentage=_percentage(count, total))
        for status, count in status_counts.items()
    ]

    unique_employees = len({record.employee_name for record in normalized})
    active = sum(1 for record in normalized if record.is_active)
    cancelled = sum(1 for record in normalized if record.status == LeaveStatus.CANCELLED.value)

    total_stats = TotalStats(
        total_leaves=total,
        active_leaves=active,
        cancelled_leaves=cancelled,
        unique_employees=unique_employees,
        avg_leaves_per_employee=round_one_decimal(total / unique_employees) if unique_employees else 0,
        most_used_leave_type=leave_types[0].leave_type if leave_types else NO_DATA,
    )

    return OverallSummary(
        leave_types=leave_types,
        status_distribution=status_distribution,
        total_stats=total_stats,
    )


def compute_employee_summaries(records: Iterable[RecordInput]) -> list[EmployeeSummary]:
    """
    Per-employee totals, ordered by total descending.

    Any status other than Active counts towards ``cancelledLeaves``.
    """
    summaries: dict[str, EmployeeSummary] = {}
    monthly: dict[str, dict[MonthKey, int]] = {}

    for record in normalize_records(records):
        name = record.employee_name
        summary = summaries.get(name)
        if summary is None:
            summary = summaries[name] = EmployeeSummary(employee_name=name)
            monthly[name] = {}

        summary.total_leaves += 1
        if record.is_active:
            summary.active_leaves += 1
        else:
            summary.cancelled_leaves += 1
        _increment(summary.leave_types, record.leave_type)

        key = _month_key(record)
        monthly[name][key] = monthly[name].get(key, 0) + 1

    for name, summary in summaries.items():
        summary.monthly_trend = [
            MonthlyTrendPoint(month=short_month_label(date(year, month, 1)), count=count)
            for (year, month), count in sorted(monthly[name].items())
        ]

    return sorted(summaries.values(), key=lambda s: s.total_leaves, reverse=True)


def most_used_leave_type(summary: EmployeeSummary | Mapping[str, int]) -> str:
    """
    Most frequent leave type of one employee.

    Ties go to the type encountered first; an empty tally yields "—".
    """
    counts = summary.leave_types if isinstance(summary, EmployeeSummary) else summary

    best_type = NO_DATA
    best_count = 0
    for leave_type, count in counts.items():
        if count > best_count:
            best_type, best_count = leave_type, count
    return best_type


def compute_monthly_stats(records: Iterable[RecordInput]) -> MonthlyStats:
    """
    Headline figures for the monthly view.

    The peak month is the busiest month; when several months tie, the
    latest of them is reported.
    """
    normalized = normalize_records(records)
    buckets = compute_monthly(normalized)
    if not buckets:
        return MonthlyStats()

    peak = buckets[0]
    for bucket in buckets[1:]:
        if bucket.total_leaves >= peak.total_leaves:
            peak = bucket

    return MonthlyStats(
        months_tracked=len(buckets),
        avg_leaves_per_month=round_one_decimal(len(normalized) / len(buckets)),
        peak_month=peak.month,
        latest_month_leaves=buckets[-1].total_leaves,
    )


def top_employee(summaries: list[EmployeeSummary]) -> str:
    """Name of the employee with the most records, or "—"."""
    if not summaries:
        return NO_DATA
    return summaries[0].employee_name
