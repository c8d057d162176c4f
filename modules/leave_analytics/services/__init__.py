"""
Leave Analytics Module Services.
"""

from modules.leave_analytics.services.aggregation import (
    compute_employee_summaries,
    compute_monthly,
    compute_monthly_stats,
    compute_overall,
    most_used_leave_type,
    normalize_records,
    top_employee,
)
from modules.leave_analytics.services.record_store import RecordStore, generate_record_id
from modules.leave_analytics.services.record_views import (
    current_month_range,
    filter_by_date_range,
    group_records_by_month,
    last_days_range,
)

__all__ = [
    "compute_employee_summaries",
    "compute_monthly",
    "compute_monthly_stats",
    "compute_overall",
    "most_used_leave_type",
    "normalize_records",
    "top_employee",
    "RecordStore",
    "generate_record_id",
    "current_month_range",
    "filter_by_date_range",
    "group_records_by_month",
    "last_days_range",
]
