"""
Leave Analytics Module Schemas.

Pydantic models for leave records and analytics responses.
"""

from modules.leave_analytics.schemas.leave import (
    DEFAULT_LEAVE_TYPE,
    NO_DATA,
    EmployeeSummary,
    LeaveRecord,
    LeaveStatus,
    LeaveSubmitRequest,
    LeaveTypeShare,
    MonthGroup,
    MonthlyBucket,
    MonthlyStats,
    MonthlyTrendPoint,
    OverallSummary,
    StatusShare,
    TotalStats,
    parse_leave_date,
)

__all__ = [
    "DEFAULT_LEAVE_TYPE",
    "NO_DATA",
    "EmployeeSummary",
    "LeaveRecord",
    "LeaveStatus",
    "LeaveSubmitRequest",
    "LeaveTypeShare",
    "MonthGroup",
    "MonthlyBucket",
    "MonthlyStats",
    "MonthlyTrendPoint",
    "OverallSummary",
    "StatusShare",
    "TotalStats",
    "parse_leave_date",
]
