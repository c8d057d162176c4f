"""
Leave Record Schemas.

Pydantic models for leave records and for the aggregates computed from them.
Fields are snake_case in Python and camelCase on the wire
(``employeeName``, ``totalLeaves``, ...).
"""

from datetime import date, datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel


DEFAULT_LEAVE_TYPE = "Annual Leave"

# Shown in "most used" fields when there is nothing to rank
NO_DATA = "—"

US_DATE_FORMAT = "%m/%d/%Y"


class LeaveStatus(str, Enum):
    """Record status. Cancellation is a soft delete."""

    ACTIVE = "Active"
    CANCELLED = "Cancelled"


def parse_leave_date(value: Any) -> date:
    """
    Parse a calendar date from the formats clients send.

    Accepts ``date``, ``datetime`` (date part), ISO ``YYYY-MM-DD``, ISO
    datetime strings and US ``M/D/YYYY`` strings.

    Raises:
        ValueError: If the value is not a recognisable date.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"Unparseable leave date: {value!r}")

    text = value.strip()
    try:
        return date.fromisoformat(text)
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    except ValueError:
        pass
    try:
        return datetime.strptime(text, US_DATE_FORMAT).date()
    except ValueError:
        raise ValueError(f"Unparseable leave date: {value!r}") from None


class CamelModel(BaseModel):
    """Base model serialising field names as camelCase."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# =============================================================================
# Records
# =============================================================================


class LeaveRecord(CamelModel):
    """One day of leave taken by one employee."""

    model_config = ConfigDict(str_strip_whitespace=True, frozen=True)

    id: str = Field(default="", description="Opaque unique record identifier")
    employee_name: str = Field(..., min_length=1, description="Employee name")
    leave_date: date = Field(..., description="Leave day")
    status: str = Field(default=LeaveStatus.ACTIVE.value, description="Active or Cancelled")
    leave_type: str = Field(default=DEFAULT_LEAVE_TYPE, description="Leave category")
    comment: str = Field(default="", description="Optional free text")

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v: Any) -> str:
        """Spreadsheet exports may carry numeric ids."""
        if v is None:
            return ""
        return str(v)

    @field_validator("leave_date", mode="before")
    @classmethod
    def parse_date(cls, v: Any) -> date:
        return parse_leave_date(v)

    @field_validator("status", mode="before")
    @classmethod
    def default_status(cls, v: Any) -> Any:
        if isinstance(v, LeaveStatus):
            return v.value
        if v is None or (isinstance(v, str) and not v.strip()):
            return LeaveStatus.ACTIVE.value
        return v

    @field_validator("leave_type", mode="before")
    @classmethod
    def default_leave_type(cls, v: Any) -> Any:
        if v is None or (isinstance(v, str) and not v.strip()):
            return DEFAULT_LEAVE_TYPE
        return v

    @field_validator("comment", mode="before")
    @classmethod
    def default_comment(cls, v: Any) -> Any:
        return "" if v is None else v

    @property
    def is_active(self) -> bool:
        return self.status == LeaveStatus.ACTIVE.value

    @property
    def month_key(self) -> str:
        """``YYYY-MM`` key of the record's calendar month."""
        return f"{self.leave_date.year:04d}-{self.leave_date.month:02d}"


class LeaveSubmitRequest(CamelModel):
    """Request to record leave for every day of an inclusive date range."""

    employee_name: str = Field(..., min_length=1, description="Employee name")
    start_date: date = Field(..., description="First leave day")
    end_date: date = Field(..., description="Last leave day (inclusive)")
    leave_type: str = Field(..., min_length=1, description="Leave category")
    comment: str = Field(default="", max_length=500, description="Optional free text")

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def parse_dates(cls, v: Any) -> date:
        return parse_leave_date(v)

    @field_validator("employee_name", "leave_type", "comment", mode="before")
    @classmethod
    def strip_text(cls, v: Any) -> Any:
        if v is None:
            return ""
        return v.strip() if isinstance(v, str) else v

    @model_validator(mode="after")
    def check_range(self) -> "LeaveSubmitRequest":
        if self.end_date < self.start_date:
            raise ValueError("End date cannot be before start date")
        return self

    @property
    def total_days(self) -> int:
        return (self.end_date - self.start_date).days + 1


# =============================================================================
# Aggregates
# =============================================================================


class MonthlyBucket(CamelModel):
    """Records of one calendar month."""

    month_key: str = Field(..., description="YYYY-MM")
    month: str = Field(..., description="Display label, e.g. 'January 2024'")
    month_date: date = Field(..., description="First day of the month")
    total_leaves: int = 0
    leave_types: dict[str, int] = Field(default_factory=dict)
    employees: list[str] = Field(default_factory=list)

    @property
    def year(self) -> int:
        return self.month_date.year

    @property
    def month_number(self) -> int:
        return self.month_date.month


class LeaveTypeShare(CamelModel):
    leave_type: str = Field(..., alias="type")
    count: int
    percentage: float


class StatusShare(CamelModel):
    status: str
    count: int
    percentage: float


class TotalStats(CamelModel):
    total_leaves: int = 0
    active_leaves: int = 0
    cancelled_leaves: int = 0
    unique_employees: int = 0
    avg_leaves_per_employee: float = 0
    most_used_leave_type: str = NO_DATA


class OverallSummary(CamelModel):
    """Distribution of the whole record set by leave type and status."""

    leave_types: list[LeaveTypeShare] = Field(default_factory=list)
    status_distribution: list[StatusShare] = Field(default_factory=list)
    total_stats: TotalStats = Field(default_factory=TotalStats)


class MonthlyTrendPoint(CamelModel):
    month: str = Field(..., description="Short label, e.g. 'Jan 2024'")
    count: int


class EmployeeSummary(CamelModel):
    """Per-employee totals."""

    employee_name: str
    total_leaves: int = 0
    active_leaves: int = 0
    cancelled_leaves: int = 0
    leave_types: dict[str, int] = Field(default_factory=dict)
    monthly_trend: list[MonthlyTrendPoint] = Field(default_factory=list)


class MonthlyStats(CamelModel):
    """Headline figures over the monthly buckets."""

    months_tracked: int = 0
    avg_leaves_per_month: float = 0
    peak_month: str = NO_DATA
    latest_month_leaves: int = 0


class MonthGroup(CamelModel):
    """Records of one month as listed in the records table."""

    month_year: str = Field(..., description="YYYY-MM")
    display_name: str
    records: list[LeaveRecord] = Field(default_factory=list)
    total_days: int = 0
