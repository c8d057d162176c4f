"""Leave Analytics module core: settings and exceptions."""

from modules.leave_analytics.core.config import LeaveSettings, get_leave_settings
from modules.leave_analytics.core.exceptions import (
    DataError,
    LeaveError,
    LeaveValidationError,
    RecordNotFoundError,
)

__all__ = [
    "LeaveSettings",
    "get_leave_settings",
    "DataError",
    "LeaveError",
    "LeaveValidationError",
    "RecordNotFoundError",
]
