"""
Leave-specific exceptions.

Raised by the record store, record views and aggregation services; the
module's event handler turns them into error responses.
"""


class LeaveError(Exception):
    """Base exception for leave-related errors."""
    pass


class DataError(LeaveError):
    """
    Raised when a record cannot be normalized for aggregation.

    Examples:
        - leaveDate is not a parseable calendar date
        - employeeName is missing
    """

    def __init__(self, message: str, record_id: str | None = None) -> None:
        self.record_id = record_id
        super().__init__(message)


class LeaveValidationError(LeaveError):
    """Raised when a store or view request is missing or has invalid input."""
    pass


class RecordNotFoundError(LeaveError):
    """Raised when no record matches the requested id (or employee)."""

    def __init__(self, record_id: str, message: str | None = None) -> None:
        self.record_id = record_id
        super().__init__(message or f"Leave record not found: {record_id}")
