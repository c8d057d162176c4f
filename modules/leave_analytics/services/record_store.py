"""
Record Store Service.

In-memory source of truth for leave records. Supplies full snapshots to
the aggregation functions and accepts create / set-status / delete
operations. A single lock serializes writers so that no aggregation pass
sees a half-applied change.
"""

import logging
import re
import threading
import time
from collections.abc import Iterable, Mapping
from datetime import date, timedelta
from typing import Any

from pydantic import ValidationError

from modules.leave_analytics.core.config import LeaveSettings, get_leave_settings
from modules.leave_analytics.core.exceptions import LeaveValidationError, RecordNotFoundError
from modules.leave_analytics.schemas.leave import (
    LeaveRecord,
    LeaveStatus,
    LeaveSubmitRequest,
    parse_leave_date,
)
from modules.leave_analytics.services.aggregation import normalize_records

logger = logging.getLogger(__name__)


def generate_record_id(employee_name: str, leave_date: date | str, timestamp_ms: int | None = None) -> str:
    """
    Build a URL-safe record id: ``<name>_<date>_<epoch millis>``.

    Non-alphanumeric name characters and non-digit date characters
    become underscores.
    """
    if timestamp_ms is None:
        timestamp_ms = time.time_ns() // 1_000_000
    clean_name = re.sub(r"[^a-zA-Z0-9]", "_", employee_name)
    date_text = leave_date.isoformat() if isinstance(leave_date, date) else str(leave_date)
    clean_date = re.sub(r"[^0-9]", "_", date_text)
    return f"{clean_name}_{clean_date}_{timestamp_ms}"


def _text(value: Any, field_name: str) -> str:
    """Stripped text; None reads as empty."""
    if value is None:
        return ""
    if not isinstance(value, str):
        raise LeaveValidationError(f"{field_name} must be text, got {type(value).__name__}")
    return value.strip()


class RecordStore:
    """
    Thread-safe in-memory leave record store.

    Records keep insertion order; fetch_all() returns a snapshot list that
    later writes do not affect.
    """

    def __init__(self, settings: LeaveSettings | None = None) -> None:
        self._settings = settings or get_leave_settings()
        self._records: dict[str, LeaveRecord] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._records)

    # =========================================================================
    # Reads
    # =========================================================================

    def fetch_all(self) -> list[LeaveRecord]:
        """Return the current full record set."""
        with self._lock:
            return list(self._records.values())

    def get(self, record_id: str) -> LeaveRecord:
        """
        Raises:
            RecordNotFoundError: If no record has this id.
        """
        with self._lock:
            record = self._records.get(record_id)
        if record is None:
            raise RecordNotFoundError(record_id)
        return record

    # =========================================================================
    # Writes
    # =========================================================================

    def load(self, records: Iterable[LeaveRecord | Mapping[str, Any]]) -> int:
        """
        Replace the store contents with an exported record set.

        Records without an id get a generated one; statuses and leave types
        are defaulted as in normalize_records().

        Returns:
            int: Number of records loaded.

        Raises:
            DataError: If a record cannot be normalized.
            LeaveValidationError: If two records share an id.
        """
        normalized = normalize_records(records)

        loaded: dict[str, LeaveRecord] = {}
        for record in normalized:
            if not record.id:
                record = record.model_copy(
                    update={"id": self._unique_id(record.employee_name, record.leave_date, loaded)}
                )
            if record.id in loaded:
                raise LeaveValidationError(f"Duplicate leave record id: {record.id}")
            loaded[record.id] = record

        with self._lock:
            self._records = loaded

        logger.info(f"Loaded {len(loaded)} leave record(s)")
        return len(loaded)

    def create(
        self,
        employee_name: str,
        leave_date: date | str,
        leave_type: str,
        comment: str = "",
        record_id: str | None = None,
    ) -> LeaveRecord:
        """
        Add one Active leave record.

        Raises:
            LeaveValidationError: If name, date or leave type is missing or
                not text, the date is unparseable, or record_id is already
                taken.
        """
        name = _text(employee_name, "Employee name")
        leave_type = _text(leave_type, "Leave type")
        comment = _text(comment, "Comment")
        if not name or not leave_date or not leave_type:
            raise LeaveValidationError("Employee name, leave date, and leave type are required")

        try:
            parsed_date = parse_leave_date(leave_date)
        except ValueError as e:
            raise LeaveValidationError(str(e)) from e

        with self._lock:
            record = self._insert(name, parsed_date, leave_type, comment, record_id)

        logger.info(f"Created leave record {record.id}")
        return record

    def submit_range(self, request: LeaveSubmitRequest | Mapping[str, Any]) -> list[LeaveRecord]:
        """
        Create one record per day of an inclusive date range.

        All records of the range are inserted under one lock, so readers
        see either none or all of them.

        Raises:
            LeaveValidationError: If the request is invalid or spans more
                than ``max_range_days`` days.
        """
        if not isinstance(request, LeaveSubmitRequest):
            try:
                request = LeaveSubmitRequest.model_validate(request)
            except ValidationError as e:
                raise LeaveValidationError(
                    "; ".join(err["msg"] for err in e.errors())
                ) from e

        if request.total_days > self._settings.max_range_days:
            raise LeaveValidationError(
                f"Date range of {request.total_days} days exceeds the limit of "
                f"{self._settings.max_range_days} days"
            )

        with self._lock:
            created = [
                self._insert(
                    request.employee_name,
                    request.start_date + timedelta(days=offset),
                    request.leave_type,
                    request.comment,
                )
                for offset in range(request.total_days)
            ]

        logger.info(
            f"Added {len(created)} {request.leave_type} record(s) for {request.employee_name}"
        )
        return created

    def set_status(self, record_id: str, status: LeaveStatus | str) -> LeaveRecord:
        """
        Change a record's status.

        Raises:
            LeaveValidationError: If status is not Active or Cancelled.
            RecordNotFoundError: If no record has this id.
        """
        try:
            new_status = LeaveStatus(status)
        except ValueError as e:
            raise LeaveValidationError(f"Unknown leave status: {status}") from e

        with self._lock:
            record = self._records.get(record_id)
            if record is None:
                raise RecordNotFoundError(record_id)
            updated = record.model_copy(update={"status": new_status.value})
            self._records[record_id] = updated

        logger.info(f"Leave record {record_id} set to {new_status.value}")
        return updated

    def cancel(self, record_id: str) -> LeaveRecord:
        """Soft-delete: mark a record Cancelled."""
        return self.set_status(record_id, LeaveStatus.CANCELLED)

    def delete(self, record_id: str) -> None:
        """
        Remove a record completely.

        Raises:
            RecordNotFoundError: If no record has this id.
        """
        with self._lock:
            if self._records.pop(record_id, None) is None:
                raise RecordNotFoundError(record_id)
        logger.info(f"Removed leave record {record_id}")

    def delete_month(self, month_key: str) -> int:
        """
        Remove every record of one ``YYYY-MM`` month.

        Returns:
            int: Number of records removed.

        Raises:
            LeaveValidationError: If month_key is not ``YYYY-MM``.
        """
        if not isinstance(month_key, str) or not re.fullmatch(r"\d{4}-\d{2}", month_key):
            raise LeaveValidationError(f"Month must be YYYY-MM, got {month_key!r}")

        with self._lock:
            doomed = [rid for rid, record in self._records.items() if record.month_key == month_key]
            for rid in doomed:
                del self._records[rid]

        logger.info(f"Removed {len(doomed)} leave record(s) for {month_key}")
        return len(doomed)

    # =========================================================================
    # Helpers
    # =========================================================================

    def _insert(
        self,
        name: str,
        leave_date: date,
        leave_type: str,
        comment: str,
        record_id: str | None = None,
    ) -> LeaveRecord:
        """Build and store one Active record. Caller holds the lock."""
        if record_id:
            record_id = str(record_id)
            if record_id in self._records:
                raise LeaveValidationError(f"Leave record id already exists: {record_id}")
        else:
            record_id = self._unique_id(name, leave_date, self._records)

        record = LeaveRecord(
            id=record_id,
            employee_name=name,
            leave_date=leave_date,
            status=LeaveStatus.ACTIVE.value,
            leave_type=leave_type,
            comment=comment,
        )
        self._records[record_id] = record
        return record

    @staticmethod
    def _unique_id(name: str, leave_date: date, taken: Mapping[str, Any]) -> str:
        """Generated id not present in ``taken``; bumps the timestamp on collision."""
        timestamp_ms = time.time_ns() // 1_000_000
        record_id = generate_record_id(name, leave_date, timestamp_ms)
        while record_id in taken:
            timestamp_ms += 1
            record_id = generate_record_id(name, leave_date, timestamp_ms)
        return record_id
