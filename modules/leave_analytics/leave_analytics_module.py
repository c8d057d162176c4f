"""
Leave Analytics Module Entry Point.

Implements IAppModule for the leave tracker. The module owns the record
store and answers presentation-layer events: record operations (add,
cancel, remove, ...) and analytics views (monthly, overall, employees).

Analytics responses are recomputed from a fresh store snapshot on every
event; nothing is cached between events.
"""

import logging
from typing import Any, Callable, Optional, TYPE_CHECKING

from pydantic import BaseModel

from core.interface import IAppModule
from modules.leave_analytics.core.config import LeaveSettings, get_leave_settings
from modules.leave_analytics.core.exceptions import (
    DataError,
    LeaveError,
    LeaveValidationError,
    RecordNotFoundError,
)
from modules.leave_analytics.services.aggregation import (
    compute_employee_summaries,
    compute_monthly,
    compute_monthly_stats,
    compute_overall,
    most_used_leave_type,
    top_employee,
)
from modules.leave_analytics.services.record_store import RecordStore
from modules.leave_analytics.services.record_views import (
    current_month_range,
    filter_by_date_range,
    group_records_by_month,
    last_days_range,
)

if TYPE_CHECKING:
    from core.app_context import AppContext

logger = logging.getLogger(__name__)

Handler = Callable[[dict], dict[str, Any]]


def _dump(model: BaseModel) -> dict[str, Any]:
    return model.model_dump(by_alias=True, mode="json")


def _field(event: dict, camel: str, snake: str, default: Any = None) -> Any:
    """Read an event field sent either as camelCase or snake_case."""
    if camel in event:
        return event[camel]
    return event.get(snake, default)


def _require(event: dict, camel: str, snake: str) -> Any:
    value = _field(event, camel, snake)
    if value is None or value == "":
        raise LeaveValidationError(f"Missing required field: {camel}")
    return value


class LeaveAnalyticsModule(IAppModule):
    """
    Leave tracking and analytics module.

    Features:
        - Record store operations (add, range submit, cancel, remove)
        - Month-grouped, date-filtered record listing
        - Monthly, overall and per-employee analytics
    """

    def __init__(
        self,
        settings: LeaveSettings | None = None,
        store: RecordStore | None = None,
    ) -> None:
        self._settings = settings or get_leave_settings()
        self._store = store or RecordStore(self._settings)
        self._context: Optional["AppContext"] = None
        self._last_error: str | None = None
        self._handlers: dict[str, Handler] = {
            "records": self._handle_records,
            "load": self._handle_load,
            "add": self._handle_add,
            "submit_range": self._handle_submit_range,
            "cancel": self._handle_cancel,
            "remove": self._handle_remove,
            "remove_month": self._handle_remove_month,
            "leave_types": self._handle_leave_types,
            "month_groups": self._handle_month_groups,
            "monthly": self._handle_monthly,
            "monthly_stats": self._handle_monthly_stats,
            "overall": self._handle_overall,
            "employees": self._handle_employees,
            "employee": self._handle_employee,
            "dashboard": self._handle_dashboard,
        }

    @property
    def store(self) -> RecordStore:
        return self._store

    def get_module_name(self) -> str:
        return "leave_analytics"

    def on_entry(self, context: "AppContext") -> None:
        self._context = context
        context.log_event(
            f"Leave analytics ready ({len(self._settings.leave_types)} leave types)", "MODULE"
        )

    def get_actions(self) -> list[str]:
        return list(self._handlers)

    def get_menu_config(self) -> dict:
        return {
            "label": "Leave Tracker",
            "icon": "calendar",
            "actions": self.get_actions(),
        }

    def get_status(self) -> dict[str, Any]:
        details = {"Records": str(len(self._store))}
        if self._last_error:
            details["Last Error"] = self._last_error[:100]
        return {
            "status": "warning" if self._last_error else "active",
            "details": details,
        }

    def on_shutdown(self) -> None:
        logger.info(f"Leave analytics shutting down with {len(self._store)} record(s) in memory")

    # =========================================================================
    # Event Dispatch
    # =========================================================================

    def handle_event(self, context: "AppContext", event: dict) -> Optional[dict]:
        """
        Dispatch ``event["action"]`` to its handler.

        Returns:
            ``{"success": True, ...}`` or ``{"success": False, "error": ..., "code": ...}``
        """
        action = event.get("action", "")
        handler = self._handlers.get(action)
        if handler is None:
            return {
                "success": False,
                "error": f"Unknown action: {action!r}",
                "code": "unknown_action",
            }

        try:
            response = handler(event)
        except RecordNotFoundError as e:
            return self._error(action, e, "not_found")
        except LeaveValidationError as e:
            return self._error(action, e, "validation_error")
        except DataError as e:
            return self._error(action, e, "data_error")
        except LeaveError as e:
            return self._error(action, e, "leave_error")

        self._last_error = None
        return {"success": True, **response}

    def _error(self, action: str, error: LeaveError, code: str) -> dict[str, Any]:
        logger.warning(f"Action '{action}' failed: {error}")
        self._last_error = str(error)
        if self._context:
            self._context.log_event(f"Leave action '{action}' failed: {error}", "ERROR")
        return {"success": False, "error": str(error), "code": code}

    # =========================================================================
    # Record Operations
    # =========================================================================

    def _handle_records(self, event: dict) -> dict[str, Any]:
        records = self._store.fetch_all()
        return {"data": [_dump(r) for r in records], "count": len(records)}

    def _handle_load(self, event: dict) -> dict[str, Any]:
        records = event.get("records")
        if not isinstance(records, list):
            raise LeaveValidationError("Field 'records' must be a list")
        count = self._store.load(records)
        return {"count": count, "message": f"Loaded {count} leave record(s)"}

    def _handle_add(self, event: dict) -> dict[str, Any]:
        record = self._store.create(
            employee_name=_require(event, "employeeName", "employee_name"),
            leave_date=_require(event, "leaveDate", "leave_date"),
            leave_type=_require(event, "leaveType", "leave_type"),
            comment=event.get("comment") or "",
            record_id=event.get("id") or None,
        )
        return {"data": _dump(record), "message": "Leave record added successfully"}

    def _handle_submit_range(self, event: dict) -> dict[str, Any]:
        created = self._store.submit_range({
            "employee_name": _field(event, "employeeName", "employee_name"),
            "start_date": _field(event, "startDate", "start_date"),
            "end_date": _field(event, "endDate", "end_date"),
            "leave_type": _field(event, "leaveType", "leave_type"),
            "comment": event.get("comment") or "",
        })
        leave_type = created[0].leave_type if created else ""
        return {
            "data": [_dump(r) for r in created],
            "count": len(created),
            "message": f"Added {len(created)} {leave_type} record(s) successfully",
        }

    def _handle_cancel(self, event: dict) -> dict[str, Any]:
        record = self._store.cancel(_require(event, "id", "id"))
        return {"data": _dump(record), "message": "Leave record cancelled successfully"}

    def _handle_remove(self, event: dict) -> dict[str, Any]:
        self._store.delete(_require(event, "id", "id"))
        return {"message": "Leave record removed successfully"}

    def _handle_remove_month(self, event: dict) -> dict[str, Any]:
        month = _require(event, "month", "month")
        removed = self._store.delete_month(month)
        return {"count": removed, "message": f"Removed {removed} leave record(s) for {month}"}

    def _handle_leave_types(self, event: dict) -> dict[str, Any]:
        return {"data": list(self._settings.leave_types)}

    def _handle_month_groups(self, event: dict) -> dict[str, Any]:
        """
        Month-grouped records, optionally filtered.

        Filters (first match wins): ``fromDate``/``toDate``,
        ``lastDays`` (int, or true for the default window; false is no
        filter), ``currentMonth`` (bool).
        """
        records = self._store.fetch_all()
        from_date = _field(event, "fromDate", "from_date")
        to_date = _field(event, "toDate", "to_date")
        last_days = _field(event, "lastDays", "last_days")
        if last_days is False:
            last_days = None
        filtering = bool(from_date or to_date)

        if not filtering and last_days is not None:
            if last_days is True:
                last_days = self._settings.default_quick_range_days
            try:
                days = int(last_days)
            except (TypeError, ValueError) as e:
                raise LeaveValidationError(f"Invalid lastDays: {last_days!r}") from e
            from_date, to_date = last_days_range(days)
            filtering = True
        elif not filtering and _field(event, "currentMonth", "current_month"):
            from_date, to_date = current_month_range()
            filtering = True

        if filtering:
            records = filter_by_date_range(records, from_date, to_date)

        groups = group_records_by_month(records)
        return {
            "data": [_dump(g) for g in groups],
            "count": len(records),
            "totalCount": len(self._store),
            "filtering": filtering,
        }

    # =========================================================================
    # Analytics
    # =========================================================================

    def _handle_monthly(self, event: dict) -> dict[str, Any]:
        buckets = compute_monthly(self._store.fetch_all())
        return {"data": [_dump(b) for b in buckets], "count": len(buckets)}

    def _handle_monthly_stats(self, event: dict) -> dict[str, Any]:
        return {"data": _dump(compute_monthly_stats(self._store.fetch_all()))}

    def _handle_overall(self, event: dict) -> dict[str, Any]:
        return {"data": _dump(compute_overall(self._store.fetch_all()))}

    def _employee_payload(self, summaries: list) -> list[dict[str, Any]]:
        payload = []
        for summary in summaries:
            item = _dump(summary)
            item["mostUsedLeaveType"] = most_used_leave_type(summary)
            payload.append(item)
        return payload

    def _handle_employees(self, event: dict) -> dict[str, Any]:
        summaries = compute_employee_summaries(self._store.fetch_all())
        return {
            "data": self._employee_payload(summaries),
            "count": len(summaries),
            "topEmployee": top_employee(summaries),
        }

    def _handle_employee(self, event: dict) -> dict[str, Any]:
        name = str(_require(event, "employeeName", "employee_name")).strip()
        summaries = compute_employee_summaries(self._store.fetch_all())
        for summary in summaries:
            if summary.employee_name == name:
                return {"data": self._employee_payload([summary])[0]}
        raise RecordNotFoundError(name, f"No leave records for employee: {name}")

    def _handle_dashboard(self, event: dict) -> dict[str, Any]:
        """All analytics views over one snapshot."""
        records = self._store.fetch_all()
        summaries = compute_employee_summaries(records)
        return {
            "data": {
                "monthly": [_dump(b) for b in compute_monthly(records)],
                "monthlyStats": _dump(compute_monthly_stats(records)),
                "overall": _dump(compute_overall(records)),
                "employees": self._employee_payload(summaries),
                "employeeNames": sorted(s.employee_name for s in summaries),
                "topEmployee": top_employee(summaries),
            },
            "count": len(records),
        }


def create_module() -> LeaveAnalyticsModule:
    """Factory function for creating the module instance."""
    return LeaveAnalyticsModule()
