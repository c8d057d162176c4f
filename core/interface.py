"""
IAppModule - Abstract Base Class for pluggable leave tracker modules.

Modules are discovered by the ModuleLoader and receive events from the
presentation layer through handle_event().
"""
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from core.app_context import AppContext


class IAppModule(ABC):
    """
    Abstract interface for pluggable application modules.
    All business modules must implement this interface to be registered.
    """

    @abstractmethod
    def get_module_name(self) -> str:
        """
        Returns the unique identifier for this module.
        Used for event routing and registry lookup.

        Returns:
            str: The module's unique name (e.g., 'leave_analytics')
        """

    @abstractmethod
    def on_entry(self, context: "AppContext") -> None:
        """
        Called once when the module is registered.

        Args:
            context: The application context (configuration, event log)
        """

    @abstractmethod
    def handle_event(self, context: "AppContext", event: dict) -> Optional[dict]:
        """
        Handles an event routed to this module.

        Args:
            context: The application context
            event: Event payload; ``event["action"]`` selects the operation

        Returns:
            Optional response dictionary
        """

    def get_actions(self) -> list[str]:
        """Names of the event actions this module understands."""
        return []

    def get_menu_config(self) -> dict:
        """
        Returns menu configuration for the presentation layer.

        Returns:
            dict: {"label": ..., "icon": ..., "actions": [...]}
        """
        return {
            "label": self.get_module_name(),
            "icon": None,
            "actions": self.get_actions(),
        }

    def on_shutdown(self) -> None:
        """Called when the module is being unloaded."""

    def get_status(self) -> dict:
        """
        Returns the current status of the module for monitoring.

        Returns:
            dict: {"status": "active" | "warning" | "error", "details": {...}}
        """
        return {
            "status": "active",
            "details": {}
        }
