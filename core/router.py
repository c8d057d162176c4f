"""
Router - dispatches presentation-layer events to the module that handles them.
"""
from typing import Optional, Dict, Any, Tuple
import logging
import re

from core.registry import ModuleRegistry
from core.app_context import AppContext
from core.interface import IAppModule


class EventRouter:
    """
    Routes incoming events to the appropriate module handlers.

    The target module is resolved in this order:
        1. ``{"module": "leave_analytics", "action": "overall"}``
        2. ``{"message": "leave_analytics:overall"}``
        3. ``{"action": "overall"}`` via the registry's action index
    """

    def __init__(self, registry: ModuleRegistry, context: AppContext) -> None:
        self._registry = registry
        self._context = context
        self._logger = logging.getLogger(__name__)

        # module_name:action
        self._prefix_pattern = re.compile(r'^(\w+):(\w*)$')

    def parse_message(self, message: str) -> Tuple[Optional[str], str]:
        """
        Split a ``module:action`` string.

        Returns:
            Tuple of (module_name, action); module_name is None when the
            message has no module prefix.
        """
        match = self._prefix_pattern.match(message.strip())
        if match:
            return (match.group(1), match.group(2))
        return (None, message)

    def resolve(self, event: Dict[str, Any]) -> Tuple[Optional[str], Optional[IAppModule]]:
        """
        Find the target of an event.

        Fills in ``event["action"]`` from a prefixed message when the event
        has none.

        Returns:
            (module_name, module); module is None when the name is unknown,
            both are None when the event has no target at all.
        """
        module_name: Optional[str] = event.get("module")

        if module_name is None and isinstance(event.get("message"), str):
            parsed_module, parsed_action = self.parse_message(event["message"])
            if parsed_module:
                module_name = parsed_module
                event.setdefault("action", parsed_action)

        if module_name:
            return module_name, self._registry.get_module(module_name)

        action = event.get("action")
        if action:
            module = self._registry.get_module_for_action(action)
            if module is not None:
                return module.get_module_name(), module

        return None, None

    def route(self, event: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """
        Route an event to its module and return the handler's response.

        Returns ``{"status": "unrouted", ...}`` when no module claims the
        event and ``{"status": "error", ...}`` when the named module is not
        registered or its handler raises.
        """
        module_name, module = self.resolve(event)

        if module_name is None:
            self._context.log_event(f"Unrouted event: action {event.get('action')!r}", "WARN")
            return {"status": "unrouted", "message": "No module handler found"}

        if module is None:
            self._logger.warning(f"Module '{module_name}' not found for routing.")
            self._context.log_event(f"Module '{module_name}' not found", "ERROR")
            return {"status": "error", "message": f"Module '{module_name}' not found"}

        return self._dispatch(module_name, module, event)

    def _dispatch(
        self,
        module_name: str,
        module: IAppModule,
        event: Dict[str, Any]
    ) -> Optional[Dict[str, Any]]:
        try:
            response = module.handle_event(self._context, event)
        except Exception as e:
            self._logger.exception(f"Error in module '{module_name}' handler: {e}")
            self._context.log_event(f"Error in '{module_name}': {e}", "ERROR")
            return {"status": "error", "message": str(e)}

        self._logger.debug(f"Module '{module_name}' handled action '{event.get('action')}'")
        return response
