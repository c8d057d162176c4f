"""
Unit Tests for core.router module.

Tests EventRouter message parsing and module dispatch.
"""

import pytest


@pytest.fixture
def registry(reset_registry, app_context, mock_module_factory):
    """Registry holding a single 'reports' mock module."""
    from core.registry import ModuleRegistry

    registry = ModuleRegistry()
    registry.set_context(app_context)
    registry.register(mock_module_factory("reports", ["overall", "monthly"]))
    return registry


@pytest.fixture
def router(registry, app_context):
    from core.router import EventRouter

    return EventRouter(registry, app_context)


class TestParseMessage:
    """Tests for EventRouter.parse_message()."""

    def test_module_and_action(self, router):
        assert router.parse_message("reports:overall") == ("reports", "overall")

    def test_empty_action(self, router):
        assert router.parse_message("reports:") == ("reports", "")

    def test_surrounding_whitespace_is_ignored(self, router):
        assert router.parse_message("  reports:monthly \n") == ("reports", "monthly")

    def test_plain_text_has_no_module(self, router):
        assert router.parse_message("hello there") == (None, "hello there")


class TestRoute:
    """Tests for EventRouter.route()."""

    def test_explicit_module(self, router, registry):
        """Test events with a module field reach that module."""
        response = router.route({"module": "reports", "action": "overall"})

        assert response == {"handled": True, "module": "reports", "action": "overall"}
        assert registry.get_module("reports").events[0]["action"] == "overall"

    def test_prefixed_message_sets_action(self, router):
        """Test 'module:action' messages are split into module and action."""
        response = router.route({"message": "reports:monthly"})

        assert response["module"] == "reports"
        assert response["action"] == "monthly"

    def test_prefixed_message_keeps_explicit_action(self, router):
        """Test an explicit action wins over the one in the message."""
        response = router.route({"message": "reports:monthly", "action": "overall"})

        assert response["action"] == "overall"

    def test_action_only_event_uses_action_index(self, router):
        """Test an event with just an action reaches the module that declared it."""
        response = router.route({"action": "monthly", "year": 2024})

        assert response == {"handled": True, "module": "reports", "action": "monthly"}

    def test_undeclared_action_is_unrouted(self, router):
        assert router.route({"action": "export"})["status"] == "unrouted"

    def test_resolve(self, router, registry):
        """Test resolve() reports the name even when the module is missing."""
        assert router.resolve({"action": "overall"}) == ("reports", registry.get_module("reports"))
        assert router.resolve({"module": "missing"}) == ("missing", None)
        assert router.resolve({}) == (None, None)

    def test_unrouted_event(self, router, app_context):
        """Test events without a module target are reported as unrouted."""
        response = router.route({"message": "no prefix here"})

        assert response["status"] == "unrouted"
        assert any("Unrouted event" in entry for entry in app_context.get_event_log())

    def test_unknown_module(self, router):
        """Test routing to an unregistered module returns an error response."""
        response = router.route({"module": "missing", "action": "x"})

        assert response == {"status": "error", "message": "Module 'missing' not found"}

    def test_handler_exception_is_contained(self, router, registry, app_context, monkeypatch):
        """Test a raising handler produces an error response instead of propagating."""
        module = registry.get_module("reports")

        def explode(context, event):
            raise RuntimeError("handler failed")

        monkeypatch.setattr(module, "handle_event", explode)

        response = router.route({"module": "reports", "action": "overall"})

        assert response == {"status": "error", "message": "handler failed"}
        assert any("handler failed" in entry for entry in app_context.get_event_log())
