"""
Pytest Configuration and Shared Fixtures.

Provides common test fixtures for framework unit tests.
"""

import logging

import pytest


# =============================================================================
# Environment Fixtures
# =============================================================================


@pytest.fixture
def mock_env_vars(monkeypatch, tmp_path):
    """Set up mock environment variables for testing."""
    env_vars = {
        "APP_DEBUG": "true",
        "APP_LOG_LEVEL": "DEBUG",
        "LOG_DIR": str(tmp_path / "logs"),
        "MODULES_DIR": "modules",
    }

    for key, value in env_vars.items():
        monkeypatch.setenv(key, value)

    return env_vars


@pytest.fixture
def config_loader(mock_env_vars):
    """Create a ConfigLoader instance with mock environment."""
    from core.app_context import ConfigLoader

    loader = ConfigLoader()
    loader.load()
    return loader


@pytest.fixture
def app_context(mock_env_vars):
    """Create an AppContext instance with mock environment."""
    from core.app_context import AppContext

    return AppContext()


@pytest.fixture
def reset_registry():
    """Give each test a fresh ModuleRegistry singleton."""
    from core.registry import ModuleRegistry

    ModuleRegistry._instance = None
    yield
    ModuleRegistry._instance = None


# =============================================================================
# Module Fixtures
# =============================================================================


class MockModule:
    """Mock module implementation for testing."""

    def __init__(self, name: str = "mock_module", actions: list[str] | None = None):
        self._name = name
        self._actions = list(actions or [])
        self._initialized = False
        self._shutdown = False
        self.events: list[dict] = []

    def get_module_name(self) -> str:
        return self._name

    def get_actions(self) -> list[str]:
        return list(self._actions)

    def get_status(self) -> dict:
        return {"status": "active", "details": {"Events": str(len(self.events))}}

    def on_entry(self, context) -> None:
        self._initialized = True

    def handle_event(self, context, event: dict) -> dict | None:
        self.events.append(event)
        return {"handled": True, "module": self._name, "action": event.get("action")}

    def get_menu_config(self) -> dict:
        return {
            "label": self._name.title(),
            "icon": "test_icon",
            "actions": []
        }

    def on_shutdown(self) -> None:
        self._shutdown = True


@pytest.fixture
def mock_module():
    """Create a mock module instance."""
    return MockModule()


@pytest.fixture
def mock_module_factory():
    """Factory for creating mock modules with custom names."""
    def _create(name: str, actions: list[str] | None = None):
        return MockModule(name, actions)
    return _create


@pytest.fixture
def restore_root_logger():
    """Put the root logger back the way pytest configured it."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield root
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)
