"""
Unit Tests for Leave Analytics Module Configuration.

Tests for LeaveSettings and get_leave_settings.
"""

import pytest
from pydantic import ValidationError

from modules.leave_analytics.core.config import (
    DEFAULT_LEAVE_TYPES,
    LeaveSettings,
    get_leave_settings,
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Start every test without LEAVE_* overrides."""
    for key in ("LEAVE_TYPES", "LEAVE_DEFAULT_QUICK_RANGE_DAYS", "LEAVE_MAX_RANGE_DAYS"):
        monkeypatch.delenv(key, raising=False)
    get_leave_settings.cache_clear()
    yield
    get_leave_settings.cache_clear()


class TestLeaveSettings:
    """Tests for LeaveSettings pydantic model."""

    def test_default_values(self):
        """Test default values are applied."""
        settings = LeaveSettings(_env_file=None)

        assert settings.leave_types == DEFAULT_LEAVE_TYPES
        assert settings.default_quick_range_days == 30
        assert settings.max_range_days == 366

    def test_default_leave_types_not_shared(self):
        """Test each instance gets its own copy of the default catalog."""
        settings = LeaveSettings(_env_file=None)
        settings.leave_types.append("Sabbatical")

        assert "Sabbatical" not in DEFAULT_LEAVE_TYPES

    def test_comma_separated_leave_types(self, monkeypatch):
        monkeypatch.setenv("LEAVE_TYPES", "Annual Leave, Sick Leave ,,Remote Day")

        settings = LeaveSettings(_env_file=None)

        assert settings.leave_types == ["Annual Leave", "Sick Leave", "Remote Day"]

    def test_json_leave_types(self, monkeypatch):
        monkeypatch.setenv("LEAVE_TYPES", '["Annual Leave", "Sick Leave"]')

        settings = LeaveSettings(_env_file=None)

        assert settings.leave_types == ["Annual Leave", "Sick Leave"]

    def test_integer_overrides(self, monkeypatch):
        monkeypatch.setenv("LEAVE_DEFAULT_QUICK_RANGE_DAYS", "7")
        monkeypatch.setenv("LEAVE_MAX_RANGE_DAYS", "14")

        settings = LeaveSettings(_env_file=None)

        assert settings.default_quick_range_days == 7
        assert settings.max_range_days == 14

    def test_range_must_be_positive(self, monkeypatch):
        monkeypatch.setenv("LEAVE_MAX_RANGE_DAYS", "0")

        with pytest.raises(ValidationError):
            LeaveSettings(_env_file=None)

    def test_env_file(self, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text("LEAVE_MAX_RANGE_DAYS=10\nUNRELATED=ignored\n")

        settings = LeaveSettings(_env_file=str(env_file))

        assert settings.max_range_days == 10


class TestGetLeaveSettings:

    def test_cached(self):
        """Test get_leave_settings() returns the same instance until cleared."""
        first = get_leave_settings()

        assert get_leave_settings() is first

        get_leave_settings.cache_clear()
        assert get_leave_settings() is not first
