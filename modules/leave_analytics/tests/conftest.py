"""
Conftest for Leave Analytics Module Tests.

Provides shared fixtures for unit testing the leave analytics module.
"""

import pytest
from unittest.mock import MagicMock

from modules.leave_analytics.core.config import DEFAULT_LEAVE_TYPES


@pytest.fixture
def mock_leave_settings():
    """Create mock LeaveSettings for testing."""
    settings = MagicMock()
    settings.leave_types = list(DEFAULT_LEAVE_TYPES)
    settings.default_quick_range_days = 30
    settings.max_range_days = 31
    return settings


@pytest.fixture
def sample_records():
    """Export-shaped records spanning the 2023/2024 year boundary."""
    return [
        {"id": "r1", "employeeName": "Alice", "leaveDate": "2023-12-28", "status": "Active", "leaveType": "Annual Leave", "comment": ""},
        {"id": "r2", "employeeName": "Bob", "leaveDate": "2024-01-05", "status": "Active", "leaveType": "Sick Leave", "comment": "flu"},
        {"id": "r3", "employeeName": "Alice", "leaveDate": "2024-01-08", "status": "Cancelled", "leaveType": "Sick Leave", "comment": ""},
        {"id": "r4", "employeeName": "Alice", "leaveDate": "2024-01-09", "status": "Active", "leaveType": "", "comment": ""},
        {"id": "r5", "employeeName": "Carol", "leaveDate": "2024-03-15", "status": "Active", "leaveType": "Personal Leave"},
        {"id": "r6", "employeeName": "Bob", "leaveDate": "2024-03-18", "status": "Active", "leaveType": "Sick Leave"},
    ]


@pytest.fixture
def store(mock_leave_settings):
    """Empty RecordStore using the mock settings."""
    from modules.leave_analytics.services.record_store import RecordStore

    return RecordStore(settings=mock_leave_settings)


@pytest.fixture
def loaded_store(store, sample_records):
    """RecordStore seeded with sample_records."""
    store.load(sample_records)
    return store
