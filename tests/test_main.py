"""
Tests for the headless entry point in main.py.
"""

import json

import pytest


RECORDS = [
    {"id": "r1", "employeeName": "Alice", "leaveDate": "2024-01-10", "status": "Active", "leaveType": "Sick Leave"},
    {"id": "r2", "employeeName": "Alice", "leaveDate": "2024-02-05", "status": "Cancelled", "leaveType": "Sick Leave"},
    {"id": "r3", "employeeName": "Bob", "leaveDate": "2024-02-06", "status": "Active", "leaveType": ""},
]


@pytest.fixture(autouse=True)
def isolated_app(mock_env_vars, reset_registry, restore_root_logger):
    """Each run gets its own registry, log directory and root logger."""
    yield


@pytest.fixture
def records_file(tmp_path):
    path = tmp_path / "records.json"
    path.write_text(json.dumps(RECORDS), encoding="utf-8")
    return path


def _output(capsys) -> dict:
    return json.loads(capsys.readouterr().out)


class TestParseParam:

    def test_json_values_are_decoded(self):
        from main import _parse_param

        assert _parse_param("lastDays=30") == ("lastDays", 30)
        assert _parse_param("currentMonth=true") == ("currentMonth", True)

    def test_plain_text_is_kept(self):
        from main import _parse_param

        assert _parse_param("employeeName=Jane Doe") == ("employeeName", "Jane Doe")

    def test_missing_separator_is_rejected(self):
        import argparse

        from main import _parse_param

        with pytest.raises(argparse.ArgumentTypeError):
            _parse_param("employeeName")


class TestRun:

    def test_overall_from_records_file(self, records_file, capsys):
        from main import run

        exit_code = run(["overall", "--records", str(records_file)])
        output = _output(capsys)

        assert exit_code == 0
        assert output["success"] is True
        stats = output["data"]["totalStats"]
        assert stats["totalLeaves"] == 3
        assert stats["cancelledLeaves"] == 1
        assert stats["mostUsedLeaveType"] == "Sick Leave"

    def test_api_shaped_export_is_accepted(self, tmp_path, capsys):
        from main import run

        path = tmp_path / "export.json"
        path.write_text(json.dumps({"success": True, "data": RECORDS}), encoding="utf-8")

        exit_code = run(["records", "--records", str(path)])

        assert exit_code == 0
        assert _output(capsys)["count"] == 3

    def test_params_are_passed_to_the_action(self, records_file, capsys):
        from main import run

        exit_code = run(["employee", "--records", str(records_file), "--param", "employeeName=Bob"])
        output = _output(capsys)

        assert exit_code == 0
        assert output["data"]["employeeName"] == "Bob"
        assert output["data"]["leaveTypes"] == {"Annual Leave": 1}

    def test_undeclared_action_is_unrouted(self, records_file, capsys):
        from main import run

        exit_code = run(["no_such_action", "--records", str(records_file)])

        assert exit_code == 1
        assert _output(capsys)["status"] == "unrouted"

    def test_explicit_module_reports_unknown_action(self, capsys):
        from main import run

        exit_code = run(["no_such_action", "--module", "leave_analytics"])

        assert exit_code == 1
        assert _output(capsys)["code"] == "unknown_action"

    def test_status_command(self, records_file, capsys):
        from main import run

        exit_code = run(["status", "--records", str(records_file)])

        output = _output(capsys)

        assert exit_code == 0
        assert output["modules"] == {
            "leave_analytics": {"status": "active", "details": {"Records": "3"}}
        }
        assert [menu["label"] for menu in output["menus"]] == ["Leave Tracker"]

    def test_debug_flag_overrides_log_level(self, monkeypatch):
        import logging

        from main import create_app_context

        monkeypatch.setenv("APP_DEBUG", "true")
        monkeypatch.setenv("APP_LOG_LEVEL", "WARNING")
        create_app_context()

        assert logging.getLogger().level == logging.DEBUG

    def test_log_level_applies_without_debug(self, monkeypatch):
        import logging

        from main import create_app_context

        monkeypatch.setenv("APP_DEBUG", "false")
        monkeypatch.setenv("APP_LOG_LEVEL", "WARNING")
        create_app_context()

        assert logging.getLogger().level == logging.WARNING

    def test_invalid_records_stop_before_the_action(self, tmp_path, capsys):
        from main import run

        path = tmp_path / "bad.json"
        path.write_text(json.dumps([{"employeeName": "Alice", "leaveDate": "someday"}]), encoding="utf-8")

        exit_code = run(["overall", "--records", str(path)])

        assert exit_code == 1
        assert _output(capsys)["code"] == "data_error"

    def test_missing_records_file(self, tmp_path):
        from main import run

        assert run(["overall", "--records", str(tmp_path / "absent.json")]) == 2

    def test_without_records_the_store_is_empty(self, capsys):
        from main import run

        exit_code = run(["monthly_stats"])
        output = _output(capsys)

        assert exit_code == 0
        assert output["data"] == {
            "monthsTracked": 0,
            "avgLeavesPerMonth": 0,
            "peakMonth": "—",
            "latestMonthLeaves": 0,
        }

    def test_modules_are_shut_down(self, records_file, capsys):
        from core.registry import ModuleRegistry
        from main import run

        run(["overall", "--records", str(records_file)])

        assert ModuleRegistry().get_module_names() == []
