"""
Leave Tracker Core - Entry Point.

Headless runner: loads the modules, optionally seeds the record store from
a JSON export, dispatches one action and prints the JSON response.

Usage:
    python main.py dashboard --records leave-records.json
    python main.py employee --records leave-records.json --param employeeName="Jane Doe"
    python main.py month_groups --records leave-records.json --param lastDays=30
    python main.py status
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Optional

from core.app_context import AppContext
from core.logging_config import setup_logging
from core.registry import ModuleLoader, ModuleRegistry
from core.router import EventRouter

# Not a module action: prints module statuses and menu configs
STATUS_COMMAND = "status"


# -----------------------------------------------------------------------------
# Application Factory
# -----------------------------------------------------------------------------


def create_app_context(env_path: Optional[str] = None) -> AppContext:
    """Create the AppContext and configure logging from it."""
    context = AppContext(env_path)
    level = logging.DEBUG if context.config.get("app.debug") else context.config.get_log_level()
    setup_logging(level, context.config.get("logging.dir") or None)
    return context


def create_registry(context: AppContext) -> ModuleRegistry:
    """Create the ModuleRegistry with every module found in the modules directory."""
    registry = ModuleRegistry()
    registry.set_context(context)

    modules_dir = context.config.get("modules.dir", "modules")
    modules_path = Path(__file__).parent / modules_dir
    count = ModuleLoader(registry).load_from_directory(str(modules_path))
    names = ", ".join(registry.get_module_names()) or "none"
    context.log_event(f"Loaded {count} module(s) from {modules_dir}/: {names}", "LOADER")

    return registry


# -----------------------------------------------------------------------------
# Command Line
# -----------------------------------------------------------------------------


def _parse_param(raw: str) -> tuple[str, Any]:
    """``key=value``; the value is read as JSON when possible, else kept as text."""
    key, sep, value = raw.partition("=")
    if not sep or not key:
        raise argparse.ArgumentTypeError(f"Expected key=value, got {raw!r}")
    try:
        return key, json.loads(value)
    except json.JSONDecodeError:
        return key, value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Leave tracker analytics")
    parser.add_argument(
        "action",
        help=f"Module action (dashboard, overall, monthly, employees, ...) or '{STATUS_COMMAND}'",
    )
    parser.add_argument("--records", help="JSON file with a list of leave records to load first")
    parser.add_argument(
        "--param",
        action="append",
        default=[],
        type=_parse_param,
        help="Extra event field as key=value (repeatable)",
    )
    parser.add_argument("--module", help="Target module; by default the module declaring the action")
    parser.add_argument("--env", help="Path to a .env file")
    return parser


def _print(payload: Any) -> None:
    print(json.dumps(payload, ensure_ascii=False, indent=2))


def _succeeded(response: Optional[dict]) -> bool:
    return bool(response) and response.get("success") is True


def _read_records(path: str) -> list:
    with open(path, encoding="utf-8") as handle:
        records = json.load(handle)
    # Accept both a bare list and the {"success": ..., "data": [...]} API shape
    if isinstance(records, dict):
        records = records.get("data", [])
    return records


def run(argv: Optional[list[str]] = None) -> int:
    """
    Run one action.

    Returns:
        int: 0 on success, 1 when a module rejects the request,
        2 when the records file cannot be read
    """
    args = build_parser().parse_args(argv)
    logger = logging.getLogger(__name__)

    context = create_app_context(args.env)
    registry = create_registry(context)
    router = EventRouter(registry, context)
    target = {"module": args.module} if args.module else {}

    try:
        if args.records:
            try:
                records = _read_records(args.records)
            except (OSError, json.JSONDecodeError) as e:
                logger.error(f"Could not read records file {args.records}: {e}")
                return 2
            response = router.route({**target, "action": "load", "records": records})
            if not _succeeded(response):
                _print(response)
                return 1

        if args.action == STATUS_COMMAND:
            _print({"modules": registry.get_statuses(), "menus": registry.get_menu_configs()})
            return 0

        response = router.route({**target, "action": args.action, **dict(args.param)})
        _print(response)
        return 0 if _succeeded(response) else 1
    finally:
        registry.shutdown_all()


def main() -> None:
    sys.exit(run())


if __name__ == "__main__":
    main()
