"""
Logging Configuration Module.

Provides centralized logging setup with a rotating file handler and a
console handler. Logs are saved to the project's logs directory unless
LOG_DIR points elsewhere.
"""

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional
import sys


# --- Constants ---
LOG_FILENAME = "leave_tracker.log"
MAX_BYTES = 10 * 1024 * 1024  # 10 MB
BACKUP_COUNT = 5
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def get_log_path(log_dir: Optional[str] = None) -> Path:
    """
    Get the path for log files, creating the directory if needed.

    Args:
        log_dir: Directory for log files. Defaults to ``<project>/logs``.
    """
    if log_dir:
        logs_dir = Path(log_dir)
    else:
        logs_dir = Path(__file__).resolve().parent.parent / "logs"

    logs_dir.mkdir(parents=True, exist_ok=True)

    return logs_dir / LOG_FILENAME


def setup_logging(log_level: int = logging.INFO, log_dir: Optional[str] = None) -> None:
    """
    Configure application logging with rotation.

    Args:
        log_level: The logging level (default: logging.INFO).
        log_dir: Optional directory for the rotating log file.
    """
    log_file_path = get_log_path(log_dir)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    # Clear existing handlers to avoid duplicates
    root_logger.handlers.clear()

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    # --- File Handler (Rotating) ---
    file_handler = RotatingFileHandler(
        filename=str(log_file_path),
        maxBytes=MAX_BYTES,
        backupCount=BACKUP_COUNT,
        encoding="utf-8",
    )
    file_handler.setLevel(log_level)
    file_handler.setFormatter(formatter)
    root_logger.addHandler(file_handler)

    # --- Console Handler ---
    # stderr keeps stdout free for CLI output
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    root_logger.info(f"Logging initialized. Log file: {log_file_path}")
