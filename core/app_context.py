"""
AppContext - Shared application state handed to every module.

Holds the configuration loader and an in-memory event log that mirrors
what is written to the application logger.
"""
from typing import Any, Dict, Optional
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
import os
import logging

from dotenv import load_dotenv


@dataclass
class ConfigLoader:
    """Configuration loader from environment variables."""

    _config: Dict[str, Any] = field(default_factory=dict)

    def load(self, env_path: Optional[str] = None) -> None:
        """Load configuration from .env file and the process environment."""
        if env_path:
            load_dotenv(env_path)
        else:
            # Try to find .env in project root
            project_root = Path(__file__).parent.parent
            env_file = project_root / ".env"
            if env_file.exists():
                load_dotenv(env_file)

        self._config = {
            "app": {
                "debug": os.getenv("APP_DEBUG", "false").lower() == "true",
                "log_level": os.getenv("APP_LOG_LEVEL", "INFO").upper(),
            },
            "logging": {
                "dir": os.getenv("LOG_DIR", ""),
            },
            "modules": {
                "dir": os.getenv("MODULES_DIR", "modules"),
            },
        }

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value by dot notation key."""
        keys = key.split('.')
        value = self._config
        for k in keys:
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default
        return value

    def get_log_level(self) -> int:
        """Resolve ``app.log_level`` to a logging level number (INFO if unknown)."""
        level = logging.getLevelName(self.get("app.log_level", "INFO"))
        return level if isinstance(level, int) else logging.INFO


class AppContext:
    """
    Application Context - configuration and event log shared by modules.
    """

    def __init__(self, env_path: Optional[str] = None) -> None:
        self._logger = logging.getLogger(__name__)
        self._config_loader = ConfigLoader()
        self._config_loader.load(env_path)

        # Event log for the presentation layer
        self._event_log: list[str] = []
        self._max_log_entries: int = 500

    @property
    def config(self) -> ConfigLoader:
        """Access the configuration loader."""
        return self._config_loader

    def log_event(self, message: str, level: str = "INFO") -> None:
        """Log an event to both logger and event log."""
        timestamp = datetime.now().strftime("%H:%M:%S")
        formatted = f"[{timestamp}] [{level}] {message}"

        self._event_log.append(formatted)
        if len(self._event_log) > self._max_log_entries:
            self._event_log = self._event_log[-self._max_log_entries:]

        if level == "ERROR":
            self._logger.error(message)
        else:
            self._logger.info(message)

    def get_event_log(self) -> list[str]:
        """Get a copy of the current event log."""
        return self._event_log.copy()
