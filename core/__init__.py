"""Core module - Application kernel components."""
from core.app_context import AppContext, ConfigLoader
from core.interface import IAppModule
from core.logging_config import setup_logging
from core.registry import ModuleRegistry, ModuleLoader
from core.router import EventRouter

__all__ = [
    "AppContext", "ConfigLoader", "IAppModule",
    "ModuleRegistry", "ModuleLoader",
    "EventRouter",
    "setup_logging",
]
