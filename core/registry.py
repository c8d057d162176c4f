"""
Module Registry - holds the loaded modules and the action index used to
route events that name an action but no module.
"""
from typing import Dict, List, Optional, Type
import importlib
import logging
from pathlib import Path

from core.interface import IAppModule
from core.app_context import AppContext


class ModuleRegistry:
    """
    Process-wide registry of application modules.

    Besides lookup by module name, the registry keeps an index from each
    declared action to the module that owns it. The first module to claim
    an action keeps it.
    """

    _instance: Optional["ModuleRegistry"] = None

    def __new__(cls) -> "ModuleRegistry":
        """Singleton pattern to ensure single registry instance."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self) -> None:
        if self._initialized:
            return

        self._modules: Dict[str, IAppModule] = {}
        self._action_owners: Dict[str, str] = {}
        self._logger = logging.getLogger(__name__)
        self._context: Optional[AppContext] = None
        self._initialized = True

    def set_context(self, context: AppContext) -> None:
        self._context = context

    def register(self, module: IAppModule) -> bool:
        """
        Add a module, index its actions and run its on_entry hook.

        A failing on_entry is logged; the module stays registered.

        Returns:
            bool: False if a module with the same name is already registered
        """
        name = module.get_module_name()
        if name in self._modules:
            self._logger.warning(f"Module '{name}' already registered. Skipping.")
            return False

        self._modules[name] = module
        self._index_actions(name, module)
        self._logger.info(f"Module '{name}' registered with {len(module.get_actions())} action(s)")

        if self._context:
            try:
                module.on_entry(self._context)
                self._context.log_event(f"Module '{name}' initialized", "SUCCESS")
            except Exception as e:
                self._logger.error(f"Failed to initialize module '{name}': {e}")
                self._context.log_event(f"Module '{name}' init failed: {e}", "ERROR")

        return True

    def register_class(self, module_class: Type[IAppModule]) -> bool:
        """Instantiate ``module_class`` with no arguments and register it."""
        try:
            instance = module_class()
        except Exception as e:
            self._logger.error(f"Failed to instantiate module class {module_class.__name__}: {e}")
            return False
        return self.register(instance)

    def unregister(self, module_name: str) -> bool:
        """
        Remove a module and its actions, then call its on_shutdown hook.

        Returns:
            bool: False if no module has this name
        """
        module = self._modules.pop(module_name, None)
        if module is None:
            self._logger.warning(f"Module '{module_name}' not found in registry.")
            return False

        self._action_owners = {
            action: owner for action, owner in self._action_owners.items() if owner != module_name
        }

        try:
            module.on_shutdown()
        except Exception as e:
            self._logger.error(f"Error during module '{module_name}' shutdown: {e}")

        self._logger.info(f"Module '{module_name}' unregistered.")
        return True

    def _index_actions(self, name: str, module: IAppModule) -> None:
        for action in module.get_actions():
            owner = self._action_owners.setdefault(action, name)
            if owner != name:
                self._logger.warning(
                    f"Action '{action}' of module '{name}' is already handled by '{owner}'"
                )

    # =========================================================================
    # Lookup
    # =========================================================================

    def get_module(self, module_name: str) -> Optional[IAppModule]:
        return self._modules.get(module_name)

    def get_module_for_action(self, action: str) -> Optional[IAppModule]:
        """Module that declared ``action`` in get_actions(), or None."""
        owner = self._action_owners.get(action)
        return self._modules.get(owner) if owner else None

    def get_module_names(self) -> List[str]:
        return list(self._modules.keys())

    def get_menu_configs(self) -> List[dict]:
        """Menu configurations of all modules; modules that fail are left out."""
        configs = []
        for name, module in self._modules.items():
            try:
                config = module.get_menu_config()
            except Exception as e:
                self._logger.error(f"Error getting menu config from module '{name}': {e}")
                continue
            if config:
                configs.append(config)
        return configs

    def get_statuses(self) -> Dict[str, dict]:
        """
        ``get_status()`` of every module, keyed by module name.

        A module whose get_status() raises is reported with status "error".
        """
        statuses = {}
        for name, module in self._modules.items():
            try:
                statuses[name] = module.get_status()
            except Exception as e:
                self._logger.error(f"Error getting status from module '{name}': {e}")
                statuses[name] = {"status": "error", "details": {"Error": str(e)}}
        return statuses

    def shutdown_all(self) -> None:
        for module_name in list(self._modules.keys()):
            self.unregister(module_name)
        self._logger.info("All modules shut down.")


class ModuleLoader:
    """
    Imports every package under the modules directory
    (``modules/<name>/__init__.py``) and registers the IAppModule
    subclasses it exports.
    """

    def __init__(self, registry: ModuleRegistry, package: str = "modules") -> None:
        self._registry = registry
        self._package = package
        self._logger = logging.getLogger(__name__)

    def load_from_directory(self, modules_path: str) -> int:
        """
        Load package modules from a directory, in name order.

        Packages whose name starts with an underscore are skipped, as are
        packages that fail to import.

        Returns:
            int: Number of modules registered
        """
        path = Path(modules_path)
        if not path.exists():
            self._logger.warning(f"Modules directory '{modules_path}' does not exist.")
            return 0

        loaded_count = 0
        for subdir in sorted(path.iterdir()):
            if not subdir.is_dir() or subdir.name.startswith("_"):
                continue
            if not (subdir / "__init__.py").exists():
                continue

            try:
                package = importlib.import_module(f"{self._package}.{subdir.name}")
            except Exception as e:
                self._logger.error(f"Error loading package module '{subdir.name}': {e}")
                continue

            for module_class in self._module_classes(package):
                if self._registry.register_class(module_class):
                    loaded_count += 1
                    self._logger.info(f"Loaded {module_class.__name__} from {subdir.name}/")

        return loaded_count

    @staticmethod
    def _module_classes(package) -> List[Type[IAppModule]]:
        classes = []
        for attr_name in dir(package):
            attr = getattr(package, attr_name)
            if isinstance(attr, type) and issubclass(attr, IAppModule) and attr is not IAppModule:
                classes.append(attr)
        return classes
