"""
Microframework - Module Registry.

============================================================
RESPONSIBILITY
============================================================
Owns the registered modules and drives them through their
lifecycle.

- Register modules (unique, non-empty names)
- Look modules up by name or type
- Resolve dependency order
- Init, bootstrap and shut down all modules
- Track module status

============================================================
"""

import logging
from typing import Any, Dict, List, Optional

from .configurator import ConfigurationSource
from .container import ServiceContainer
from .lifecycle import LifecycleDriver
from .models import (
    MicroFrameworkConfig,
    MicroFrameworkSettings,
    ModuleInitOptions,
    ModuleStatus,
    PhaseResult,
)
from .module import Module
from .resolver import sort_modules_by_dependencies
from core.exceptions import (
    DependenciesMissingException,
    ModuleAlreadyRegisteredException,
    ModuleConfigurationMissingException,
    ModuleProblemsException,
    ModuleWithoutNameException,
    NoModulesLoadedException,
)


# ============================================================
# MODULE REGISTRY
# ============================================================

class ModuleRegistry:
    """
    Registry for framework modules.

    Registration order is kept for lookups and shutdown; the
    dependency order is computed at bootstrap and kept apart.
    """

    def __init__(
        self,
        settings: MicroFrameworkSettings,
        configuration: MicroFrameworkConfig,
        configurator: ConfigurationSource,
        framework: Any,
        container: Optional[ServiceContainer] = None,
    ):
        """
        Initialize registry.

        Args:
            settings: Settings copied into every module's init options
            configuration: Framework configuration (debug mode, bootstrap delay)
            configurator: Source of per-module configuration sections
            framework: Host handle passed to every module's init
            container: Shared service container
        """
        self._settings = settings
        self._configuration = configuration
        self._configurator = configurator
        self._framework = framework
        self._container = container if container is not None else ServiceContainer()

        self._modules: List[Module] = []
        self._bootstrap_order: List[Module] = []
        self._statuses: Dict[str, ModuleStatus] = {}
        self._driver = LifecycleDriver(status_listener=self._set_status)
        self._logger = logging.getLogger(__name__)

    @property
    def modules(self) -> List[Module]:
        """Registered modules in registration order."""
        return list(self._modules)

    # --------------------------------------------------------
    # Registration
    # --------------------------------------------------------

    def register_modules(self, modules: List[Module]) -> None:
        """
        Register all given modules.

        Stops at the first failure; modules registered before it stay.
        """
        for module in modules:
            self.register_module(module)

    def register_module(self, module: Module) -> None:
        """
        Register a module.

        Raises:
            ModuleWithoutNameException: If the module has no name
            ModuleAlreadyRegisteredException: If the name is taken
        """
        name = module.get_name()
        if not name:
            raise ModuleWithoutNameException(module)

        if self.find_module_by_name(name) is not None:
            raise ModuleAlreadyRegisteredException(name)

        self._modules.append(module)
        self._statuses[name] = ModuleStatus.NOT_STARTED
        self._logger.debug(f"Registered module: {name}")

    # --------------------------------------------------------
    # Lookup
    # --------------------------------------------------------

    def find_module_by_type(self, module_type: type) -> Optional[Module]:
        """Find the first registered module that is an instance of module_type."""
        return next(
            (module for module in self._modules if isinstance(module, module_type)),
            None,
        )

    def find_module_by_name(self, name: str) -> Optional[Module]:
        """Find a registered module by name."""
        return next(
            (module for module in self._modules if module.get_name() == name),
            None,
        )

    # --------------------------------------------------------
    # Lifecycle
    # --------------------------------------------------------

    async def bootstrap_all_modules(self) -> None:
        """
        Bootstrap all modules.

        Raises:
            NoModulesLoadedException: If nothing is registered
            ModuleProblemsException: If modules cannot be ordered
            ModuleConfigurationMissingException: If required configuration is absent
            DependenciesMissingException: If a dependency is not registered
            Exception: The original failure of any module hook
        """
        if not self._modules:
            raise NoModulesLoadedException()

        try:
            ordered = sort_modules_by_dependencies(self._modules)
        except ValueError as e:
            raise ModuleProblemsException(str(e), cause=e) from e

        self._bootstrap_order = ordered
        self._logger.info(
            f"Bootstrap order: {', '.join(m.get_name() for m in ordered)}"
        )

        await self._driver.initialize(ordered, self._init_module)
        await self._driver.bootstrap(
            ordered,
            shutdown=self.shutdown_all_modules,
            delay_seconds=self._configuration.bootstrap.timeout_seconds,
        )

        self._logger.info(f"Bootstrapped {len(ordered)} modules")

    async def shutdown_all_modules(self) -> None:
        """
        Shut down all registered modules concurrently.

        Waits for every module, then raises the first failure, if any.
        """
        await self._driver.shutdown(self._modules)
        self._logger.info(f"Shut down {len(self._modules)} modules")

    def _init_module(self, module: Module) -> Any:
        options = ModuleInitOptions(
            framework_settings=self._settings.clone(),
            debug_mode=self._configuration.debug_mode or False,
            container=self._container,
        )
        return module.init(
            options,
            self._find_configuration_for_module(module),
            self._find_dependent_modules_for_module(module),
            self._framework,
        )

    def _find_configuration_for_module(self, module: Module) -> Optional[Any]:
        configuration_name = module.get_configuration_name()
        if not configuration_name:
            return None

        config = self._configurator.get(configuration_name)
        if config is None and module.is_configuration_required():
            raise ModuleConfigurationMissingException(
                module.get_name(),
                configuration_name,
            )

        return config

    def _find_dependent_modules_for_module(self, module: Module) -> Optional[List[Module]]:
        names = module.get_dependent_modules()
        if not names:
            return None

        dependent_modules: List[Module] = []
        missing: List[str] = []
        for name in names:
            dependency = self.find_module_by_name(name)
            if dependency is None:
                missing.append(name)
            else:
                dependent_modules.append(dependency)

        if missing and not module.ignore_missing_dependencies:
            raise DependenciesMissingException(module.get_name(), missing)

        if missing:
            self._logger.warning(
                f"Module {module.get_name()} ignores missing dependencies: {', '.join(missing)}"
            )

        return dependent_modules

    # --------------------------------------------------------
    # Status
    # --------------------------------------------------------

    def _set_status(self, module: Module, status: ModuleStatus) -> None:
        name = module.get_name()
        # A failed module keeps ERROR through the shutdown that follows.
        if (
            self._statuses.get(name) == ModuleStatus.ERROR
            and status in (ModuleStatus.STOPPING, ModuleStatus.STOPPED)
        ):
            return
        self._statuses[name] = status

    def get_module_status(self, name: str) -> Optional[ModuleStatus]:
        """Get the lifecycle status of a module."""
        return self._statuses.get(name)

    def get_bootstrap_order(self) -> List[str]:
        """Names in resolved order (empty before the first bootstrap)."""
        return [module.get_name() for module in self._bootstrap_order]

    def get_phase_results(self) -> List[PhaseResult]:
        """Results of every lifecycle phase run so far."""
        return self._driver.phase_results

    def get_status_summary(self) -> Dict[str, Any]:
        """Get summary of all module statuses."""
        status_counts = {status.value: 0 for status in ModuleStatus}
        for status in self._statuses.values():
            status_counts[status.value] += 1

        return {
            "total_registered": len(self._modules),
            "bootstrap_order": self.get_bootstrap_order(),
            "status_counts": status_counts,
            "active": [
                name for name, status in self._statuses.items()
                if status.is_active
            ],
            "failed": [
                name for name, status in self._statuses.items()
                if status == ModuleStatus.ERROR
            ],
        }


# ============================================================
# EXPORTS
# ============================================================

__all__ = [
    "ModuleRegistry",
]
