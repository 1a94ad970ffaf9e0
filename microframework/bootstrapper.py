"""
Microframework - Bootstrapper.

============================================================
RESPONSIBILITY
============================================================
Host object that applications create to run their modules.

- Collects modules before bootstrap
- Loads configuration files from the configured directory
- Builds the registry with itself as the host handle
- Bootstraps and shuts down all modules

============================================================
"""

import json
import logging
import sys
from typing import List, Optional

from .configurator import Configurator
from .container import ServiceContainer
from .models import MicroFrameworkConfig, MicroFrameworkSettings
from .module import Module
from .registry import ModuleRegistry
from core.exceptions import ConfigurationError, ShutdownError, wrap_exception


FRAMEWORK_CONFIGURATION_NAME = "microframework"


# ============================================================
# LOGGING SETUP
# ============================================================

def _build_formatter(log_format: str, correlation_id: Optional[str]) -> logging.Formatter:
    if log_format == "json":
        return logging.Formatter(
            json.dumps({
                "timestamp": "%(asctime)s",
                "level": "%(levelname)s",
                "logger": "%(name)s",
                "message": "%(message)s",
                "correlation_id": correlation_id or "",
            })
        )
    return logging.Formatter(
        f"%(asctime)s | %(levelname)-8s | %(name)s | {correlation_id or ''} | %(message)s"
    )


def setup_logging(
    config: MicroFrameworkConfig,
    correlation_id: Optional[str] = None,
) -> logging.Logger:
    """
    Install root logging from the framework configuration.

    The root logger takes ``config.log_level``. In debug mode the
    ``microframework`` logger is opened up to DEBUG so lifecycle
    phases are traced even when the application logs at a higher level.

    Args:
        config: Framework configuration
        correlation_id: Correlation ID added to every record

    Returns:
        The framework logger
    """
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(_build_formatter(config.log_format, correlation_id))

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, config.log_level.upper(), logging.INFO))
    root_logger.handlers = [handler]

    framework_logger = logging.getLogger(FRAMEWORK_CONFIGURATION_NAME)
    framework_logger.setLevel(logging.DEBUG if config.debug_mode else logging.NOTSET)
    return framework_logger


# ============================================================
# BOOTSTRAPPER
# ============================================================

class MicroFrameworkBootstrapper:
    """
    Entry point for applications built from modules.

    Usage::

        framework = MicroFrameworkBootstrapper(settings)
        framework.register_modules([DatabaseModule(), ApiModule()])
        await framework.bootstrap()
        ...
        await framework.shutdown()
    """

    def __init__(
        self,
        settings: Optional[MicroFrameworkSettings] = None,
        configurator: Optional[Configurator] = None,
        container: Optional[ServiceContainer] = None,
        configure_logging: bool = False,
    ):
        """
        Initialize bootstrapper.

        Args:
            settings: Framework settings (defaults to MicroFrameworkSettings())
            configurator: Configuration store; configuration files are loaded into it
            container: Service container shared with every module
            configure_logging: Install root logging from the framework configuration
        """
        self._settings = settings or MicroFrameworkSettings()
        self._configure_logging = configure_logging
        self._configurator = configurator or Configurator()
        self._container = container or ServiceContainer()
        self._config: Optional[MicroFrameworkConfig] = None
        self._modules: List[Module] = []
        self._registry: Optional[ModuleRegistry] = None
        self._running = False
        self._logger = logging.getLogger(__name__)

    # --------------------------------------------------------
    # Properties
    # --------------------------------------------------------

    @property
    def settings(self) -> MicroFrameworkSettings:
        return self._settings

    @property
    def configurator(self) -> Configurator:
        return self._configurator

    @property
    def container(self) -> ServiceContainer:
        return self._container

    @property
    def config(self) -> Optional[MicroFrameworkConfig]:
        """Framework configuration, available once bootstrap has started."""
        return self._config

    @property
    def registry(self) -> Optional[ModuleRegistry]:
        return self._registry

    @property
    def is_running(self) -> bool:
        return self._running

    # --------------------------------------------------------
    # Modules
    # --------------------------------------------------------

    def register_module(self, module: Module) -> "MicroFrameworkBootstrapper":
        """Add a module to be bootstrapped."""
        self._modules.append(module)
        return self

    def register_modules(self, modules: List[Module]) -> "MicroFrameworkBootstrapper":
        """Add modules to be bootstrapped."""
        self._modules.extend(modules)
        return self

    def find_module_by_type(self, module_type: type) -> Optional[Module]:
        if self._registry is None:
            return next((m for m in self._modules if isinstance(m, module_type)), None)
        return self._registry.find_module_by_type(module_type)

    def find_module_by_name(self, name: str) -> Optional[Module]:
        if self._registry is None:
            return next((m for m in self._modules if m.get_name() == name), None)
        return self._registry.find_module_by_name(name)

    # --------------------------------------------------------
    # Lifecycle
    # --------------------------------------------------------

    async def bootstrap(self) -> "MicroFrameworkBootstrapper":
        """
        Load configuration and bootstrap every module.

        Raises:
            ConfigurationError: If the framework configuration is invalid
        """
        if self._running:
            self._logger.warning("Framework already running")
            return self

        if self._settings.configuration_directory:
            self._configurator.load_directory(
                self._settings.configuration_directory,
                environment=self._settings.environment,
            )

        self._config = MicroFrameworkConfig.from_dict(
            self._configurator.get(FRAMEWORK_CONFIGURATION_NAME)
        )
        errors = self._config.validate()
        if errors:
            raise ConfigurationError(
                message=f"Invalid configuration: {', '.join(errors)}",
                config_key=FRAMEWORK_CONFIGURATION_NAME,
            )

        if self._configure_logging:
            setup_logging(self._config)

        self._registry = ModuleRegistry(
            settings=self._settings,
            configuration=self._config,
            configurator=self._configurator,
            framework=self,
            container=self._container,
        )
        self._registry.register_modules(self._modules)

        self._logger.info(
            f"=== BOOTSTRAP START | modules={len(self._modules)} "
            f"debug={self._config.debug_mode} ==="
        )
        await self._registry.bootstrap_all_modules()
        self._running = True
        self._logger.info("=== BOOTSTRAP COMPLETE ===")

        return self

    async def shutdown(self) -> None:
        """
        Shut down every module.

        Raises:
            ShutdownError: If any module failed to shut down
        """
        if not self._running or self._registry is None:
            return

        self._logger.info("=== SHUTDOWN START ===")
        try:
            await self._registry.shutdown_all_modules()
        except Exception as e:
            self._logger.error(f"Shutdown error: {e}", exc_info=True)
            raise wrap_exception(e, ShutdownError, message=f"Shutdown error: {e}") from e
        finally:
            self._running = False

        self._logger.info("=== SHUTDOWN COMPLETE ===")


# ============================================================
# EXPORTS
# ============================================================

__all__ = [
    "MicroFrameworkBootstrapper",
    "setup_logging",
]
