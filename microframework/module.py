"""
Microframework - Module Interface.

============================================================
RESPONSIBILITY
============================================================
Defines the capability interface every framework module implements.

Required:
- get_name()
- init(options, config, dependent_modules, framework)
- on_bootstrap()
- on_shutdown()

Optional (declared here with defaults):
- get_dependent_modules()      -> None
- ignore_missing_dependencies  -> False
- get_configuration_name()     -> None
- is_configuration_required()  -> False
- after_bootstrap              -> None (no hook)

============================================================
"""

from abc import ABC, abstractmethod
from typing import Any, Awaitable, Callable, List, Optional

from .models import ModuleInitOptions


# ============================================================
# MODULE INTERFACE
# ============================================================

class Module(ABC):
    """Base class that all framework modules derive from."""

    ignore_missing_dependencies: bool = False
    """Bootstrap even if some declared dependencies are not registered."""

    after_bootstrap: Optional[Callable[[], Awaitable[None]]] = None
    """Optional hook run once every module has bootstrapped.

    Subclasses that need it override this attribute with an async method.
    """

    @abstractmethod
    def get_name(self) -> str:
        """Unique module name."""
        ...

    def get_dependent_modules(self) -> Optional[List[str]]:
        """Names of modules that must be initialized before this one."""
        return None

    def get_configuration_name(self) -> Optional[str]:
        """Name of the configuration section this module reads."""
        return None

    def is_configuration_required(self) -> bool:
        """Whether bootstrap must fail when the configuration is absent."""
        return False

    @abstractmethod
    def init(
        self,
        options: ModuleInitOptions,
        config: Optional[Any],
        dependent_modules: Optional[List["Module"]],
        framework: Any,
    ) -> Optional[Awaitable[None]]:
        """
        Initialize the module.

        Called once, in dependency order, before any module bootstraps.
        May return an awaitable; it is awaited before the next module's init.

        Args:
            options: Settings snapshot, debug flag and service container
            config: Configuration found for get_configuration_name(), if any
            dependent_modules: Resolved dependency modules, if any were declared
            framework: The host bootstrapper
        """
        ...

    @abstractmethod
    async def on_bootstrap(self) -> None:
        """Start the module."""
        ...

    @abstractmethod
    async def on_shutdown(self) -> None:
        """Stop the module."""
        ...

    def __repr__(self) -> str:
        return f"<{type(self).__name__} name={self.get_name()!r}>"


# ============================================================
# SIMPLE MODULE
# ============================================================

class SimpleModule(Module):
    """
    Module with no-op lifecycle hooks.

    Stores everything it receives at init time so subclasses can
    use it from on_bootstrap.
    """

    def __init__(
        self,
        name: str,
        dependencies: Optional[List[str]] = None,
        configuration_name: Optional[str] = None,
        configuration_required: bool = False,
        ignore_missing_dependencies: bool = False,
    ):
        self._name = name
        self._dependencies = dependencies
        self._configuration_name = configuration_name
        self._configuration_required = configuration_required
        self.ignore_missing_dependencies = ignore_missing_dependencies

        self.options: Optional[ModuleInitOptions] = None
        self.config: Optional[Any] = None
        self.dependent_modules: Optional[List[Module]] = None
        self.framework: Any = None

    def get_name(self) -> str:
        return self._name

    def get_dependent_modules(self) -> Optional[List[str]]:
        return self._dependencies

    def get_configuration_name(self) -> Optional[str]:
        return self._configuration_name

    def is_configuration_required(self) -> bool:
        return self._configuration_required

    def init(self, options, config, dependent_modules, framework) -> None:
        self.options = options
        self.config = config
        self.dependent_modules = dependent_modules
        self.framework = framework

    async def on_bootstrap(self) -> None:
        pass

    async def on_shutdown(self) -> None:
        pass


# ============================================================
# EXPORTS
# ============================================================

__all__ = [
    "Module",
    "SimpleModule",
]
