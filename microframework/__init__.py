"""
Microframework Package - Module Lifecycle Layer.

============================================================
PACKAGE OVERVIEW
============================================================
This package starts and stops a set of named, interdependent
modules inside one process.

============================================================
CORE PRINCIPLES
============================================================
1. Module names are unique
2. A module is initialized only after the modules it depends on
3. Every phase finishes for all modules before the next begins
4. A failed bootstrap shuts everything down and reports the
   original failure

============================================================
ARCHITECTURE
============================================================

    +-----------------------------------------------------+
    |               MicroFrameworkBootstrapper            |
    |-----------------------------------------------------|
    |  Configurator     |  Named configuration sections    |
    |  ServiceContainer |  Services shared between modules |
    |  ModuleRegistry   |  Registration and lookup         |
    |  DependencyGraph  |  Dependency order                |
    |  LifecycleDriver  |  Phase execution                 |
    +-----------------------------------------------------+

============================================================
LIFECYCLE PHASES
============================================================
 1. INIT            - init() per module, in dependency order
 2. DELAY           - optional bootstrap.timeout_seconds pause
 3. BOOTSTRAP       - on_bootstrap() on all modules, concurrently
 4. AFTER_BOOTSTRAP - after_bootstrap() where provided, concurrently
 5. SHUTDOWN        - on_shutdown() on all modules, concurrently

============================================================
QUICK START
============================================================
Programmatic usage::

    import asyncio
    from microframework import (
        MicroFrameworkBootstrapper,
        MicroFrameworkSettings,
        SimpleModule,
    )

    class ApiModule(SimpleModule):
        async def on_bootstrap(self):
            ...

    async def main():
        framework = MicroFrameworkBootstrapper(
            MicroFrameworkSettings(configuration_directory="config"),
        )
        framework.register_modules([
            SimpleModule("database", configuration_name="database"),
            ApiModule("api", dependencies=["database"]),
        ])
        await framework.bootstrap()
        ...
        await framework.shutdown()

    asyncio.run(main())

============================================================
EXPORTS
============================================================
"""

# ============================================================
# Models
# ============================================================
from microframework.models import (
    # Enums
    LifecyclePhase,
    ModuleStatus,

    # Results
    PhaseResult,

    # Configuration
    BootstrapConfig,
    MicroFrameworkConfig,
    MicroFrameworkSettings,
    ModuleInitOptions,
)

# ============================================================
# Modules
# ============================================================
from microframework.module import (
    Module,
    SimpleModule,
)

# ============================================================
# Collaborators
# ============================================================
from microframework.configurator import (
    ConfigurationSource,
    Configurator,
)
from microframework.container import ServiceContainer

# ============================================================
# Ordering and lifecycle
# ============================================================
from microframework.resolver import (
    DependencyGraph,
    sort_modules_by_dependencies,
)
from microframework.lifecycle import LifecycleDriver
from microframework.registry import ModuleRegistry

# ============================================================
# Host
# ============================================================
from microframework.bootstrapper import (
    MicroFrameworkBootstrapper,
    setup_logging,
)


__all__ = [
    # Models
    "LifecyclePhase",
    "ModuleStatus",
    "PhaseResult",
    "BootstrapConfig",
    "MicroFrameworkConfig",
    "MicroFrameworkSettings",
    "ModuleInitOptions",

    # Modules
    "Module",
    "SimpleModule",

    # Collaborators
    "ConfigurationSource",
    "Configurator",
    "ServiceContainer",

    # Ordering and lifecycle
    "DependencyGraph",
    "sort_modules_by_dependencies",
    "LifecycleDriver",
    "ModuleRegistry",

    # Host
    "MicroFrameworkBootstrapper",
    "setup_logging",
]
