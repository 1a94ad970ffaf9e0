"""
Shared fixtures for framework tests.
"""

import asyncio
import time
from typing import Any, Dict, List, Optional, Tuple

import pytest

from microframework import (
    BootstrapConfig,
    Configurator,
    MicroFrameworkConfig,
    MicroFrameworkSettings,
    ModuleRegistry,
    ServiceContainer,
    SimpleModule,
)


# ============================================================
# TEST MODULE
# ============================================================

class RecordingModule(SimpleModule):
    """Module that appends every lifecycle call to a shared event log."""

    def __init__(
        self,
        name: str,
        events: List[Tuple[str, str]],
        bootstrap_error: Optional[Exception] = None,
        after_bootstrap_error: Optional[Exception] = None,
        shutdown_error: Optional[Exception] = None,
        bootstrap_sleep: float = 0.0,
        with_after_bootstrap: bool = False,
        **kwargs,
    ):
        super().__init__(name, **kwargs)
        self.events = events
        self.bootstrap_error = bootstrap_error
        self.after_bootstrap_error = after_bootstrap_error
        self.shutdown_error = shutdown_error
        self.bootstrap_sleep = bootstrap_sleep
        self.bootstrapped_at: Optional[float] = None

        if with_after_bootstrap:
            self.after_bootstrap = self._after_bootstrap

    def init(self, options, config, dependent_modules, framework) -> None:
        super().init(options, config, dependent_modules, framework)
        self.events.append(("init", self.get_name()))

    async def on_bootstrap(self) -> None:
        self.bootstrapped_at = time.monotonic()
        self.events.append(("bootstrap", self.get_name()))
        if self.bootstrap_sleep:
            await asyncio.sleep(self.bootstrap_sleep)
        if self.bootstrap_error:
            raise self.bootstrap_error

    async def _after_bootstrap(self) -> None:
        self.events.append(("after_bootstrap", self.get_name()))
        if self.after_bootstrap_error:
            raise self.after_bootstrap_error

    async def on_shutdown(self) -> None:
        self.events.append(("shutdown", self.get_name()))
        if self.shutdown_error:
            raise self.shutdown_error


# ============================================================
# FIXTURES
# ============================================================

@pytest.fixture
def events() -> List[Tuple[str, str]]:
    """Shared event log."""
    return []


@pytest.fixture
def make_module(events):
    """Factory for recording modules bound to the shared event log."""
    def factory(name: str, **kwargs) -> RecordingModule:
        return RecordingModule(name, events, **kwargs)
    return factory


@pytest.fixture
def framework_handle() -> object:
    """Opaque host handle."""
    return object()


@pytest.fixture
def make_registry(framework_handle):
    """Factory for registries with in-memory collaborators."""
    def factory(
        configuration: Optional[Dict[str, Any]] = None,
        delay_seconds: float = 0.0,
        debug_mode: bool = False,
        container: Optional[ServiceContainer] = None,
    ) -> ModuleRegistry:
        return ModuleRegistry(
            settings=MicroFrameworkSettings(extra={"feature": {"enabled": True}}),
            configuration=MicroFrameworkConfig(
                debug_mode=debug_mode,
                bootstrap=BootstrapConfig(timeout_seconds=delay_seconds),
            ),
            configurator=Configurator(configuration or {}),
            framework=framework_handle,
            container=container,
        )
    return factory


@pytest.fixture
def registry(make_registry) -> ModuleRegistry:
    return make_registry()
