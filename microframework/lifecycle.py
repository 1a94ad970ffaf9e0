"""
Microframework - Lifecycle Driver.

============================================================
RESPONSIBILITY
============================================================
Runs module hooks phase by phase.

- All modules of a phase run concurrently
- Each phase is a barrier: every module settles before the next phase
- The first failure (in completion order) ends the sequence
- A failed bootstrap shuts every module down and re-raises the
  original failure, never a failure raised during that shutdown

============================================================
PHASES
============================================================
 1. INIT            - sequential, run by the registry
 2. DELAY           - optional sleep before bootstrap
 3. BOOTSTRAP       - on_bootstrap on every module
 4. AFTER_BOOTSTRAP - after_bootstrap where a module provides it
 5. SHUTDOWN        - on_shutdown on every module

============================================================
"""

import asyncio
import inspect
import logging
from typing import Any, Awaitable, Callable, Dict, List, Optional, Sequence, Tuple

from .models import LifecyclePhase, ModuleStatus, PhaseResult
from .module import Module
from core.clock import ClockFactory
from core.exceptions import classify_exception


# ============================================================
# TYPES
# ============================================================

StatusListener = Callable[[Module, ModuleStatus], None]

# phase -> (status while running, status once done)
_PHASE_STATUSES: Dict[LifecyclePhase, Tuple[Optional[ModuleStatus], Optional[ModuleStatus]]] = {
    LifecyclePhase.BOOTSTRAP: (ModuleStatus.BOOTSTRAPPING, ModuleStatus.RUNNING),
    LifecyclePhase.AFTER_BOOTSTRAP: (None, None),
    LifecyclePhase.SHUTDOWN: (ModuleStatus.STOPPING, ModuleStatus.STOPPED),
}


async def maybe_await(value: Any) -> Any:
    """Await value if it is awaitable, otherwise return it."""
    if inspect.isawaitable(value):
        return await value
    return value


# ============================================================
# LIFECYCLE DRIVER
# ============================================================

class LifecycleDriver:
    """
    Executes lifecycle phases over an ordered module set.
    """

    def __init__(self, status_listener: Optional[StatusListener] = None):
        """
        Initialize driver.

        Args:
            status_listener: Called whenever a module changes status
        """
        self._status_listener = status_listener
        self._phase_results: List[PhaseResult] = []
        self._logger = logging.getLogger(__name__)

    @property
    def phase_results(self) -> List[PhaseResult]:
        """Results of every phase run so far."""
        return list(self._phase_results)

    # --------------------------------------------------------
    # Sequences
    # --------------------------------------------------------

    async def bootstrap(
        self,
        modules: Sequence[Module],
        shutdown: Callable[[], Awaitable[None]],
        delay_seconds: float = 0.0,
    ) -> None:
        """
        Run delay, bootstrap and after-bootstrap phases.

        Args:
            modules: Modules in resolved order
            shutdown: Shuts every module down if bootstrap fails
            delay_seconds: Pause before the bootstrap phase

        Raises:
            Exception: The original bootstrap or after-bootstrap failure
        """
        if delay_seconds > 0:
            await self.delay(delay_seconds)

        try:
            await self.run_phase(LifecyclePhase.BOOTSTRAP, modules)
            await self.run_phase(LifecyclePhase.AFTER_BOOTSTRAP, modules)
        except Exception as error:
            await self._shutdown_after_failure(shutdown, error)
            raise

    async def shutdown(self, modules: Sequence[Module]) -> PhaseResult:
        """Run on_shutdown on every module."""
        return await self.run_phase(LifecyclePhase.SHUTDOWN, modules)

    async def _shutdown_after_failure(
        self,
        shutdown: Callable[[], Awaitable[None]],
        cause: Exception,
    ) -> None:
        """Best-effort shutdown; its own failures are logged and dropped."""
        self._logger.error(
            f"Bootstrap failed, shutting down all modules | "
            f"{type(cause).__name__}: {cause}"
        )

        try:
            await shutdown()
        except Exception as shutdown_error:
            self._logger.warning(
                f"Shutdown after failed bootstrap also failed, keeping original error | "
                f"{type(shutdown_error).__name__}: {shutdown_error}"
            )

    # --------------------------------------------------------
    # Phases
    # --------------------------------------------------------

    async def initialize(
        self,
        modules: Sequence[Module],
        initializer: Callable[[Module], Any],
    ) -> PhaseResult:
        """
        Initialize modules one at a time, in the given order.

        A failure propagates immediately; no module has bootstrapped
        yet, so nothing is shut down.
        """
        phase = LifecyclePhase.INIT
        clock = ClockFactory.get_clock()
        started_at = clock.now()

        self._logger.info(
            f"Phase [{phase.order}] START: {phase.description} ({len(modules)} modules)"
        )

        for module in modules:
            try:
                await maybe_await(initializer(module))
            except Exception as e:
                self._notify(module, ModuleStatus.ERROR)
                completed_at = clock.now()
                self._phase_results.append(PhaseResult(
                    phase=phase,
                    success=False,
                    started_at=started_at,
                    completed_at=completed_at,
                    duration_seconds=(completed_at - started_at).total_seconds(),
                    module_names=[m.get_name() for m in modules],
                    error=str(e),
                    error_type=type(e).__name__,
                ))
                self._logger.error(
                    f"Phase [{phase.order}] module {module.get_name()} FAILED "
                    f"- {type(e).__name__}: {e}"
                )
                raise
            self._notify(module, ModuleStatus.INITIALIZED)

        completed_at = clock.now()
        duration = (completed_at - started_at).total_seconds()
        result = PhaseResult(
            phase=phase,
            success=True,
            started_at=started_at,
            completed_at=completed_at,
            duration_seconds=duration,
            module_names=[m.get_name() for m in modules],
        )
        self._phase_results.append(result)

        self._logger.info(
            f"Phase [{phase.order}] COMPLETE: {phase.description} ({duration:.2f}s)"
        )
        return result

    async def delay(self, seconds: float) -> PhaseResult:
        """Suspend the whole sequence before bootstrap."""
        phase = LifecyclePhase.DELAY
        clock = ClockFactory.get_clock()
        started_at = clock.now()

        self._logger.info(f"Phase [{phase.order}] START: {phase.description} ({seconds}s)")
        await asyncio.sleep(seconds)

        completed_at = clock.now()
        result = PhaseResult(
            phase=phase,
            success=True,
            started_at=started_at,
            completed_at=completed_at,
            duration_seconds=(completed_at - started_at).total_seconds(),
        )
        self._phase_results.append(result)
        return result

    async def run_phase(
        self,
        phase: LifecyclePhase,
        modules: Sequence[Module],
    ) -> PhaseResult:
        """
        Run one phase's hook on every module concurrently.

        Waits until every module has settled, then raises the first
        failure if there was one.

        Returns:
            PhaseResult of a successful phase
        """
        hooks = [
            (module, hook)
            for module, hook in ((m, self._get_hook(phase, m)) for m in modules)
            if hook is not None
        ]
        running_status, done_status = _PHASE_STATUSES[phase]
        failures: List[Tuple[Module, Exception]] = []

        clock = ClockFactory.get_clock()
        started_at = clock.now()

        self._logger.info(
            f"Phase [{phase.order}] START: {phase.description} ({len(hooks)} modules)"
        )

        async def invoke(module: Module, hook: Callable[[], Any]) -> None:
            self._notify(module, running_status)
            try:
                await maybe_await(hook())
            except Exception as e:
                failures.append((module, e))
                self._notify(module, ModuleStatus.ERROR)
                self._logger.error(
                    f"Phase [{phase.order}] module {module.get_name()} FAILED "
                    f"- {type(e).__name__}: {e} "
                    f"(classification={classify_exception(e).value})"
                )
                return
            self._notify(module, done_status)

        await asyncio.gather(*(invoke(module, hook) for module, hook in hooks))

        completed_at = clock.now()
        duration = (completed_at - started_at).total_seconds()
        first_error = failures[0][1] if failures else None

        result = PhaseResult(
            phase=phase,
            success=first_error is None,
            started_at=started_at,
            completed_at=completed_at,
            duration_seconds=duration,
            module_names=[module.get_name() for module, _ in hooks],
            error=str(first_error) if first_error else None,
            error_type=type(first_error).__name__ if first_error else None,
        )
        self._phase_results.append(result)

        if first_error is not None:
            self._logger.error(
                f"Phase [{phase.order}] FAILED: {phase.description} "
                f"({len(failures)} of {len(hooks)} modules failed)"
            )
            raise first_error

        self._logger.info(
            f"Phase [{phase.order}] COMPLETE: {phase.description} ({duration:.2f}s)"
        )
        return result

    # --------------------------------------------------------
    # Helpers
    # --------------------------------------------------------

    @staticmethod
    def _get_hook(phase: LifecyclePhase, module: Module) -> Optional[Callable[[], Any]]:
        if phase == LifecyclePhase.BOOTSTRAP:
            return module.on_bootstrap
        if phase == LifecyclePhase.AFTER_BOOTSTRAP:
            return module.after_bootstrap
        if phase == LifecyclePhase.SHUTDOWN:
            return module.on_shutdown
        raise ValueError(f"Phase {phase.phase_id} does not run module hooks")

    def _notify(self, module: Module, status: Optional[ModuleStatus]) -> None:
        if status is not None and self._status_listener:
            self._status_listener(module, status)


# ============================================================
# EXPORTS
# ============================================================

__all__ = [
    "LifecycleDriver",
    "StatusListener",
    "maybe_await",
]
