"""
Microframework - Models.

============================================================
RESPONSIBILITY
============================================================
Defines data models for the module framework.

- Lifecycle phases with strict ordering
- Module status
- Phase results
- Framework settings and configuration dataclasses
- Options handed to every module at init time

============================================================
"""

from enum import Enum
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional
import copy
import os

from dotenv import load_dotenv

from core.exceptions import InvalidConfigError


# ============================================================
# LIFECYCLE PHASES
# ============================================================

class LifecyclePhase(Enum):
    """
    Lifecycle phases in strict order.

    Every phase is a barrier: the next phase starts only once
    every module has settled the current one.
    """

    INIT = (1, "init", "Initialize modules in dependency order")
    DELAY = (2, "delay", "Wait for the configured startup delay")
    BOOTSTRAP = (3, "bootstrap", "Bootstrap all modules")
    AFTER_BOOTSTRAP = (4, "after_bootstrap", "Run after-bootstrap hooks")
    SHUTDOWN = (5, "shutdown", "Shut down all modules")

    def __init__(self, order: int, phase_id: str, description: str):
        self._order = order
        self._phase_id = phase_id
        self._description = description

    @property
    def order(self) -> int:
        """Get execution order."""
        return self._order

    @property
    def phase_id(self) -> str:
        """Get phase identifier."""
        return self._phase_id

    @property
    def description(self) -> str:
        """Get phase description."""
        return self._description


# ============================================================
# MODULE STATUS
# ============================================================

class ModuleStatus(Enum):
    """Module lifecycle status."""

    NOT_STARTED = "not_started"
    """Module is registered but has not been initialized."""

    INITIALIZED = "initialized"
    """Module init completed."""

    BOOTSTRAPPING = "bootstrapping"
    """Module bootstrap is in progress."""

    RUNNING = "running"
    """Module bootstrapped successfully."""

    STOPPING = "stopping"
    """Module is shutting down."""

    STOPPED = "stopped"
    """Module has stopped cleanly."""

    ERROR = "error"
    """A lifecycle operation of this module failed."""

    @property
    def is_active(self) -> bool:
        """Check if module is active."""
        return self in (ModuleStatus.BOOTSTRAPPING, ModuleStatus.RUNNING)


# ============================================================
# PHASE RESULT
# ============================================================

@dataclass
class PhaseResult:
    """Result of executing a lifecycle phase."""

    phase: LifecyclePhase
    success: bool
    started_at: datetime
    completed_at: datetime
    duration_seconds: float
    module_names: List[str] = field(default_factory=list)
    error: Optional[str] = None
    error_type: Optional[str] = None

    @property
    def duration(self) -> timedelta:
        """Get duration as timedelta."""
        return timedelta(seconds=self.duration_seconds)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to dictionary."""
        return {
            "phase": self.phase.phase_id,
            "success": self.success,
            "started_at": self.started_at.isoformat(),
            "completed_at": self.completed_at.isoformat(),
            "duration_seconds": self.duration_seconds,
            "module_names": list(self.module_names),
            "error": self.error,
            "error_type": self.error_type,
        }


# ============================================================
# FRAMEWORK CONFIGURATION
# ============================================================

@dataclass
class BootstrapConfig:
    """Bootstrap settings."""

    timeout_seconds: float = 0.0
    """Delay between the init pass and the bootstrap phase."""


@dataclass
class MicroFrameworkConfig:
    """Configuration for the framework itself."""

    debug_mode: bool = False
    """Passed to every module through its init options."""

    bootstrap: BootstrapConfig = field(default_factory=BootstrapConfig)
    """Bootstrap settings."""

    log_level: str = "INFO"
    """Logging level."""

    log_format: str = "text"
    """Log output format (json or text)."""

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "MicroFrameworkConfig":
        """
        Build configuration from the ``microframework`` configuration section.

        Raises:
            InvalidConfigError: If the section or its bootstrap block is malformed
        """
        data = data or {}
        if not isinstance(data, dict):
            raise InvalidConfigError(
                "microframework",
                reason=f"expected a mapping, got {type(data).__name__}",
            )

        bootstrap = data.get("bootstrap") or {}
        if not isinstance(bootstrap, dict):
            raise InvalidConfigError(
                "microframework.bootstrap",
                reason=f"expected a mapping, got {type(bootstrap).__name__}",
            )

        try:
            timeout_seconds = float(bootstrap.get("timeout_seconds", 0.0))
        except (TypeError, ValueError) as e:
            raise InvalidConfigError(
                "microframework.bootstrap.timeout_seconds",
                reason=str(e),
                cause=e,
            ) from e

        return cls(
            debug_mode=bool(data.get("debug_mode", False)),
            bootstrap=BootstrapConfig(timeout_seconds=timeout_seconds),
            log_level=data.get("log_level", "INFO"),
            log_format=data.get("log_format", "text"),
        )

    @classmethod
    def from_env(cls) -> "MicroFrameworkConfig":
        """Load configuration from environment variables."""
        load_dotenv()
        return cls(
            debug_mode=os.getenv("MICROFRAMEWORK_DEBUG", "false").lower() == "true",
            bootstrap=BootstrapConfig(
                timeout_seconds=float(os.getenv("MICROFRAMEWORK_BOOTSTRAP_TIMEOUT_SECONDS", "0")),
            ),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            log_format=os.getenv("LOG_FORMAT", "text"),
        )

    def validate(self) -> List[str]:
        """Validate configuration, return list of errors."""
        errors = []

        if self.bootstrap.timeout_seconds < 0:
            errors.append("bootstrap.timeout_seconds must not be negative")

        if self.log_format not in ("json", "text"):
            errors.append("log_format must be 'json' or 'text'")

        return errors


# ============================================================
# FRAMEWORK SETTINGS
# ============================================================

@dataclass
class MicroFrameworkSettings:
    """
    Process-wide settings.

    Every module receives its own deep copy at init time.
    """

    base_directory: str = "."
    """Root directory of the application."""

    configuration_directory: Optional[str] = None
    """Directory holding configuration files."""

    environment: Optional[str] = None
    """Environment name used to pick configuration overlays."""

    extra: Dict[str, Any] = field(default_factory=dict)
    """Free-form application settings."""

    @classmethod
    def from_env(cls) -> "MicroFrameworkSettings":
        """Load settings from environment variables (and a .env file)."""
        load_dotenv()
        return cls(
            base_directory=os.getenv("MICROFRAMEWORK_BASE_DIRECTORY", os.getcwd()),
            configuration_directory=os.getenv("MICROFRAMEWORK_CONFIGURATION_DIRECTORY"),
            environment=os.getenv("MICROFRAMEWORK_ENVIRONMENT"),
        )

    def clone(self) -> "MicroFrameworkSettings":
        """Return an independent deep copy."""
        return copy.deepcopy(self)


# ============================================================
# MODULE INIT OPTIONS
# ============================================================

@dataclass
class ModuleInitOptions:
    """Options handed to a module's init, built fresh per module."""

    framework_settings: MicroFrameworkSettings
    debug_mode: bool
    container: Any


# ============================================================
# EXPORTS
# ============================================================

__all__ = [
    "LifecyclePhase",
    "ModuleStatus",
    "PhaseResult",
    "BootstrapConfig",
    "MicroFrameworkConfig",
    "MicroFrameworkSettings",
    "ModuleInitOptions",
]
