"""
Core Module - Exceptions.

============================================================
RESPONSIBILITY
============================================================
Defines all custom exceptions for the module framework.

- Provides a clear exception hierarchy
- Separates registration, ordering and bootstrap failures
- Includes context for debugging

============================================================
EXCEPTION HIERARCHY
============================================================
FrameworkException (base)
├── ConfigurationError
│   ├── MissingConfigError
│   └── InvalidConfigError
├── ModuleException
│   ├── ModuleWithoutNameException
│   ├── ModuleAlreadyRegisteredException
│   ├── NoModulesLoadedException
│   ├── ModuleProblemsException
│   ├── ModuleConfigurationMissingException
│   └── DependenciesMissingException
└── ShutdownError

============================================================
"""

from enum import Enum
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional


# ============================================================
# SEVERITY LEVELS
# ============================================================

class Severity(Enum):
    """Exception severity levels."""

    LOW = "low"
    """Minor issue, informational."""

    MEDIUM = "medium"
    """Moderate issue, requires attention."""

    HIGH = "high"
    """Serious issue, the operation cannot continue."""

    CRITICAL = "critical"
    """The host process cannot come up."""


# ============================================================
# ERROR CLASSIFICATION
# ============================================================

class ErrorClassification(Enum):
    """Classification of error recoverability."""

    RECOVERABLE = "recoverable"
    """Caller can fix the input and try again."""

    TRANSIENT = "transient"
    """Temporary error, retry may succeed."""

    NON_RECOVERABLE = "non_recoverable"
    """Permanent error, requires intervention."""


# ============================================================
# BASE EXCEPTION
# ============================================================

class FrameworkException(Exception):
    """
    Base exception for all framework errors.

    All exceptions carry:
    - severity: how loud to be about it
    - context: for debugging
    - classification: for error handling decisions
    - timestamp: when the error occurred
    """

    default_severity: Severity = Severity.MEDIUM
    default_classification: ErrorClassification = ErrorClassification.RECOVERABLE

    def __init__(
        self,
        message: str,
        severity: Optional[Severity] = None,
        context: Optional[Dict[str, Any]] = None,
        classification: Optional[ErrorClassification] = None,
        cause: Optional[BaseException] = None,
    ):
        super().__init__(message)

        self.message = message
        self.severity = severity or self.default_severity
        self.context = context or {}
        self.classification = classification or self.default_classification
        self.cause = cause
        self.timestamp = datetime.now(timezone.utc)

        if cause:
            self.context["cause_type"] = type(cause).__name__
            self.context["cause_message"] = str(cause)

    @property
    def is_recoverable(self) -> bool:
        """Check if error is recoverable."""
        return self.classification in (
            ErrorClassification.RECOVERABLE,
            ErrorClassification.TRANSIENT,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Serialize exception for logging."""
        return {
            "type": type(self).__name__,
            "message": self.message,
            "severity": self.severity.value,
            "classification": self.classification.value,
            "context": self.context,
            "timestamp": self.timestamp.isoformat(),
            "cause": str(self.cause) if self.cause else None,
        }

    def to_log_format(self) -> str:
        """Format exception for structured logging."""
        line = f"[{self.severity.value.upper()}] {type(self).__name__}: {self.message}"
        ctx_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
        if ctx_str:
            line += f" | {ctx_str}"
        return line


# ============================================================
# CONFIGURATION ERRORS
# ============================================================

class ConfigurationError(FrameworkException):
    """Error in framework configuration."""

    default_severity = Severity.HIGH
    default_classification = ErrorClassification.NON_RECOVERABLE

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        source: Optional[str] = None,
        **kwargs,
    ):
        context = kwargs.pop("context", {})

        if config_key:
            context["config_key"] = config_key
        if source:
            context["source"] = source

        super().__init__(message, context=context, **kwargs)


class MissingConfigError(ConfigurationError):
    """Configuration source does not exist."""

    def __init__(self, key: str, source: str = "config"):
        super().__init__(
            message=f"Missing required configuration: {key}",
            config_key=key,
            source=source,
        )


class InvalidConfigError(ConfigurationError):
    """Configuration value or file is invalid."""

    def __init__(self, key: str, reason: str, **kwargs):
        super().__init__(
            message=f"Invalid configuration for {key}: {reason}",
            config_key=key,
            **kwargs,
        )


# ============================================================
# MODULE ERRORS
# ============================================================

class ModuleException(FrameworkException):
    """Base class for module registration and bootstrap errors."""

    default_severity = Severity.HIGH
    default_classification = ErrorClassification.NON_RECOVERABLE

    def __init__(
        self,
        message: str,
        module_name: Optional[str] = None,
        **kwargs,
    ):
        context = kwargs.pop("context", {})

        if module_name:
            context["module_name"] = module_name

        self.module_name = module_name
        super().__init__(message, context=context, **kwargs)


class ModuleWithoutNameException(ModuleException):
    """A module without a name was registered."""

    default_classification = ErrorClassification.RECOVERABLE

    def __init__(self, module: Any):
        self.module = module
        super().__init__(
            message=f"Module {type(module).__name__} does not have a name",
            context={"module_type": type(module).__name__},
        )


class ModuleAlreadyRegisteredException(ModuleException):
    """A module with the same name is already registered."""

    default_classification = ErrorClassification.RECOVERABLE

    def __init__(self, module_name: str):
        super().__init__(
            message=f"Module {module_name} is already registered",
            module_name=module_name,
        )


class NoModulesLoadedException(ModuleException):
    """Bootstrap was requested but no modules are registered."""

    def __init__(self):
        super().__init__(
            message="No modules were loaded. Register at least one module before bootstrap",
        )


class ModuleProblemsException(ModuleException):
    """Modules could not be ordered by their dependencies."""

    def __init__(self, reason: str, **kwargs):
        self.reason = reason
        super().__init__(
            message=f"Problems with modules: {reason}",
            context={"reason": reason},
            **kwargs,
        )


class ModuleConfigurationMissingException(ModuleException):
    """A module requires configuration that could not be found."""

    def __init__(self, module_name: str, configuration_name: Optional[str] = None):
        self.configuration_name = configuration_name
        super().__init__(
            message=f"Configuration for module {module_name} is required but was not found",
            module_name=module_name,
            context={"configuration_name": configuration_name},
        )


class DependenciesMissingException(ModuleException):
    """A module depends on modules that are not registered."""

    def __init__(self, module_name: str, missing_dependencies: List[str]):
        self.missing_dependencies = list(missing_dependencies)
        super().__init__(
            message=(
                f"Module {module_name} depends on modules that are not registered: "
                f"{', '.join(self.missing_dependencies)}"
            ),
            module_name=module_name,
            context={"missing_dependencies": self.missing_dependencies},
        )


# ============================================================
# HOST ERRORS
# ============================================================

class ShutdownError(FrameworkException):
    """Framework shutdown failed."""

    default_severity = Severity.MEDIUM
    default_classification = ErrorClassification.RECOVERABLE


# ============================================================
# EXCEPTION UTILITIES
# ============================================================

def classify_exception(exc: BaseException) -> ErrorClassification:
    """Classify an exception for error handling."""
    if isinstance(exc, FrameworkException):
        return exc.classification

    if isinstance(exc, (ConnectionError, TimeoutError, OSError)):
        return ErrorClassification.TRANSIENT

    if isinstance(exc, (ValueError, TypeError, KeyError)):
        return ErrorClassification.RECOVERABLE

    if isinstance(exc, (SystemExit, KeyboardInterrupt, MemoryError)):
        return ErrorClassification.NON_RECOVERABLE

    return ErrorClassification.RECOVERABLE


def wrap_exception(
    exc: BaseException,
    wrapper_class: type = FrameworkException,
    message: Optional[str] = None,
    **kwargs,
) -> FrameworkException:
    """Wrap a standard exception in a FrameworkException."""
    msg = message or f"{type(exc).__name__}: {exc}"
    return wrapper_class(message=msg, cause=exc, **kwargs)


__all__ = [
    "Severity",
    "ErrorClassification",
    "FrameworkException",
    "ConfigurationError",
    "MissingConfigError",
    "InvalidConfigError",
    "ModuleException",
    "ModuleWithoutNameException",
    "ModuleAlreadyRegisteredException",
    "NoModulesLoadedException",
    "ModuleProblemsException",
    "ModuleConfigurationMissingException",
    "DependenciesMissingException",
    "ShutdownError",
    "classify_exception",
    "wrap_exception",
]
