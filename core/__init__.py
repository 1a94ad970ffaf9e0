"""
Core Module Package.

This package contains the shared infrastructure that the
framework package depends on.

Components:
- clock: Testable time abstraction
- exceptions: Custom exception hierarchy
"""

from .clock import ClockFactory, ClockProtocol, MockClock, SystemClock
from .exceptions import (
    Severity,
    ErrorClassification,
    FrameworkException,
    ConfigurationError,
    MissingConfigError,
    InvalidConfigError,
    ModuleException,
    ModuleWithoutNameException,
    ModuleAlreadyRegisteredException,
    NoModulesLoadedException,
    ModuleProblemsException,
    ModuleConfigurationMissingException,
    DependenciesMissingException,
    ShutdownError,
    classify_exception,
    wrap_exception,
)
