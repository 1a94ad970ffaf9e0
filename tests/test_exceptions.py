"""
Tests for the core exception hierarchy.
"""

import pytest

from core.exceptions import (
    DependenciesMissingException,
    ErrorClassification,
    FrameworkException,
    ModuleAlreadyRegisteredException,
    ModuleException,
    ModuleProblemsException,
    NoModulesLoadedException,
    Severity,
    ShutdownError,
    classify_exception,
    wrap_exception,
)


class TestModuleExceptions:
    """Test module exception messages and context."""

    def test_hierarchy(self):
        for exc in (
            NoModulesLoadedException(),
            ModuleProblemsException("cycle"),
            ModuleAlreadyRegisteredException("a"),
        ):
            assert isinstance(exc, ModuleException)
            assert isinstance(exc, FrameworkException)

    def test_dependencies_missing(self):
        exc = DependenciesMissingException("api", ["db", "cache"])

        assert exc.module_name == "api"
        assert exc.missing_dependencies == ["db", "cache"]
        assert "db, cache" in str(exc)
        assert exc.context["module_name"] == "api"

    def test_module_problems_keeps_reason(self):
        cause = ValueError("Circular dependency detected: a -> b -> a")
        exc = ModuleProblemsException(str(cause), cause=cause)

        assert exc.reason == str(cause)
        assert exc.cause is cause
        assert exc.context["cause_type"] == "ValueError"

    def test_severity_defaults(self):
        assert NoModulesLoadedException().severity == Severity.HIGH
        assert not NoModulesLoadedException().is_recoverable
        assert ModuleAlreadyRegisteredException("a").is_recoverable

    def test_to_dict(self):
        data = ModuleAlreadyRegisteredException("a").to_dict()

        assert data["type"] == "ModuleAlreadyRegisteredException"
        assert data["context"] == {"module_name": "a"}
        assert data["cause"] is None

    def test_to_log_format(self):
        line = ModuleAlreadyRegisteredException("a").to_log_format()

        assert line.startswith("[HIGH] ModuleAlreadyRegisteredException")
        assert "module_name=a" in line


class TestExceptionUtilities:
    """Test classify_exception and wrap_exception."""

    @pytest.mark.parametrize("exc, expected", [
        (ConnectionError(), ErrorClassification.TRANSIENT),
        (KeyError("x"), ErrorClassification.RECOVERABLE),
        (NoModulesLoadedException(), ErrorClassification.NON_RECOVERABLE),
        (RuntimeError(), ErrorClassification.RECOVERABLE),
    ])
    def test_classify_exception(self, exc, expected):
        assert classify_exception(exc) == expected

    def test_wrap_exception(self):
        cause = OSError("busy")
        wrapped = wrap_exception(cause, ShutdownError)

        assert isinstance(wrapped, ShutdownError)
        assert wrapped.message == "OSError: busy"
        assert wrapped.cause is cause
