"""
Tests for the MicroFrameworkBootstrapper host.
"""

import logging

import pytest

from microframework import (
    MicroFrameworkBootstrapper,
    MicroFrameworkConfig,
    MicroFrameworkSettings,
    ServiceContainer,
    SimpleModule,
    setup_logging,
)
from core.exceptions import (
    ConfigurationError,
    InvalidConfigError,
    ModuleConfigurationMissingException,
    ShutdownError,
)


class ApiModule(SimpleModule):
    pass


# ============================================================
# FIXTURES
# ============================================================

@pytest.fixture
def config_dir(tmp_path):
    (tmp_path / "app.yml").write_text(
        "microframework:\n"
        "  debug_mode: true\n"
        "  bootstrap:\n"
        "    timeout_seconds: 0.01\n"
        "api:\n"
        "  port: 8080\n"
    )
    return tmp_path


@pytest.fixture
def framework(config_dir):
    return MicroFrameworkBootstrapper(
        MicroFrameworkSettings(configuration_directory=str(config_dir)),
    )


# ============================================================
# BOOTSTRAP TESTS
# ============================================================

class TestBootstrapper:
    """Test the host lifecycle."""

    @pytest.mark.asyncio
    async def test_bootstrap_loads_configuration(self, framework, make_module):
        api = make_module("api", configuration_name="api", configuration_required=True)
        framework.register_module(api)

        await framework.bootstrap()

        assert framework.is_running
        assert framework.config.debug_mode is True
        assert framework.config.bootstrap.timeout_seconds == 0.01
        assert api.config == {"port": 8080}
        assert api.options.debug_mode is True
        assert api.framework is framework
        assert api.options.container is framework.container

    @pytest.mark.asyncio
    async def test_register_is_fluent(self, framework, make_module):
        result = framework.register_module(make_module("a")).register_modules([
            make_module("b", dependencies=["a"]),
        ])

        assert result is framework
        await framework.bootstrap()
        assert framework.registry.get_bootstrap_order() == ["a", "b"]

    @pytest.mark.asyncio
    async def test_find_modules_before_and_after_bootstrap(self, framework, make_module):
        api = ApiModule("api")
        framework.register_modules([make_module("a"), api])

        assert framework.find_module_by_type(ApiModule) is api
        assert framework.find_module_by_name("api") is api

        await framework.bootstrap()

        assert framework.find_module_by_type(ApiModule) is api
        assert framework.find_module_by_name("missing") is None

    @pytest.mark.asyncio
    async def test_bootstrap_failure_propagates(self, framework, make_module):
        framework.register_module(
            make_module("cache", configuration_name="cache", configuration_required=True)
        )

        with pytest.raises(ModuleConfigurationMissingException):
            await framework.bootstrap()

        assert not framework.is_running

    @pytest.mark.asyncio
    async def test_invalid_framework_configuration(self, make_module):
        framework = MicroFrameworkBootstrapper()
        framework.configurator.set("microframework", {"bootstrap": {"timeout_seconds": -1}})
        framework.register_module(make_module("a"))

        with pytest.raises(ConfigurationError, match="timeout_seconds"):
            await framework.bootstrap()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("section", [
        {"bootstrap": 5},
        {"bootstrap": {"timeout_seconds": "soon"}},
    ])
    async def test_malformed_framework_configuration(self, make_module, events, section):
        framework = MicroFrameworkBootstrapper()
        framework.configurator.set("microframework", section)
        framework.register_module(make_module("a"))

        with pytest.raises(InvalidConfigError) as exc_info:
            await framework.bootstrap()

        assert isinstance(exc_info.value, ConfigurationError)
        assert not framework.is_running
        assert events == []

    @pytest.mark.asyncio
    async def test_modules_share_container(self, make_module):
        container = ServiceContainer({"db": "connection"})
        framework = MicroFrameworkBootstrapper(container=container)
        a = make_module("a")
        b = make_module("b")
        framework.register_modules([a, b])

        await framework.bootstrap()

        assert a.options.container is b.options.container is container


# ============================================================
# SHUTDOWN TESTS
# ============================================================

class TestBootstrapperShutdown:
    """Test host shutdown."""

    @pytest.mark.asyncio
    async def test_shutdown(self, framework, make_module, events):
        framework.register_modules([make_module("a"), make_module("b")])
        await framework.bootstrap()

        await framework.shutdown()

        assert not framework.is_running
        assert sorted(n for k, n in events if k == "shutdown") == ["a", "b"]

    @pytest.mark.asyncio
    async def test_shutdown_when_not_running_is_noop(self, framework, make_module, events):
        framework.register_module(make_module("a"))

        await framework.shutdown()

        assert events == []

    @pytest.mark.asyncio
    async def test_shutdown_failure_wrapped(self, framework, make_module):
        error = OSError("socket busy")
        framework.register_module(make_module("a", shutdown_error=error))
        await framework.bootstrap()

        with pytest.raises(ShutdownError) as exc_info:
            await framework.shutdown()

        assert exc_info.value.cause is error
        assert exc_info.value.context["cause_type"] == "OSError"
        assert not framework.is_running


# ============================================================
# LOGGING TESTS
# ============================================================

class TestSetupLogging:
    """Test root logging setup."""

    @pytest.fixture(autouse=True)
    def restore_loggers(self):
        root = logging.getLogger()
        framework_logger = logging.getLogger("microframework")
        handlers, level = list(root.handlers), root.level
        framework_level = framework_logger.level
        yield
        root.handlers = handlers
        root.setLevel(level)
        framework_logger.setLevel(framework_level)

    def test_text_format(self):
        config = MicroFrameworkConfig(log_level="debug", log_format="text")
        logger = setup_logging(config, correlation_id="run-1")
        root = logging.getLogger()

        assert logger.name == "microframework"
        assert root.level == logging.DEBUG
        assert len(root.handlers) == 1
        assert "run-1" in root.handlers[0].formatter._fmt

    def test_json_format(self):
        setup_logging(MicroFrameworkConfig(log_level="WARNING", log_format="json"))
        root = logging.getLogger()

        assert root.level == logging.WARNING
        assert root.handlers[0].formatter._fmt.startswith("{")

    def test_debug_mode_traces_framework_only(self):
        logger = setup_logging(MicroFrameworkConfig(debug_mode=True, log_level="WARNING"))

        assert logging.getLogger().level == logging.WARNING
        assert logger.level == logging.DEBUG
        assert logging.getLogger("microframework.lifecycle").isEnabledFor(logging.DEBUG)
        assert not logging.getLogger("app").isEnabledFor(logging.DEBUG)

    def test_without_debug_mode_framework_follows_root(self):
        logger = setup_logging(MicroFrameworkConfig(log_level="ERROR"))

        assert logger.level == logging.NOTSET
        assert not logger.isEnabledFor(logging.INFO)

    @pytest.mark.asyncio
    async def test_bootstrap_configures_logging(self, config_dir, make_module):
        framework = MicroFrameworkBootstrapper(
            MicroFrameworkSettings(configuration_directory=str(config_dir)),
            configure_logging=True,
        )
        framework.register_module(make_module("a"))

        await framework.bootstrap()

        assert logging.getLogger("microframework").level == logging.DEBUG
