"""
Tests for the Configurator and Service Container.
"""

import json

import pytest

from microframework import Configurator, ServiceContainer
from core.exceptions import InvalidConfigError, MissingConfigError


# ============================================================
# FIXTURES
# ============================================================

@pytest.fixture
def config_dir(tmp_path):
    """Configuration directory with base files and overlays."""
    (tmp_path / "app.yml").write_text(
        "database:\n"
        "  host: localhost\n"
        "  port: 5432\n"
        "microframework:\n"
        "  debug_mode: false\n"
    )
    (tmp_path / "cache.json").write_text(json.dumps({"cache": {"ttl": 60}}))
    (tmp_path / "app.production.yml").write_text(
        "database:\n"
        "  host: db.internal\n"
    )
    (tmp_path / "app.staging.yaml").write_text(
        "database:\n"
        "  host: staging.internal\n"
    )
    (tmp_path / "notes.txt").write_text("not configuration")
    return tmp_path


# ============================================================
# CONFIGURATOR TESTS
# ============================================================

class TestConfigurator:
    """Test configuration loading and lookup."""

    def test_get_missing_section(self):
        assert Configurator().get("database") is None

    def test_initial_configuration(self):
        configurator = Configurator({"database": {"host": "localhost"}})

        assert configurator.get("database") == {"host": "localhost"}

    def test_add_configuration_deep_merges(self):
        configurator = Configurator({"database": {"host": "localhost", "port": 5432}})
        configurator.add_configuration({"database": {"host": "remote"}, "cache": {}})

        assert configurator.get("database") == {"host": "remote", "port": 5432}
        assert configurator.get("cache") == {}

    def test_set_replaces_section(self):
        configurator = Configurator({"database": {"host": "localhost", "port": 5432}})
        configurator.set("database", {"host": "remote"})

        assert configurator.get("database") == {"host": "remote"}

    def test_load_directory_base_files(self, config_dir):
        configurator = Configurator()
        configurator.load_directory(config_dir)

        assert configurator.get("database") == {"host": "localhost", "port": 5432}
        assert configurator.get("cache") == {"ttl": 60}
        assert [p.name for p in configurator.loaded_files] == ["app.yml", "cache.json"]

    def test_load_directory_environment_overlay(self, config_dir):
        configurator = Configurator()
        configurator.load_directory(config_dir, environment="production")

        assert configurator.get("database") == {"host": "db.internal", "port": 5432}
        assert "app.staging.yaml" not in [p.name for p in configurator.loaded_files]

    def test_missing_directory(self, tmp_path):
        with pytest.raises(MissingConfigError):
            Configurator().load_directory(tmp_path / "nope")

    def test_missing_file(self, tmp_path):
        with pytest.raises(MissingConfigError):
            Configurator().load_file(tmp_path / "nope.yml")

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "broken.yml"
        path.write_text("database: [unclosed\n")

        with pytest.raises(InvalidConfigError) as exc_info:
            Configurator().load_file(path)

        assert exc_info.value.context["config_key"] == str(path)

    def test_non_mapping_rejected(self, tmp_path):
        path = tmp_path / "list.json"
        path.write_text("[1, 2, 3]")

        with pytest.raises(InvalidConfigError, match="mapping"):
            Configurator().load_file(path)

    def test_empty_file_is_empty_mapping(self, tmp_path):
        path = tmp_path / "empty.yml"
        path.write_text("")

        configurator = Configurator()
        configurator.load_file(path)

        assert configurator.all() == {}


# ============================================================
# SERVICE CONTAINER TESTS
# ============================================================

class TestServiceContainer:
    """Test shared services."""

    def test_set_and_get(self):
        container = ServiceContainer()
        service = object()
        container.set("metrics", service)

        assert container.get("metrics") is service
        assert container.has("metrics")
        assert container.names() == ["metrics"]

    def test_get_default(self):
        container = ServiceContainer({"a": 1})

        assert container.get("b") is None
        assert container.get("b", 2) == 2
        assert not container.has("b")
