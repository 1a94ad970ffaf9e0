"""
Microframework - Configurator.

============================================================
RESPONSIBILITY
============================================================
In-memory configuration store that modules read their
named configuration sections from.

- Loads *.json, *.yml and *.yaml files from a directory
- Applies environment overlays (<stem>.<environment>.<ext>)
- Deep-merges everything into one dictionary
- get(name) returns one top-level section

============================================================
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Protocol, Union

import yaml

from core.exceptions import InvalidConfigError, MissingConfigError


CONFIG_EXTENSIONS = (".json", ".yml", ".yaml")


# ============================================================
# CONFIGURATION SOURCE PROTOCOL
# ============================================================

class ConfigurationSource(Protocol):
    """What the registry needs from a configuration store."""

    def get(self, name: str) -> Optional[Any]:
        ...


# ============================================================
# CONFIGURATOR
# ============================================================

class Configurator:
    """
    Configuration store.

    Values added later win over values added earlier; nested
    dictionaries are merged key by key.
    """

    def __init__(self, configuration: Optional[Dict[str, Any]] = None):
        self._configuration: Dict[str, Any] = {}
        self._loaded_files: List[Path] = []
        self._logger = logging.getLogger(__name__)

        if configuration:
            self.add_configuration(configuration)

    @property
    def loaded_files(self) -> List[Path]:
        """Files loaded so far, in load order."""
        return list(self._loaded_files)

    def get(self, name: str) -> Optional[Any]:
        """Get a top-level configuration section."""
        return self._configuration.get(name)

    def set(self, name: str, value: Any) -> None:
        """Replace a top-level configuration section."""
        self._configuration[name] = value

    def all(self) -> Dict[str, Any]:
        """Get the whole configuration."""
        return dict(self._configuration)

    def add_configuration(self, configuration: Dict[str, Any]) -> None:
        """Merge a configuration dictionary into the store."""
        _deep_merge(self._configuration, configuration)

    def load_file(self, path: Union[str, Path]) -> None:
        """
        Load one configuration file.

        Raises:
            MissingConfigError: If the file does not exist
            InvalidConfigError: If the file cannot be parsed
        """
        path = Path(path)
        if not path.is_file():
            raise MissingConfigError(str(path), source="file")

        try:
            with open(path, "r", encoding="utf-8") as f:
                if path.suffix == ".json":
                    data = json.load(f)
                else:
                    data = yaml.safe_load(f)
        except (json.JSONDecodeError, yaml.YAMLError) as e:
            raise InvalidConfigError(str(path), reason=str(e), cause=e) from e

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise InvalidConfigError(
                str(path),
                reason=f"top level must be a mapping, got {type(data).__name__}",
            )

        self.add_configuration(data)
        self._loaded_files.append(path)
        self._logger.debug(f"Loaded configuration file: {path}")

    def load_directory(
        self,
        directory: Union[str, Path],
        environment: Optional[str] = None,
    ) -> None:
        """
        Load every configuration file in a directory.

        Base files load first in name order, then the overlays for
        the given environment. Overlays for other environments are
        skipped.

        Raises:
            MissingConfigError: If the directory does not exist
        """
        directory = Path(directory)
        if not directory.is_dir():
            raise MissingConfigError(str(directory), source="directory")

        files = sorted(
            p for p in directory.iterdir()
            if p.is_file() and p.suffix in CONFIG_EXTENSIONS
        )
        base_files = [p for p in files if "." not in p.stem]
        overlays = [
            p for p in files
            if environment and p.stem.endswith(f".{environment}")
        ]

        for path in base_files + overlays:
            self.load_file(path)

        self._logger.info(
            f"Loaded {len(base_files) + len(overlays)} configuration files from {directory}"
            f" (environment={environment or '-'})"
        )


def _deep_merge(target: Dict[str, Any], source: Dict[str, Any]) -> None:
    for key, value in source.items():
        if isinstance(value, dict) and isinstance(target.get(key), dict):
            _deep_merge(target[key], value)
        else:
            target[key] = value


# ============================================================
# EXPORTS
# ============================================================

__all__ = [
    "ConfigurationSource",
    "Configurator",
]
