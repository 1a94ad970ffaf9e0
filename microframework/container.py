"""
Microframework - Service Container.

============================================================
RESPONSIBILITY
============================================================
Holds named services shared between modules.

Every module receives the same container through its init
options; modules register what they provide during init and
look up what they need afterwards.

============================================================
"""

import logging
from typing import Any, Dict, List, Optional


class ServiceContainer:
    """Registry of shared services keyed by name."""

    def __init__(self, services: Optional[Dict[str, Any]] = None):
        self._services: Dict[str, Any] = dict(services or {})
        self._logger = logging.getLogger(__name__)

    def set(self, name: str, instance: Any) -> None:
        """Add or replace a shared service."""
        self._services[name] = instance
        self._logger.debug(f"Registered service: {name}")

    def get(self, name: str, default: Optional[Any] = None) -> Optional[Any]:
        """Get a shared service."""
        return self._services.get(name, default)

    def has(self, name: str) -> bool:
        return name in self._services

    def names(self) -> List[str]:
        return list(self._services)


__all__ = [
    "ServiceContainer",
]
