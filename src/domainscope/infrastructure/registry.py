"""
domainscope.infrastructure.registry - Service Registry Handle
==============================================================

The registry is the context object producers build against. domainscope
itself never inspects it: the scope stores the handle it was created with
and passes the very same object to every (re)build.

Usage:
    >>> registry = ServiceRegistry.from_config(config.registry)
    >>> registry.get_setting("dialect", "sqlite")
    >>> registry.close()
"""

from __future__ import annotations

from typing import Any, Optional

import structlog

from domainscope.core.config import RegistryConfig


logger = structlog.get_logger()


class ServiceRegistry:
    """Opaque settings holder handed to DomainModelProducers.

    Attributes:
        name: Label used in log lines.
    """

    def __init__(self, name: str = "default", settings: Optional[dict[str, Any]] = None) -> None:
        self.name = name
        self._settings: dict[str, Any] = dict(settings or {})
        self._active = True
        self._logger = logger.bind(component="service_registry", registry=name)

    @classmethod
    def from_config(cls, config: RegistryConfig) -> ServiceRegistry:
        return cls(name=config.name, settings=config.settings)

    @property
    def is_active(self) -> bool:
        return self._active

    @property
    def settings(self) -> dict[str, Any]:
        """Copy of the registry settings."""
        return dict(self._settings)

    def get_setting(self, key: str, default: Any = None) -> Any:
        return self._settings.get(key, default)

    def close(self) -> None:
        """Mark the registry closed. Safe to call more than once."""
        if self._active:
            self._active = False
            self._logger.debug("registry_closed")

    def __repr__(self) -> str:
        return f"ServiceRegistry(name={self.name!r}, active={self._active})"
