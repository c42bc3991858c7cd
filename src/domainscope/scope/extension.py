"""
domainscope.scope.extension - Test Lifecycle Hooks
===================================================

DomainModelExtension is the surface a host test runner drives. Three hooks
map onto the scope lifecycle:

    on_test_instance_ready(unit)          → find or create the scope
    on_test_execution_failure(unit, err)  → release the model, re-raise err
    on_test_unit_complete(unit)           → remove and close the scope

The failure hook always re-raises the exception it was given, unchanged.
Releasing the model only makes sure any later access in the same failing
unit starts from a fresh build.

Usage:
    >>> extension = DomainModelExtension()
    >>> unit = TestUnit(key=key, element=TestInvoices, instance=test, registry=registry)
    >>> scope = extension.on_test_instance_ready(unit)
    >>> try:
    ...     run_test()
    ... except Exception as e:
    ...     extension.on_test_execution_failure(unit, e)
    ... finally:
    ...     extension.on_test_unit_complete(unit)
"""

from __future__ import annotations

from typing import Any, NoReturn, Optional, Protocol, runtime_checkable

import structlog

from domainscope.core.config import DomainScopeConfig
from domainscope.core.models import ScopeKey
from domainscope.scope.manager import ScopeManager
from domainscope.scope.producer import resolve_producer
from domainscope.scope.scope import DomainModelScope


logger = structlog.get_logger()


@runtime_checkable
class DomainModelScopeAware(Protocol):
    """Capability: a test instance that wants the scope injected."""

    def inject_test_model_scope(self, scope: DomainModelScope) -> None:
        ...


class TestUnit:
    """What the host runner knows about one test unit.

    Attributes:
        key: Storage key for this unit's scope.
        element: Test class (or module) carrying the ``@domain_model``.
        instance: The current test instance, if any.
        registry: Registry handle producers build against.
    """

    __test__ = False  # not a pytest test class

    def __init__(
        self,
        key: ScopeKey,
        element: Any,
        instance: Any = None,
        registry: Any = None,
    ) -> None:
        self.key = key
        self.element = element
        self.instance = instance
        self.registry = registry

    def __repr__(self) -> str:
        return f"TestUnit(key={self.key!s})"


class DomainModelExtension:
    """Drives DomainModelScopes from host test-runner lifecycle hooks.

    Args:
        manager: Scope storage. A private ScopeManager is created if omitted.
        config: Passed to synthesized producers.
    """

    def __init__(
        self,
        manager: Optional[ScopeManager] = None,
        config: Optional[DomainScopeConfig] = None,
    ) -> None:
        self.manager = manager if manager is not None else ScopeManager()
        self.config = config or DomainScopeConfig()
        self._logger = logger.bind(component="domain_model_extension")

    def find_domain_model_scope(self, unit: TestUnit) -> DomainModelScope:
        """Return the unit's scope, creating (and building) it on first use."""
        existing = self.manager.find(unit.key)
        if existing is None:
            producer = resolve_producer(unit.instance, unit.element, self.config)
            scope = self.manager.find_or_create(unit.key, producer, unit.registry)
        else:
            scope = existing

        if isinstance(unit.instance, DomainModelScopeAware):
            unit.instance.inject_test_model_scope(scope)

        return scope

    # -------------------------------------------------------------------------
    # Lifecycle Hooks
    # -------------------------------------------------------------------------
    def on_test_instance_ready(self, unit: TestUnit) -> DomainModelScope:
        return self.find_domain_model_scope(unit)

    def on_test_unit_complete(self, unit: TestUnit) -> None:
        if self.manager.close(unit.key):
            self._logger.debug("scope_closed_on_completion", scope_key=str(unit.key))

    def on_test_execution_failure(self, unit: TestUnit, error: BaseException) -> NoReturn:
        """Release the unit's model, then re-raise ``error`` as-is."""
        scope = self.manager.find(unit.key)
        if scope is not None and scope.is_active:
            scope.release_model()
            self._logger.debug(
                "model_released_on_failure",
                scope_key=str(unit.key),
                error_type=type(error).__name__,
            )

        raise error
