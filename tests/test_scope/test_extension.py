"""
Tests for domainscope.scope.extension — DomainModelExtension
=============================================================

What's Being Tested:
    - on_test_instance_ready: create once, reuse afterwards
    - Producer selection through the test instance
    - Scope injection into DomainModelScopeAware instances
    - on_test_execution_failure: model released, same exception re-raised
    - on_test_unit_complete: scope closed and forgotten
"""

import pytest

from domainscope.core.enums import ScopeState
from domainscope.core.exceptions import ScopeInactiveError
from domainscope.core.specification import domain_model
from domainscope.scope.extension import DomainModelExtension, DomainModelScopeAware, TestUnit
from domainscope.scope.manager import ScopeManager
from tests.fixtures.domain import Person
from tests.fixtures.producers import CountingProducer


@domain_model(annotated_classes=[Person], concurrency_strategy="read-write")
class DeclaredUnit:
    pass


class ScopeAwareInstance:
    def __init__(self) -> None:
        self.injected = []

    def inject_test_model_scope(self, scope) -> None:
        self.injected.append(scope)


def _unit(scope_key, registry, instance=None, element=DeclaredUnit) -> TestUnit:
    return TestUnit(key=scope_key, element=element, instance=instance, registry=registry)


# =============================================================================
# Tests: Scope Resolution
# =============================================================================
class TestInstanceReady:
    def test_creates_scope_from_declaration(self, extension, scope_key, registry) -> None:
        scope = extension.on_test_instance_ready(_unit(scope_key, registry))

        assert scope.state == ScopeState.ACTIVE_POPULATED
        person = scope.get_domain_model().get_entity_binding("Person")
        assert person.cache_concurrency_strategy == "read-write"

    def test_reuses_scope_for_later_instances(self, extension, scope_key, registry) -> None:
        first = extension.on_test_instance_ready(_unit(scope_key, registry, instance=object()))
        second = extension.on_test_instance_ready(_unit(scope_key, registry, instance=object()))

        assert second is first
        assert second.get_domain_model() is first.get_domain_model()

    def test_instance_producer_is_used(self, extension, scope_key, registry) -> None:
        instance = CountingProducer()
        scope = extension.on_test_instance_ready(_unit(scope_key, registry, instance=instance, element=object))

        assert instance.calls == 1
        assert instance.registries == [registry]
        assert scope.get_domain_model().get_entity_binding("Thing") is not None

    def test_injects_scope_into_aware_instance(self, extension, scope_key, registry) -> None:
        instance = ScopeAwareInstance()
        scope = extension.on_test_instance_ready(_unit(scope_key, registry, instance=instance))

        assert isinstance(instance, DomainModelScopeAware)
        assert instance.injected == [scope]

    def test_injects_existing_scope_into_each_instance(self, extension, scope_key, registry) -> None:
        first, second = ScopeAwareInstance(), ScopeAwareInstance()
        extension.on_test_instance_ready(_unit(scope_key, registry, instance=first))
        extension.on_test_instance_ready(_unit(scope_key, registry, instance=second))

        assert first.injected[0] is second.injected[0]

    def test_default_manager(self) -> None:
        assert isinstance(DomainModelExtension().manager, ScopeManager)


# =============================================================================
# Tests: Failure Hook
# =============================================================================
class TestExecutionFailure:
    def test_reraises_same_exception(self, extension, scope_key, registry) -> None:
        unit = _unit(scope_key, registry)
        extension.on_test_instance_ready(unit)
        error = AssertionError("expected 3, got 4")

        with pytest.raises(AssertionError) as exc_info:
            extension.on_test_execution_failure(unit, error)

        assert exc_info.value is error

    def test_releases_model(self, extension, scope_key, registry) -> None:
        instance = CountingProducer()
        unit = _unit(scope_key, registry, instance=instance)
        scope = extension.on_test_instance_ready(unit)
        before = scope.get_domain_model()

        with pytest.raises(ValueError):
            extension.on_test_execution_failure(unit, ValueError("boom"))

        assert scope.state == ScopeState.ACTIVE_EMPTY
        after = scope.get_domain_model()
        assert after is not before
        assert instance.calls == 2

    def test_without_scope_still_reraises(self, extension, scope_key, registry) -> None:
        error = KeyError("missing")
        with pytest.raises(KeyError) as exc_info:
            extension.on_test_execution_failure(_unit(scope_key, registry), error)
        assert exc_info.value is error

    def test_closed_scope_is_left_alone(self, extension, manager, scope_key, registry) -> None:
        unit = _unit(scope_key, registry)
        scope = extension.on_test_instance_ready(unit)
        manager.remove(scope_key)
        scope.close()

        with pytest.raises(RuntimeError, match="late failure"):
            extension.on_test_execution_failure(unit, RuntimeError("late failure"))


# =============================================================================
# Tests: Unit Completion
# =============================================================================
class TestUnitComplete:
    def test_closes_and_forgets_scope(self, extension, manager, scope_key, registry) -> None:
        unit = _unit(scope_key, registry)
        scope = extension.on_test_instance_ready(unit)

        extension.on_test_unit_complete(unit)

        assert scope.state == ScopeState.CLOSED
        assert scope_key not in manager
        with pytest.raises(ScopeInactiveError):
            scope.get_domain_model()

    def test_complete_without_scope(self, extension, scope_key, registry) -> None:
        extension.on_test_unit_complete(_unit(scope_key, registry))

    def test_next_ready_after_complete_builds_again(self, extension, scope_key, registry) -> None:
        instance = CountingProducer()
        unit = _unit(scope_key, registry, instance=instance)
        first = extension.on_test_instance_ready(unit)
        extension.on_test_unit_complete(unit)

        second = extension.on_test_instance_ready(unit)

        assert second is not first
        assert instance.calls == 2
