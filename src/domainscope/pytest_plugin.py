"""
domainscope.pytest_plugin - pytest Integration
===============================================

Registered through the ``pytest11`` entry point. It maps pytest's setup,
call and teardown phases onto DomainModelExtension hooks:

    first test of a class/module requests domain_model_scope
        → on_test_instance_ready(unit)     (scope created, model built)
    every later test of that class/module
        → on_test_instance_ready(unit)     (same scope, same model)
    a test body raises or calls pytest.fail() (pytest.xfail() is left alone)
        → on_test_execution_failure(unit, error)   (model released, error re-raised)
    class/module collector torn down
        → on_test_unit_complete(unit)      (scope closed)

Fixtures:
    domainscope_config       session   DomainScopeConfig from load_config()
    domain_model_extension   session   closes any leftover scopes at exit
    service_registry         module    registry handle; override to customize
    domain_model_scope       function  the unit's DomainModelScope
    domain_model             function  the unit's DomainModelArtifact

Usage:
    >>> @domain_model(standard_models=["contacts"], concurrency_strategy="read-write")
    ... class TestContacts:
    ...     def test_cached(self, domain_model):
    ...         assert domain_model.get_entity_binding("Contact").is_cached
"""

from __future__ import annotations

from typing import Any, Iterator, Optional

import pytest

from domainscope.core.config import DomainScopeConfig, load_config
from domainscope.core.models import DomainModelArtifact, ScopeKey
from domainscope.infrastructure.registry import ServiceRegistry
from domainscope.scope.extension import DomainModelExtension, TestUnit
from domainscope.scope.scope import DomainModelScope


_UNIT_KEY = pytest.StashKey[tuple[DomainModelExtension, TestUnit]]()


def _unit_collector(node: pytest.Item) -> pytest.Collector:
    collector = node.getparent(pytest.Class) or node.getparent(pytest.Module)
    if collector is None:
        raise RuntimeError(f"Unable to determine test unit for {node.nodeid}")
    return collector


def _unit_name(element: Any) -> str:
    module = getattr(element, "__module__", None)
    qualname = getattr(element, "__qualname__", None)
    if module and qualname:
        return f"{module}.{qualname}"
    return getattr(element, "__name__", repr(element))


def build_test_unit(node: pytest.Item, instance: Any, registry: Any) -> TestUnit:
    """Describe the class (or module) enclosing ``node`` as a TestUnit."""
    collector = _unit_collector(node)
    element = collector.obj
    key = ScopeKey(context_id=collector.nodeid, unit_name=_unit_name(element))
    return TestUnit(key=key, element=element, instance=instance, registry=registry)


# =============================================================================
# Fixtures
# =============================================================================
@pytest.fixture(scope="session")
def domainscope_config() -> DomainScopeConfig:
    """Configuration from domainscope.yaml and DOMAINSCOPE_* variables."""
    return load_config()


@pytest.fixture(scope="session")
def domain_model_extension(domainscope_config) -> Iterator[DomainModelExtension]:
    extension = DomainModelExtension(config=domainscope_config)
    yield extension
    extension.manager.close_all()


@pytest.fixture(scope="module")
def service_registry(domainscope_config) -> Iterator[ServiceRegistry]:
    """Registry handle for the module's producers."""
    registry = ServiceRegistry.from_config(domainscope_config.registry)
    yield registry
    registry.close()


@pytest.fixture
def domain_model_scope(
    request: pytest.FixtureRequest,
    domain_model_extension: DomainModelExtension,
    service_registry: Any,
) -> DomainModelScope:
    """The DomainModelScope shared by every test of the enclosing class or module."""
    unit = build_test_unit(request.node, request.instance, service_registry)
    created = unit.key not in domain_model_extension.manager

    scope = domain_model_extension.on_test_instance_ready(unit)
    if created:
        _unit_collector(request.node).addfinalizer(
            lambda: domain_model_extension.on_test_unit_complete(unit)
        )

    request.node.stash[_UNIT_KEY] = (domain_model_extension, unit)
    return scope


@pytest.fixture
def domain_model(domain_model_scope: DomainModelScope) -> DomainModelArtifact:
    return domain_model_scope.get_domain_model()


# =============================================================================
# Hooks
# =============================================================================
@pytest.hookimpl(wrapper=True)
def pytest_pyfunc_call(pyfuncitem: pytest.Function) -> Iterator[Optional[object]]:
    try:
        return (yield)
    except pytest.xfail.Exception:
        # An imperative xfail is an expected outcome, not a failure.
        raise
    except (Exception, pytest.fail.Exception) as error:
        registered = pyfuncitem.stash.get(_UNIT_KEY, None)
        if registered is None:
            raise
        extension, unit = registered
        extension.on_test_execution_failure(unit, error)
