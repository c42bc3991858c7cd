"""
Shared Test Fixtures for domainscope
=====================================

Fixtures are organized by layer:

    1. Configuration fixtures
    2. Infrastructure fixtures (ServiceRegistry, MetadataSources)
    3. Scope fixtures (ScopeManager, DomainModelExtension, producers)
    4. Artifact fixtures (hand-built DomainModelArtifacts)
"""

from __future__ import annotations

from pathlib import Path

import pytest

from domainscope.core.config import DomainScopeConfig
from domainscope.core.models import (
    CollectionBinding,
    DomainModelArtifact,
    EntityBinding,
    PropertyBinding,
    ReferenceValue,
    ScopeKey,
    SimpleValue,
)
from domainscope.infrastructure.metadata_sources import MetadataSources
from domainscope.infrastructure.registry import ServiceRegistry
from domainscope.scope.extension import DomainModelExtension
from domainscope.scope.manager import ScopeManager
from tests.fixtures.producers import CountingProducer

pytest_plugins = ["pytester", "domainscope.pytest_plugin"]

MAPPINGS_DIR = Path(__file__).parent / "fixtures" / "mappings"


# =============================================================================
# Configuration
# =============================================================================
@pytest.fixture
def config():
    """domainscope configuration with defaults."""
    return DomainScopeConfig()


# =============================================================================
# Infrastructure
# =============================================================================
@pytest.fixture
def registry():
    """Fresh ServiceRegistry."""
    return ServiceRegistry(name="test", settings={"dialect": "sqlite"})


@pytest.fixture
def sources(registry):
    """Empty MetadataSources bound to the test registry."""
    return MetadataSources(registry)


@pytest.fixture
def mappings_dir():
    """Directory holding the YAML mapping documents."""
    return MAPPINGS_DIR


# =============================================================================
# Scope
# =============================================================================
@pytest.fixture
def scope_key():
    return ScopeKey(context_id="tests/test_example.py::TestExample", unit_name="test_example.TestExample")


@pytest.fixture
def producer():
    """CountingProducer that never fails."""
    return CountingProducer()


@pytest.fixture
def manager():
    """Fresh ScopeManager."""
    return ScopeManager()


@pytest.fixture
def extension(manager, config):
    """DomainModelExtension over the test ScopeManager."""
    return DomainModelExtension(manager=manager, config=config)


# =============================================================================
# Artifacts
# =============================================================================
def _entity(name: str, *props: tuple[str, str], inherited: bool = False) -> EntityBinding:
    return EntityBinding(
        entity_name=name,
        class_name=f"tests.{name}",
        is_inherited=inherited,
        properties=[
            PropertyBinding(name=prop, value=SimpleValue(type_name=type_name))
            for prop, type_name in props
        ],
    )


@pytest.fixture
def artifact():
    """Hand-built artifact covering every branch of the cache-strategy pass.

    Entities:
        Plain       - only basic types                    → cacheable
        WithBlob    - a "blob" property                   → skipped
        LateClob    - LOB after a reference property      → skipped
        Child       - inherited                           → skipped
        RefOnly     - reference property named like a LOB → cacheable
    Collections:
        Plain.tags      - string elements                 → cacheable
        Plain.notes     - org.hibernate.type.ClobType     → skipped
        Plain.children  - reference elements              → cacheable
    """
    return DomainModelArtifact(
        entity_bindings=[
            _entity("Plain", ("id", "integer"), ("name", "string")),
            _entity("WithBlob", ("id", "integer"), ("data", "blob")),
            EntityBinding(
                entity_name="LateClob",
                class_name="tests.LateClob",
                properties=[
                    PropertyBinding(name="owner", value=ReferenceValue(target="Plain")),
                    PropertyBinding(name="text", value=SimpleValue(type_name="java.sql.Clob")),
                ],
            ),
            _entity("Child", ("id", "integer"), inherited=True),
            EntityBinding(
                entity_name="RefOnly",
                class_name="tests.RefOnly",
                properties=[PropertyBinding(name="blob", value=ReferenceValue(target="blob"))],
            ),
        ],
        collection_bindings=[
            CollectionBinding(role="Plain.tags", element=SimpleValue(type_name="string")),
            CollectionBinding(
                role="Plain.notes",
                element=SimpleValue(type_name="org.hibernate.type.ClobType"),
            ),
            CollectionBinding(role="Plain.children", element=ReferenceValue(target="Child")),
        ],
    )
