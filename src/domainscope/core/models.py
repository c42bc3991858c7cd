"""
domainscope.core.models - Domain Model Artifact Data Models
============================================================

This module defines the Pydantic models for the artifact a producer hands
back: the "domain model" graph of entity and collection bindings.

Artifact Structure:
    DomainModelArtifact
        ├── entity_bindings: list[EntityBinding]
        │       └── properties: list[PropertyBinding]
        │               └── value: SimpleValue | ReferenceValue
        ├── collection_bindings: list[CollectionBinding]
        │       └── element: SimpleValue | ReferenceValue
        ├── query_imports: {import name → qualified class name}
        ├── packages / resources: what the aggregator consumed
        └── ...

Only the entity and collection bindings are traversed by domainscope itself
(see scope/cache_strategy.py). Everything else is informational for tests.

Mutability:
    ``EntityBinding.is_cached``, ``EntityBinding.cache_concurrency_strategy``
    and ``CollectionBinding.cache_concurrency_strategy`` are mutated in place
    by the cache-strategy pass. Everything else is set once by the builder.
"""

from __future__ import annotations

from typing import Literal, Optional, Union

from pydantic import BaseModel, Field


# =============================================================================
# Scope Key
# =============================================================================
class ScopeKey(BaseModel):
    """Identity of one test unit, used to locate its scope in storage.

    Attributes:
        context_id: Identity of the surrounding host context (for pytest,
            the node id of the class or module collector).
        unit_name: Qualified name of the test class or module.

    Example:
        >>> key = ScopeKey(context_id="tests/test_x.py::TestX", unit_name="test_x.TestX")
        >>> {key: "hashable"}
    """

    context_id: str
    unit_name: str

    model_config = {"frozen": True}

    def __str__(self) -> str:
        return f"{self.context_id}[{self.unit_name}]"


# =============================================================================
# Values
# =============================================================================
# A property or collection element is either a "simple value" with a type
# name (string, integer, blob, ...) or an opaque reference to another
# mapped type. Only simple values matter to the LOB check.
# =============================================================================
class SimpleValue(BaseModel):
    """A basic-typed value carrying its type name."""

    kind: Literal["simple"] = "simple"
    type_name: str

    @property
    def is_simple_value(self) -> bool:
        return True


class ReferenceValue(BaseModel):
    """An opaque, non-simple value (entity reference, component)."""

    kind: Literal["reference"] = "reference"
    target: str

    @property
    def is_simple_value(self) -> bool:
        return False


Value = Union[SimpleValue, ReferenceValue]


# =============================================================================
# Bindings
# =============================================================================
class PropertyBinding(BaseModel):
    """One mapped attribute of an entity."""

    name: str
    value: Value = Field(discriminator="kind")


class EntityBinding(BaseModel):
    """A mapped type in the domain model.

    Attributes:
        entity_name: Short entity name (class ``__name__`` or mapping name).
        class_name: Qualified class name, or the entity name for mapped
            resources without a Python class.
        is_inherited: True when the entity extends another mapped entity.
            The cache strategy is only ever set on root bindings.
        superclass: Entity name of the mapped parent, if inherited.
        properties: The property closure, inherited attributes first.
        is_cached: Set by the cache-strategy pass.
        cache_concurrency_strategy: Set by the cache-strategy pass.
    """

    entity_name: str
    class_name: str
    is_inherited: bool = False
    superclass: Optional[str] = None
    properties: list[PropertyBinding] = Field(default_factory=list)

    is_cached: bool = False
    cache_concurrency_strategy: Optional[str] = None

    def get_property(self, name: str) -> Optional[PropertyBinding]:
        for prop in self.properties:
            if prop.name == name:
                return prop
        return None


class CollectionBinding(BaseModel):
    """A mapped collection, identified by its role ``<Entity>.<property>``."""

    role: str
    element: Value = Field(discriminator="kind")
    cache_concurrency_strategy: Optional[str] = None


# =============================================================================
# Artifact
# =============================================================================
class DomainModelArtifact(BaseModel):
    """The built domain model graph.

    Each build produces a fresh instance; the scope that caches it is its
    sole owner.

    Example:
        >>> artifact = sources.build()
        >>> artifact.get_entity_binding("Contact").is_cached
        False
    """

    entity_bindings: list[EntityBinding] = Field(default_factory=list)
    collection_bindings: list[CollectionBinding] = Field(default_factory=list)
    query_imports: dict[str, str] = Field(default_factory=dict)
    packages: list[str] = Field(default_factory=list)
    resources: list[str] = Field(default_factory=list)

    def get_entity_binding(self, entity_name: str) -> Optional[EntityBinding]:
        """Find an entity binding by entity name (or qualified class name)."""
        for binding in self.entity_bindings:
            if entity_name in (binding.entity_name, binding.class_name):
                return binding
        return None

    def get_collection_binding(self, role: str) -> Optional[CollectionBinding]:
        """Find a collection binding by role."""
        for binding in self.collection_bindings:
            if binding.role == role:
                return binding
        return None
