"""
domainscope.infrastructure.metadata_sources - Model Sources Aggregator
=======================================================================

MetadataSources collects everything that makes up a domain model and builds
a DomainModelArtifact from it. Sources come in several kinds:

    add_package()                  → import a module, register its __domain_entities__
    add_standard_model()           → apply a named standard bundle
    add_descriptor_contribution()  → let a DomainModelDescriptor contribute
    add_class() / add_class_by_name()
    add_resource()                 → YAML mapping document
    add_query_import()             → name → class for queries

Entity Derivation (build):
    For annotated classes the attribute types come from the resolved type
    hints, base classes first, so each binding holds the full property
    closure. Hints are mapped as follows:

        str → "string"      int → "integer"     float → "double"
        bool → "boolean"    bytes → "binary"    Decimal → "big_decimal"
        datetime → "timestamp"   date → "date"  UUID → "uuid"
        Blob → "blob"       Clob → "clob"       NClob → "nclob"
        another registered entity  → ReferenceValue
        list[X] / set[X] / tuple[X, ...] → CollectionBinding("<Entity>.<attr>")
        anything else              → its qualified name

    Collections are bound on the class that declares them; a subclass does
    not repeat its base class's collection roles. An entity is inherited
    when one of its base classes is also registered.

YAML Mapping Resources:
    entities:
      - name: Document
        extends: Record           # optional, another mapped entity
        properties:
          title: string
          body: clob
        collections:
          tags: string

Override Semantics:
    Later contributions win: re-registering an entity name from a resource
    replaces the earlier binding, and a query import name can be re-pointed.
    Two different classes with the same short name are rejected at build.
"""

from __future__ import annotations

import datetime
import decimal
import importlib
import inspect
import types
import typing
import uuid
from pathlib import Path
from typing import Any, Optional, Union

import structlog
import yaml

from domainscope.core.enums import StandardDomainModel
from domainscope.core.exceptions import MappingResourceError, ModelBuildError
from domainscope.core.models import (
    CollectionBinding,
    DomainModelArtifact,
    EntityBinding,
    PropertyBinding,
    ReferenceValue,
    SimpleValue,
    Value,
)
from domainscope.core.types import Blob, Clob, NClob
from domainscope.infrastructure.descriptors import DomainModelDescriptor


logger = structlog.get_logger()

PACKAGE_ENTITIES_ATTRIBUTE = "__domain_entities__"

_TYPE_NAMES: dict[Any, str] = {
    str: "string",
    int: "integer",
    float: "double",
    bool: "boolean",
    bytes: "binary",
    decimal.Decimal: "big_decimal",
    datetime.datetime: "timestamp",
    datetime.date: "date",
    uuid.UUID: "uuid",
    Blob: "blob",
    Clob: "clob",
    NClob: "nclob",
}

_COLLECTION_ORIGINS = (list, set, frozenset, tuple)


def qualified_name(cls: type) -> str:
    return f"{cls.__module__}.{cls.__qualname__}"


def type_name_for(hint: Any) -> str:
    """Map a Python type hint to the type name stored on a SimpleValue."""
    if hint in _TYPE_NAMES:
        return _TYPE_NAMES[hint]
    if isinstance(hint, type):
        return qualified_name(hint)
    return str(hint)


def _unwrap_optional(hint: Any) -> Any:
    if typing.get_origin(hint) in (Union, types.UnionType):
        args = [arg for arg in typing.get_args(hint) if arg is not type(None)]
        if len(args) == 1:
            return args[0]
    return hint


def _resolve_class(name: str) -> type:
    """Resolve "pkg.mod:Cls" or "pkg.mod.Cls" (nested classes allowed after ':')."""
    if ":" in name:
        module_name, _, attr_path = name.partition(":")
    else:
        module_name, _, attr_path = name.rpartition(".")
    if not module_name or not attr_path:
        raise ModelBuildError(
            message=f"Not a qualified class name : {name}",
            details={"class_name": name},
        )

    target: Any = importlib.import_module(module_name)
    for part in attr_path.split("."):
        try:
            target = getattr(target, part)
        except AttributeError as e:
            raise ModelBuildError(
                message=f"Unable to resolve class : {name}",
                details={"class_name": name},
            ) from e
    if not isinstance(target, type):
        raise ModelBuildError(
            message=f"Named object is not a class : {name}",
            details={"class_name": name},
        )
    return target


class MetadataSources:
    """Aggregates domain model sources and builds DomainModelArtifacts.

    Each ``build()`` returns a new artifact; the sources themselves are not
    consumed and can be built again.

    Example:
        >>> sources = MetadataSources(registry)
        >>> sources.add_standard_model(StandardDomainModel.CONTACTS)
        >>> sources.add_class(Invoice)
        >>> artifact = sources.build()
    """

    def __init__(self, registry: Any = None) -> None:
        self.registry = registry
        self._packages: list[str] = []
        self._classes: dict[str, type] = {}
        self._resources: list[str] = []
        self._mapped_entities: dict[str, dict[str, Any]] = {}
        self._query_imports: dict[str, type] = {}
        self._logger = logger.bind(component="metadata_sources")

    # -------------------------------------------------------------------------
    # Contributions
    # -------------------------------------------------------------------------
    def add_package(self, package_name: str) -> MetadataSources:
        """Import a module and register the classes in its ``__domain_entities__``.

        Raises:
            ImportError: If the module cannot be imported.
        """
        module = importlib.import_module(package_name)
        if package_name not in self._packages:
            self._packages.append(package_name)
        for cls in getattr(module, PACKAGE_ENTITIES_ATTRIBUTE, ()):
            self.add_class(cls)
        self._logger.debug("package_added", package=package_name)
        return self

    def add_standard_model(self, model: Union[StandardDomainModel, str]) -> MetadataSources:
        # Local import: the standard bundles import descriptors from this package.
        from domainscope.infrastructure.standard_models import get_standard_descriptor

        standard = StandardDomainModel(model)
        get_standard_descriptor(standard).apply_domain_model(self)
        self._logger.debug("standard_model_added", model=standard.value)
        return self

    def add_descriptor_contribution(self, descriptor: DomainModelDescriptor) -> MetadataSources:
        descriptor.apply_domain_model(self)
        self._logger.debug(
            "descriptor_applied",
            descriptor=qualified_name(type(descriptor)),
        )
        return self

    def add_class(self, cls: type) -> MetadataSources:
        self._classes[qualified_name(cls)] = cls
        return self

    def add_class_by_name(self, class_name: str) -> MetadataSources:
        return self.add_class(_resolve_class(class_name))

    def add_resource(self, resource: str) -> MetadataSources:
        """Read a YAML mapping document and register its entities.

        Raises:
            MappingResourceError: If the file is missing, is not valid YAML,
                does not contain an ``entities`` list, or an entity's
                ``properties`` or ``collections`` is not a mapping.
        """
        path = Path(resource)
        if not path.is_file():
            raise MappingResourceError(resource=resource)

        try:
            with open(path) as f:
                document = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise MappingResourceError(
                resource=resource,
                message=f"Invalid YAML in mapping resource : {resource}",
            ) from e

        entities = document.get("entities") if isinstance(document, dict) else None
        if not isinstance(entities, list):
            raise MappingResourceError(
                resource=resource,
                message=f"Mapping resource has no 'entities' list : {resource}",
            )

        for entry in entities:
            if not isinstance(entry, dict) or not entry.get("name"):
                raise MappingResourceError(
                    resource=resource,
                    message=f"Mapped entity without a name : {resource}",
                )
            for section in ("properties", "collections"):
                if entry.get(section) is not None and not isinstance(entry[section], dict):
                    raise MappingResourceError(
                        resource=resource,
                        message=(
                            f"'{section}' of mapped entity {entry['name']} "
                            f"must be a mapping : {resource}"
                        ),
                    )

        # Register only once the whole document is valid.
        for entry in entities:
            self._mapped_entities[entry["name"]] = entry

        self._resources.append(resource)
        self._logger.debug("resource_added", resource=resource, entities=len(entities))
        return self

    def add_query_import(self, import_name: str, cls: type) -> MetadataSources:
        self._query_imports[import_name] = cls
        return self

    # -------------------------------------------------------------------------
    # Build
    # -------------------------------------------------------------------------
    def build(self) -> DomainModelArtifact:
        """Build a fresh DomainModelArtifact from everything registered so far.

        Raises:
            ModelBuildError: If a class's type hints cannot be resolved, two
                different classes share an entity name, or a mapped entity
                extends an unknown (or circular) parent.
        """
        entities: dict[str, EntityBinding] = {}
        collections: dict[str, CollectionBinding] = {}
        entity_classes = set(self._classes.values())
        entity_names = {cls.__name__ for cls in entity_classes} | set(self._mapped_entities)

        claimed: dict[str, str] = {}
        for class_name, cls in self._classes.items():
            previous = claimed.setdefault(cls.__name__, class_name)
            if previous != class_name:
                raise ModelBuildError(
                    message=(
                        f"Duplicate entity name {cls.__name__} : "
                        f"{previous} and {class_name}"
                    ),
                    details={"entity": cls.__name__, "classes": [previous, class_name]},
                )

        for cls in self._classes.values():
            binding, cls_collections = self._bind_class(cls, entity_classes)
            entities[binding.entity_name] = binding
            for collection in cls_collections:
                collections[collection.role] = collection

        for name in self._mapped_entities:
            binding, mapped_collections = self._bind_mapped_entity(name, entity_names)
            entities[name] = binding
            for collection in mapped_collections:
                collections[collection.role] = collection

        artifact = DomainModelArtifact(
            entity_bindings=list(entities.values()),
            collection_bindings=list(collections.values()),
            query_imports={
                name: qualified_name(cls) for name, cls in self._query_imports.items()
            },
            packages=list(self._packages),
            resources=list(self._resources),
        )
        self._logger.debug(
            "model_built",
            entities=len(artifact.entity_bindings),
            collections=len(artifact.collection_bindings),
        )
        return artifact

    def _bind_class(
        self, cls: type, entity_classes: set[type]
    ) -> tuple[EntityBinding, list[CollectionBinding]]:
        try:
            hints = typing.get_type_hints(cls)
        except (NameError, TypeError) as e:
            raise ModelBuildError(
                message=f"Unable to resolve attribute types of {qualified_name(cls)}",
                details={"class_name": qualified_name(cls)},
            ) from e

        def value_for(hint: Any) -> Value:
            hint = _unwrap_optional(hint)
            if hint in entity_classes:
                return ReferenceValue(target=hint.__name__)
            return SimpleValue(type_name=type_name_for(hint))

        own_attributes = set(inspect.get_annotations(cls))

        properties: list[PropertyBinding] = []
        collections: list[CollectionBinding] = []
        for attr, hint in hints.items():
            if attr.startswith("_") or typing.get_origin(hint) is typing.ClassVar:
                continue
            hint = _unwrap_optional(hint)
            if typing.get_origin(hint) in _COLLECTION_ORIGINS:
                # Collection roles belong to the declaring class only.
                if attr not in own_attributes:
                    continue
                args = typing.get_args(hint)
                element = value_for(args[0]) if args else SimpleValue(type_name="object")
                collections.append(
                    CollectionBinding(role=f"{cls.__name__}.{attr}", element=element)
                )
            else:
                properties.append(PropertyBinding(name=attr, value=value_for(hint)))

        parent = next((base for base in cls.__mro__[1:] if base in entity_classes), None)
        binding = EntityBinding(
            entity_name=cls.__name__,
            class_name=qualified_name(cls),
            is_inherited=parent is not None,
            superclass=parent.__name__ if parent is not None else None,
            properties=properties,
        )
        return binding, collections

    def _bind_mapped_entity(
        self, name: str, entity_names: set[str]
    ) -> tuple[EntityBinding, list[CollectionBinding]]:
        def value_for(type_name: str) -> Value:
            if type_name in entity_names:
                return ReferenceValue(target=type_name)
            return SimpleValue(type_name=type_name)

        # Walk up the extends chain so the closure lists root attributes first.
        chain: list[dict[str, Any]] = []
        seen: set[str] = set()
        current: Optional[str] = name
        while current is not None:
            if current in seen:
                raise ModelBuildError(
                    message=f"Circular 'extends' in mapped entity {name}",
                    details={"entity": name},
                )
            entry = self._mapped_entities.get(current)
            if entry is None:
                raise ModelBuildError(
                    message=f"Mapped entity {name} extends unknown entity {current}",
                    details={"entity": name, "extends": current},
                )
            seen.add(current)
            chain.append(entry)
            current = entry.get("extends")

        properties = [
            PropertyBinding(name=prop, value=value_for(str(type_name)))
            for entry in reversed(chain)
            for prop, type_name in (entry.get("properties") or {}).items()
        ]
        collections = [
            CollectionBinding(role=f"{name}.{prop}", element=value_for(str(type_name)))
            for prop, type_name in (chain[0].get("collections") or {}).items()
        ]
        superclass = chain[0].get("extends")
        binding = EntityBinding(
            entity_name=name,
            class_name=name,
            is_inherited=superclass is not None,
            superclass=superclass,
            properties=properties,
        )
        return binding, collections
