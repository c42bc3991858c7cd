"""
domainscope.scope.producer - Domain Model Producers
====================================================

A producer turns a registry handle into a DomainModelArtifact. There are
two kinds, chosen when a scope is created:

    1. The test instance itself, if it implements ``produce_model(registry)``
       (the DomainModelProducer capability).
    2. Otherwise a SpecificationModelProducer synthesized from the
       ``@domain_model`` declaration on the test class.

Synthesized Build Order:
    (a) packages → (b) standard models → (c) descriptor classes →
    (d) classes → (e) class names → (f) mapping resources →
    (g) named query imports → (h) class-named query imports
    → build() → cache-strategy override

Producers hold no reference to what they build; the scope owns the result.
"""

from __future__ import annotations

from typing import Any, Optional, Protocol, runtime_checkable

import structlog

from domainscope.core.config import DomainScopeConfig
from domainscope.core.exceptions import (
    ModelDescriptorInstantiationError,
    SpecificationMissingError,
)
from domainscope.core.models import DomainModelArtifact
from domainscope.core.specification import DomainModelSpec, find_domain_model_spec
from domainscope.infrastructure.metadata_sources import MetadataSources, qualified_name
from domainscope.scope.cache_strategy import apply_cache_settings


logger = structlog.get_logger()


@runtime_checkable
class DomainModelProducer(Protocol):
    """Capability: build one domain model from a registry handle."""

    def produce_model(self, registry: Any) -> DomainModelArtifact:
        ...


def _element_name(element: Any) -> str:
    if isinstance(element, type):
        return qualified_name(element)
    return getattr(element, "__name__", repr(element))


class SpecificationModelProducer:
    """Producer synthesized from the ``@domain_model`` on a test element.

    The specification is resolved on every call, so a missing declaration
    surfaces as SpecificationMissingError from whichever build hits it.

    Args:
        element: The test class (or module) carrying the declaration.
        config: Supplies the fallback concurrency strategy.
    """

    def __init__(self, element: Any, config: Optional[DomainScopeConfig] = None) -> None:
        self.element = element
        self.config = config or DomainScopeConfig()
        self._logger = logger.bind(
            component="specification_model_producer",
            element=_element_name(element),
        )

    def resolve_specification(self) -> DomainModelSpec:
        spec = find_domain_model_spec(self.element)
        if spec is None:
            raise SpecificationMissingError(element=_element_name(self.element))
        return spec

    def produce_model(self, registry: Any) -> DomainModelArtifact:
        spec = self.resolve_specification()
        sources = MetadataSources(registry)

        for package_name in spec.annotated_package_names:
            sources.add_package(package_name)

        for standard_model in spec.standard_models:
            sources.add_standard_model(standard_model)

        for descriptor_class in spec.model_descriptor_classes:
            try:
                descriptor = descriptor_class()
            except Exception as e:
                raise ModelDescriptorInstantiationError(
                    descriptor=qualified_name(descriptor_class),
                ) from e
            sources.add_descriptor_contribution(descriptor)

        for annotated_class in spec.annotated_classes:
            sources.add_class(annotated_class)

        for class_name in spec.annotated_class_names:
            sources.add_class_by_name(class_name)

        for mapping in spec.xml_mappings:
            sources.add_resource(mapping)

        for extra_query_import in spec.extra_query_imports:
            sources.add_query_import(extra_query_import.name, extra_query_import.imported_class)

        for imported_class in spec.extra_query_import_classes:
            sources.add_query_import(imported_class.__name__, imported_class)

        artifact = sources.build()

        strategy = spec.concurrency_strategy
        if strategy is None:
            strategy = self.config.default_concurrency_strategy
        apply_cache_settings(artifact, spec.override_cache_strategy, strategy)

        self._logger.debug("model_produced", strategy=strategy)
        return artifact


def resolve_producer(
    test_instance: Any,
    element: Any,
    config: Optional[DomainScopeConfig] = None,
) -> DomainModelProducer:
    """Pick the producer for a test unit.

    The test instance wins if it implements ``produce_model``; otherwise a
    producer is synthesized from the element's ``@domain_model``.
    """
    if test_instance is not None and isinstance(test_instance, DomainModelProducer):
        return test_instance
    return SpecificationModelProducer(element, config)
