"""
domainscope.infrastructure.descriptors - Domain Model Descriptors
==================================================================

A descriptor is a reusable contribution to a MetadataSources aggregator.
Test authors list descriptor classes in ``@domain_model(model_descriptor_classes=...)``;
the producer instantiates each one (no arguments) and calls
``apply_domain_model``.

Usage:
    >>> class InvoicingModel(AnnotatedClassesDescriptor):
    ...     def annotated_classes(self):
    ...         return [Invoice, InvoiceLine]
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Sequence

if TYPE_CHECKING:
    from domainscope.infrastructure.metadata_sources import MetadataSources


class DomainModelDescriptor(ABC):
    """Something that knows how to add a domain model to an aggregator."""

    @abstractmethod
    def apply_domain_model(self, sources: MetadataSources) -> None:
        """Contribute classes, resources or imports to ``sources``."""


class AnnotatedClassesDescriptor(DomainModelDescriptor):
    """Descriptor made of a fixed list of annotated entity classes."""

    @abstractmethod
    def annotated_classes(self) -> Sequence[type]:
        ...

    def apply_domain_model(self, sources: MetadataSources) -> None:
        for cls in self.annotated_classes():
            sources.add_class(cls)
