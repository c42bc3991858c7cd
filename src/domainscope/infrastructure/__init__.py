"""
domainscope.infrastructure - Model Building Collaborators
=========================================================

    - registry:          ServiceRegistry, the opaque handle producers receive
    - metadata_sources:  MetadataSources aggregator (classes, YAML mappings)
    - descriptors:       DomainModelDescriptor contributions
    - standard_models:   descriptors behind StandardDomainModel members
"""

from domainscope.infrastructure.descriptors import (
    AnnotatedClassesDescriptor,
    DomainModelDescriptor,
)
from domainscope.infrastructure.metadata_sources import MetadataSources
from domainscope.infrastructure.registry import ServiceRegistry

__all__ = [
    "AnnotatedClassesDescriptor",
    "DomainModelDescriptor",
    "MetadataSources",
    "ServiceRegistry",
]
