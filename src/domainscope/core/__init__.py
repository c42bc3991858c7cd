"""
domainscope.core - Foundation Layer
====================================

Plain data structures and configuration shared by every other module:

    - config:         DomainScopeConfig, RegistryConfig, load_config
    - enums:          ScopeState, StandardDomainModel
    - exceptions:     DomainScopeError hierarchy
    - models:         ScopeKey and the DomainModelArtifact graph
    - specification:  DomainModelSpec and the @domain_model decorator
    - types:          Blob / Clob / NClob marker types

Dependency Rule:
    core/ depends on NOTHING else in the domainscope package.
"""

from domainscope.core.config import DomainScopeConfig, RegistryConfig
from domainscope.core.enums import ScopeState, StandardDomainModel
from domainscope.core.exceptions import (
    ConfigurationError,
    DomainScopeError,
    MappingResourceError,
    ModelBuildError,
    ModelDescriptorInstantiationError,
    ScopeInactiveError,
    SpecificationMissingError,
)
from domainscope.core.models import (
    CollectionBinding,
    DomainModelArtifact,
    EntityBinding,
    PropertyBinding,
    ReferenceValue,
    ScopeKey,
    SimpleValue,
)
from domainscope.core.specification import DomainModelSpec, ExtraQueryImport, domain_model
from domainscope.core.types import Blob, Clob, NClob

__all__ = [
    # Config
    "DomainScopeConfig",
    "RegistryConfig",
    # Enums
    "ScopeState",
    "StandardDomainModel",
    # Exceptions
    "DomainScopeError",
    "ConfigurationError",
    "SpecificationMissingError",
    "ScopeInactiveError",
    "ModelDescriptorInstantiationError",
    "ModelBuildError",
    "MappingResourceError",
    # Models
    "ScopeKey",
    "SimpleValue",
    "ReferenceValue",
    "PropertyBinding",
    "EntityBinding",
    "CollectionBinding",
    "DomainModelArtifact",
    # Specification
    "DomainModelSpec",
    "ExtraQueryImport",
    "domain_model",
    # Types
    "Blob",
    "Clob",
    "NClob",
]
