"""
domainscope.scope - Scope Lifecycle Layer
==========================================

    - producer:        DomainModelProducer capability + synthesized producer
    - cache_strategy:  cache concurrency strategy override pass
    - scope:           DomainModelScope state machine
    - manager:         ScopeManager keyed storage
    - extension:       DomainModelExtension lifecycle hooks
"""

from domainscope.scope.cache_strategy import LOB_TYPE_NAMES, apply_cache_settings, is_lob
from domainscope.scope.extension import DomainModelExtension, DomainModelScopeAware, TestUnit
from domainscope.scope.manager import ScopeManager
from domainscope.scope.producer import (
    DomainModelProducer,
    SpecificationModelProducer,
    resolve_producer,
)
from domainscope.scope.scope import DomainModelScope

__all__ = [
    "LOB_TYPE_NAMES",
    "apply_cache_settings",
    "is_lob",
    "DomainModelExtension",
    "DomainModelScopeAware",
    "TestUnit",
    "ScopeManager",
    "DomainModelProducer",
    "SpecificationModelProducer",
    "resolve_producer",
    "DomainModelScope",
]
