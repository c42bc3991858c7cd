"""
domainscope - Scoped Domain Model Fixtures for Tests
=====================================================

domainscope builds a "domain model" artifact for a test unit, caches it
while the unit runs, and releases it deterministically when the unit
completes or fails:

    @domain_model(...)  →  SpecificationModelProducer  →  DomainModelArtifact
                                      │
    DomainModelExtension hooks  →  ScopeManager  →  DomainModelScope (cache)

Quick Start (pytest):
    >>> from domainscope import domain_model
    >>> @domain_model(standard_models=["retail"], concurrency_strategy="read-write")
    ... class TestOrders:
    ...     def test_vendor_cached(self, domain_model):
    ...         assert domain_model.get_entity_binding("Vendor").is_cached
"""

__version__ = "0.1.0"

from domainscope.core.specification import domain_model
from domainscope.scope.extension import DomainModelExtension
from domainscope.scope.manager import ScopeManager
from domainscope.scope.scope import DomainModelScope

__all__ = [
    "DomainModelExtension",
    "DomainModelScope",
    "ScopeManager",
    "domain_model",
    "__version__",
]
