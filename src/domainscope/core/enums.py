"""
domainscope.core.enums - Type-Safe Enumerations
================================================

All enums inherit from both `str` and `Enum`, so they compare equal to their
plain string values and serialize cleanly in logs.
"""

from enum import Enum


# =============================================================================
# Scope State
# =============================================================================
# The lifecycle of one DomainModelScope:
#
#   ACTIVE_EMPTY ──build──→ ACTIVE_POPULATED
#        ↑                        │
#        └──────invalidate────────┘
#
#   ACTIVE_* ──close──→ CLOSED   (terminal)
# =============================================================================
class ScopeState(str, Enum):
    """Lifecycle states of a DomainModelScope.

    Usage:
        >>> scope.state == ScopeState.ACTIVE_POPULATED
        True
    """

    ACTIVE_EMPTY = "active_empty"           # Active, artifact not built (or released)
    ACTIVE_POPULATED = "active_populated"   # Active, artifact cached
    CLOSED = "closed"                       # Terminal, rejects every access


# =============================================================================
# Standard Domain Models
# =============================================================================
# Named bundles of ready-made domain classes. Each member resolves to a
# DomainModelDescriptor in infrastructure/standard_models.py.
# =============================================================================
class StandardDomainModel(str, Enum):
    """Named standard model bundles a @domain_model can pull in.

    Usage:
        >>> @domain_model(standard_models=[StandardDomainModel.CONTACTS])
        ... class TestContacts: ...
    """

    CONTACTS = "contacts"       # Contact, Address, phone numbers
    RETAIL = "retail"           # Vendor, Product, SalesOrder, LineItem
    HELPDESK = "helpdesk"       # Account, Ticket, Incident (LOB-heavy)
