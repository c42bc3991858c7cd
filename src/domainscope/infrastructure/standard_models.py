"""
domainscope.infrastructure.standard_models - Standard Model Bundles
====================================================================

Maps each StandardDomainModel member to the descriptor that contributes its
classes:

    CONTACTS → Address, Contact, BusinessContact
    RETAIL   → Vendor, Product, LineItem, SalesOrder
    HELPDESK → Account, Ticket, Incident
"""

from __future__ import annotations

from typing import Sequence

from domainscope.core.enums import StandardDomainModel
from domainscope.infrastructure.descriptors import (
    AnnotatedClassesDescriptor,
    DomainModelDescriptor,
)
from domainscope.testing.domain import contacts, helpdesk, retail


class ContactsDomainModel(AnnotatedClassesDescriptor):
    def annotated_classes(self) -> Sequence[type]:
        return [contacts.Address, contacts.Contact, contacts.BusinessContact]


class RetailDomainModel(AnnotatedClassesDescriptor):
    def annotated_classes(self) -> Sequence[type]:
        return [retail.Vendor, retail.Product, retail.LineItem, retail.SalesOrder]


class HelpdeskDomainModel(AnnotatedClassesDescriptor):
    def annotated_classes(self) -> Sequence[type]:
        return [helpdesk.Account, helpdesk.Ticket, helpdesk.Incident]


_DESCRIPTORS: dict[StandardDomainModel, type[DomainModelDescriptor]] = {
    StandardDomainModel.CONTACTS: ContactsDomainModel,
    StandardDomainModel.RETAIL: RetailDomainModel,
    StandardDomainModel.HELPDESK: HelpdeskDomainModel,
}


def get_standard_descriptor(model: StandardDomainModel) -> DomainModelDescriptor:
    """Return a fresh descriptor for the given standard bundle."""
    return _DESCRIPTORS[model]()
