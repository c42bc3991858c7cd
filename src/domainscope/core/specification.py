"""
domainscope.core.specification - Declarative Domain Model Specification
=========================================================================

A test class declares the domain model it needs with the ``@domain_model``
decorator. The decorator validates its arguments into a ``DomainModelSpec``
and stores it on the class; the synthesized producer later looks it up with
``find_domain_model_spec``.

Usage:
    >>> @domain_model(
    ...     standard_models=[StandardDomainModel.CONTACTS],
    ...     annotated_classes=[Invoice],
    ...     xml_mappings=["tests/mappings/legacy.yaml"],
    ...     concurrency_strategy="read-write",
    ... )
    ... class TestInvoices:
    ...     def test_total(self, domain_model): ...

Source Order:
    The producer applies the fields in declaration order below, (a) to (h).
    Later contributions may override earlier ones inside the aggregator.
"""

from __future__ import annotations

from typing import Any, Callable, Optional, TypeVar

from pydantic import BaseModel, Field

from domainscope.core.enums import StandardDomainModel

SPEC_ATTRIBUTE = "__domain_model__"

T = TypeVar("T")


class ExtraQueryImport(BaseModel):
    """An extra query import registered under an explicit name."""

    name: str
    imported_class: type


class DomainModelSpec(BaseModel):
    """Validated contents of a ``@domain_model`` declaration.

    Attributes:
        annotated_package_names: (a) Modules to import and register.
        standard_models: (b) Named standard model bundles.
        model_descriptor_classes: (c) DomainModelDescriptor subclasses;
            each is instantiated once and asked to contribute.
        annotated_classes: (d) Entity classes.
        annotated_class_names: (e) Entity classes by "pkg.mod:Cls" name.
        xml_mappings: (f) YAML mapping resources.
        extra_query_imports: (g) Query imports with an explicit name.
        extra_query_import_classes: (h) Query imports named after the class.
        override_cache_strategy: Whether to run the cache-strategy pass.
        concurrency_strategy: Strategy string; None defers to configuration.
    """

    annotated_package_names: list[str] = Field(default_factory=list)
    standard_models: list[StandardDomainModel] = Field(default_factory=list)
    model_descriptor_classes: list[type] = Field(default_factory=list)
    annotated_classes: list[type] = Field(default_factory=list)
    annotated_class_names: list[str] = Field(default_factory=list)
    xml_mappings: list[str] = Field(default_factory=list)
    extra_query_imports: list[ExtraQueryImport] = Field(default_factory=list)
    extra_query_import_classes: list[type] = Field(default_factory=list)

    override_cache_strategy: bool = True
    concurrency_strategy: Optional[str] = None

    model_config = {"protected_namespaces": ()}


def domain_model(**fields: Any) -> Callable[[T], T]:
    """Class decorator attaching a DomainModelSpec to a test class.

    Raises:
        pydantic.ValidationError: If the fields do not validate.
    """
    spec = DomainModelSpec(**fields)

    def decorator(target: T) -> T:
        setattr(target, SPEC_ATTRIBUTE, spec)
        return target

    return decorator


def find_domain_model_spec(element: Any) -> Optional[DomainModelSpec]:
    """Look up the specification attached to a test class or module.

    Class lookups follow normal attribute resolution, so a decorated base
    class supplies the spec to its subclasses.
    """
    if element is None:
        return None
    spec = getattr(element, SPEC_ATTRIBUTE, None)
    if isinstance(spec, DomainModelSpec):
        return spec
    return None
