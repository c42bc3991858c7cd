"""
domainscope.core.exceptions - Custom Exception Hierarchy
=========================================================

Structured exceptions raised by domainscope. Every exception carries a
machine-readable error code and a ``details`` dict, so the host test runner
(or a log line) can tell a configuration mistake from a lifecycle misuse.

Exception Hierarchy:
    DomainScopeError (base)
        ├── ConfigurationError                 - Invalid config / test setup
        │     └── SpecificationMissingError    - No @domain_model on the test
        ├── ScopeInactiveError                 - Use of a closed scope
        ├── ModelDescriptorInstantiationError  - Descriptor class failed to build
        └── ModelBuildError                    - Aggregator could not build
              └── MappingResourceError         - Mapping document unreadable

Propagation Policy:
    Nothing here is retried. The scope recovers only its own artifact state
    (invalidate / rebuild); every error surfaces to the caller. Errors raised
    by imported modules or by a descriptor's contribution pass through as-is.

Usage:
    >>> from domainscope.core.exceptions import ScopeInactiveError
    >>> raise ScopeInactiveError(scope_key="tests/test_x.py::TestX")
"""

from __future__ import annotations

from typing import Any, Optional


# =============================================================================
# Base Exception
# =============================================================================
class DomainScopeError(Exception):
    """Base exception for all domainscope errors.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code, UPPER_SNAKE_CASE.
        details: Additional debugging context.
    """

    def __init__(
        self,
        message: str,
        error_code: str = "UNKNOWN_ERROR",
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)

        self.message = message
        self.error_code = error_code
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Serialize this exception to a dictionary (for structured logs).

        Returns:
            Dictionary with error_type, message, error_code, and details.
        """
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "error_code": self.error_code,
            "details": self.details,
        }

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"error_code={self.error_code!r}, "
            f"details={self.details!r})"
        )


# =============================================================================
# Configuration Errors
# =============================================================================
# Raised when the test setup itself is wrong. These should fail the test
# immediately with a clear message; retrying cannot help.
# =============================================================================
class ConfigurationError(DomainScopeError):
    """Raised when domainscope configuration or test setup is invalid.

    Example:
        >>> raise ConfigurationError(
        ...     message="Invalid YAML in domainscope.yaml",
        ...     details={"path": "domainscope.yaml"},
        ... )
    """

    def __init__(
        self,
        message: str,
        error_code: str = "CONFIG_ERROR",
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(message=message, error_code=error_code, details=details)


class SpecificationMissingError(ConfigurationError):
    """Raised when a test unit has no declarative domain model specification.

    This happens when the synthesized producer is selected (the test does
    not implement ``produce_model``) but the test class was never decorated
    with ``@domain_model``.

    Attributes:
        element: Qualified name of the test class or module that was searched.
    """

    def __init__(
        self,
        element: str,
        message: Optional[str] = None,
        error_code: str = "SPECIFICATION_MISSING",
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        enriched_details = details or {}
        enriched_details["element"] = element

        super().__init__(
            message=message or f"Could not locate @domain_model specification : {element}",
            error_code=error_code,
            details=enriched_details,
        )
        self.element = element


# =============================================================================
# Scope Lifecycle Errors
# =============================================================================
class ScopeInactiveError(DomainScopeError):
    """Raised on any artifact access or invalidation after a scope was closed.

    This is always a programming error in the caller: a closed scope is
    terminal and never hands out (or rebuilds) an artifact again.

    Attributes:
        scope_key: String form of the key the scope was stored under.
    """

    def __init__(
        self,
        scope_key: Optional[str] = None,
        message: str = "DomainModelScope no longer active",
        error_code: str = "SCOPE_INACTIVE",
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        enriched_details = details or {}
        if scope_key is not None:
            enriched_details["scope_key"] = scope_key

        super().__init__(message=message, error_code=error_code, details=enriched_details)
        self.scope_key = scope_key


# =============================================================================
# Model Building Errors
# =============================================================================
class ModelDescriptorInstantiationError(DomainScopeError):
    """Raised when a custom model descriptor class cannot be instantiated.

    The underlying exception is kept as ``__cause__`` (raise ... from ...).

    Attributes:
        descriptor: Qualified name of the descriptor class.

    Example:
        >>> try:
        ...     descriptor_cls()
        ... except Exception as e:
        ...     raise ModelDescriptorInstantiationError(
        ...         descriptor="tests.models.BrokenDescriptor",
        ...     ) from e
    """

    def __init__(
        self,
        descriptor: str,
        message: Optional[str] = None,
        error_code: str = "DESCRIPTOR_INSTANTIATION_FAILED",
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        enriched_details = details or {}
        enriched_details["descriptor"] = descriptor

        super().__init__(
            message=message or f"Error instantiating DomainModelDescriptor - {descriptor}",
            error_code=error_code,
            details=enriched_details,
        )
        self.descriptor = descriptor


class ModelBuildError(DomainScopeError):
    """Raised when the model sources aggregator cannot build the artifact."""

    def __init__(
        self,
        message: str,
        error_code: str = "MODEL_BUILD_ERROR",
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(message=message, error_code=error_code, details=details)


class MappingResourceError(ModelBuildError):
    """Raised when a YAML mapping resource is missing or malformed.

    Attributes:
        resource: The resource path as declared in ``xml_mappings``.
    """

    def __init__(
        self,
        resource: str,
        message: Optional[str] = None,
        error_code: str = "MAPPING_RESOURCE_ERROR",
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        enriched_details = details or {}
        enriched_details["resource"] = resource

        super().__init__(
            message=message or f"Unable to read mapping resource : {resource}",
            error_code=error_code,
            details=enriched_details,
        )
        self.resource = resource
