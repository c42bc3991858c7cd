"""
domainscope.scope.scope - Lifecycle-Bound Domain Model Holder
==============================================================

A DomainModelScope owns the cached artifact for one test unit.

State Machine:
    ACTIVE_EMPTY ──get_domain_model()──→ ACTIVE_POPULATED
         ↑                                    │
         └──────────release_model()───────────┘

    ACTIVE_* ──close()──→ CLOSED   (terminal; every later access raises)

    The model is built once, eagerly, when the scope is constructed. After
    release_model() the next get_domain_model() rebuilds it with the
    original producer against the original registry.

Failure Semantics:
    Producer failures are never retried and never leave a partial artifact
    behind: the slot is only filled once the producer returns.

Threading:
    A scope is driven by sequential lifecycle hooks and is not locked.
    Storage-level locking lives in ScopeManager.
"""

from __future__ import annotations

from typing import Any, Optional

import structlog

from domainscope.core.enums import ScopeState
from domainscope.core.exceptions import ScopeInactiveError
from domainscope.core.models import DomainModelArtifact, ScopeKey
from domainscope.scope.producer import DomainModelProducer


logger = structlog.get_logger()


class DomainModelScope:
    """Holds, rebuilds and finally releases one DomainModelArtifact.

    Args:
        producer: Builds the artifact. Not retained beyond this scope.
        registry: Opaque handle passed to every producer call.
        key: Storage key, used for logging and error details.

    Raises:
        Whatever the producer raises during the eager first build.

    Example:
        >>> scope = DomainModelScope(producer, registry)
        >>> model = scope.get_domain_model()
        >>> scope.release_model()            # next access rebuilds
        >>> scope.close()                    # terminal
    """

    def __init__(
        self,
        producer: DomainModelProducer,
        registry: Any,
        key: Optional[ScopeKey] = None,
    ) -> None:
        self.producer = producer
        self.registry = registry
        self.key = key

        self._model: Optional[DomainModelArtifact] = None
        self._active = True
        self._logger = logger.bind(
            component="domain_model_scope",
            scope_key=str(key) if key is not None else None,
        )

        self._create_domain_model()

    # -------------------------------------------------------------------------
    # State
    # -------------------------------------------------------------------------
    @property
    def is_active(self) -> bool:
        return self._active

    @property
    def state(self) -> ScopeState:
        if not self._active:
            return ScopeState.CLOSED
        if self._model is None:
            return ScopeState.ACTIVE_EMPTY
        return ScopeState.ACTIVE_POPULATED

    def _verify_active(self) -> None:
        if not self._active:
            raise ScopeInactiveError(
                scope_key=str(self.key) if self.key is not None else None,
            )

    # -------------------------------------------------------------------------
    # Artifact Access
    # -------------------------------------------------------------------------
    def _create_domain_model(self) -> DomainModelArtifact:
        self._verify_active()

        model = self.producer.produce_model(self.registry)
        self._model = model
        self._logger.debug("model_built")
        return model

    def get_domain_model(self) -> DomainModelArtifact:
        """Return the cached model, rebuilding it if it was released.

        Raises:
            ScopeInactiveError: If the scope has been closed.
        """
        self._verify_active()

        if self._model is None:
            return self._create_domain_model()
        return self._model

    def release_model(self) -> None:
        """Drop the cached model; the scope stays active.

        Raises:
            ScopeInactiveError: If the scope has been closed.
        """
        self._verify_active()

        if self._model is not None:
            self._model = None
            self._logger.debug("model_released")

    # Alias matching the invalidate/close vocabulary of the hook surface.
    invalidate = release_model

    def close(self) -> None:
        """Deactivate the scope for good and drop the model. Idempotent."""
        if not self._active:
            return

        self._active = False
        self._model = None
        self._logger.debug("scope_closed")

    def __repr__(self) -> str:
        return f"DomainModelScope(key={self.key!s}, state={self.state.value})"
