"""
domainscope.scope.manager - Scope Storage
==========================================

The ScopeManager maps ScopeKeys to live DomainModelScopes. It is the
process-wide slot table shared by every lifecycle hook.

Key Schema:
    ScopeKey(context_id, unit_name) → DomainModelScope

Locking:
    Each key has its own threading.Lock, held while that key's scope is
    looked up or created (creation runs the producer), so a slow build for
    one test unit never blocks lookups for another. A separate guard lock
    protects the lock table and every read or write of the scope table.

    Key locks are reference counted. A key's lock is dropped once no thread
    holds or waits on it and no scope is stored under the key, so the lock
    table never outgrows the live scopes plus the calls in flight.
"""

from __future__ import annotations

import threading
from typing import Any, Optional

import structlog

from domainscope.core.models import ScopeKey
from domainscope.scope.producer import DomainModelProducer
from domainscope.scope.scope import DomainModelScope


logger = structlog.get_logger()


class _KeyLock:
    """A key's lock plus the number of threads holding or waiting on it."""

    __slots__ = ("lock", "users")

    def __init__(self) -> None:
        self.lock = threading.Lock()
        self.users = 0


class ScopeManager:
    """Thread-safe key → DomainModelScope storage.

    Example:
        >>> manager = ScopeManager()
        >>> scope = manager.find_or_create(key, producer, registry)
        >>> manager.find(key) is scope
        True
        >>> manager.close(key)
        True
    """

    def __init__(self) -> None:
        self._scopes: dict[ScopeKey, DomainModelScope] = {}
        self._locks: dict[ScopeKey, _KeyLock] = {}
        self._guard = threading.Lock()
        self._logger = logger.bind(component="scope_manager")

    # -------------------------------------------------------------------------
    # Key Locks
    # -------------------------------------------------------------------------
    def _acquire(self, key: ScopeKey) -> _KeyLock:
        with self._guard:
            key_lock = self._locks.get(key)
            if key_lock is None:
                key_lock = _KeyLock()
                self._locks[key] = key_lock
            key_lock.users += 1
        key_lock.lock.acquire()
        return key_lock

    def _release(self, key: ScopeKey, key_lock: _KeyLock) -> None:
        key_lock.lock.release()
        with self._guard:
            key_lock.users -= 1
            if key_lock.users == 0 and key not in self._scopes:
                del self._locks[key]

    # -------------------------------------------------------------------------
    # Lookup / Creation
    # -------------------------------------------------------------------------
    def find(self, key: ScopeKey) -> Optional[DomainModelScope]:
        """Return the stored scope for ``key``, or None."""
        key_lock = self._acquire(key)
        try:
            with self._guard:
                return self._scopes.get(key)
        finally:
            self._release(key, key_lock)

    def find_or_create(
        self,
        key: ScopeKey,
        producer: DomainModelProducer,
        registry: Any,
    ) -> DomainModelScope:
        """Return the scope stored under ``key``, creating it if needed.

        A new scope builds its model immediately. If that build fails the
        error propagates and nothing is stored.
        """
        key_lock = self._acquire(key)
        try:
            with self._guard:
                existing = self._scopes.get(key)
            if existing is not None:
                return existing

            scope = DomainModelScope(producer, registry, key=key)
            with self._guard:
                self._scopes[key] = scope
            self._logger.debug("scope_created", scope_key=str(key))
            return scope
        finally:
            self._release(key, key_lock)

    # -------------------------------------------------------------------------
    # Removal
    # -------------------------------------------------------------------------
    def remove(self, key: ScopeKey) -> Optional[DomainModelScope]:
        """Detach the scope for ``key`` from storage without closing it."""
        key_lock = self._acquire(key)
        try:
            with self._guard:
                return self._scopes.pop(key, None)
        finally:
            self._release(key, key_lock)

    def close(self, key: ScopeKey) -> bool:
        """Remove and close the scope for ``key``.

        Returns:
            True if a scope was stored under ``key``.
        """
        scope = self.remove(key)
        if scope is None:
            return False
        scope.close()
        self._logger.debug("scope_removed", scope_key=str(key))
        return True

    def close_all(self) -> int:
        """Close every stored scope. Returns how many were closed."""
        closed = 0
        for key in self.keys():
            if self.close(key):
                closed += 1
        return closed

    # -------------------------------------------------------------------------
    # Introspection
    # -------------------------------------------------------------------------
    def keys(self) -> list[ScopeKey]:
        with self._guard:
            return list(self._scopes)

    def __len__(self) -> int:
        with self._guard:
            return len(self._scopes)

    def __contains__(self, key: object) -> bool:
        with self._guard:
            return key in self._scopes
