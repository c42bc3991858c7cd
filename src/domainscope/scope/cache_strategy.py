"""
domainscope.scope.cache_strategy - Cache Concurrency Strategy Override
=======================================================================

After a model is built, the synthesized producer can force a cache
concurrency strategy onto every cacheable element of the graph:

    for each entity binding:
        inherited?                 → skip (strategy lives on the root only)
        any simple LOB property?   → skip (stop scanning at the first one)
        otherwise                  → strategy + is_cached = True

    for each collection binding:
        simple LOB element?        → skip
        otherwise                  → strategy

The pass is idempotent: running it twice with the same strategy leaves the
bindings exactly as one run does.

LOB Detection:
    A fixed, case-sensitive set of type names. It is never inferred from the
    size or shape of a value.
"""

from __future__ import annotations

from typing import Optional

import structlog

from domainscope.core.models import DomainModelArtifact


logger = structlog.get_logger()


LOB_TYPE_NAMES: frozenset[str] = frozenset(
    {
        "blob",
        "clob",
        "nclob",
        "java.sql.Blob",
        "java.sql.Clob",
        "java.sql.NClob",
        "org.hibernate.type.BlobType",
        "org.hibernate.type.ClobType",
        "org.hibernate.type.NClobType",
    }
)


def is_lob(type_name: Optional[str]) -> bool:
    """Return True if ``type_name`` names a large-object type."""
    return type_name in LOB_TYPE_NAMES


def apply_cache_settings(
    artifact: DomainModelArtifact,
    override_cache_strategy: bool,
    cache_concurrency_strategy: Optional[str],
) -> None:
    """Apply ``cache_concurrency_strategy`` to the artifact's bindings in place.

    Args:
        artifact: The built model. Must expose ``entity_bindings`` and
            ``collection_bindings``; anything else raises AttributeError.
        override_cache_strategy: When False, nothing is changed.
        cache_concurrency_strategy: Strategy name such as "read-write".
            An empty string (or None) means nothing is changed.
    """
    if not override_cache_strategy:
        return

    if not cache_concurrency_strategy:
        return

    cached_entities = 0
    skipped_entities = 0
    for entity_binding in artifact.entity_bindings:
        if entity_binding.is_inherited:
            continue

        has_lob = False
        for prop in entity_binding.properties:
            if prop.value.is_simple_value and is_lob(prop.value.type_name):
                has_lob = True
                break

        if has_lob:
            skipped_entities += 1
            continue

        entity_binding.cache_concurrency_strategy = cache_concurrency_strategy
        entity_binding.is_cached = True
        cached_entities += 1

    cached_collections = 0
    skipped_collections = 0
    for collection_binding in artifact.collection_bindings:
        element = collection_binding.element
        if element.is_simple_value and is_lob(element.type_name):
            skipped_collections += 1
            continue

        collection_binding.cache_concurrency_strategy = cache_concurrency_strategy
        cached_collections += 1

    logger.debug(
        "cache_strategy_applied",
        strategy=cache_concurrency_strategy,
        cached_entities=cached_entities,
        skipped_entities=skipped_entities,
        cached_collections=cached_collections,
        skipped_collections=skipped_collections,
    )
