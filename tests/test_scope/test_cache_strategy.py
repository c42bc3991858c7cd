"""
Tests for domainscope.scope.cache_strategy
===========================================

What's Being Tested:
    - No-op conditions (flag off, empty strategy)
    - Entity rules: inherited skip, LOB skip, first-LOB short circuit
    - Collection rules: LOB element skip, reference elements cached
    - Idempotence
    - The closed LOB type-name set
"""

import pytest

from domainscope.core.models import CollectionBinding, DomainModelArtifact, EntityBinding, SimpleValue
from domainscope.infrastructure.metadata_sources import MetadataSources
from domainscope.scope.cache_strategy import LOB_TYPE_NAMES, apply_cache_settings, is_lob
from tests.fixtures.domain import Document, Employee, Library, Person


def _snapshot(artifact: DomainModelArtifact) -> dict:
    return {
        "entities": [(b.entity_name, b.is_cached, b.cache_concurrency_strategy) for b in artifact.entity_bindings],
        "collections": [(c.role, c.cache_concurrency_strategy) for c in artifact.collection_bindings],
    }


# =============================================================================
# Tests: No-op Conditions
# =============================================================================
class TestNoOp:
    @pytest.mark.parametrize("strategy", ["read-write", "", "anything"])
    def test_override_disabled(self, artifact, strategy) -> None:
        before = _snapshot(artifact)
        apply_cache_settings(artifact, False, strategy)
        assert _snapshot(artifact) == before

    def test_empty_strategy(self, artifact) -> None:
        before = _snapshot(artifact)
        apply_cache_settings(artifact, True, "")
        assert _snapshot(artifact) == before

    def test_none_strategy(self, artifact) -> None:
        before = _snapshot(artifact)
        apply_cache_settings(artifact, True, None)
        assert _snapshot(artifact) == before


# =============================================================================
# Tests: Entities
# =============================================================================
class TestEntities:
    def test_plain_entity_cached(self, artifact) -> None:
        apply_cache_settings(artifact, True, "read-write")
        plain = artifact.get_entity_binding("Plain")
        assert plain.is_cached is True
        assert plain.cache_concurrency_strategy == "read-write"

    def test_blob_entity_skipped(self, artifact) -> None:
        apply_cache_settings(artifact, True, "read-write")
        with_blob = artifact.get_entity_binding("WithBlob")
        assert with_blob.is_cached is False
        assert with_blob.cache_concurrency_strategy is None

    def test_lob_after_reference_still_skips(self, artifact) -> None:
        apply_cache_settings(artifact, True, "read-write")
        assert artifact.get_entity_binding("LateClob").is_cached is False

    def test_inherited_entity_skipped(self, artifact) -> None:
        apply_cache_settings(artifact, True, "read-write")
        child = artifact.get_entity_binding("Child")
        assert child.is_cached is False
        assert child.cache_concurrency_strategy is None

    def test_reference_values_never_count_as_lob(self, artifact) -> None:
        apply_cache_settings(artifact, True, "read-write")
        assert artifact.get_entity_binding("RefOnly").is_cached is True


# =============================================================================
# Tests: Collections
# =============================================================================
class TestCollections:
    def test_plain_collection_cached(self, artifact) -> None:
        apply_cache_settings(artifact, True, "nonstrict-read-write")
        assert artifact.get_collection_binding("Plain.tags").cache_concurrency_strategy == "nonstrict-read-write"

    def test_clob_wrapper_collection_skipped(self, artifact) -> None:
        apply_cache_settings(artifact, True, "nonstrict-read-write")
        assert artifact.get_collection_binding("Plain.notes").cache_concurrency_strategy is None

    def test_reference_collection_cached(self, artifact) -> None:
        apply_cache_settings(artifact, True, "nonstrict-read-write")
        assert artifact.get_collection_binding("Plain.children").cache_concurrency_strategy == "nonstrict-read-write"


# =============================================================================
# Tests: Idempotence and Built Models
# =============================================================================
class TestApplication:
    def test_idempotent(self, artifact) -> None:
        apply_cache_settings(artifact, True, "read-write")
        once = _snapshot(artifact)
        apply_cache_settings(artifact, True, "read-write")
        assert _snapshot(artifact) == once

    def test_on_built_model(self) -> None:
        artifact = (
            MetadataSources()
            .add_class(Person)
            .add_class(Employee)
            .add_class(Document)
            .add_class(Library)
            .build()
        )

        apply_cache_settings(artifact, True, "read-only")

        assert artifact.get_entity_binding("Person").is_cached
        assert not artifact.get_entity_binding("Employee").is_cached
        assert not artifact.get_entity_binding("Document").is_cached
        assert artifact.get_entity_binding("Library").is_cached
        assert artifact.get_collection_binding("Library.shelves").cache_concurrency_strategy == "read-only"
        assert artifact.get_collection_binding("Library.scans").cache_concurrency_strategy is None
        assert artifact.get_collection_binding("Library.members").cache_concurrency_strategy == "read-only"

    def test_malformed_artifact_propagates(self) -> None:
        with pytest.raises(AttributeError):
            apply_cache_settings(object(), True, "read-write")

    def test_entity_without_properties_is_cached(self) -> None:
        artifact = DomainModelArtifact(entity_bindings=[EntityBinding(entity_name="E", class_name="m.E")])
        apply_cache_settings(artifact, True, "transactional")
        assert artifact.entity_bindings[0].cache_concurrency_strategy == "transactional"


# =============================================================================
# Tests: LOB Type Names
# =============================================================================
class TestLobTypeNames:
    def test_closed_set_of_nine(self) -> None:
        assert LOB_TYPE_NAMES == {
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

    @pytest.mark.parametrize("name", ["BLOB", "Clob", "binary", "blob ", "java.sql.blob", None])
    def test_not_lob(self, name) -> None:
        assert not is_lob(name)

    @pytest.mark.parametrize("name", sorted(LOB_TYPE_NAMES))
    def test_each_member_is_lob(self, name) -> None:
        collection = CollectionBinding(role="E.items", element=SimpleValue(type_name=name))
        artifact = DomainModelArtifact(collection_bindings=[collection])
        apply_cache_settings(artifact, True, "read-write")
        assert collection.cache_concurrency_strategy is None
