"""Integration tests for ChromaStore against a real on-disk ChromaDB."""

import json

import pytest

from docsearch.models.enums import Metric
from docsearch.vectorstore.chroma_store import ChromaStore


@pytest.fixture
def store(tmp_path):
    return ChromaStore(path=str(tmp_path / "chroma"))


def _payload(text):
    return json.dumps({"text": text})


class TestCollections:
    def test_create_is_idempotent(self, store):
        store.create_collection("laravel", 4)
        store.create_collection("laravel", 4)
        assert store.collection_names().count("laravel") == 1

    def test_dimension_mismatch_rejected(self, store):
        store.create_collection("laravel", 4)
        with pytest.raises(ValueError, match="dimension"):
            store.create_collection("laravel", 8)

    def test_non_positive_dimension_rejected(self, store):
        with pytest.raises(ValueError):
            store.create_collection("laravel", 0)

    def test_drop_removes_collection(self, store):
        store.create_collection("laravel", 4)
        store.drop_collection("laravel")
        assert not store.has_collection("laravel")

    def test_drop_missing_is_noop(self, store):
        store.drop_collection("missing")

    def test_collections_are_isolated(self, store):
        store.create_collection("laravel", 4)
        store.create_collection("livewire", 4)
        store.commit_batch("laravel", [[1.0, 0.0, 0.0, 0.0]], [(1, _payload("a"))])
        assert store.count("laravel") == 1
        assert store.count("livewire") == 0

    def test_persists_across_instances(self, tmp_path):
        path = str(tmp_path / "chroma")
        first = ChromaStore(path=path)
        first.create_collection("laravel", 4, Metric.EUCLIDEAN)
        first.commit_batch("laravel", [[1.0, 0.0, 0.0, 0.0]], [(1, _payload("kept"))])

        second = ChromaStore(path=path)
        assert second.count("laravel") == 1


class TestCommitAndSearch:
    @pytest.fixture
    def populated(self, store):
        store.create_collection("laravel", 4)
        store.commit_batch(
            "laravel",
            [
                [1.0, 0.0, 0.0, 0.0],
                [0.0, 1.0, 0.0, 0.0],
                [0.7, 0.7, 0.0, 0.0],
            ],
            [(1, _payload("routing")), (2, _payload("eloquent")), (3, _payload("both"))],
        )
        return store

    def test_nearest_first(self, populated):
        results = populated.similarity_search("laravel", [1.0, 0.0, 0.0, 0.0], 3)
        assert [gid for gid, _ in results] == [1, 3, 2]
        assert json.loads(results[0][1]) == {"text": "routing"}

    def test_k_larger_than_collection(self, populated):
        assert len(populated.similarity_search("laravel", [0.0, 1.0, 0.0, 0.0], 50)) == 3

    def test_empty_collection_returns_nothing(self, store):
        store.create_collection("empty", 4)
        assert store.similarity_search("empty", [1.0, 0.0, 0.0, 0.0], 5) == []

    def test_recommit_same_ids_does_not_duplicate(self, populated):
        populated.commit_batch("laravel", [[0.0, 0.0, 1.0, 0.0]], [(1, _payload("routing v2"))])
        assert populated.count("laravel") == 3
        results = populated.similarity_search("laravel", [0.0, 0.0, 1.0, 0.0], 1)
        assert results[0] == (1, _payload("routing v2"))

    def test_length_mismatch_rejected(self, populated):
        with pytest.raises(ValueError):
            populated.commit_batch("laravel", [[1.0, 0.0, 0.0, 0.0]], [])
        assert populated.count("laravel") == 3

    def test_wrong_vector_dimension_rejected(self, populated):
        with pytest.raises(ValueError, match="dimension"):
            populated.commit_batch("laravel", [[1.0, 0.0]], [(4, _payload("short"))])
        assert populated.count("laravel") == 3

    def test_empty_batch_writes_nothing(self, populated):
        assert populated.commit_batch("laravel", [], []) == 0
