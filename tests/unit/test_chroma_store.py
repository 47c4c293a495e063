"""Unit tests for the Chroma-backed vector store (in-process ephemeral client)."""

import uuid

import numpy as np
import pytest

from resume_rag.errors import DimensionMismatchError, StorageError
from resume_rag.models.chunk import Document
from resume_rag.vectorstore.chroma_store import ChromaVectorStore


@pytest.fixture
def store():
    # The ephemeral client is shared per process; isolate by collection
    s = ChromaVectorStore(path=":memory:", dimension=3, collection_name=f"test_{uuid.uuid4().hex}")
    yield s
    s.close()


def _doc(doc_id, vector, **metadata):
    return Document(id=doc_id, content=f"content {doc_id}", embedding=np.array(vector), metadata=metadata)


class TestChromaVectorStore:
    def test_upsert_and_count(self, store):
        store.upsert([_doc("a", [1, 0, 0]), _doc("b", [0, 1, 0])])
        assert store.count == 2

    def test_upsert_is_idempotent(self, store):
        store.upsert([_doc("a", [1, 0, 0])])
        store.upsert([_doc("a", [1, 0, 0])])
        assert store.count == 1

    def test_metadata_round_trips_lists(self, store):
        store.upsert([
            _doc("a", [1, 0, 0], section="skills", title="Skills", tags=["technical", "competencies"], originalIndex=4)
        ])
        [hit] = store.similarity_search(np.array([1, 0, 0]), threshold=0.5, k=1)
        assert hit.metadata == {
            "section": "skills",
            "title": "Skills",
            "tags": ["technical", "competencies"],
            "originalIndex": 4,
        }

    def test_search_thresholds_and_sorts(self, store):
        store.upsert([
            _doc("near", [1, 1, 0]),
            _doc("exact", [1, 0, 0]),
            _doc("far", [0, 0, 1]),
        ])
        results = store.similarity_search(np.array([1, 0, 0]), threshold=0.7, k=6)
        assert [r.content for r in results] == ["content exact", "content near"]
        assert results[0].similarity == pytest.approx(1.0, abs=1e-4)

    def test_k_larger_than_collection(self, store):
        store.upsert([_doc("a", [1, 0, 0])])
        assert len(store.similarity_search(np.array([1, 0, 0]), threshold=0.0, k=10)) == 1

    def test_empty_collection(self, store):
        assert store.similarity_search(np.array([1, 0, 0]), threshold=0.0, k=5) == []

    def test_rejects_wrong_dimension(self, store):
        with pytest.raises(DimensionMismatchError):
            store.upsert([_doc("a", [1, 0])])
        assert store.count == 0

    def test_rejected_batch_leaves_dimension_unset(self):
        store = ChromaVectorStore(path=":memory:", collection_name=f"test_{uuid.uuid4().hex}")
        with pytest.raises(DimensionMismatchError):
            store.upsert([_doc("a", [1, 0]), _doc("b", [1, 0, 0])])
        assert store.dimension is None

        store.upsert([_doc("b", [1, 0, 0])])
        assert store.dimension == 3
        store.close()

    def test_reopen_with_other_dimension_fails(self, tmp_path):
        path = str(tmp_path / "chroma")
        ChromaVectorStore(path=path, dimension=3).close()
        with pytest.raises(DimensionMismatchError):
            ChromaVectorStore(path=path, dimension=768)

    def test_close_is_idempotent(self, store):
        store.close()
        store.close()
        with pytest.raises(StorageError, match="closed"):
            store.count

    def test_persistent_path(self, tmp_path):
        path = str(tmp_path / "chroma")
        first = ChromaVectorStore(path=path, dimension=3)
        first.upsert([_doc("a", [1, 0, 0])])
        first.close()

        second = ChromaVectorStore(path=path)
        assert second.count == 1
        assert second.dimension == 3
        second.close()


class TestVectorStoreFactory:
    def test_memory_backend(self):
        from config.settings import Settings
        from resume_rag.vectorstore.factory import build_vector_store
        from resume_rag.vectorstore.memory_store import MemoryVectorStore

        store = build_vector_store(Settings(resume_rag_vector_store="memory"))
        assert isinstance(store, MemoryVectorStore)
        assert store.dimension == 768

    def test_unknown_backend(self):
        from config.settings import Settings
        from resume_rag.vectorstore.factory import build_vector_store

        with pytest.raises(ValueError):
            build_vector_store(Settings(resume_rag_vector_store="pinecone"))
