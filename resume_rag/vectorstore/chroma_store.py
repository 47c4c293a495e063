"""ChromaDB vector store for profile documents."""

import json
import logging

import chromadb
import numpy as np
from chromadb.config import Settings as ChromaSettings

from resume_rag.errors import DimensionMismatchError, StorageError
from resume_rag.models.chunk import Document, SearchResult
from resume_rag.vectorstore.base import VectorStore

logger = logging.getLogger(__name__)

COLLECTION_NAME = "profile_documents"

# Chroma metadata values must be scalars; lists and dicts are stored as JSON
# strings and the encoded keys are recorded under this key.
_JSON_KEYS = "_json_keys"
_DIMENSION_KEY = "embedding_dimension"


def _encode_metadata(metadata: dict) -> dict:
    encoded = {}
    json_keys = []
    for key, value in metadata.items():
        if isinstance(value, (list, tuple, dict)) or value is None:
            encoded[key] = json.dumps(value)
            json_keys.append(key)
        else:
            encoded[key] = value
    encoded[_JSON_KEYS] = ",".join(json_keys)
    return encoded


def _decode_metadata(metadata: dict | None) -> dict:
    if not metadata:
        return {}
    json_keys = [k for k in (metadata.get(_JSON_KEYS) or "").split(",") if k]
    decoded = {}
    for key, value in metadata.items():
        if key == _JSON_KEYS:
            continue
        decoded[key] = json.loads(value) if key in json_keys else value
    return decoded


class ChromaVectorStore(VectorStore):
    """Persistent vector store backed by a Chroma collection with cosine distance.

    Chroma reports cosine distance (1 - cosine similarity); results are
    converted back to similarity before thresholding. Tie order is whatever
    the HNSW index returns.
    """

    def __init__(
        self,
        path: str = "./data/chroma",
        dimension: int | None = None,
        collection_name: str = COLLECTION_NAME,
    ):
        super().__init__(dimension)
        try:
            if path == ":memory:":
                self._client = chromadb.Client(ChromaSettings(anonymized_telemetry=False))
            else:
                self._client = chromadb.PersistentClient(
                    path=path,
                    settings=ChromaSettings(anonymized_telemetry=False),
                )
            self._collection = self._open_collection(collection_name, dimension)
        except Exception as e:
            raise StorageError(f"Failed to open Chroma collection '{collection_name}': {e}") from e

        stored = (self._collection.metadata or {}).get(_DIMENSION_KEY)
        if stored is not None:
            if dimension is not None and stored != dimension:
                raise DimensionMismatchError(dimension, stored)
            self._dimension = stored
        logger.info("Opened Chroma collection '%s' at %s", collection_name, path)

    def _open_collection(self, name: str, dimension: int | None):
        # get_or_create may rewrite metadata of an existing collection, which
        # would hide a dimension mismatch; only new collections get metadata.
        existing = {getattr(c, "name", c) for c in self._client.list_collections()}
        if name in existing:
            return self._client.get_collection(name=name)

        metadata = {"hnsw:space": "cosine"}
        if dimension is not None:
            metadata[_DIMENSION_KEY] = dimension
        return self._client.create_collection(name=name, metadata=metadata)

    def _require_open(self):
        if self._collection is None:
            raise StorageError("Vector store is closed")
        return self._collection

    def upsert(self, documents: list[Document]) -> None:
        """Write all documents in a single Chroma call.

        Dimensions are checked for the whole batch before anything is
        written; a failed write raises StorageError for the whole batch.
        """
        if not documents:
            return
        collection = self._require_open()
        dimension = self._batch_dimension(documents)

        try:
            collection.upsert(
                ids=[doc.id for doc in documents],
                embeddings=[doc.embedding.tolist() for doc in documents],
                documents=[doc.content for doc in documents],
                metadatas=[_encode_metadata(doc.metadata) for doc in documents],
            )
        except Exception as e:
            raise StorageError(f"Failed to upsert {len(documents)} documents: {e}") from e
        self._dimension = dimension

    def similarity_search(
        self,
        query_embedding: np.ndarray,
        threshold: float,
        k: int,
    ) -> list[SearchResult]:
        collection = self._require_open()
        query = np.asarray(query_embedding, dtype=np.float32)
        if self._dimension is not None:
            self._check_dimension(query)

        try:
            available = collection.count()
            if available == 0 or k <= 0:
                return []
            results = collection.query(
                query_embeddings=[query.tolist()],
                n_results=min(k, available),
                include=["documents", "metadatas", "distances"],
            )
        except Exception as e:
            raise StorageError(f"Failed to search documents: {e}") from e

        output = []
        if results["ids"] and results["ids"][0]:
            for i in range(len(results["ids"][0])):
                similarity = 1.0 - float(results["distances"][0][i])
                if similarity < threshold:
                    continue
                output.append(
                    SearchResult(
                        content=results["documents"][0][i] if results["documents"] else "",
                        metadata=_decode_metadata(results["metadatas"][0][i] if results["metadatas"] else None),
                        similarity=similarity,
                    )
                )
        output.sort(key=lambda r: r.similarity, reverse=True)
        return output[:k]

    @property
    def count(self) -> int:
        try:
            return self._require_open().count()
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to count documents: {e}") from e

    def close(self) -> None:
        if getattr(self, "_collection", None) is None:
            return
        self._collection = None
        self._client = None
        logger.debug("Closed Chroma vector store")
