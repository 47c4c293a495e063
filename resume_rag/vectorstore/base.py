"""Vector store interface and similarity metric."""

from abc import ABC, abstractmethod

import numpy as np

from resume_rag.errors import DimensionMismatchError
from resume_rag.models.chunk import Document, SearchResult


def cosine_similarity(a: np.ndarray, b: np.ndarray) -> float:
    """dot(a, b) / (|a| * |b|), defined as 0.0 when either norm is zero."""
    if a.shape != b.shape:
        raise DimensionMismatchError(int(a.shape[0]), int(b.shape[0]))
    a64 = a.astype(np.float64)
    b64 = b.astype(np.float64)
    norm_a = np.linalg.norm(a64)
    norm_b = np.linalg.norm(b64)
    if norm_a == 0.0 or norm_b == 0.0:
        return 0.0
    return float(np.dot(a64, b64) / (norm_a * norm_b))


class VectorStore(ABC):
    """Persists documents and answers nearest-neighbor queries.

    A store holds vectors of a single dimension. When constructed without
    one, the first upserted document fixes it.
    """

    def __init__(self, dimension: int | None = None):
        self._dimension = dimension

    @property
    def dimension(self) -> int | None:
        return self._dimension

    def _check_dimension(self, vector: np.ndarray) -> None:
        actual = int(vector.shape[0])
        if self._dimension is not None and actual != self._dimension:
            raise DimensionMismatchError(self._dimension, actual)

    def _batch_dimension(self, documents: list[Document]) -> int | None:
        """Dimension shared by every document, checked without touching the store."""
        expected = self._dimension
        for doc in documents:
            actual = int(doc.embedding.shape[0])
            if expected is None:
                expected = actual
            elif actual != expected:
                raise DimensionMismatchError(expected, actual)
        return expected

    @abstractmethod
    def upsert(self, documents: list[Document]) -> None:
        """Write documents keyed by id; an existing id is fully replaced."""
        ...

    @abstractmethod
    def similarity_search(
        self,
        query_embedding: np.ndarray,
        threshold: float,
        k: int,
    ) -> list[SearchResult]:
        """Return at most k results with similarity >= threshold, best first."""
        ...

    @property
    @abstractmethod
    def count(self) -> int:
        """Return the number of stored documents."""
        ...

    def close(self) -> None:
        """Release held resources. Idempotent."""
