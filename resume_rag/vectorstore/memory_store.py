"""Brute-force in-memory vector store."""

import logging

import numpy as np

from resume_rag.models.chunk import Document, SearchResult
from resume_rag.vectorstore.base import VectorStore, cosine_similarity

logger = logging.getLogger(__name__)


class MemoryVectorStore(VectorStore):
    """Reference store that scores every document on each query.

    Documents keep their first insertion position when replaced, and ties in
    similarity are broken by that position (earlier wins).
    """

    def __init__(self, dimension: int | None = None):
        super().__init__(dimension)
        self._documents: dict[str, Document] = {}

    def upsert(self, documents: list[Document]) -> None:
        dimension = self._batch_dimension(documents)
        for doc in documents:
            self._documents[doc.id] = doc
        self._dimension = dimension
        logger.debug("Upserted %d documents (%d total)", len(documents), len(self._documents))

    def similarity_search(
        self,
        query_embedding: np.ndarray,
        threshold: float,
        k: int,
    ) -> list[SearchResult]:
        query = np.asarray(query_embedding, dtype=np.float32)
        if self._documents:
            self._check_dimension(query)
        if k <= 0:
            return []

        scored = [
            (cosine_similarity(query, doc.embedding), doc)
            for doc in self._documents.values()
        ]
        # sorted() is stable, so insertion order decides ties
        ranked = sorted(
            (item for item in scored if item[0] >= threshold),
            key=lambda item: item[0],
            reverse=True,
        )
        return [
            SearchResult(content=doc.content, metadata=dict(doc.metadata), similarity=score)
            for score, doc in ranked[:k]
        ]

    def clear(self) -> None:
        self._documents.clear()

    @property
    def count(self) -> int:
        return len(self._documents)
