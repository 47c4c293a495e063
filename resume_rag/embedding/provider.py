"""Abstract embedding provider interface."""

import asyncio
from abc import ABC, abstractmethod

import numpy as np

from resume_rag.errors import DimensionMismatchError, EmbeddingError


class EmbeddingProvider(ABC):
    """Interface for text embedding generation.

    Implementations wrap a specific embedding model and only produce raw
    vectors; this base class owns the postconditions: every returned vector
    is float32 with exactly ``dimension`` components, and upstream failures
    surface as EmbeddingError rather than placeholder vectors.
    """

    def __init__(self, dimension: int):
        if dimension <= 0:
            raise ValueError("dimension must be > 0")
        self._dimension = dimension

    @property
    def dimension(self) -> int:
        """Return the configured embedding dimension (e.g., 768)."""
        return self._dimension

    @abstractmethod
    def _embed(self, text: str) -> list[float]:
        """Call the underlying model for a single text."""
        ...

    async def _aembed(self, text: str) -> list[float]:
        """Async variant of _embed. Default runs _embed in a worker thread."""
        return await asyncio.to_thread(self._embed, text)

    def embed_text(self, text: str) -> np.ndarray:
        """Embed one text.

        Raises:
            EmbeddingError: if the upstream call fails.
            DimensionMismatchError: if the vector has the wrong length.
        """
        try:
            values = self._embed(text)
        except EmbeddingError:
            raise
        except Exception as e:
            raise EmbeddingError(f"Failed to generate embedding: {e}") from e
        return self._validated(values)

    async def aembed_text(self, text: str) -> np.ndarray:
        try:
            values = await self._aembed(text)
        except EmbeddingError:
            raise
        except Exception as e:
            raise EmbeddingError(f"Failed to generate embedding: {e}") from e
        return self._validated(values)

    def embed_batch(self, texts: list[str]) -> list[np.ndarray]:
        """Embed texts one at a time, preserving order."""
        return [self.embed_text(text) for text in texts]

    def _validated(self, values) -> np.ndarray:
        if values is None:
            raise EmbeddingError("Embedding response contained no values")
        try:
            vector = np.asarray(values, dtype=np.float32)
        except (TypeError, ValueError) as e:
            raise EmbeddingError(f"Malformed embedding response: {e}") from e
        if vector.ndim != 1:
            raise EmbeddingError(f"Malformed embedding response with shape {vector.shape}")
        if vector.shape[0] != self._dimension:
            raise DimensionMismatchError(self._dimension, int(vector.shape[0]))
        return vector
