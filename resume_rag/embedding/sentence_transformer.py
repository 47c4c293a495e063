"""Local sentence-transformers embedding provider."""

import logging
import os

from sentence_transformers import SentenceTransformer

from resume_rag.embedding.provider import EmbeddingProvider
from resume_rag.errors import DimensionMismatchError

logger = logging.getLogger(__name__)


class SentenceTransformerEmbeddingProvider(EmbeddingProvider):
    """Embedding provider running a sentence-transformers model in-process.

    Default model: all-mpnet-base-v2 (768 dimensions), matching the
    dimension of the hosted Gemini model so either can serve one store.
    """

    def __init__(self, model_name: str = "all-mpnet-base-v2", dimension: int = 768):
        super().__init__(dimension)
        os.environ.setdefault("TRANSFORMERS_VERBOSITY", "error")
        try:
            self._model = SentenceTransformer(model_name, local_files_only=True)
        except OSError:
            logger.info("Model %s not cached locally, downloading", model_name)
            self._model = SentenceTransformer(model_name)

        model_dimension = self._model.get_sentence_embedding_dimension()
        if model_dimension != dimension:
            raise DimensionMismatchError(dimension, model_dimension)

    def _embed(self, text: str) -> list[float]:
        return self._model.encode(text, show_progress_bar=False).tolist()
