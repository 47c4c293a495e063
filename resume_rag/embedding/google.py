"""Gemini embedding provider via langchain-google-genai."""

import logging

from langchain_google_genai import GoogleGenerativeAIEmbeddings

from resume_rag.embedding.provider import EmbeddingProvider

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "models/text-embedding-004"


class GoogleEmbeddingProvider(EmbeddingProvider):
    """Embedding provider wrapping Google's text embedding models.

    text-embedding-004 produces 768-dimension vectors.
    """

    def __init__(self, model_name: str = DEFAULT_MODEL, dimension: int = 768, api_key: str = ""):
        super().__init__(dimension)
        kwargs = {"model": model_name}
        if api_key:
            kwargs["google_api_key"] = api_key
        self._model = GoogleGenerativeAIEmbeddings(**kwargs)
        self._model_name = model_name
        logger.info("Gemini embeddings ready: model=%s dimension=%d", model_name, dimension)

    @property
    def model_name(self) -> str:
        return self._model_name

    def _embed(self, text: str) -> list[float]:
        return self._model.embed_query(text)

    async def _aembed(self, text: str) -> list[float]:
        return await self._model.aembed_query(text)
