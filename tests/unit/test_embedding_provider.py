"""Unit tests for embedding providers."""

from unittest.mock import AsyncMock, MagicMock, patch

import numpy as np
import pytest

from resume_rag.embedding.provider import EmbeddingProvider
from resume_rag.errors import DimensionMismatchError, EmbeddingError


class FixedProvider(EmbeddingProvider):
    def __init__(self, values, dimension=4):
        super().__init__(dimension)
        self.values = values

    def _embed(self, text):
        if isinstance(self.values, Exception):
            raise self.values
        return self.values


class TestEmbeddingProviderContract:
    def test_returns_float32_vector(self):
        vector = FixedProvider([1, 2, 3, 4]).embed_text("hello")
        assert vector.dtype == np.float32
        assert vector.shape == (4,)

    def test_wrong_length_is_dimension_mismatch(self):
        with pytest.raises(DimensionMismatchError) as exc_info:
            FixedProvider([1.0, 2.0, 3.0]).embed_text("hello")
        assert exc_info.value.expected == 4
        assert exc_info.value.actual == 3

    def test_upstream_failure_is_wrapped(self):
        provider = FixedProvider(RuntimeError("quota exceeded"))
        with pytest.raises(EmbeddingError, match="quota exceeded"):
            provider.embed_text("hello")

    def test_missing_values_never_become_placeholder(self):
        with pytest.raises(EmbeddingError):
            FixedProvider(None).embed_text("hello")

    def test_malformed_values(self):
        with pytest.raises(EmbeddingError):
            FixedProvider([[1.0, 2.0], [3.0, 4.0]]).embed_text("hello")

    def test_batch_preserves_order(self, embedder):
        vectors = embedder.embed_batch(["Cornell", "Coinbase"])
        assert vectors[0][0] == 1.0
        assert vectors[1][1] == 1.0
        assert embedder.calls == ["Cornell", "Coinbase"]

    @pytest.mark.asyncio
    async def test_async_variant_validates(self):
        with pytest.raises(DimensionMismatchError):
            await FixedProvider([1.0]).aembed_text("hello")

    def test_dimension_must_be_positive(self):
        with pytest.raises(ValueError):
            FixedProvider([], dimension=0)


class TestGoogleEmbeddingProvider:
    @patch("resume_rag.embedding.google.GoogleGenerativeAIEmbeddings")
    def test_embed_uses_query_embedding(self, mock_cls):
        from resume_rag.embedding.google import GoogleEmbeddingProvider

        mock_cls.return_value.embed_query.return_value = [0.5] * 768
        provider = GoogleEmbeddingProvider(api_key="secret")

        vector = provider.embed_text("Where did Ilan study?")

        assert vector.shape == (768,)
        mock_cls.assert_called_once_with(
            model="models/text-embedding-004", google_api_key="secret"
        )
        mock_cls.return_value.embed_query.assert_called_once_with("Where did Ilan study?")

    @pytest.mark.asyncio
    @patch("resume_rag.embedding.google.GoogleGenerativeAIEmbeddings")
    async def test_async_embed(self, mock_cls):
        from resume_rag.embedding.google import GoogleEmbeddingProvider

        mock_cls.return_value.aembed_query = AsyncMock(return_value=[0.1] * 768)
        provider = GoogleEmbeddingProvider()

        vector = await provider.aembed_text("hi")

        assert vector.dtype == np.float32
        mock_cls.return_value.aembed_query.assert_awaited_once_with("hi")

    @patch("resume_rag.embedding.google.GoogleGenerativeAIEmbeddings")
    def test_api_error_is_embedding_error(self, mock_cls):
        from resume_rag.embedding.google import GoogleEmbeddingProvider

        mock_cls.return_value.embed_query.side_effect = Exception("403 API key invalid")
        provider = GoogleEmbeddingProvider()

        with pytest.raises(EmbeddingError, match="API key invalid"):
            provider.embed_text("hi")


class TestSentenceTransformerProvider:
    @patch("resume_rag.embedding.sentence_transformer.SentenceTransformer")
    def test_falls_back_to_download(self, mock_cls):
        from resume_rag.embedding.sentence_transformer import SentenceTransformerEmbeddingProvider

        model = MagicMock()
        model.get_sentence_embedding_dimension.return_value = 768
        model.encode.return_value = np.ones(768, dtype=np.float32)
        mock_cls.side_effect = [OSError("not cached"), model]

        provider = SentenceTransformerEmbeddingProvider()

        assert provider.embed_text("hello").shape == (768,)
        assert mock_cls.call_count == 2

    @patch("resume_rag.embedding.sentence_transformer.SentenceTransformer")
    def test_model_dimension_must_match_configuration(self, mock_cls):
        from resume_rag.embedding.sentence_transformer import SentenceTransformerEmbeddingProvider

        mock_cls.return_value.get_sentence_embedding_dimension.return_value = 384
        with pytest.raises(DimensionMismatchError):
            SentenceTransformerEmbeddingProvider(model_name="all-MiniLM-L6-v2", dimension=768)


class TestEmbeddingFactory:
    def test_unknown_provider(self):
        from config.settings import Settings
        from resume_rag.embedding.factory import get_embedding_provider

        with pytest.raises(ValueError, match="Unsupported embedding provider"):
            get_embedding_provider(Settings(resume_rag_embedding_provider="openai"))
