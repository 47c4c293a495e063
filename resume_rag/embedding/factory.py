"""Build the configured embedding provider."""

from config.settings import Settings, get_settings
from resume_rag.embedding.provider import EmbeddingProvider


def get_embedding_provider(settings: Settings | None = None) -> EmbeddingProvider:
    """Create the embedding provider selected by RESUME_RAG_EMBEDDING_PROVIDER."""
    settings = settings or get_settings()
    provider = settings.resume_rag_embedding_provider.lower()

    if provider == "google":
        from resume_rag.embedding.google import GoogleEmbeddingProvider

        return GoogleEmbeddingProvider(
            model_name=settings.resume_rag_embedding_model,
            dimension=settings.resume_rag_embedding_dimension,
            api_key=settings.google_api_key,
        )
    elif provider == "local":
        from resume_rag.embedding.sentence_transformer import SentenceTransformerEmbeddingProvider

        return SentenceTransformerEmbeddingProvider(
            model_name=settings.resume_rag_local_embedding_model,
            dimension=settings.resume_rag_embedding_dimension,
        )
    else:
        raise ValueError(
            f"Unsupported embedding provider: {provider}. "
            "Supported: 'google', 'local'"
        )
