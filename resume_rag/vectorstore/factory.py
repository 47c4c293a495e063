"""Build the configured vector store backend."""

from config.settings import Settings, get_settings
from resume_rag.vectorstore.base import VectorStore


def build_vector_store(settings: Settings | None = None) -> VectorStore:
    """Create the vector store selected by RESUME_RAG_VECTOR_STORE.

    Both backends are pinned to the configured embedding dimension.
    """
    settings = settings or get_settings()
    backend = settings.resume_rag_vector_store.lower()
    dimension = settings.resume_rag_embedding_dimension

    if backend == "chroma":
        from resume_rag.vectorstore.chroma_store import ChromaVectorStore

        return ChromaVectorStore(
            path=str(settings.chroma_path),
            dimension=dimension,
            collection_name=settings.resume_rag_collection,
        )
    elif backend == "memory":
        from resume_rag.vectorstore.memory_store import MemoryVectorStore

        return MemoryVectorStore(dimension=dimension)
    else:
        raise ValueError(
            f"Unsupported vector store: {backend}. "
            "Supported: 'chroma', 'memory'"
        )
