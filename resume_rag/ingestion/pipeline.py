"""Ingestion pipeline orchestrator.

Wires together: loader → chunker → embedding → vector store.
"""

import logging
from pathlib import Path

from resume_rag.embedding.provider import EmbeddingProvider
from resume_rag.errors import DimensionMismatchError, EmbeddingError, ResumeRagError, StorageError
from resume_rag.ingestion.chunker import chunk_profile, hash_content
from resume_rag.ingestion.loader import load_profile
from resume_rag.models.chunk import Chunk, Document
from resume_rag.vectorstore.base import VectorStore

logger = logging.getLogger(__name__)


def _chunk_metadata(chunk: Chunk, index: int) -> dict:
    return {
        "section": chunk.section.value,
        "title": chunk.title,
        "tags": list(chunk.tags),
        "originalIndex": index,
    }


def run_ingestion_pipeline(
    profile_path: str | Path | None,
    store: VectorStore,
    embedding_provider: EmbeddingProvider,
) -> dict:
    """Run the full ingestion pipeline for one profile document.

    Steps:
    1. Load and validate the profile JSON
    2. Render one chunk per populated section
    3. Embed each chunk (failures skip that chunk only)
    4. Upsert the embedded documents in one call

    Raises:
        ValidationError: if the profile is missing, unreadable or invalid.
        StorageError: if the upsert fails.

    Returns a summary dict with counts.
    """
    profile = load_profile(profile_path)
    chunks = chunk_profile(profile)
    logger.info("Created %d chunks for %s", len(chunks), profile.name)

    documents: list[Document] = []
    errors = 0
    for index, chunk in enumerate(chunks):
        try:
            embedding = embedding_provider.embed_text(chunk.content)
        except (EmbeddingError, DimensionMismatchError) as e:
            # Only this chunk is dropped; the batch continues
            logger.error("Skipping %s chunk: %s", chunk.section.value, e)
            errors += 1
            continue

        documents.append(
            Document(
                id=hash_content(chunk.content),
                content=chunk.content,
                embedding=embedding,
                metadata=_chunk_metadata(chunk, index),
            )
        )

    if documents:
        try:
            store.upsert(documents)
        except ResumeRagError:
            raise
        except Exception as e:
            raise StorageError("Failed to store documents", str(e)) from e
        logger.info("Stored %d documents", len(documents))
    else:
        logger.warning("No documents to store")

    return {
        "chunks_created": len(chunks),
        "documents_stored": len(documents),
        "embedding_dimension": embedding_provider.dimension,
        "sections": [doc.metadata["section"] for doc in documents],
        "errors": errors,
        "total_in_store": store.count,
    }
