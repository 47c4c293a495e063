"""Graph nodes for the query-preparation workflow.

Each node performs one state transition and records the stage it reached.
Failures are raised as taxonomy errors; the orchestrator turns them into
the ERRORED state.
"""

import asyncio
import logging
import time

from pydantic import ValidationError as PydanticValidationError

from resume_rag.access.identity import IdentityVerifier
from resume_rag.access.quota import QuotaStore
from resume_rag.agent.state import QueryState
from resume_rag.embedding.provider import EmbeddingProvider
from resume_rag.errors import RateLimitedError, ResumeRagError, StorageError, ValidationError
from resume_rag.models.enums import QueryStage
from resume_rag.models.query import QueryRequest
from resume_rag.retrieval.context import assemble_prompt, sanitize_query, truncate_context
from resume_rag.vectorstore.base import VectorStore

logger = logging.getLogger(__name__)


def _advance(stage: QueryStage, **updates) -> dict:
    return {"stage": stage, "stages": [stage], **updates}


async def validate_request(state: QueryState) -> dict:
    """Parse the body: non-empty query of at most 512 characters, optional stream flag."""
    try:
        request = QueryRequest.model_validate(state.get("body"))
    except PydanticValidationError as e:
        messages = [
            f"{'.'.join(str(p) for p in err['loc']) or 'body'}: {err['msg']}"
            for err in e.errors()
        ]
        raise ValidationError("Invalid request body", messages) from e
    return _advance(QueryStage.VALIDATED, query=request.query, stream=request.stream)


async def authenticate(state: QueryState, verifier: IdentityVerifier) -> dict:
    identity = await verifier.verify(state.get("token"))
    return _advance(QueryStage.AUTHENTICATED, identity=identity)


async def check_quota(state: QueryState, quota_store: QuotaStore, cap: int) -> dict:
    """Check-and-increment the caller's daily counter."""
    try:
        decision = await quota_store.check_and_increment(state["identity"], cap)
    except ResumeRagError:
        raise
    except Exception as e:
        raise StorageError("Failed to check rate limit", str(e)) from e

    if not decision.allowed:
        logger.info("Daily cap reached for %s (%d/%d)", state["identity"], decision.current_count, cap)
        raise RateLimitedError(f"Daily query limit of {cap} reached", decision.current_count, cap)
    return _advance(QueryStage.QUOTA_CHECKED, quota_count=decision.current_count)


async def embed_query(state: QueryState, embedding_provider: EmbeddingProvider) -> dict:
    """Sanitize the question and embed it."""
    query = sanitize_query(state["query"])
    if not query:
        raise ValidationError("Query cannot be empty after sanitization")

    started = time.perf_counter()
    vector = await embedding_provider.aembed_text(query)
    return _advance(
        QueryStage.EMBEDDED,
        query=query,
        query_embedding=vector,
        retrieve_started=started,
    )


async def search_profile(state: QueryState, vector_store: VectorStore, threshold: float, k: int) -> dict:
    try:
        results = await asyncio.to_thread(
            vector_store.similarity_search, state["query_embedding"], threshold, k
        )
    except ResumeRagError:
        raise
    except Exception as e:
        raise StorageError("Failed to search documents", str(e)) from e

    logger.debug("Retrieved %d documents above %.2f", len(results), threshold)
    return _advance(QueryStage.RETRIEVED, results=results)


async def assemble_context(state: QueryState, max_context_tokens: int) -> dict:
    """Truncate results to the token budget and render the prompt."""
    context = truncate_context(state.get("results", []), max_context_tokens)
    prompt = assemble_prompt(state["query"], context)
    started = state.get("retrieve_started", time.perf_counter())
    return _advance(
        QueryStage.ASSEMBLED,
        context=context,
        prompt=prompt,
        retrieve_ms=(time.perf_counter() - started) * 1000,
    )
