"""Query orchestrator: drives one request from RECEIVED to RESPONDED.

The preparation stages run as a LangGraph workflow (see graph.py); this
module adds generation, the request deadline, latency accounting and the
interaction record.
"""

import asyncio
import logging
import time
from collections.abc import AsyncIterator
from dataclasses import dataclass
from typing import Any

from config.settings import Settings, get_settings
from resume_rag.access.identity import IdentityVerifier, parse_bearer
from resume_rag.access.interaction_log import InteractionLog, NullInteractionLog
from resume_rag.access.quota import QuotaStore
from resume_rag.agent.graph import build_graph
from resume_rag.agent.state import QueryState
from resume_rag.embedding.provider import EmbeddingProvider
from resume_rag.errors import InternalError, ResumeRagError, UpstreamTimeout
from resume_rag.llm.provider import CompletionStream, LLMProvider
from resume_rag.models.enums import QueryStage
from resume_rag.models.query import InteractionRecord, QueryAnswer, StreamChunk
from resume_rag.vectorstore.base import VectorStore

logger = logging.getLogger(__name__)

TIMEOUT_MESSAGE = "Request timed out"


@dataclass(frozen=True)
class PipelineConfig:
    match_threshold: float = 0.7
    match_count: int = 6
    max_context_tokens: int = 2400
    daily_query_cap: int = 10
    max_output_tokens: int = 350
    request_timeout_s: float = 30.0

    @classmethod
    def from_settings(cls, settings: Settings) -> "PipelineConfig":
        return cls(
            match_threshold=settings.resume_rag_match_threshold,
            match_count=settings.resume_rag_match_count,
            max_context_tokens=settings.resume_rag_max_context_tokens,
            daily_query_cap=settings.resume_rag_daily_query_cap,
            max_output_tokens=settings.resume_rag_max_output_tokens,
            request_timeout_s=settings.resume_rag_request_timeout_s,
        )


def _ms(seconds: float) -> float:
    return round(seconds * 1000, 1)


class QueryOrchestrator:
    """Answers profile questions for authenticated, in-quota callers.

    Stateless across requests apart from what the injected collaborators
    hold (quota counters, stored documents), so one instance serves any
    number of concurrent requests.
    """

    def __init__(
        self,
        verifier: IdentityVerifier,
        quota_store: QuotaStore,
        embedding_provider: EmbeddingProvider,
        store: VectorStore,
        llm: LLMProvider,
        interaction_log: InteractionLog | None = None,
        config: PipelineConfig | None = None,
    ):
        self._config = config or PipelineConfig()
        self._store = store
        self._embedding_provider = embedding_provider
        self._llm = llm
        self._interaction_log = interaction_log or NullInteractionLog()
        self._graph = build_graph(
            verifier,
            quota_store,
            embedding_provider,
            store,
            daily_query_cap=self._config.daily_query_cap,
            match_threshold=self._config.match_threshold,
            match_count=self._config.match_count,
            max_context_tokens=self._config.max_context_tokens,
        )

    @classmethod
    def from_settings(
        cls,
        settings: Settings | None = None,
        verifier: IdentityVerifier | None = None,
        quota_store: QuotaStore | None = None,
        interaction_log: InteractionLog | None = None,
    ) -> "QueryOrchestrator":
        """Wire the configured providers, store and access collaborators."""
        from resume_rag.access.identity import ApiKeyVerifier
        from resume_rag.access.interaction_log import JsonlInteractionLog
        from resume_rag.access.quota import InMemoryQuotaStore
        from resume_rag.embedding.factory import get_embedding_provider
        from resume_rag.llm.config import get_llm
        from resume_rag.vectorstore.factory import build_vector_store

        settings = settings or get_settings()
        return cls(
            verifier=verifier or ApiKeyVerifier(settings.resume_rag_api_keys),
            quota_store=quota_store or InMemoryQuotaStore(),
            embedding_provider=get_embedding_provider(settings),
            store=build_vector_store(settings),
            llm=LLMProvider(lambda max_tokens: get_llm(settings, max_tokens)),
            interaction_log=interaction_log or JsonlInteractionLog(settings.interaction_log_path),
            config=PipelineConfig.from_settings(settings),
        )

    @property
    def store(self) -> VectorStore:
        return self._store

    @property
    def embedding_dimension(self) -> int:
        return self._embedding_provider.dimension

    async def prepare(self, body: Any, authorization: str | None = None) -> QueryState:
        """Run the graph from RECEIVED through ASSEMBLED.

        Raises:
            ResumeRagError: the request moved to ERRORED; unknown faults are
                wrapped as InternalError.
        """
        state: QueryState = {
            "body": body,
            "token": parse_bearer(authorization),
            "stage": QueryStage.RECEIVED,
            "stages": [QueryStage.RECEIVED],
        }
        last = state
        try:
            async for values in self._graph.astream(state, stream_mode="values"):
                last = values
        except ResumeRagError as e:
            logger.warning(
                "Query %s after %s: %s", QueryStage.ERRORED.value, last["stage"].value, e
            )
            raise
        except Exception as e:
            logger.exception("Query %s after %s", QueryStage.ERRORED.value, last["stage"].value)
            raise InternalError("Unexpected error while preparing query", str(e)) from e
        return last

    async def answer(self, body: Any, authorization: str | None = None) -> QueryAnswer | CompletionStream:
        """Answer one request.

        Returns a QueryAnswer for buffered requests, or a CompletionStream of
        answer fragments when the body asks for streaming. Errors before the
        first fragment are raised; later failures and deadline expiry arrive
        as the stream's terminal error element.
        """
        started = time.perf_counter()
        deadline = started + self._config.request_timeout_s

        try:
            state = await asyncio.wait_for(
                self.prepare(body, authorization), self._config.request_timeout_s
            )
        except asyncio.TimeoutError as e:
            logger.warning("Query %s: deadline expired before generation", QueryStage.ERRORED.value)
            raise UpstreamTimeout(TIMEOUT_MESSAGE) from e

        logger.debug("Query %s", QueryStage.GENERATING.value)
        if state.get("stream"):
            return CompletionStream(self._stream_answer(state, started, deadline))
        return await self._buffered_answer(state, started, deadline)

    async def _buffered_answer(self, state: QueryState, started: float, deadline: float) -> QueryAnswer:
        llm_started = time.perf_counter()
        try:
            completion = await asyncio.wait_for(
                self._llm.complete_once(state["prompt"], self._config.max_output_tokens),
                max(deadline - llm_started, 0),
            )
        except asyncio.TimeoutError as e:
            logger.warning("Query %s during generation: deadline expired", QueryStage.ERRORED.value)
            raise UpstreamTimeout(TIMEOUT_MESSAGE) from e
        except ResumeRagError as e:
            logger.warning("Query %s during generation: %s", QueryStage.ERRORED.value, e)
            raise

        finished = time.perf_counter()
        result = QueryAnswer(
            answer=completion.text,
            retrieve_ms=round(state.get("retrieve_ms", 0.0), 1),
            llm_ms=_ms(finished - llm_started),
            total_ms=_ms(finished - started),
        )
        self._log_responded(result)
        await self._record(state, completion.text)
        return result

    async def _stream_answer(
        self, state: QueryState, started: float, deadline: float
    ) -> AsyncIterator[StreamChunk]:
        upstream = self._llm.complete_stream(state["prompt"], self._config.max_output_tokens)
        llm_started = time.perf_counter()
        parts: list[str] = []
        try:
            while True:
                try:
                    chunk = await asyncio.wait_for(
                        upstream.__anext__(), max(deadline - time.perf_counter(), 0)
                    )
                except StopAsyncIteration:
                    return
                except asyncio.TimeoutError:
                    logger.warning("Query %s during streaming: deadline expired", QueryStage.ERRORED.value)
                    yield StreamChunk(text="", done=True, error=TIMEOUT_MESSAGE)
                    return

                if chunk.error:
                    logger.warning("Query %s during streaming: %s", QueryStage.ERRORED.value, chunk.error)
                    yield chunk
                    return
                if chunk.done:
                    finished = time.perf_counter()
                    answer = "".join(parts)
                    self._log_responded(
                        QueryAnswer(
                            answer=answer,
                            retrieve_ms=round(state.get("retrieve_ms", 0.0), 1),
                            llm_ms=_ms(finished - llm_started),
                            total_ms=_ms(finished - started),
                        )
                    )
                    await self._record(state, answer)
                    yield chunk
                    return

                parts.append(chunk.text)
                yield chunk
        finally:
            await upstream.aclose()

    def _log_responded(self, result: QueryAnswer) -> None:
        logger.info(
            "Query %s: retrieve=%.1fms llm=%.1fms total=%.1fms",
            QueryStage.RESPONDED.value,
            result.retrieve_ms,
            result.llm_ms,
            result.total_ms,
        )

    async def _record(self, state: QueryState, answer: str) -> None:
        record = InteractionRecord(
            question=state["query"],
            answer=answer,
            identity=state["identity"],
        )
        try:
            await self._interaction_log.append(record)
        except Exception as e:
            logger.warning("Failed to persist interaction: %s", e)
