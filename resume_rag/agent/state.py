"""Query state definition for the LangGraph workflow."""

import operator
from typing import Annotated, Any, TypedDict

from resume_rag.models.chunk import SearchResult
from resume_rag.models.enums import QueryStage


class QueryState(TypedDict, total=False):
    """State object passed through the query-preparation graph."""
    body: Any  # raw request body, validated by the first node
    token: str | None
    stage: QueryStage
    stages: Annotated[list[QueryStage], operator.add]  # every completed stage, in order
    query: str
    stream: bool
    identity: str
    quota_count: int
    query_embedding: Any  # np.ndarray, float32
    retrieve_started: float
    results: list[SearchResult]
    context: list[SearchResult]
    prompt: str
    retrieve_ms: float
