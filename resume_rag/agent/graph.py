"""LangGraph workflow taking a query request from RECEIVED to ASSEMBLED."""

from functools import partial

from langgraph.graph import END, StateGraph

from resume_rag.access.identity import IdentityVerifier
from resume_rag.access.quota import QuotaStore
from resume_rag.agent.nodes import (
    assemble_context,
    authenticate,
    check_quota,
    embed_query,
    search_profile,
    validate_request,
)
from resume_rag.agent.state import QueryState
from resume_rag.embedding.provider import EmbeddingProvider
from resume_rag.vectorstore.base import VectorStore


def build_graph(
    verifier: IdentityVerifier,
    quota_store: QuotaStore,
    embedding_provider: EmbeddingProvider,
    store: VectorStore,
    *,
    daily_query_cap: int,
    match_threshold: float,
    match_count: int,
    max_context_tokens: int,
):
    """Build the query-preparation graph.

    The graph is strictly linear: no transition skips a stage, and a node
    that raises stops the run.

    Returns:
        A compiled LangGraph StateGraph.
    """
    graph = StateGraph(QueryState)

    graph.add_node("validate_request", validate_request)
    graph.add_node("authenticate", partial(authenticate, verifier=verifier))
    graph.add_node("check_quota", partial(check_quota, quota_store=quota_store, cap=daily_query_cap))
    graph.add_node("embed_query", partial(embed_query, embedding_provider=embedding_provider))
    graph.add_node(
        "search_profile",
        partial(search_profile, vector_store=store, threshold=match_threshold, k=match_count),
    )
    graph.add_node("assemble_context", partial(assemble_context, max_context_tokens=max_context_tokens))

    graph.set_entry_point("validate_request")

    graph.add_edge("validate_request", "authenticate")
    graph.add_edge("authenticate", "check_quota")
    graph.add_edge("check_quota", "embed_query")
    graph.add_edge("embed_query", "search_profile")
    graph.add_edge("search_profile", "assemble_context")
    graph.add_edge("assemble_context", END)

    return graph.compile()
