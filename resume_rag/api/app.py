"""FastAPI application exposing the query endpoint."""

import json
import logging
from collections.abc import AsyncIterator

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, Response
from sse_starlette.sse import EventSourceResponse

from config.settings import Settings, get_settings
from resume_rag.agent.orchestrator import QueryOrchestrator
from resume_rag.api.errors import GENERIC_ERROR_MESSAGE, to_error_response
from resume_rag.api.rate_limit import FixedWindowRateLimiter
from resume_rag.errors import (
    ForbiddenError,
    MethodNotAllowedError,
    RateLimitedError,
    ResumeRagError,
    ValidationError,
)
from resume_rag.llm.provider import CompletionStream
from resume_rag.models.query import QueryAnswer

logger = logging.getLogger(__name__)

QUERY_PATH = "/api/rag-query"
DONE_MARKER = "[DONE]"
ERROR_MARKER = "[ERROR]"


def create_app(orchestrator: QueryOrchestrator, settings: Settings | None = None) -> FastAPI:
    """Build the HTTP app around an orchestrator.

    CORS is an explicit allow-list: requests from any other origin (or with
    no Origin header) are refused before any other processing.
    """
    settings = settings or get_settings()
    allowed_origins = set(settings.cors_origins)
    debug = settings.resume_rag_debug
    limiter = FixedWindowRateLimiter(
        settings.resume_rag_edge_rate_limit, settings.resume_rag_edge_rate_window_s
    )

    app = FastAPI(
        title="Résumé RAG API",
        description="Answers natural-language questions about a single résumé.",
        version="0.1.0",
        debug=debug,
    )

    def cors_headers(origin: str | None) -> dict[str, str]:
        headers = {"Vary": "Origin"}
        if origin in allowed_origins:
            headers.update({
                "Access-Control-Allow-Origin": origin,
                "Access-Control-Allow-Methods": "POST, OPTIONS",
                "Access-Control-Allow-Headers": "Content-Type, Authorization",
                "Access-Control-Max-Age": "86400",
            })
        return headers

    def error_response(exc: Exception, origin: str | None) -> JSONResponse:
        status_code, payload = to_error_response(exc, debug)
        return JSONResponse(
            status_code=status_code,
            content=payload.model_dump(mode="json", exclude_none=True),
            headers=cors_headers(origin),
        )

    async def sse_events(stream: CompletionStream) -> AsyncIterator[dict]:
        try:
            async for chunk in stream:
                if chunk.error:
                    message = chunk.error if debug else GENERIC_ERROR_MESSAGE
                    yield {"data": f"{ERROR_MARKER} {message}"}
                elif chunk.done:
                    yield {"data": DONE_MARKER}
                else:
                    yield {"data": chunk.text}
        finally:
            # Client disconnects cancel this generator; close upstream with it
            await stream.aclose()

    @app.options(QUERY_PATH)
    async def preflight(request: Request):
        origin = request.headers.get("origin")
        if origin not in allowed_origins:
            return error_response(ForbiddenError("Origin not allowed"), origin)
        return Response(status_code=200, headers=cors_headers(origin))

    @app.post(QUERY_PATH)
    async def rag_query(request: Request):
        origin = request.headers.get("origin")
        if origin not in allowed_origins:
            return error_response(ForbiddenError("Origin not allowed"), origin)

        client = request.client.host if request.client else "unknown"
        if not limiter.hit(client):
            logger.info("Edge rate limit hit for %s", client)
            return error_response(
                RateLimitedError("Too many requests", limiter.limit, limiter.limit), origin
            )

        try:
            body = await request.json()
        except (json.JSONDecodeError, UnicodeDecodeError):
            return error_response(ValidationError("Invalid JSON in request body"), origin)

        try:
            result = await orchestrator.answer(body, request.headers.get("authorization"))
        except Exception as e:
            return error_response(e, origin)

        if isinstance(result, QueryAnswer):
            return JSONResponse(content=result.to_dict(), headers=cors_headers(origin))
        return EventSourceResponse(sse_events(result), headers=cors_headers(origin))

    @app.api_route(QUERY_PATH, methods=["GET", "PUT", "PATCH", "DELETE"])
    async def method_not_allowed(request: Request):
        return error_response(
            MethodNotAllowedError("Only POST method is allowed"), request.headers.get("origin")
        )

    @app.get("/api/health")
    async def health():
        """Liveness plus a view of the document store."""
        try:
            documents = orchestrator.store.count
        except ResumeRagError as e:
            logger.warning("Health check could not count documents: %s", e)
            return JSONResponse(
                status_code=503,
                content={"status": "degraded", "embedding_dimension": orchestrator.embedding_dimension},
            )
        return {
            "status": "ok",
            "documents": documents,
            "embedding_dimension": orchestrator.embedding_dimension,
        }

    return app
