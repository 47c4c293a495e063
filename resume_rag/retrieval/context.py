"""Context assembly: token budgeting, prompt rendering and input sanitization."""

import math
import re

from resume_rag.models.chunk import SearchResult

FALLBACK_ANSWER = "I don't know based on the current data."

SYSTEM_PROMPT = (
    "Answer succinctly about the person described in the Context, using ONLY "
    "the provided Context from their résumé.\n"
    f'If the information isn\'t present, reply exactly: "{FALLBACK_ANSWER}"\n'
    "Be concise; prefer short paragraphs or 3-6 bullets. "
    "No citations, footnotes, or URLs."
)

DEFAULT_MAX_CONTEXT_TOKENS = 2400

_ANGLE_BRACKETS = re.compile(r"[<>]")
_JAVASCRIPT_SCHEME = re.compile(r"javascript:", re.IGNORECASE)
_EVENT_HANDLER = re.compile(r"on\w+=", re.IGNORECASE)


def estimate_tokens(text: str) -> int:
    """Crude token estimate: ceil(UTF-8 byte length / 4)."""
    return math.ceil(len(text.encode("utf-8")) / 4)


def truncate_context(
    results: list[SearchResult],
    max_tokens: int = DEFAULT_MAX_CONTEXT_TOKENS,
) -> list[SearchResult]:
    """Keep the longest prefix of results that fits within max_tokens.

    Stops at the first result that would overflow the budget; later, smaller
    results are not considered.
    """
    total = 0
    kept = []
    for result in results:
        tokens = estimate_tokens(result.content)
        if total + tokens > max_tokens:
            break
        kept.append(result)
        total += tokens
    return kept


def assemble_prompt(query: str, chunks: list[SearchResult]) -> str:
    """Render the instruction, the tagged context chunks and the user query."""
    context = "\n".join(
        f"<S{i}>{chunk.content}</S{i}>" for i, chunk in enumerate(chunks, start=1)
    )
    return f"{SYSTEM_PROMPT}\n\nContext:\n{context}\n\nUser: {query}"


def sanitize_query(text: str) -> str:
    """Strip angle brackets, javascript: schemes and inline on*= handlers.

    Input normalization only; output encoding is the renderer's job.
    """
    text = _ANGLE_BRACKETS.sub("", text)
    text = _JAVASCRIPT_SCHEME.sub("", text)
    text = _EVENT_HANDLER.sub("", text)
    return text.strip()
