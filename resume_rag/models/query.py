"""Query, answer and completion data models."""

from dataclasses import dataclass, field
from datetime import datetime, timezone

from pydantic import BaseModel, Field, field_validator

from resume_rag.retrieval.context import sanitize_query

MAX_QUERY_LENGTH = 512


class QueryRequest(BaseModel):
    """Body of a query request."""

    query: str = Field(min_length=1, max_length=MAX_QUERY_LENGTH)
    stream: bool = False

    @field_validator("query")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Query cannot be blank")
        if not sanitize_query(value):
            raise ValueError("Query cannot be empty after sanitization")
        return value


@dataclass
class QueryAnswer:
    """A buffered answer with its latency breakdown."""

    answer: str
    retrieve_ms: float
    llm_ms: float
    total_ms: float

    def to_dict(self) -> dict:
        return {
            "answer": self.answer,
            "retrieve_ms": self.retrieve_ms,
            "llm_ms": self.llm_ms,
            "total_ms": self.total_ms,
        }


@dataclass(frozen=True)
class Usage:
    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0


@dataclass(frozen=True)
class Completion:
    text: str
    usage: Usage = field(default_factory=Usage)


@dataclass(frozen=True)
class StreamChunk:
    """One element of a streamed completion.

    The terminal element has done=True and empty text. A failure after the
    stream started is reported as a terminal element carrying ``error``.
    """

    text: str
    done: bool = False
    error: str | None = None


@dataclass
class InteractionRecord:
    question: str
    answer: str
    identity: str
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> dict:
        return {
            "question": self.question,
            "answer": self.answer,
            "identity": self.identity,
            "timestamp": self.timestamp.isoformat(),
        }
