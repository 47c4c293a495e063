"""Error taxonomy for the résumé RAG pipeline.

Every failure that can reach a caller is one of these types. Each carries the
wire-level error code and HTTP status used by the query endpoint.
"""

from typing import Any

from resume_rag.models.enums import ErrorCode


class ResumeRagError(Exception):
    """Base exception for all pipeline errors."""

    code: ErrorCode = ErrorCode.INTERNAL_ERROR
    status_code: int = 500

    def __init__(self, message: str, details: Any = None) -> None:
        self.message = message
        self.details = details
        super().__init__(message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class ValidationError(ResumeRagError):
    """Bad input shape or size (request body or profile document)."""

    code = ErrorCode.BAD_REQUEST
    status_code = 400

    def __init__(self, message: str, errors: list[str] | None = None) -> None:
        self.errors = errors or []
        super().__init__(message, ", ".join(self.errors) or None)


class AuthError(ResumeRagError):
    """Missing or invalid bearer credential."""

    code = ErrorCode.UNAUTHORIZED
    status_code = 401


class ForbiddenError(ResumeRagError):
    """Request origin is not on the allow-list."""

    code = ErrorCode.FORBIDDEN
    status_code = 403


class MethodNotAllowedError(ResumeRagError):
    code = ErrorCode.METHOD_NOT_ALLOWED
    status_code = 405


class RateLimitedError(ResumeRagError):
    """Daily quota (or edge rate limit) exhausted."""

    code = ErrorCode.RATE_LIMIT
    status_code = 429

    def __init__(self, message: str, current_count: int, cap: int) -> None:
        self.current_count = current_count
        self.cap = cap
        super().__init__(message)

    @property
    def remaining(self) -> int:
        return max(0, self.cap - self.current_count)


class EmbeddingError(ResumeRagError):
    """Upstream embedding call failed or returned an unusable response."""


class DimensionMismatchError(ResumeRagError):
    """A vector does not have the dimension configured for the deployment."""

    def __init__(self, expected: int, actual: int) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(f"Expected {expected} dimensions, got {actual}")


class StorageError(ResumeRagError):
    """Vector store or quota store failure."""


class CompletionError(ResumeRagError):
    """Generative model call failed."""


class UpstreamTimeout(ResumeRagError):
    """The request did not finish within its overall deadline."""

    status_code = 504


class InternalError(ResumeRagError):
    """Catch-all for unexpected faults."""
