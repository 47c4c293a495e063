"""Error payloads for the HTTP surface."""

import logging
from typing import Any

from pydantic import BaseModel

from resume_rag.errors import InternalError, RateLimitedError, ResumeRagError
from resume_rag.models.enums import ErrorCode

logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "An unexpected error occurred"


class ErrorResponse(BaseModel):
    """Error response model."""

    code: ErrorCode
    message: str
    details: Any | None = None
    remaining: int | None = None


def to_error_response(exc: Exception, debug: bool = False) -> tuple[int, ErrorResponse]:
    """Map any exception to (HTTP status, payload).

    Outside debug mode internal faults are reported with a generic message
    and without details; the full error only goes to the log.
    """
    if not isinstance(exc, ResumeRagError):
        logger.exception("Unhandled error", exc_info=exc)
        exc = InternalError(str(exc) or exc.__class__.__name__)

    response = ErrorResponse(code=exc.code, message=exc.message, details=exc.details)
    if isinstance(exc, RateLimitedError):
        response.remaining = exc.remaining

    if exc.code == ErrorCode.INTERNAL_ERROR and not debug:
        logger.error("Internal error: %s", exc)
        response.message = GENERIC_ERROR_MESSAGE
        response.details = None

    return exc.status_code, response
