"""Bearer credential verification."""

import hashlib
import logging
from typing import Protocol

from resume_rag.errors import AuthError

logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer "


class IdentityVerifier(Protocol):
    async def verify(self, token: str | None) -> str:
        """Return the caller identity for token or raise AuthError."""
        ...


def hash_api_key(raw_key: str) -> str:
    """Derive deterministic hash for API key secrets."""
    return hashlib.sha256(raw_key.encode("utf-8")).hexdigest()


def parse_bearer(authorization: str | None) -> str | None:
    """Extract the token from an ``Authorization: Bearer <token>`` header."""
    if not authorization or not authorization.startswith(BEARER_PREFIX):
        return None
    token = authorization[len(BEARER_PREFIX):].strip()
    return token or None


class ApiKeyVerifier:
    """Verifies bearer tokens against a table of SHA-256 key hashes.

    Args:
        key_hashes: mapping of sha256(api key) to the caller identity.
    """

    def __init__(self, key_hashes: dict[str, str]):
        self._key_hashes = dict(key_hashes)

    async def verify(self, token: str | None) -> str:
        if not token:
            raise AuthError("Missing or invalid Authorization header")
        identity = self._key_hashes.get(hash_api_key(token))
        if identity is None:
            logger.info("Rejected unknown API key")
            raise AuthError("Invalid or expired token")
        return identity
