"""Per-identity daily query quota."""

import asyncio
import logging
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Callable, Protocol

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class QuotaDecision:
    allowed: bool
    current_count: int


class QuotaStore(Protocol):
    async def check_and_increment(self, identity: str, cap: int) -> QuotaDecision:
        """Atomically admit and count one query for identity, or refuse it."""
        ...


def _utc_today() -> date:
    return datetime.now(timezone.utc).date()


class InMemoryQuotaStore:
    """Process-local quota store keyed by (identity, UTC day).

    Atomic within one event loop only; a multi-instance deployment needs a
    shared store implementing the same protocol.
    """

    def __init__(self, today: Callable[[], date] = _utc_today):
        self._today = today
        self._counts: dict[tuple[str, date], int] = {}
        self._lock = asyncio.Lock()

    async def check_and_increment(self, identity: str, cap: int) -> QuotaDecision:
        async with self._lock:
            day = self._today()
            key = (identity, day)
            count = self._counts.get(key, 0)
            if count >= cap:
                return QuotaDecision(allowed=False, current_count=count)
            count += 1
            self._counts[key] = count
            # Drop counters from previous days
            for stale in [k for k in self._counts if k[1] != day]:
                del self._counts[stale]
            return QuotaDecision(allowed=True, current_count=count)
