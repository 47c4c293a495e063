"""Per-source fixed-window rate limiter for the query endpoint."""

import time
from typing import Callable


class FixedWindowRateLimiter:
    """Allows at most ``limit`` hits per key in each ``window_s`` window.

    A limit of 0 or less disables the limiter. Not shared across processes.
    """

    def __init__(self, limit: int, window_s: float = 60.0, clock: Callable[[], float] = time.monotonic):
        self.limit = limit
        self.window_s = window_s
        self._clock = clock
        self._windows: dict[str, tuple[float, int]] = {}

    @property
    def enabled(self) -> bool:
        return self.limit > 0

    def hit(self, key: str) -> bool:
        """Count one hit for key; False when the window is already full."""
        if not self.enabled:
            return True

        now = self._clock()
        # Drop windows that have already expired
        for stale in [k for k, (started, _) in self._windows.items() if now - started >= self.window_s]:
            del self._windows[stale]

        started, count = self._windows.get(key, (now, 0))
        if count >= self.limit:
            return False
        self._windows[key] = (started, count + 1)
        return True
