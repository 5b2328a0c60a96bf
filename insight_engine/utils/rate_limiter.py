"""Sliding-window rate limiter"""

import time
from collections import deque
from typing import Deque, Dict

from insight_engine.core.config import settings
from insight_engine.utils.logger import log


class RateLimiter:
    """Per-client request counter over a sliding time window"""

    def __init__(self, max_requests: int = 100, time_window: int = 60):
        self.max_requests = max_requests
        self.time_window = time_window
        self.requests: Dict[str, Deque[float]] = {}

    def _prune(self, key: str, now: float) -> Deque[float]:
        stamps = self.requests.get(key, deque())
        while stamps and now - stamps[0] >= self.time_window:
            stamps.popleft()
        if not stamps:
            self.requests.pop(key, None)
        return stamps

    def is_allowed(self, key: str) -> bool:
        """Record a request for ``key`` unless the window is full"""
        now = time.monotonic()
        stamps = self._prune(key, now)
        if len(stamps) >= self.max_requests:
            log.warning(f"Rate limit hit: {key}")
            return False
        stamps.append(now)
        self.requests[key] = stamps
        return True

    def get_remaining(self, key: str) -> int:
        stamps = self._prune(key, time.monotonic())
        return max(0, self.max_requests - len(stamps))

    def reset(self) -> None:
        self.requests.clear()


_rate_limiter = RateLimiter(
    max_requests=settings.rate_limit_requests,
    time_window=settings.rate_limit_window_seconds
)


def get_rate_limiter() -> RateLimiter:
    """Get the process-wide rate limiter"""
    return _rate_limiter
