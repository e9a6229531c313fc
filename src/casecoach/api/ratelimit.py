"""
Fixed-window rate limiting per client.

A client's window opens on its first request and lasts `window` seconds;
requests beyond `max_requests` inside it are refused until it expires.
Counters live in memory, so limits apply per process.
"""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Dict, Tuple

logger = logging.getLogger(__name__)


@dataclass
class RateLimitResult:
    allowed: bool
    limit: int
    remaining: int
    reset_at: float  # epoch seconds

    def headers(self) -> Dict[str, str]:
        reset = datetime.fromtimestamp(self.reset_at, tz=timezone.utc)
        return {
            "X-RateLimit-Limit": str(self.limit),
            "X-RateLimit-Remaining": str(self.remaining),
            "X-RateLimit-Reset": reset.isoformat(),
        }


class RateLimiter:
    """
    Counts hits per client key.

    Usage:
        limiter = RateLimiter("messages", max_requests=30, window=60)
        result = limiter.hit("alice")
        if not result.allowed:
            ...  # answer 429 with result.headers()
    """

    def __init__(
        self,
        name: str,
        max_requests: int,
        window: float,
        clock: Callable[[], float] = time.time,
    ):
        if max_requests < 1 or window <= 0:
            raise ValueError(f"Invalid rate limit for {name}: {max_requests} per {window}s")
        self.name = name
        self.max_requests = max_requests
        self.window = window
        self._clock = clock
        self._windows: Dict[str, Tuple[int, float]] = {}  # key -> (count, reset_at)
        self._lock = threading.Lock()

    def hit(self, key: str) -> RateLimitResult:
        now = self._clock()
        with self._lock:
            count, reset_at = self._windows.get(key, (0, 0.0))
            if now > reset_at:
                self._prune(now)
                count, reset_at = 0, now + self.window
            if count >= self.max_requests:
                logger.warning(
                    "Rate limit %s exceeded for %s (%d per %.0fs)",
                    self.name, key, self.max_requests, self.window,
                )
                return RateLimitResult(False, self.max_requests, 0, reset_at)
            count += 1
            self._windows[key] = (count, reset_at)
        return RateLimitResult(True, self.max_requests, self.max_requests - count, reset_at)

    def reset(self) -> None:
        with self._lock:
            self._windows.clear()

    def _prune(self, now: float) -> None:
        expired = [k for k, (_, reset_at) in self._windows.items() if now > reset_at]
        for k in expired:
            del self._windows[k]
