"""Simple in-memory rate limiting for the credential endpoints."""

from __future__ import annotations

import threading
import time
from collections import deque
from dataclasses import dataclass
from typing import Deque, Dict, Optional

from app.config import settings
from app.core.exceptions import RateLimitExceededError


@dataclass
class _Bucket:
    timestamps: Deque[float]
    window_seconds: int


class InMemoryRateLimiter:
    """Sliding-window rate limiter suitable for single-node deployments."""

    # Keys embed client-supplied emails; past this size every idle key is dropped
    SWEEP_THRESHOLD = 10_000

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._buckets: Dict[str, _Bucket] = {}

    def _prune(self, key: str, now: float) -> Optional[_Bucket]:
        """Drop expired timestamps; an emptied bucket is removed."""
        bucket = self._buckets.get(key)
        if bucket is None:
            return None
        cutoff = now - bucket.window_seconds
        while bucket.timestamps and bucket.timestamps[0] < cutoff:
            bucket.timestamps.popleft()
        if not bucket.timestamps:
            del self._buckets[key]
            return None
        return bucket

    def _sweep(self, now: float) -> None:
        for key in list(self._buckets):
            self._prune(key, now)

    def allow(self, key: str, limit: int, window_seconds: int) -> bool:
        now = time.time()
        with self._lock:
            if len(self._buckets) >= self.SWEEP_THRESHOLD:
                self._sweep(now)
            bucket = self._prune(key, now)
            used = len(bucket.timestamps) if bucket else 0
            if used >= limit:
                return False
            if bucket is None:
                bucket = self._buckets[key] = _Bucket(timestamps=deque(), window_seconds=window_seconds)
            bucket.timestamps.append(now)
            return True

    def remaining(self, key: str, limit: int) -> int:
        with self._lock:
            bucket = self._prune(key, time.time())
            used = len(bucket.timestamps) if bucket else 0
            return max(0, limit - used)

    def tracked_keys(self) -> int:
        with self._lock:
            return len(self._buckets)

    def reset(self) -> None:
        with self._lock:
            self._buckets.clear()


rate_limiter = InMemoryRateLimiter()


def enforce_login_limit(client_ip: str, email: str) -> None:
    """Throttle password guessing per client and account."""
    account = (email or "").strip().lower()
    if not rate_limiter.allow(f"login:min:{client_ip}:{account}", settings.LOGIN_RATE_LIMIT_PER_MINUTE, 60):
        raise RateLimitExceededError("Too many login attempts. Please wait a minute.")
    if not rate_limiter.allow(f"login:hour:{client_ip}:{account}", settings.LOGIN_RATE_LIMIT_PER_HOUR, 3600):
        raise RateLimitExceededError("Too many login attempts. Please try again later.")


def enforce_refresh_limit(client_ip: str) -> None:
    if not rate_limiter.allow(f"refresh:min:{client_ip}", settings.RATE_LIMIT_PER_MINUTE, 60):
        raise RateLimitExceededError("Too many refresh attempts. Slow down.")
    if not rate_limiter.allow(f"refresh:hour:{client_ip}", settings.RATE_LIMIT_PER_HOUR, 3600):
        raise RateLimitExceededError("Too many refresh attempts. Try later.")
