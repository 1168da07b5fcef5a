"""In-memory token bucket rate limiter.

Notes:
- Per-process only: running multiple workers multiplies the effective limit.
- Thread-safe: uses a lock around the bucket map.
- Buckets are never evicted; one exists per distinct key ever seen.
"""

from __future__ import annotations

import math
import threading
import time
from dataclasses import dataclass

from mockai.adapters.rate_limit.base import (
    ADMITTED_UNLIMITED,
    AbstractRateLimiter,
    Clock,
    RateLimitResult,
)


@dataclass
class _Bucket:
    tokens: float
    last_refill: float


class InMemoryTokenBucketRateLimiter(AbstractRateLimiter):
    """Token bucket per key with continuous refill.

    Each key starts with a full bucket of ``burst`` tokens. Tokens refill in
    proportion to elapsed time at ``refill_per_minute`` and never exceed
    ``burst``. Every admitted request consumes one token.
    """

    def __init__(
        self,
        *,
        burst: float,
        refill_per_minute: float,
        clock: Clock = time.monotonic,
    ) -> None:
        """Initialize the limiter.

        Args:
            burst: Bucket capacity.
            refill_per_minute: Tokens added per minute of elapsed time.
            clock: Time source returning seconds.

        Raises:
            ValueError: If burst or refill_per_minute are not positive.
        """
        if not burst > 0:
            raise ValueError("burst must be > 0")
        if not refill_per_minute > 0:
            raise ValueError("refill_per_minute must be > 0")

        self._burst = float(burst)
        self._refill_per_minute = float(refill_per_minute)
        self._clock = clock
        self._lock = threading.RLock()
        self._buckets: dict[str, _Bucket] = {}

    def __len__(self) -> int:
        with self._lock:
            return len(self._buckets)

    @property
    def burst(self) -> float:
        return self._burst

    @property
    def refill_per_minute(self) -> float:
        return self._refill_per_minute

    def peek(self, key: str) -> float | None:
        """Return the stored token count for ``key`` without refilling it."""
        with self._lock:
            bucket = self._buckets.get(key)
            return None if bucket is None else bucket.tokens

    def _refill(self, bucket: _Bucket, now: float) -> None:
        # A clock reading older than the last refill counts as no time passed
        elapsed_seconds = max(0.0, now - bucket.last_refill)
        refill = elapsed_seconds * self._refill_per_minute / 60.0
        bucket.tokens = min(self._burst, bucket.tokens + refill)
        bucket.last_refill = max(bucket.last_refill, now)

    def _retry_after(self, tokens: float) -> int:
        missing = max(0.0, 1.0 - tokens)
        return max(1, int(math.ceil(missing * 60.0 / self._refill_per_minute)))

    def admit(self, key: str | None) -> RateLimitResult:
        """Refill the bucket for ``key`` and try to take one token from it.

        Requests without a key are always admitted and leave every bucket
        untouched.
        """
        if not key:
            return ADMITTED_UNLIMITED

        with self._lock:
            now = self._clock()
            bucket = self._buckets.get(key)
            if bucket is None:
                bucket = _Bucket(tokens=self._burst, last_refill=now)
                self._buckets[key] = bucket

            self._refill(bucket, now)

            if bucket.tokens >= 1:
                bucket.tokens -= 1
                return RateLimitResult(
                    allowed=True,
                    limit=self._burst,
                    remaining=int(bucket.tokens),
                )

            return RateLimitResult(
                allowed=False,
                limit=self._burst,
                remaining=0,
                retry_after_seconds=self._retry_after(bucket.tokens),
            )
