"""Rate limiting adapters.

This package provides a small abstraction layer so the pipeline can run
with a per-model token bucket, or with a limiter that admits everything
when rate limiting is not configured.
"""

from __future__ import annotations

import logging
import time

from mockai.adapters.rate_limit.base import (
    AbstractRateLimiter,
    Clock,
    RateLimitResult,
    UnlimitedRateLimiter,
)
from mockai.adapters.rate_limit.token_bucket import InMemoryTokenBucketRateLimiter
from mockai.core.config import RateLimitSettings

logger = logging.getLogger(__name__)

__all__ = [
    "AbstractRateLimiter",
    "InMemoryTokenBucketRateLimiter",
    "RateLimitResult",
    "UnlimitedRateLimiter",
    "build_rate_limiter",
]


def build_rate_limiter(
    settings: RateLimitSettings,
    *,
    clock: Clock = time.monotonic,
) -> AbstractRateLimiter:
    """Build the limiter described by ``settings``.

    Returns:
        A token bucket limiter when both burst and rpm are configured,
        otherwise a limiter that admits every request.
    """

    if not settings.enabled:
        logger.info("rate_limit.disabled")
        return UnlimitedRateLimiter()

    logger.info(
        "rate_limit.enabled",
        extra={"burst": settings.burst, "rpm": settings.rpm},
    )
    return InMemoryTokenBucketRateLimiter(
        burst=settings.burst,
        refill_per_minute=settings.rpm,
        clock=clock,
    )
