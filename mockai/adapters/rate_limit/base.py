"""Rate limiter interfaces.

The pipeline depends on this abstraction (not the concrete implementation)
so the unconfigured server can run with a limiter that admits everything.
"""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable

Clock = Callable[[], float]


@dataclass(frozen=True)
class RateLimitResult:
    """Outcome of an admission check.

    Attributes:
        allowed: Whether the request is admitted.
        limit: Bucket capacity (``math.inf`` when unlimited).
        remaining: Whole tokens left after this check.
        retry_after_seconds: Suggested wait time in seconds when rejected.
    """

    allowed: bool
    limit: float
    remaining: int
    retry_after_seconds: int | None = None


ADMITTED_UNLIMITED = RateLimitResult(allowed=True, limit=math.inf, remaining=0)


class AbstractRateLimiter(ABC):
    """Interface for rate limiters."""

    @abstractmethod
    def admit(self, key: str | None) -> RateLimitResult:
        """Decide whether a request carrying ``key`` may proceed.

        Args:
            key: Rate limit key (the requested model), or None when the
                request does not declare one.

        Returns:
            RateLimitResult describing whether it was admitted.
        """
        raise NotImplementedError


class UnlimitedRateLimiter(AbstractRateLimiter):
    """Limiter used when rate limiting is not configured."""

    def admit(self, key: str | None) -> RateLimitResult:
        return ADMITTED_UNLIMITED
