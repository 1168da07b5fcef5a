"""Artificial response delay for the health endpoint."""

from __future__ import annotations

import asyncio
from typing import Awaitable, Callable

from starlette.requests import Request

DELAY_HEADER = "X-Set-Response-Delay-Ms"


def _parse_delay(value: str | None) -> int | None:
    if value is None:
        return None
    value = value.strip()
    if not (value.isascii() and value.isdigit()):
        return None
    try:
        return int(value)
    except ValueError:
        # Beyond the interpreter's int/str digit limit
        return None


class DelayInjector:
    """Resolve and apply the per-request response delay.

    Precedence: a valid ``X-Set-Response-Delay-Ms`` header, then the
    configured default, then zero.
    """

    def __init__(
        self,
        default_ms: int = 0,
        *,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._default_ms = max(0, int(default_ms or 0))
        self._sleep = sleep

    @property
    def default_ms(self) -> int:
        return self._default_ms

    def compute_delay(self, request: Request) -> int:
        """Return the delay in milliseconds for ``request``."""
        override = _parse_delay(request.headers.get(DELAY_HEADER))
        if override is not None:
            return override
        return self._default_ms

    async def apply(self, request: Request) -> int:
        """Suspend the current request for its delay; return the delay used."""
        delay_ms = self.compute_delay(request)
        if delay_ms > 0:
            await self._sleep(delay_ms / 1000)
        return delay_ms
