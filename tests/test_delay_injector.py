"""Tests for the response delay injector."""

import asyncio
from unittest.mock import AsyncMock

import pytest
from starlette.requests import Request

from mockai.core.delay import DELAY_HEADER, DelayInjector


def _request(delay_header: str | None = None) -> Request:
    headers = []
    if delay_header is not None:
        headers.append((DELAY_HEADER.lower().encode(), delay_header.encode()))
    return Request({"type": "http", "method": "GET", "path": "/", "headers": headers})


def test_header_override_wins_over_default() -> None:
    injector = DelayInjector(default_ms=500)

    assert injector.compute_delay(_request("250")) == 250


def test_zero_header_is_a_valid_override() -> None:
    injector = DelayInjector(default_ms=500)

    assert injector.compute_delay(_request("0")) == 0


@pytest.mark.parametrize("header", ["-5", "abc", "", "1.5", "12ms", "1" * 5000])
def test_invalid_header_falls_back_to_default(header: str) -> None:
    injector = DelayInjector(default_ms=300)

    assert injector.compute_delay(_request(header)) == 300


def test_no_header_and_no_default_is_zero() -> None:
    assert DelayInjector().compute_delay(_request()) == 0


def test_negative_default_is_treated_as_zero() -> None:
    assert DelayInjector(default_ms=-20).compute_delay(_request()) == 0


def test_apply_sleeps_for_the_computed_delay() -> None:
    sleep = AsyncMock()
    injector = DelayInjector(default_ms=100, sleep=sleep)

    applied = asyncio.run(injector.apply(_request("40")))

    assert applied == 40
    sleep.assert_awaited_once_with(0.04)


def test_apply_skips_sleep_without_delay() -> None:
    sleep = AsyncMock()
    injector = DelayInjector(sleep=sleep)

    assert asyncio.run(injector.apply(_request())) == 0
    sleep.assert_not_awaited()
