"""Unit tests for the rate limiter adapters."""

import threading
from unittest.mock import Mock

import pytest

from mockai.adapters.rate_limit import build_rate_limiter
from mockai.adapters.rate_limit.base import UnlimitedRateLimiter
from mockai.adapters.rate_limit.token_bucket import InMemoryTokenBucketRateLimiter
from mockai.core.config import RateLimitSettings


def test_burst_then_reject_then_refill_one_token() -> None:
    clock = Mock(return_value=1000.0)
    limiter = InMemoryTokenBucketRateLimiter(burst=5, refill_per_minute=60, clock=clock)

    for _ in range(5):
        assert limiter.admit("gpt-4o").allowed is True
    assert limiter.admit("gpt-4o").allowed is False

    clock.return_value = 1001.0
    assert limiter.admit("gpt-4o").allowed is True
    assert limiter.admit("gpt-4o").allowed is False


def test_new_bucket_starts_full() -> None:
    clock = Mock(return_value=0.0)
    limiter = InMemoryTokenBucketRateLimiter(burst=3, refill_per_minute=1, clock=clock)

    result = limiter.admit("k")

    assert result.allowed is True
    assert result.remaining == 2
    assert limiter.peek("k") == pytest.approx(2.0)


def test_refill_is_continuous_and_capped() -> None:
    clock = Mock(return_value=0.0)
    limiter = InMemoryTokenBucketRateLimiter(burst=4, refill_per_minute=60, clock=clock)

    for _ in range(4):
        limiter.admit("k")
    assert limiter.peek("k") == pytest.approx(0.0)

    # Half a second refills half a token: still not enough
    clock.return_value = 0.5
    assert limiter.admit("k").allowed is False
    assert limiter.peek("k") == pytest.approx(0.5)

    # A long idle period never overfills the bucket
    clock.return_value = 3600.0
    assert limiter.admit("k").allowed is True
    assert limiter.peek("k") == pytest.approx(3.0)


def test_rejection_leaves_tokens_unchanged() -> None:
    clock = Mock(return_value=10.0)
    limiter = InMemoryTokenBucketRateLimiter(burst=1, refill_per_minute=6, clock=clock)

    assert limiter.admit("k").allowed is True
    clock.return_value = 15.0  # +0.5 token
    blocked = limiter.admit("k")

    assert blocked.allowed is False
    assert blocked.remaining == 0
    assert blocked.retry_after_seconds == 5
    assert limiter.peek("k") == pytest.approx(0.5)


def test_clock_going_backwards_does_not_refill_or_drain() -> None:
    clock = Mock(return_value=100.0)
    limiter = InMemoryTokenBucketRateLimiter(burst=2, refill_per_minute=60, clock=clock)

    limiter.admit("k")
    limiter.admit("k")

    clock.return_value = 40.0
    assert limiter.admit("k").allowed is False
    assert limiter.peek("k") == pytest.approx(0.0)

    # Elapsed time is measured from the latest reading, not the earlier one
    clock.return_value = 101.0
    assert limiter.admit("k").allowed is True


def test_isolated_by_key() -> None:
    clock = Mock(return_value=1000.0)
    limiter = InMemoryTokenBucketRateLimiter(burst=1, refill_per_minute=1, clock=clock)

    assert limiter.admit("gpt-4o").allowed is True
    assert limiter.admit("gpt-4o").allowed is False

    assert limiter.admit("gpt-4o-mini").allowed is True
    assert len(limiter) == 2


@pytest.mark.parametrize("key", [None, ""])
def test_requests_without_key_always_admitted(key) -> None:
    clock = Mock(return_value=1000.0)
    limiter = InMemoryTokenBucketRateLimiter(burst=1, refill_per_minute=1, clock=clock)
    limiter.admit("gpt-4o")
    assert limiter.admit("gpt-4o").allowed is False

    for _ in range(10):
        assert limiter.admit(key).allowed is True
    assert len(limiter) == 1


def test_tokens_stay_within_bounds() -> None:
    clock = Mock(return_value=0.0)
    limiter = InMemoryTokenBucketRateLimiter(burst=3, refill_per_minute=30, clock=clock)

    for step in range(200):
        clock.return_value = step * 0.37
        limiter.admit("k")
        assert 0.0 <= limiter.peek("k") <= 3.0


def test_concurrent_admission_never_over_admits() -> None:
    clock = Mock(return_value=0.0)
    limiter = InMemoryTokenBucketRateLimiter(burst=50, refill_per_minute=1, clock=clock)
    admitted: list[bool] = []
    lock = threading.Lock()

    def worker() -> None:
        for _ in range(20):
            result = limiter.admit("shared")
            with lock:
                admitted.append(result.allowed)

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert admitted.count(True) == 50
    assert limiter.peek("shared") == pytest.approx(0.0)


@pytest.mark.parametrize(
    "kwargs",
    [
        {"burst": 0, "refill_per_minute": 60},
        {"burst": 5, "refill_per_minute": 0},
        {"burst": -1, "refill_per_minute": 60},
    ],
)
def test_invalid_constructor_args(kwargs: dict) -> None:
    with pytest.raises(ValueError):
        InMemoryTokenBucketRateLimiter(**kwargs)


def test_unlimited_limiter_admits_everything() -> None:
    limiter = UnlimitedRateLimiter()

    for key in ("gpt-4o", None, "", "gpt-4o"):
        assert limiter.admit(key).allowed is True


@pytest.mark.parametrize(
    "burst, rpm",
    [
        (None, None),
        (5, None),
        (None, 60),
        ("abc", 60),
        (5, "-3"),
        (0, 60),
        ("", ""),
    ],
)
def test_build_rate_limiter_fails_open_when_unconfigured(burst, rpm) -> None:
    settings = RateLimitSettings(burst=burst, rpm=rpm)

    limiter = build_rate_limiter(settings)

    assert settings.enabled is False
    assert isinstance(limiter, UnlimitedRateLimiter)


def test_build_rate_limiter_uses_token_bucket_when_configured() -> None:
    settings = RateLimitSettings(burst="5", rpm="60")

    limiter = build_rate_limiter(settings, clock=Mock(return_value=0.0))

    assert isinstance(limiter, InMemoryTokenBucketRateLimiter)
    assert limiter.burst == 5
    assert limiter.refill_per_minute == 60
