"""Unit tests for the in-memory rate limiter primitives."""

from __future__ import annotations

from typing import List

import pytest

from search_gateway.utils.errors import RateLimited
from search_gateway.utils.ratelimit import RateLimiter


class Clock:
    """Deterministic monotonic clock used to drive limiter windows."""

    def __init__(self) -> None:
        self._history: List[float] = [0.0]

    def advance(self, seconds: float) -> None:
        """Advance the synthetic clock by ``seconds`` to simulate time passing."""
        self._history.append(self._history[-1] + seconds)

    def __call__(self) -> float:
        return self._history[-1]


def test_rate_limiter_allows_burst_within_window() -> None:
    limiter = RateLimiter(3, clock=Clock())
    assert [limiter.acquire("weather") for _ in range(3)] == [2, 1, 0]


def test_rate_limiter_blocks_when_exceeding_quota() -> None:
    limiter = RateLimiter(2, clock=Clock())
    limiter.acquire("weather")
    limiter.acquire("weather")
    with pytest.raises(RateLimited):
        limiter.acquire("weather")


def test_rate_limiter_frees_slots_after_window() -> None:
    clock = Clock()
    limiter = RateLimiter(1, clock=clock)
    limiter.acquire("weather")
    clock.advance(61.0)
    limiter.acquire("weather")


def test_allow_reports_denial_as_boolean() -> None:
    limiter = RateLimiter(1, clock=Clock())
    assert limiter.allow("weather") is True
    assert limiter.allow("weather") is False


def test_keys_are_bucketed_independently() -> None:
    limiter = RateLimiter(1, clock=Clock())
    assert limiter.allow("weather") is True
    assert limiter.allow("news") is True
    assert limiter.allow("weather") is False


def test_denied_calls_do_not_extend_the_window() -> None:
    clock = Clock()
    limiter = RateLimiter(1, clock=clock)
    assert limiter.allow("weather")
    clock.advance(30.0)
    assert not limiter.allow("weather")
    clock.advance(31.0)
    assert limiter.allow("weather")


def test_rate_limiter_rejects_non_positive_quota() -> None:
    with pytest.raises(ValueError):
        RateLimiter(0)


def test_stale_keys_are_released_after_the_window() -> None:
    """Free-text keys must not accumulate once their hits leave the window."""
    clock = Clock()
    limiter = RateLimiter(2, clock=clock)
    for index in range(1000):
        assert limiter.allow(f"query {index}")
    clock.advance(3600.0)

    assert limiter.allow("fresh")

    assert list(limiter._hits) == ["fresh"]


def test_live_keys_survive_the_sweep() -> None:
    clock = Clock()
    limiter = RateLimiter(1, clock=clock)
    limiter.allow("weather")
    clock.advance(30.0)
    limiter.allow("news")

    assert set(limiter._hits) == {"weather", "news"}
    assert limiter.allow("weather") is False
