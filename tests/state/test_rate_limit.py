"""Tests for tiered fixed-window rate limiting."""
import pytest

from themestats.errors import RateLimitedError
from themestats.state.rate_limit import HOUR, INSTALL_MARKER, RateLimiter, RateLimitTier
from themestats.state.repositories import KeyValueStore

TIER = RateLimitTier("test", limit=2, window_seconds=HOUR, message="slow down")


class FakeClock:
    def __init__(self, now: float) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(now=HOUR * 1000 + 600)


class TestRateLimitTier:
    def test_invalid_limit(self) -> None:
        with pytest.raises(ValueError):
            RateLimitTier("x", limit=0)

    def test_invalid_window(self) -> None:
        with pytest.raises(ValueError):
            RateLimitTier("x", limit=1, window_seconds=0)


class TestRateLimiter:
    async def test_key_format(self, db, clock) -> None:
        async with db.connection() as conn:
            limiter = RateLimiter(KeyValueStore(conn, clock=clock), clock=clock)
            assert limiter.key(TIER, "1.2.3.4") == "ratelimit:test:1.2.3.4:1000"
            assert limiter.key(INSTALL_MARKER, "k:t") == "ratelimit:installed:k:t"

    async def test_retry_after_is_time_left_in_window(self, db, clock) -> None:
        async with db.connection() as conn:
            limiter = RateLimiter(KeyValueStore(conn, clock=clock), clock=clock)
            assert limiter.retry_after(TIER) == HOUR - 600
            assert limiter.retry_after(INSTALL_MARKER) is None

    async def test_enforce_until_limit(self, db, clock) -> None:
        async with db.connection() as conn:
            limiter = RateLimiter(KeyValueStore(conn, clock=clock), clock=clock)
            assert await limiter.enforce(TIER, "ip") == 1
            assert await limiter.enforce(TIER, "ip") == 2
            with pytest.raises(RateLimitedError) as exc_info:
                await limiter.enforce(TIER, "ip")
            assert exc_info.value.message == "slow down"
            assert exc_info.value.retry_after == HOUR - 600
            assert await limiter.count(TIER, "ip") == 2

    async def test_subjects_are_independent(self, db, clock) -> None:
        async with db.connection() as conn:
            limiter = RateLimiter(KeyValueStore(conn, clock=clock), clock=clock)
            await limiter.hit(TIER, "a")
            await limiter.hit(TIER, "a")
            assert await limiter.is_limited(TIER, "a")
            assert not await limiter.is_limited(TIER, "b")

    async def test_new_window_resets(self, db, clock) -> None:
        async with db.connection() as conn:
            limiter = RateLimiter(KeyValueStore(conn, clock=clock), clock=clock)
            await limiter.hit(TIER, "ip")
            await limiter.hit(TIER, "ip")
            clock.now += HOUR
            await limiter.check(TIER, "ip")

    async def test_check_never_increments(self, db, clock) -> None:
        async with db.connection() as conn:
            limiter = RateLimiter(KeyValueStore(conn, clock=clock), clock=clock)
            for _ in range(5):
                await limiter.check(TIER, "ip")
            assert await limiter.count(TIER, "ip") == 0

    async def test_marker_is_permanent(self, db, clock) -> None:
        async with db.connection() as conn:
            limiter = RateLimiter(KeyValueStore(conn, clock=clock), clock=clock)
            await limiter.hit(INSTALL_MARKER, "key:theme")
            clock.now += 365 * 24 * HOUR
            assert await limiter.is_limited(INSTALL_MARKER, "key:theme")
