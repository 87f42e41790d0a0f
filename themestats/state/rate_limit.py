"""Tiered fixed-window counters kept in the key-value store."""
import logging
import math
import time
from dataclasses import dataclass
from typing import Callable, Optional

from themestats.errors import RateLimitedError
from themestats.state.repositories.kv import KeyValueStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RateLimitTier:
    """A named counter scope.

    ``window_seconds=None`` makes the counter permanent, which with
    ``limit=1`` turns it into a one-shot marker.
    """

    scope: str
    limit: int
    window_seconds: Optional[int] = None
    message: str = "Rate limit exceeded"

    def __post_init__(self) -> None:
        if self.limit < 1:
            raise ValueError("limit must be at least 1")
        if self.window_seconds is not None and self.window_seconds < 1:
            raise ValueError("window_seconds must be positive")


HOUR = 60 * 60

TURNSTILE_FAILURES = RateLimitTier(
    "turnstile", limit=5, window_seconds=HOUR,
    message="Too many verification attempts, please try again later",
)
FIRST_RATINGS = RateLimitTier(
    "rate", limit=10, window_seconds=HOUR,
    message="Too many new ratings, please try again later",
)
FIRST_INSTALLS = RateLimitTier(
    "install", limit=10, window_seconds=HOUR,
    message="Too many new installs, please try again later",
)
USER_READS = RateLimitTier(
    "user-ratings", limit=30, window_seconds=60,
    message="Too many requests, please try again later",
)
INSTALL_MARKER = RateLimitTier(
    "installed", limit=1, window_seconds=None,
    message="Install already counted for this theme",
)


@dataclass(frozen=True)
class RateLimitPolicy:
    turnstile_failures: RateLimitTier = TURNSTILE_FAILURES
    first_ratings: RateLimitTier = FIRST_RATINGS
    first_installs: RateLimitTier = FIRST_INSTALLS
    user_reads: RateLimitTier = USER_READS
    install_marker: RateLimitTier = INSTALL_MARKER


class RateLimiter:
    """Check-then-act counters; two racing requests may both pass a check."""

    def __init__(self, kv: KeyValueStore, clock: Callable[[], float] = time.time) -> None:
        self._kv = kv
        self._clock = clock

    def key(self, tier: RateLimitTier, subject: str) -> str:
        if tier.window_seconds is None:
            return f"ratelimit:{tier.scope}:{subject}"
        window = int(self._clock() // tier.window_seconds)
        return f"ratelimit:{tier.scope}:{subject}:{window}"

    def retry_after(self, tier: RateLimitTier) -> Optional[int]:
        """Seconds until the current window closes; None for permanent tiers."""
        if tier.window_seconds is None:
            return None
        now = self._clock()
        window_end = (now // tier.window_seconds + 1) * tier.window_seconds
        return max(1, math.ceil(window_end - now))

    async def count(self, tier: RateLimitTier, subject: str) -> int:
        value = await self._kv.get(self.key(tier, subject))
        try:
            return int(value) if value is not None else 0
        except ValueError:
            return 0

    async def is_limited(self, tier: RateLimitTier, subject: str) -> bool:
        return await self.count(tier, subject) >= tier.limit

    async def check(self, tier: RateLimitTier, subject: str) -> None:
        """Raise :class:`RateLimitedError` once ``tier.limit`` is reached. Never increments."""
        if await self.is_limited(tier, subject):
            logger.warning("Rate limit %s reached for %s", tier.scope, subject)
            raise RateLimitedError(tier.message, retry_after=self.retry_after(tier))

    async def hit(self, tier: RateLimitTier, subject: str) -> int:
        """Increment the counter for the current window and return the new count."""
        key = self.key(tier, subject)
        ttl = self.retry_after(tier)
        current = await self.count(tier, subject)
        await self._kv.put(key, str(current + 1), ttl=ttl)
        return current + 1

    async def enforce(self, tier: RateLimitTier, subject: str) -> int:
        """Check, then count this attempt. Rejected attempts are not counted."""
        await self.check(tier, subject)
        return await self.hit(tier, subject)
