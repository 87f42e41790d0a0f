"""Orchestration of signed mutations: rating submissions and install counts.

Each request walks RECEIVED -> VALIDATED -> AUTHORIZED -> IDENTITY_RESOLVED
-> SIGNATURE_VERIFIED -> RATE_CHECKED -> MUTATED -> RESPONDED and stops
at the first failing check. Nothing is retried here. Side effects that
completed before a rejection (a freshly registered identity, a counted
verification failure) are kept.
"""
import asyncio
import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional

import aiosqlite

from themestats.errors import (
    AuthorizationRequiredError,
    InvalidCertificateError,
    InvalidSignatureError,
    KeyNotFoundError,
    ThemeMismatchError,
    ThemeStatsError,
    TimestampExpiredError,
)
from themestats.protocol.certificate import verify_certificate
from themestats.protocol.envelope import SignedEnvelope
from themestats.protocol.freshness import is_fresh
from themestats.protocol.signing import verify_signature
from themestats.state.database import DatabaseManager
from themestats.state.exchange import BotCheckExchange
from themestats.state.identity import lookup_identity, resolve_identity
from themestats.state.models.public_key import PublicKeyIdentity
from themestats.state.models.rating import RatingStats
from themestats.state.rate_limit import RateLimiter, RateLimitPolicy
from themestats.state.repositories.kv import KeyValueStore
from themestats.state.repositories.ratings import RatingRepository

logger = logging.getLogger(__name__)

INSTALL_COUNT_PREFIX = "installs:"


class RequestState(Enum):
    RECEIVED = "received"
    VALIDATED = "validated"
    AUTHORIZED = "authorized"
    IDENTITY_RESOLVED = "identity_resolved"
    SIGNATURE_VERIFIED = "signature_verified"
    RATE_CHECKED = "rate_checked"
    MUTATED = "mutated"
    RESPONDED = "responded"
    REJECTED = "rejected"


class _Progress:
    def __init__(self, operation: str, envelope: SignedEnvelope, client_ip: str) -> None:
        self.operation = operation
        self.key_id = envelope.key_id
        self.client_ip = client_ip
        self.state = RequestState.RECEIVED

    def advance(self, state: RequestState) -> None:
        logger.debug("%s key=%s %s -> %s", self.operation, self.key_id, self.state.value, state.value)
        self.state = state

    def reject(self, exc: ThemeStatsError) -> None:
        logger.warning(
            "%s rejected after %s: key=%s ip=%s code=%s",
            self.operation, self.state.value, self.key_id, self.client_ip, exc.error_code,
        )
        self.state = RequestState.REJECTED


@dataclass(frozen=True)
class RatingOutcome:
    stats: RatingStats
    certificate: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"average": self.stats.average, "count": self.stats.count}
        if self.certificate:
            result["certificate"] = self.certificate
        return result


@dataclass(frozen=True)
class InstallOutcome:
    count: int
    already_counted: bool = False

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"count": self.count}
        if self.already_counted:
            result["alreadyCounted"] = True
        return result


def install_count_key(theme_id: str) -> str:
    return f"{INSTALL_COUNT_PREFIX}{theme_id}"


async def read_install_count(kv: KeyValueStore, theme_id: str) -> int:
    value = await kv.get(install_count_key(theme_id))
    try:
        return int(value) if value is not None else 0
    except ValueError:
        return 0


class MutationCoordinator:
    """Applies signed mutations once per identity, after every check passed."""

    def __init__(
        self,
        db: DatabaseManager,
        exchange: BotCheckExchange,
        certificate_signing_key: str,
        policy: RateLimitPolicy = RateLimitPolicy(),
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._db = db
        self._exchange = exchange
        self._certificate_signing_key = certificate_signing_key
        self._policy = policy
        self._clock = clock

    def _now_ms(self) -> int:
        return int(self._clock() * 1000)

    def _check_fresh(self, envelope: SignedEnvelope) -> None:
        if not is_fresh(envelope.timestamp, now=self._now_ms()):
            raise TimestampExpiredError()

    def _check_signature(self, envelope: SignedEnvelope, identity: PublicKeyIdentity) -> None:
        # Always the stored key: inline key material never overrides a binding.
        if not verify_signature(envelope.payload, envelope.signature, identity.public_key):
            raise InvalidSignatureError()

    async def _authorize(self, envelope: SignedEnvelope, limiter: RateLimiter, client_ip: str) -> bool:
        """Accept a certificate or redeem a bot-check token.

        Returns True when authorization came from a fresh token, meaning a
        new certificate is owed once the mutation succeeds.
        """
        if envelope.certificate:
            if not verify_certificate(
                envelope.certificate, envelope.key_id, self._certificate_signing_key, now=self._now_ms(),
            ):
                raise InvalidCertificateError()
            return False
        if envelope.turnstile_token:
            await self._exchange.redeem(limiter, envelope.turnstile_token, client_ip)
            return True
        raise AuthorizationRequiredError()

    def _limiter(self, conn: aiosqlite.Connection) -> tuple[KeyValueStore, RateLimiter]:
        kv = KeyValueStore(conn, clock=self._clock)
        return kv, RateLimiter(kv, clock=self._clock)

    async def submit_rating(self, theme_id: str, envelope: SignedEnvelope, client_ip: str) -> RatingOutcome:
        """Create or replace this identity's rating of ``theme_id``.

        Proof of humanity (certificate or token) is required on every
        submission, including updates of an existing rating.
        """
        progress = _Progress("rating", envelope, client_ip)
        try:
            if envelope.theme_id != theme_id:
                raise ThemeMismatchError()
            progress.advance(RequestState.VALIDATED)
            async with self._db.connection() as conn:
                _, limiter = self._limiter(conn)
                newly_certified = await self._authorize(envelope, limiter, client_ip)
                progress.advance(RequestState.AUTHORIZED)
                self._check_fresh(envelope)
                identity = await resolve_identity(conn, envelope.key_id, envelope.public_key)
                progress.advance(RequestState.IDENTITY_RESOLVED)
                self._check_signature(envelope, identity)
                progress.advance(RequestState.SIGNATURE_VERIFIED)

                ratings = RatingRepository(conn)
                if not await ratings.has_rating(theme_id, identity.key_id):
                    await limiter.enforce(self._policy.first_ratings, client_ip)
                progress.advance(RequestState.RATE_CHECKED)
                await ratings.upsert(theme_id, identity.key_id, envelope.payload["rating"])
                progress.advance(RequestState.MUTATED)
                stats = await ratings.get_stats(theme_id)
        except ThemeStatsError as exc:
            progress.reject(exc)
            raise

        certificate = self._exchange.issue(identity.key_id) if newly_certified else None
        progress.advance(RequestState.RESPONDED)
        logger.info("Rating %s=%s by %s (certified=%s)", theme_id, envelope.payload["rating"], identity.key_id, newly_certified)
        return RatingOutcome(stats=stats, certificate=certificate)

    async def record_install(self, theme_id: str, envelope: SignedEnvelope, client_ip: str) -> InstallOutcome:
        """Count one install of ``theme_id`` per identity, ever.

        A valid signature is the only authorization: a repeat is answered
        with the current count and ``already_counted`` set.
        """
        progress = _Progress("install", envelope, client_ip)
        try:
            if envelope.theme_id != theme_id:
                raise ThemeMismatchError()
            progress.advance(RequestState.VALIDATED)
            self._check_fresh(envelope)
            progress.advance(RequestState.AUTHORIZED)
            async with self._db.connection() as conn:
                kv, limiter = self._limiter(conn)
                identity = await resolve_identity(conn, envelope.key_id, envelope.public_key)
                progress.advance(RequestState.IDENTITY_RESOLVED)
                self._check_signature(envelope, identity)
                progress.advance(RequestState.SIGNATURE_VERIFIED)

                marker = f"{identity.key_id}:{theme_id}"
                if await limiter.is_limited(self._policy.install_marker, marker):
                    count = await read_install_count(kv, theme_id)
                    progress.advance(RequestState.RESPONDED)
                    return InstallOutcome(count=count, already_counted=True)
                await limiter.enforce(self._policy.first_installs, client_ip)
                progress.advance(RequestState.RATE_CHECKED)

                count = await read_install_count(kv, theme_id) + 1
                await asyncio.gather(
                    kv.put(install_count_key(theme_id), str(count)),
                    limiter.hit(self._policy.install_marker, marker),
                )
                progress.advance(RequestState.MUTATED)
        except ThemeStatsError as exc:
            progress.reject(exc)
            raise

        progress.advance(RequestState.RESPONDED)
        logger.info("Install %s by %s, count=%d", theme_id, identity.key_id, count)
        return InstallOutcome(count=count)

    async def user_ratings(self, envelope: SignedEnvelope, client_ip: str) -> dict[str, int]:
        """Signed read of every rating the envelope's identity has given.

        Unlike mutations this never registers an identity.
        """
        progress = _Progress("user-ratings", envelope, client_ip)
        try:
            self._check_fresh(envelope)
            progress.advance(RequestState.VALIDATED)
            async with self._db.connection() as conn:
                _, limiter = self._limiter(conn)
                await limiter.check(self._policy.user_reads, client_ip)
                identity = await lookup_identity(conn, envelope.key_id)
                if identity is None:
                    raise KeyNotFoundError()
                progress.advance(RequestState.IDENTITY_RESOLVED)
                self._check_signature(envelope, identity)
                progress.advance(RequestState.SIGNATURE_VERIFIED)
                await limiter.hit(self._policy.user_reads, client_ip)
                progress.advance(RequestState.RATE_CHECKED)
                result = await RatingRepository(conn).get_user_ratings(identity.key_id)
        except ThemeStatsError as exc:
            progress.reject(exc)
            raise
        progress.advance(RequestState.RESPONDED)
        return result
