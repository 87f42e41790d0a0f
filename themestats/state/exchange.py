"""Exchange of one-time human-verification tokens for reusable certificates."""
import logging
from typing import Optional, Protocol

from themestats.errors import InvalidTurnstileError
from themestats.protocol.certificate import issue_certificate
from themestats.state.rate_limit import TURNSTILE_FAILURES, RateLimiter, RateLimitTier

logger = logging.getLogger(__name__)


class HumanVerifier(Protocol):
    async def verify(self, token: str, remote_ip: Optional[str] = None) -> bool: ...


class BotCheckExchange:
    """Turns a passed bot check into a certificate bound to one key id.

    Every rejected token costs the client IP one slot of the failure
    quota; once the quota is spent, tokens are refused without being
    sent upstream until the window closes.
    """

    def __init__(
        self,
        verifier: HumanVerifier,
        signing_key: str,
        failure_tier: RateLimitTier = TURNSTILE_FAILURES,
    ) -> None:
        if not signing_key:
            raise ValueError("Certificate signing key cannot be empty")
        self._verifier = verifier
        self._signing_key = signing_key
        self._failure_tier = failure_tier

    async def redeem(self, limiter: RateLimiter, token: str, client_ip: str) -> None:
        """Verify ``token`` under the failure quota.

        Raises:
            RateLimitedError: The IP has used up its failure quota.
            InvalidTurnstileError: The token was rejected (and counted).
        """
        await limiter.check(self._failure_tier, client_ip)
        if not await self._verifier.verify(token, client_ip):
            failures = await limiter.hit(self._failure_tier, client_ip)
            logger.warning("Human verification failed for %s (%d/%d)", client_ip, failures, self._failure_tier.limit)
            raise InvalidTurnstileError()

    def issue(self, key_id: str) -> str:
        return issue_certificate(key_id.lower(), self._signing_key)

    async def exchange(self, limiter: RateLimiter, token: str, client_ip: str, key_id: str) -> str:
        """Redeem ``token`` and return a fresh certificate for ``key_id``."""
        await self.redeem(limiter, token, client_ip)
        return self.issue(key_id)
