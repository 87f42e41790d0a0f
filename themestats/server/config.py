"""Server configuration."""
import logging
from dataclasses import dataclass, field, replace
from pathlib import Path
import os

from themestats.protocol.turnstile import TURNSTILE_VERIFY_URL
from themestats.state.maintenance import DEFAULT_PURGE_INTERVAL
from themestats.state.rate_limit import (
    FIRST_INSTALLS,
    FIRST_RATINGS,
    TURNSTILE_FAILURES,
    USER_READS,
    RateLimitPolicy,
)

logger = logging.getLogger(__name__)

MIN_SIGNING_KEY_LENGTH = 32


@dataclass(frozen=True)
class RateLimitConfig:
    turnstile_failures_per_hour: int = TURNSTILE_FAILURES.limit
    ratings_per_hour: int = FIRST_RATINGS.limit
    installs_per_hour: int = FIRST_INSTALLS.limit
    user_reads_per_minute: int = USER_READS.limit

    def policy(self) -> RateLimitPolicy:
        return RateLimitPolicy(
            turnstile_failures=replace(TURNSTILE_FAILURES, limit=self.turnstile_failures_per_hour),
            first_ratings=replace(FIRST_RATINGS, limit=self.ratings_per_hour),
            first_installs=replace(FIRST_INSTALLS, limit=self.installs_per_hour),
            user_reads=replace(USER_READS, limit=self.user_reads_per_minute),
        )


@dataclass(frozen=True)
class TurnstileConfig:
    """Human-verification settings.

    ``secret_key`` is the Turnstile server secret, unrelated to the
    certificate signing key.
    """

    secret_key: str
    verify_url: str = TURNSTILE_VERIFY_URL
    timeout: float = 10.0


@dataclass(frozen=True)
class ServerConfig:
    certificate_signing_key: str
    turnstile: TurnstileConfig
    rate_limit: RateLimitConfig = field(default_factory=RateLimitConfig)
    db_path: Path = field(default_factory=lambda: Path("data/themestats.db"))
    client_ip_header: str = "CF-Connecting-IP"
    kv_purge_interval_seconds: float = DEFAULT_PURGE_INTERVAL


def load_config_from_env() -> ServerConfig:
    signing_key = os.environ.get("CERTIFICATE_SIGNING_KEY")
    turnstile_secret = os.environ.get("TURNSTILE_SECRET_KEY")
    missing = []
    if not signing_key:
        missing.append("CERTIFICATE_SIGNING_KEY")
    if not turnstile_secret:
        missing.append("TURNSTILE_SECRET_KEY")
    if missing:
        raise ValueError(f"Missing: {', '.join(missing)}")

    if len(signing_key) < MIN_SIGNING_KEY_LENGTH:
        logger.warning(
            "CERTIFICATE_SIGNING_KEY is shorter than %d characters; "
            "certificates are only as strong as this secret.",
            MIN_SIGNING_KEY_LENGTH,
        )

    return ServerConfig(
        certificate_signing_key=signing_key,
        turnstile=TurnstileConfig(
            secret_key=turnstile_secret,
            verify_url=os.environ.get("TURNSTILE_VERIFY_URL", TURNSTILE_VERIFY_URL),
            timeout=float(os.environ.get("TURNSTILE_TIMEOUT", "10.0")),
        ),
        rate_limit=RateLimitConfig(
            turnstile_failures_per_hour=int(os.environ.get("RATE_LIMIT_TURNSTILE_PER_HOUR", "5")),
            ratings_per_hour=int(os.environ.get("RATE_LIMIT_RATINGS_PER_HOUR", "10")),
            installs_per_hour=int(os.environ.get("RATE_LIMIT_INSTALLS_PER_HOUR", "10")),
            user_reads_per_minute=int(os.environ.get("RATE_LIMIT_USER_READS_PER_MINUTE", "30")),
        ),
        db_path=Path(os.environ.get("DB_PATH", "data/themestats.db")),
        client_ip_header=os.environ.get("CLIENT_IP_HEADER", "CF-Connecting-IP"),
        kv_purge_interval_seconds=float(
            os.environ.get("KV_PURGE_INTERVAL_SECONDS", str(DEFAULT_PURGE_INTERVAL))
        ),
    )
