"""State management module."""
from themestats.state.coordinator import InstallOutcome, MutationCoordinator, RatingOutcome, RequestState
from themestats.state.database import DatabaseManager, DatabaseError, DatabaseNotInitializedError
from themestats.state.exchange import BotCheckExchange, HumanVerifier
from themestats.state.identity import IdentityRegistrationError, lookup_identity, register_identity, resolve_identity
from themestats.state.maintenance import purge_expired, purge_expired_periodically
from themestats.state.models import PublicKeyIdentity, RatingStats, ThemeStats
from themestats.state.rate_limit import RateLimiter, RateLimitPolicy, RateLimitTier
from themestats.state.repositories import IdentityRepository, KeyValueStore, RatingRepository
__all__ = ["InstallOutcome", "MutationCoordinator", "RatingOutcome", "RequestState",
           "DatabaseManager", "DatabaseError", "DatabaseNotInitializedError",
           "BotCheckExchange", "HumanVerifier",
           "IdentityRegistrationError", "lookup_identity", "register_identity", "resolve_identity",
           "purge_expired", "purge_expired_periodically",
           "PublicKeyIdentity", "RatingStats", "ThemeStats",
           "RateLimiter", "RateLimitPolicy", "RateLimitTier",
           "IdentityRepository", "KeyValueStore", "RatingRepository"]
