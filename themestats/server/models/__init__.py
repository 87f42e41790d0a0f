"""Pydantic models for request/response validation."""
from themestats.server.models.requests import (
    InstallPayload,
    InstallRequest,
    PublicKeyJwk,
    RatingPayload,
    RatingRequest,
    SignedPayload,
    UserRatingsRequest,
)
from themestats.server.models.responses import (
    ErrorResponse,
    HealthResponse,
    IdentityResponse,
    InstallResponse,
    RatingResponse,
    RatingStatsResponse,
    ThemeStatsResponse,
)

__all__ = [
    "InstallPayload",
    "InstallRequest",
    "PublicKeyJwk",
    "RatingPayload",
    "RatingRequest",
    "SignedPayload",
    "UserRatingsRequest",
    "ErrorResponse",
    "HealthResponse",
    "IdentityResponse",
    "InstallResponse",
    "RatingResponse",
    "RatingStatsResponse",
    "ThemeStatsResponse",
]
