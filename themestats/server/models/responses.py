"""Response models for API endpoints."""
from typing import Annotated, Literal, Optional
from pydantic import BaseModel, ConfigDict, Field


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class RatingResponse(_CamelModel):
    average: Annotated[float, Field()]
    count: Annotated[int, Field()]
    certificate: Optional[str] = None


class RatingStatsResponse(_CamelModel):
    average: Annotated[float, Field()]
    count: Annotated[int, Field()]


class InstallResponse(_CamelModel):
    count: Annotated[int, Field()]
    already_counted: Optional[bool] = Field(default=None, alias="alreadyCounted")


class ThemeStatsResponse(_CamelModel):
    installs: Annotated[int, Field()]
    rating: Annotated[float, Field()]
    rating_count: Annotated[int, Field(alias="ratingCount")]


class IdentityResponse(_CamelModel):
    key_id: Annotated[str, Field(alias="keyId")]
    display_name: Annotated[str, Field(alias="displayName")]
    created_at: Annotated[str, Field(alias="createdAt")]


class HealthResponse(BaseModel):
    status: Literal["ok"] = "ok"


class ErrorResponse(BaseModel):
    error: Annotated[str, Field(pattern=r"^[A-Z][A-Z0-9_]*$")]
    message: Annotated[str, Field()]
