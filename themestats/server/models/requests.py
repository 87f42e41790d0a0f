"""Request models for API endpoints."""
from typing import Annotated, Literal, Optional, Union
from pydantic import BaseModel, ConfigDict, Field, StrictFloat, StrictInt, StrictStr
from themestats.protocol.envelope import SignedEnvelope

THEME_ID_PATTERN = r"^[A-Za-z0-9-]+$"
NONCE_PATTERN = r"^[A-Za-z0-9_-]{16,64}$"
KEY_ID_PATTERN = r"^[0-9a-fA-F]{64}$"

ThemeId = Annotated[StrictStr, Field(min_length=1, max_length=100, pattern=THEME_ID_PATTERN)]


class PublicKeyJwk(BaseModel):
    model_config = ConfigDict(extra="allow")

    kty: Literal["EC"]
    crv: Literal["P-256"]
    x: Annotated[StrictStr, Field(min_length=1)]
    y: Annotated[StrictStr, Field(min_length=1)]


class SignedPayload(BaseModel):
    """Members common to every signed payload.

    Unknown members are kept: they are part of what the client signed.
    Strict types stop pydantic from coercing values away from the signed
    form.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    timestamp: Union[StrictInt, StrictFloat]
    nonce: Annotated[StrictStr, Field(pattern=NONCE_PATTERN)]
    key_id: Annotated[StrictStr, Field(alias="keyId", pattern=KEY_ID_PATTERN)]


class InstallPayload(SignedPayload):
    theme_id: Annotated[ThemeId, Field(alias="themeId")]


class RatingPayload(InstallPayload):
    rating: Annotated[StrictInt, Field(ge=1, le=5)]


class _SignedRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    signature: Annotated[StrictStr, Field(min_length=1)]
    public_key: Optional[PublicKeyJwk] = Field(default=None, alias="publicKey")

    def to_envelope(self) -> SignedEnvelope:
        return SignedEnvelope(
            payload=self.payload.model_dump(by_alias=True),
            signature=self.signature,
            public_key=self.public_key.model_dump() if self.public_key else None,
            turnstile_token=getattr(self, "turnstile_token", None),
            certificate=getattr(self, "certificate", None),
        )


class InstallRequest(_SignedRequest):
    payload: InstallPayload


class RatingRequest(_SignedRequest):
    payload: RatingPayload
    turnstile_token: Optional[StrictStr] = Field(default=None, alias="turnstileToken")
    certificate: Optional[StrictStr] = None


class UserRatingsRequest(_SignedRequest):
    payload: SignedPayload
