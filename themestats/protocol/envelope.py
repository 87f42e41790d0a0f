"""Signed request envelope."""
from dataclasses import dataclass
from typing import Any, Optional


@dataclass(frozen=True)
class SignedEnvelope:
    """A signed request body as received on the wire.

    ``payload`` holds the exact signed members (domain fields plus
    ``timestamp``, ``nonce`` and ``keyId``). ``public_key`` is only
    consulted to register an unknown key id.
    """

    payload: dict[str, Any]
    signature: str
    public_key: Optional[dict[str, Any]] = None
    turnstile_token: Optional[str] = None
    certificate: Optional[str] = None

    @property
    def key_id(self) -> str:
        return str(self.payload["keyId"]).lower()

    @property
    def timestamp(self) -> float:
        return self.payload["timestamp"]

    @property
    def theme_id(self) -> Optional[str]:
        return self.payload.get("themeId")
