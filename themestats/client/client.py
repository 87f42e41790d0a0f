"""ThemeStatsClient: signed calls against the themes API."""

from __future__ import annotations

from typing import Any

import httpx
from cryptography.hazmat.primitives.asymmetric import ec

from .crypto import key_id_for
from .envelope import build_envelope
from .exceptions import ThemeStatsClientError
from .transport import Transport


class ThemeStatsClient:
    """Client for the themes API. Must be used as async context manager.

    Keeps the certificate earned by the last successful Turnstile-backed
    rating and sends it instead of a token on later ratings.
    """

    def __init__(self, base_url: str, private_key: ec.EllipticCurvePrivateKey,
                 certificate: str | None = None, timeout: float = 30.0, max_retries: int = 3,
                 transport: httpx.AsyncBaseTransport | None = None) -> None:
        self._private_key = private_key
        self._key_id = key_id_for(private_key.public_key())
        self._certificate = certificate
        self._transport = Transport(base_url, timeout, max_retries, transport=transport)

    @property
    def key_id(self) -> str:
        return self._key_id

    @property
    def certificate(self) -> str | None:
        return self._certificate

    async def __aenter__(self) -> "ThemeStatsClient":
        await self._transport.__aenter__()
        return self

    async def __aexit__(self, *args) -> None:
        await self._transport.__aexit__(*args)

    async def rate(self, theme_id: str, rating: int, turnstile_token: str | None = None) -> dict[str, Any]:
        """Submit a 1..5 rating; needs a stored certificate or ``turnstile_token``.

        An explicit token replaces the stored certificate for this call, so a
        certificate the service no longer accepts can be renewed.
        """
        if not self._certificate and not turnstile_token:
            raise ThemeStatsClientError("Rating requires a certificate or a Turnstile token")
        certificate = None if turnstile_token else self._certificate
        body = build_envelope(self._private_key, {"themeId": theme_id, "rating": rating},
                              turnstile_token=turnstile_token, certificate=certificate)
        # Mutations are not retried: a lost response must not cost a second quota slot.
        result = await self._transport.post(f"/api/rate/{theme_id}", body, retry=False)
        if isinstance(result, dict) and result.get("certificate"):
            self._certificate = result["certificate"]
        return result

    async def install(self, theme_id: str) -> dict[str, Any]:
        body = build_envelope(self._private_key, {"themeId": theme_id})
        return await self._transport.post(f"/api/install/{theme_id}", body, retry=False)

    async def my_ratings(self) -> dict[str, int]:
        body = build_envelope(self._private_key, {}, include_public_key=False)
        return await self._transport.post("/api/user/ratings", body, retry=False)

    async def rating(self, theme_id: str) -> dict[str, Any]:
        return await self._transport.get(f"/api/rating/{theme_id}")

    async def stats(self) -> dict[str, Any]:
        return await self._transport.get("/api/stats")

    async def identity(self, key_id: str | None = None) -> dict[str, Any]:
        return await self._transport.get(f"/api/identity/{key_id or self._key_id}")
