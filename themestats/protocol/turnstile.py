"""Cloudflare Turnstile token verification."""
import logging
from typing import Optional

import httpx

logger = logging.getLogger(__name__)

TURNSTILE_VERIFY_URL = "https://challenges.cloudflare.com/turnstile/v0/siteverify"


class TurnstileVerifier:
    """Verifies one-time human-verification tokens against ``siteverify``.

    A shared ``httpx.AsyncClient`` may be injected; otherwise a short-lived
    client is opened per call.
    """

    def __init__(
        self,
        secret_key: str,
        verify_url: str = TURNSTILE_VERIFY_URL,
        timeout: float = 10.0,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        if not secret_key:
            raise ValueError("Turnstile secret key cannot be empty")
        self._secret_key = secret_key
        self._verify_url = verify_url
        self._timeout = timeout
        self._client = client

    async def verify(self, token: str, remote_ip: Optional[str] = None) -> bool:
        """Return True only when siteverify reports ``success: true``."""
        body = {"secret": self._secret_key, "response": token}
        if remote_ip and remote_ip != "unknown":
            body["remoteip"] = remote_ip
        try:
            if self._client is not None:
                response = await self._client.post(self._verify_url, json=body, timeout=self._timeout)
            else:
                async with httpx.AsyncClient(timeout=self._timeout) as client:
                    response = await client.post(self._verify_url, json=body)
        except httpx.HTTPError as exc:
            logger.warning("Turnstile verification request failed: %s", exc)
            return False
        if response.status_code >= 400:
            logger.warning("Turnstile siteverify returned %d", response.status_code)
            return False
        try:
            data = response.json()
        except ValueError:
            return False
        if not isinstance(data, dict):
            return False
        if data.get("success") is not True:
            logger.info("Turnstile token rejected: %s", data.get("error-codes", []))
            return False
        return True
