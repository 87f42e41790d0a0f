"""HTTP transport layer with retry logic."""

import asyncio
import random
from typing import Any

import httpx

from .exceptions import ApiError, RateLimitError, TransportError


class Transport:
    def __init__(self, base_url: str, timeout: float = 30.0, max_retries: int = 3,
                 transport: httpx.AsyncBaseTransport | None = None) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._max_retries = max_retries
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> "Transport":
        self._client = httpx.AsyncClient(base_url=self._base_url, timeout=httpx.Timeout(self._timeout),
            transport=self._transport, headers={"Content-Type": "application/json"})
        return self

    async def __aexit__(self, exc_type: type | None, exc_val: Any, exc_tb: Any) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    def _backoff(self, attempt: int) -> float:
        delay = min(1.0 * (2 ** attempt), 30.0)
        return max(0.1, delay + delay * 0.25 * (2 * random.random() - 1))

    def _retryable(self, code: int) -> bool:
        return code in (408, 500, 502, 503, 504)

    async def post(self, path: str, data: dict, retry: bool = True) -> Any:
        return await self._request("POST", path, data, retry)

    async def get(self, path: str, retry: bool = True) -> Any:
        return await self._request("GET", path, None, retry)

    async def _request(self, method: str, path: str, data: dict | None, retry: bool) -> Any:
        if not self._client:
            raise TransportError("Transport not initialized")
        last_err: Exception | None = None
        attempts = self._max_retries if retry else 1
        for i in range(attempts):
            try:
                resp = await self._client.request(method, path, json=data)
            except (httpx.TimeoutException, httpx.RequestError) as e:
                last_err = e
                if i < attempts - 1:
                    await asyncio.sleep(self._backoff(i))
                continue
            if self._retryable(resp.status_code) and i < attempts - 1:
                await asyncio.sleep(self._backoff(i))
                continue
            return self._decode(resp)
        raise TransportError(f"Request failed after {attempts} attempts: {last_err}")

    def _decode(self, resp: httpx.Response) -> Any:
        try:
            body = resp.json() if resp.content else None
        except ValueError:
            body = None
        if resp.status_code < 400:
            return body
        code = body.get("error", "HTTP_ERROR") if isinstance(body, dict) else "HTTP_ERROR"
        message = body.get("message", resp.reason_phrase) if isinstance(body, dict) else resp.reason_phrase
        if resp.status_code == 429:
            retry_after = resp.headers.get("Retry-After")
            raise RateLimitError(message, int(retry_after) if retry_after and retry_after.isdigit() else None)
        raise ApiError(code, message, resp.status_code)
