"""Request logging middleware."""
import logging
import time
from typing import Callable
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

logger = logging.getLogger("themestats.server")
SENSITIVE_FIELDS = frozenset({"signature", "publickey", "turnstiletoken", "certificate", "authorization"})


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs incoming requests with the client address and timing."""

    def __init__(self, app: ASGIApp, client_ip_header: str = "CF-Connecting-IP") -> None:
        super().__init__(app)
        self._client_ip_header = client_ip_header

    async def dispatch(self, request: Request, call_next: Callable[[Request], Response]) -> Response:
        start_time = time.perf_counter()
        ip = request.headers.get(self._client_ip_header) or (request.client.host if request.client else "unknown")
        logger.info("Request: %s %s ip=%s", request.method, request.url.path, ip)

        response = await call_next(request)

        duration_ms = (time.perf_counter() - start_time) * 1000
        logger.info("Response: %s %s status=%d duration=%.2fms", request.method, request.url.path, response.status_code, duration_ms)
        return response


def sanitize_dict(data: dict) -> dict:
    """Redact signatures, key material and credentials from a body for logging."""
    result = {}
    for key, value in data.items():
        lower_key = key.lower().replace("_", "")
        if lower_key in SENSITIVE_FIELDS:
            result[key] = "[REDACTED]"
        elif isinstance(value, dict):
            result[key] = sanitize_dict(value)
        else:
            result[key] = value
    return result
