"""Exception types for the themestats client library."""
from typing import Optional


class ThemeStatsClientError(Exception):
    """Base exception for all client errors."""
    pass


class SignatureError(ThemeStatsClientError):
    """ECDSA key handling or signing failed."""
    pass


class TransportError(ThemeStatsClientError):
    """Network communication error."""
    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class ApiError(TransportError):
    """The service answered with an ``{"error", "message"}`` body."""
    def __init__(self, code: str, message: str, status_code: int) -> None:
        super().__init__(f"{code}: {message}", status_code=status_code)
        self.code = code
        self.api_message = message


class RateLimitError(ApiError):
    """Request was rate limited by the service."""
    def __init__(self, message: str, retry_after: Optional[int] = None) -> None:
        super().__init__("RATE_LIMITED", message, 429)
        self.retry_after = retry_after
