"""Exception types rendered as ``{"error": CODE, "message": ...}`` responses."""
from typing import Optional


class ThemeStatsError(Exception):
    status_code: int = 500
    error_code: str = "INTERNAL_ERROR"
    default_message: str = "An unexpected error occurred"

    def __init__(self, message: Optional[str] = None) -> None:
        message = message or self.default_message
        super().__init__(message)
        self.message = message


class InvalidRequestError(ThemeStatsError):
    status_code = 400
    error_code = "INVALID_REQUEST"
    default_message = "Request must include valid payload and signature"


class InvalidJsonError(InvalidRequestError):
    error_code = "INVALID_JSON"
    default_message = "Request body must be valid JSON"


class InvalidThemeIdError(InvalidRequestError):
    error_code = "INVALID_THEME_ID"
    default_message = "Theme ID must be alphanumeric with hyphens only"


class InvalidKeyIdError(InvalidRequestError):
    error_code = "INVALID_KEY_ID"
    default_message = "Key ID must be a 64-character hex string"


class ThemeMismatchError(InvalidRequestError):
    error_code = "THEME_MISMATCH"
    default_message = "Payload themeId must match URL parameter"


class TimestampExpiredError(InvalidRequestError):
    error_code = "TIMESTAMP_EXPIRED"
    default_message = "Request timestamp is too old or too far in the future"


class PublicKeyRequiredError(InvalidRequestError):
    error_code = "PUBLIC_KEY_REQUIRED"
    default_message = "Public key is required for first-time registration"


class KeyIdMismatchError(InvalidRequestError):
    error_code = "KEY_ID_MISMATCH"
    default_message = "Key ID does not match the provided public key"


class AuthorizationRequiredError(ThemeStatsError):
    status_code = 401
    error_code = "CERTIFICATE_OR_TOKEN_REQUIRED"
    default_message = "Either a certificate or Turnstile token is required"


class InvalidCertificateError(ThemeStatsError):
    status_code = 401
    error_code = "INVALID_CERTIFICATE"
    default_message = "Certificate is invalid or expired"


class InvalidTurnstileError(ThemeStatsError):
    status_code = 401
    error_code = "INVALID_TURNSTILE"
    default_message = "Turnstile verification failed"


class InvalidSignatureError(ThemeStatsError):
    status_code = 403
    error_code = "INVALID_SIGNATURE"
    default_message = "Signature verification failed"


class NotFoundError(ThemeStatsError):
    status_code = 404
    error_code = "NOT_FOUND"
    default_message = "The requested resource does not exist"


class KeyNotFoundError(NotFoundError):
    error_code = "KEY_NOT_FOUND"
    default_message = "No identity found for this key ID"


class RateLimitedError(ThemeStatsError):
    status_code = 429
    error_code = "RATE_LIMITED"
    default_message = "Rate limit exceeded"

    def __init__(self, message: Optional[str] = None, retry_after: Optional[int] = None) -> None:
        super().__init__(message)
        self.retry_after = retry_after
