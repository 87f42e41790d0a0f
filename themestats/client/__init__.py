"""Themestats Python client library."""

from .client import ThemeStatsClient
from .crypto import generate_keypair, key_id_for, private_key_from_pem, private_key_to_pem, public_key_to_jwk, sign_payload
from .envelope import build_envelope, new_nonce
from .exceptions import ApiError, RateLimitError, SignatureError, ThemeStatsClientError, TransportError

__all__ = [
    "ThemeStatsClient",
    "generate_keypair", "key_id_for", "private_key_from_pem", "private_key_to_pem", "public_key_to_jwk", "sign_payload",
    "build_envelope", "new_nonce",
    "ApiError", "RateLimitError", "SignatureError", "ThemeStatsClientError", "TransportError",
]
