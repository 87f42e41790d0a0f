"""Signed-request protocol primitives."""
from themestats.protocol.canonical import canonical_bytes, canonical_json
from themestats.protocol.certificate import (
    CERTIFICATE_ISSUER,
    Certificate,
    CertificateError,
    CertificateExpiredError,
    CertificatePayloadError,
    CertificateSignatureError,
    issue_certificate,
    parse_certificate,
    verify_certificate,
)
from themestats.protocol.envelope import SignedEnvelope
from themestats.protocol.freshness import TIMESTAMP_TOLERANCE_MS, is_fresh, now_ms
from themestats.protocol.keys import (
    generate_display_name,
    hash_public_key,
    is_valid_key_id,
    normalize_key_id,
    verify_key_id,
)
from themestats.protocol.signing import load_public_key, verify_signature
from themestats.protocol.turnstile import TurnstileVerifier

__all__ = [
    "canonical_json", "canonical_bytes",
    "CERTIFICATE_ISSUER", "Certificate", "CertificateError", "CertificateExpiredError",
    "CertificatePayloadError", "CertificateSignatureError",
    "issue_certificate", "parse_certificate", "verify_certificate",
    "SignedEnvelope",
    "TIMESTAMP_TOLERANCE_MS", "is_fresh", "now_ms",
    "generate_display_name", "hash_public_key", "is_valid_key_id", "normalize_key_id", "verify_key_id",
    "load_public_key", "verify_signature",
    "TurnstileVerifier",
]
