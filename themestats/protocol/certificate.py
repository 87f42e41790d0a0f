"""Service-issued certificates proving a key id passed human verification.

Wire form is ``base64(json) + "." + base64(hmac_sha256(json, secret))``.
The secret belongs to the service alone and shares nothing with the
ECDSA keys clients sign envelopes with.
"""
import base64
import hashlib
import hmac
import json
from dataclasses import dataclass
from typing import Optional

from themestats.protocol.freshness import now_ms

CERTIFICATE_ISSUER = "better-lyrics-themes-api"


class CertificateError(Exception):
    """Base class for certificate validation errors."""


class CertificateSignatureError(CertificateError):
    """Raised when the certificate HMAC does not match."""


class CertificateExpiredError(CertificateError):
    """Raised when the certificate has expired."""


class CertificatePayloadError(CertificateError):
    """Raised when the certificate structure or claims are invalid."""


@dataclass(frozen=True)
class Certificate:
    key_id: str
    issued_at: int
    expires_at: Optional[int] = None
    issuer: str = CERTIFICATE_ISSUER

    def to_json(self) -> str:
        return json.dumps(
            {
                "keyId": self.key_id,
                "issuedAt": self.issued_at,
                "expiresAt": self.expires_at,
                "issuer": self.issuer,
            },
            separators=(",", ":"),
        )


def _sign(data: str, signing_key: str) -> bytes:
    return hmac.new(signing_key.encode("utf-8"), data.encode("utf-8"), hashlib.sha256).digest()


def encode_certificate(certificate: Certificate, signing_key: str) -> str:
    """Serialize and sign a certificate."""
    cert_json = certificate.to_json()
    cert_b64 = base64.b64encode(cert_json.encode("utf-8")).decode("ascii")
    signature_b64 = base64.b64encode(_sign(cert_json, signing_key)).decode("ascii")
    return f"{cert_b64}.{signature_b64}"


def issue_certificate(
    key_id: str,
    signing_key: str,
    now: Optional[int] = None,
    expires_at: Optional[int] = None,
) -> str:
    """Issue a certificate for ``key_id``; non-expiring unless ``expires_at`` is set."""
    certificate = Certificate(
        key_id=key_id,
        issued_at=now if now is not None else now_ms(),
        expires_at=expires_at,
    )
    return encode_certificate(certificate, signing_key)


def parse_certificate(token: str, signing_key: str, now: Optional[int] = None) -> Certificate:
    """Check a certificate's HMAC, issuer and expiry, returning its claims.

    Raises:
        CertificatePayloadError: If the structure or claims are invalid.
        CertificateSignatureError: If the HMAC does not match.
        CertificateExpiredError: If ``expiresAt`` is set and not in the future.
    """
    parts = token.split(".")
    if len(parts) != 2 or not all(parts):
        raise CertificatePayloadError(
            f"Invalid certificate structure: expected 2 parts, got {len(parts)}"
        )
    cert_b64, signature_b64 = parts
    try:
        cert_bytes = base64.b64decode(cert_b64, validate=True)
        signature = base64.b64decode(signature_b64, validate=True)
        cert_json = cert_bytes.decode("utf-8")
    except ValueError as exc:
        raise CertificatePayloadError(f"Cannot decode certificate: {exc}") from exc

    if not hmac.compare_digest(signature, _sign(cert_json, signing_key)):
        raise CertificateSignatureError("Certificate signature verification failed")

    try:
        claims = json.loads(cert_json)
    except json.JSONDecodeError as exc:
        raise CertificatePayloadError(f"Invalid certificate payload: {exc}") from exc
    if not isinstance(claims, dict):
        raise CertificatePayloadError("Certificate payload must be a JSON object")
    if claims.get("issuer") != CERTIFICATE_ISSUER:
        raise CertificatePayloadError(f"Unexpected issuer: {claims.get('issuer')!r}")
    key_id, issued_at, expires_at = claims.get("keyId"), claims.get("issuedAt"), claims.get("expiresAt")
    if not isinstance(key_id, str) or not isinstance(issued_at, (int, float)):
        raise CertificatePayloadError("Certificate is missing keyId or issuedAt")
    if expires_at is not None:
        if not isinstance(expires_at, (int, float)):
            raise CertificatePayloadError("Certificate expiresAt must be a number or null")
        if expires_at <= (now if now is not None else now_ms()):
            raise CertificateExpiredError(f"Certificate expired at {expires_at}")

    return Certificate(key_id=key_id, issued_at=int(issued_at), expires_at=expires_at)


def verify_certificate(
    token: str, expected_key_id: str, signing_key: str, now: Optional[int] = None,
) -> bool:
    """Return True only for an authentic, unexpired certificate bound to ``expected_key_id``."""
    try:
        certificate = parse_certificate(token, signing_key, now=now)
    except CertificateError:
        return False
    return certificate.key_id == expected_key_id
