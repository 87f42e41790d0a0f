"""ECDSA P-256 signature verification over canonical payloads."""
import base64
from typing import Any, Mapping

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.hazmat.primitives.asymmetric.utils import encode_dss_signature

from themestats.protocol.canonical import canonical_bytes

CURVE_NAME = "P-256"
KEY_TYPE = "EC"
COORDINATE_SIZE = 32
SIGNATURE_SIZE = 2 * COORDINATE_SIZE


def b64url_decode(data: str) -> bytes:
    """Decode base64url-encoded data with padding normalization."""
    padding = 4 - len(data) % 4
    if padding != 4:
        data += "=" * padding
    return base64.urlsafe_b64decode(data)


def b64url_encode(data: bytes) -> str:
    """Base64url encode without padding."""
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")


def load_public_key(jwk: Mapping[str, Any]) -> ec.EllipticCurvePublicKey:
    """Build a P-256 public key from its JWK form.

    Raises:
        ValueError: If the JWK is not an EC P-256 key or the point is
            not on the curve.
    """
    if jwk.get("kty") != KEY_TYPE or jwk.get("crv") != CURVE_NAME:
        raise ValueError("Public key must be an EC P-256 JWK")
    x, y = jwk.get("x"), jwk.get("y")
    if not isinstance(x, str) or not isinstance(y, str):
        raise ValueError("Public key coordinates must be base64url strings")
    x_bytes, y_bytes = b64url_decode(x), b64url_decode(y)
    if len(x_bytes) != COORDINATE_SIZE or len(y_bytes) != COORDINATE_SIZE:
        raise ValueError("Public key coordinates must be 32 bytes")
    numbers = ec.EllipticCurvePublicNumbers(
        int.from_bytes(x_bytes, "big"), int.from_bytes(y_bytes, "big"), ec.SECP256R1(),
    )
    return numbers.public_key()


def verify_signature(payload: Any, signature_b64: str, public_key: Mapping[str, Any]) -> bool:
    """Verify a raw ``r || s`` ECDSA signature over ``canonical_json(payload)``.

    Returns True if valid, False for any decoding or cryptographic failure.
    """
    try:
        key = load_public_key(public_key)
        raw = base64.b64decode(signature_b64, validate=True)
        if len(raw) != SIGNATURE_SIZE:
            return False
        r = int.from_bytes(raw[:COORDINATE_SIZE], "big")
        s = int.from_bytes(raw[COORDINATE_SIZE:], "big")
        key.verify(encode_dss_signature(r, s), canonical_bytes(payload), ec.ECDSA(hashes.SHA256()))
        return True
    except (InvalidSignature, ValueError, TypeError):
        return False
