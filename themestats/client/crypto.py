"""Client-side ECDSA P-256 keys and envelope signing."""

import base64
from typing import Any

from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.hazmat.primitives.asymmetric.utils import decode_dss_signature

from themestats.protocol.canonical import canonical_bytes
from themestats.protocol.keys import hash_public_key
from themestats.protocol.signing import COORDINATE_SIZE, b64url_encode

from .exceptions import SignatureError


def generate_keypair() -> tuple[ec.EllipticCurvePrivateKey, ec.EllipticCurvePublicKey]:
    """Generate a new P-256 keypair."""
    private_key = ec.generate_private_key(ec.SECP256R1())
    return private_key, private_key.public_key()


def public_key_to_jwk(public_key: ec.EllipticCurvePublicKey) -> dict[str, str]:
    """Export a public key as the ``{kty, crv, x, y}`` JWK the service expects."""
    if not isinstance(public_key.curve, ec.SECP256R1):
        raise SignatureError(f"Unsupported curve: {public_key.curve.name}")
    numbers = public_key.public_numbers()
    return {
        "kty": "EC",
        "crv": "P-256",
        "x": b64url_encode(numbers.x.to_bytes(COORDINATE_SIZE, "big")),
        "y": b64url_encode(numbers.y.to_bytes(COORDINATE_SIZE, "big")),
    }


def key_id_for(public_key: ec.EllipticCurvePublicKey) -> str:
    """The service-side identifier of ``public_key``."""
    return hash_public_key(public_key_to_jwk(public_key))


def private_key_to_pem(private_key: ec.EllipticCurvePrivateKey) -> bytes:
    return private_key.private_bytes(
        serialization.Encoding.PEM,
        serialization.PrivateFormat.PKCS8,
        serialization.NoEncryption(),
    )


def private_key_from_pem(data: bytes) -> ec.EllipticCurvePrivateKey:
    """Load a PKCS#8 PEM private key. Raises SignatureError if not a P-256 key."""
    try:
        key = serialization.load_pem_private_key(data, password=None)
    except (ValueError, TypeError) as e:
        raise SignatureError(f"Invalid private key: {e}") from e
    if not isinstance(key, ec.EllipticCurvePrivateKey) or not isinstance(key.curve, ec.SECP256R1):
        raise SignatureError("Private key must be an EC P-256 key")
    return key


def sign_payload(private_key: ec.EllipticCurvePrivateKey, payload: Any) -> str:
    """Sign ``canonical_json(payload)``. Returns the base64 raw ``r || s`` signature."""
    try:
        der = private_key.sign(canonical_bytes(payload), ec.ECDSA(hashes.SHA256()))
    except (ValueError, TypeError) as e:
        raise SignatureError(f"Failed to sign payload: {e}") from e
    r, s = decode_dss_signature(der)
    raw = r.to_bytes(COORDINATE_SIZE, "big") + s.to_bytes(COORDINATE_SIZE, "big")
    return base64.b64encode(raw).decode("ascii")
