"""Builds signed request envelopes."""

import secrets
import time
from typing import Any, Optional

from cryptography.hazmat.primitives.asymmetric import ec

from .crypto import key_id_for, public_key_to_jwk, sign_payload


def new_nonce() -> str:
    """32 characters from the base64url alphabet."""
    return secrets.token_urlsafe(24)


def build_envelope(
    private_key: ec.EllipticCurvePrivateKey,
    fields: dict[str, Any],
    include_public_key: bool = True,
    turnstile_token: Optional[str] = None,
    certificate: Optional[str] = None,
    timestamp: Optional[int] = None,
    nonce: Optional[str] = None,
) -> dict[str, Any]:
    """Sign ``fields`` plus ``timestamp``, ``nonce`` and ``keyId`` into a request body.

    The public key is attached by default so the first request from a new
    key registers it; the service ignores it for known keys.
    """
    public_key = private_key.public_key()
    payload = {
        **fields,
        "timestamp": timestamp if timestamp is not None else int(time.time() * 1000),
        "nonce": nonce or new_nonce(),
        "keyId": key_id_for(public_key),
    }
    body: dict[str, Any] = {"payload": payload, "signature": sign_payload(private_key, payload)}
    if include_public_key:
        body["publicKey"] = public_key_to_jwk(public_key)
    if certificate:
        body["certificate"] = certificate
    elif turnstile_token:
        body["turnstileToken"] = turnstile_token
    return body
