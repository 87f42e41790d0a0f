"""Tests for ECDSA P-256 signature verification."""
import base64

import pytest

from themestats.client import generate_keypair, public_key_to_jwk, sign_payload
from themestats.protocol.signing import load_public_key, verify_signature


@pytest.fixture
def signed():
    private_key, public_key = generate_keypair()
    payload = {"themeId": "dark-mode", "rating": 4, "timestamp": 1700000000000, "nonce": "n" * 32}
    return payload, sign_payload(private_key, payload), public_key_to_jwk(public_key)


class TestVerifySignature:
    def test_valid_signature(self, signed) -> None:
        payload, signature, jwk = signed
        assert verify_signature(payload, signature, jwk) is True

    def test_member_order_irrelevant(self, signed) -> None:
        payload, signature, jwk = signed
        reordered = dict(reversed(list(payload.items())))
        assert verify_signature(reordered, signature, jwk) is True

    def test_tampered_payload_rejected(self, signed) -> None:
        payload, signature, jwk = signed
        assert verify_signature({**payload, "rating": 5}, signature, jwk) is False

    def test_other_key_rejected(self, signed) -> None:
        payload, signature, _ = signed
        _, other = generate_keypair()
        assert verify_signature(payload, signature, public_key_to_jwk(other)) is False

    def test_malformed_signature_returns_false(self, signed) -> None:
        payload, _, jwk = signed
        assert verify_signature(payload, "not base64!!", jwk) is False
        assert verify_signature(payload, base64.b64encode(b"short").decode(), jwk) is False

    def test_malformed_key_returns_false(self, signed) -> None:
        payload, signature, jwk = signed
        assert verify_signature(payload, signature, {**jwk, "crv": "P-384"}) is False
        assert verify_signature(payload, signature, {**jwk, "x": "AAAA"}) is False


class TestLoadPublicKey:
    def test_round_trips_jwk(self) -> None:
        _, public_key = generate_keypair()
        loaded = load_public_key(public_key_to_jwk(public_key))
        assert loaded.public_numbers() == public_key.public_numbers()

    def test_point_off_curve_rejected(self) -> None:
        _, public_key = generate_keypair()
        jwk = public_key_to_jwk(public_key)
        with pytest.raises(ValueError):
            load_public_key({**jwk, "y": jwk["x"]})

    def test_wrong_key_type_rejected(self) -> None:
        with pytest.raises(ValueError):
            load_public_key({"kty": "OKP", "crv": "Ed25519", "x": "abc"})
