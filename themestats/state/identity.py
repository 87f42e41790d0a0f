"""Trust-on-first-use identity registry.

An unknown key id is bound to the public key that hashes to it the first
time a request presents both. Once stored, the binding never changes:
later requests are verified against the stored key whatever key material
they carry inline. Anyone can mint identities; the per-IP first-mutation
rate limit is the only brake on that.
"""
import logging
from datetime import datetime, timezone
from typing import Any, Mapping, Optional

import aiosqlite

from themestats.errors import InvalidRequestError, KeyIdMismatchError, PublicKeyRequiredError
from themestats.protocol.keys import KEY_ID_FIELDS, generate_display_name, normalize_key_id, verify_key_id
from themestats.protocol.signing import load_public_key
from themestats.state.models.public_key import PublicKeyIdentity
from themestats.state.repositories.identities import IdentityRepository

logger = logging.getLogger(__name__)


class IdentityRegistrationError(Exception):
    """Raised when a row vanished between insert and re-read."""


async def lookup_identity(conn: aiosqlite.Connection, key_id: str) -> Optional[PublicKeyIdentity]:
    return await IdentityRepository(conn).get(normalize_key_id(key_id))


async def register_identity(
    conn: aiosqlite.Connection, key_id: str, public_key: Mapping[str, Any],
) -> PublicKeyIdentity:
    """Insert an identity, or return the row already stored under ``key_id``.

    The caller must have checked that ``public_key`` hashes to ``key_id``.
    A concurrent registration of the same key id is not an error: the
    losing insert is ignored and both callers get the stored row.
    """
    key_id = normalize_key_id(key_id)
    identity = PublicKeyIdentity(
        key_id=key_id,
        public_key=dict(public_key),
        display_name=generate_display_name(key_id),
        registered_at=datetime.now(timezone.utc),
    )
    repo = IdentityRepository(conn)
    if await repo.insert(identity):
        logger.info("Registered identity %s (%s)", key_id, identity.display_name)
        return identity
    stored = await repo.get(key_id)
    if stored is None:
        raise IdentityRegistrationError(f"Identity {key_id} missing after registration")
    logger.debug("Identity %s already registered", key_id)
    return stored


async def resolve_identity(
    conn: aiosqlite.Connection, key_id: str, inline_key: Optional[Mapping[str, Any]],
) -> PublicKeyIdentity:
    """Return the stored identity, registering it from ``inline_key`` on first contact.

    Raises:
        PublicKeyRequiredError: Unknown key id and no inline key.
        KeyIdMismatchError: Inline key does not hash to ``key_id``.
    """
    stored = await lookup_identity(conn, key_id)
    if stored is not None:
        return stored
    if not inline_key:
        raise PublicKeyRequiredError()
    if not verify_key_id(key_id, inline_key):
        logger.warning("Key id %s does not match the presented public key", key_id)
        raise KeyIdMismatchError()
    # Only the hashed members are stored; extras never reach verification.
    material = {name: inline_key.get(name) for name in KEY_ID_FIELDS}
    try:
        load_public_key(material)
    except ValueError as exc:
        raise InvalidRequestError("Public key must be a valid EC P-256 JWK") from exc
    return await register_identity(conn, key_id, material)
