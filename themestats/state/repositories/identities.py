"""Public key identity repository."""
import json
import aiosqlite
from datetime import datetime
from typing import Optional
from themestats.state.models.public_key import PublicKeyIdentity


def _row_to_identity(r: aiosqlite.Row) -> PublicKeyIdentity:
    return PublicKeyIdentity(
        key_id=r["key_id"], public_key=json.loads(r["public_key"]),
        display_name=r["display_name"], registered_at=datetime.fromisoformat(r["created_at"]),
    )


class IdentityRepository:
    def __init__(self, conn: aiosqlite.Connection) -> None: self._conn = conn

    async def get(self, key_id: str) -> Optional[PublicKeyIdentity]:
        c = await self._conn.execute("SELECT * FROM public_keys WHERE key_id = ?", (key_id.lower(),))
        r = await c.fetchone()
        return _row_to_identity(r) if r else None

    async def insert(self, identity: PublicKeyIdentity) -> bool:
        """Insert unless the key id exists. Returns False when a row was already stored."""
        c = await self._conn.execute(
            "INSERT INTO public_keys (key_id, public_key, display_name, created_at) VALUES (?, ?, ?, ?) "
            "ON CONFLICT(key_id) DO NOTHING",
            (identity.key_id, identity.public_key_json, identity.display_name, identity.registered_at.isoformat()),
        )
        await self._conn.commit()
        return c.rowcount > 0

    async def count(self) -> int:
        c = await self._conn.execute("SELECT COUNT(*) FROM public_keys")
        return (await c.fetchone())[0]
