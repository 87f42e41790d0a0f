"""Key-value store with optional per-entry TTL, backed by the kv_store table."""
import time
from typing import Callable, Optional

import aiosqlite


class KeyValueStore:
    """Counters and markers keyed by string.

    Expired entries are invisible to ``get`` and ``list`` and are removed
    lazily by :meth:`purge_expired`. Read-modify-write sequences built on
    this store are not atomic.
    """

    def __init__(self, conn: aiosqlite.Connection, clock: Callable[[], float] = time.time) -> None:
        self._conn = conn
        self._clock = clock

    async def get(self, key: str) -> Optional[str]:
        c = await self._conn.execute(
            "SELECT value FROM kv_store WHERE key = ? AND (expires_at IS NULL OR expires_at > ?)",
            (key, self._clock()),
        )
        r = await c.fetchone()
        return r["value"] if r else None

    async def put(self, key: str, value: str, ttl: Optional[float] = None) -> None:
        """Store ``value``; with ``ttl`` (seconds) the entry expires after that long."""
        expires_at = self._clock() + ttl if ttl is not None else None
        await self._conn.execute(
            "INSERT INTO kv_store (key, value, expires_at) VALUES (?, ?, ?) "
            "ON CONFLICT(key) DO UPDATE SET value = excluded.value, expires_at = excluded.expires_at",
            (key, value, expires_at),
        )
        await self._conn.commit()

    async def list(self, prefix: str) -> list[str]:
        c = await self._conn.execute(
            "SELECT key FROM kv_store WHERE substr(key, 1, ?) = ? AND (expires_at IS NULL OR expires_at > ?) "
            "ORDER BY key",
            (len(prefix), prefix, self._clock()),
        )
        return [r["key"] for r in await c.fetchall()]

    async def purge_expired(self) -> int:
        c = await self._conn.execute(
            "DELETE FROM kv_store WHERE expires_at IS NOT NULL AND expires_at <= ?", (self._clock(),),
        )
        await self._conn.commit()
        return c.rowcount
