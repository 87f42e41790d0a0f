"""Tests for background purging of expired counters."""
import asyncio
import time

from themestats.state.maintenance import purge_expired, purge_expired_periodically
from themestats.state.repositories import KeyValueStore


async def _expired_row(conn, key: str) -> None:
    await conn.execute(
        "INSERT INTO kv_store (key, value, expires_at) VALUES (?, ?, ?)", (key, "3", time.time() - 1),
    )
    await conn.commit()


async def _row_count(db) -> int:
    async with db.connection() as conn:
        c = await conn.execute("SELECT COUNT(*) FROM kv_store")
        return (await c.fetchone())[0]


class TestPurgeExpired:
    async def test_removes_only_expired(self, db) -> None:
        async with db.connection() as conn:
            await _expired_row(conn, "ratelimit:rate:1.2.3.4:1")
            await KeyValueStore(conn).put("installs:dark-mode", "1")
        assert await purge_expired(db) == 1
        assert await _row_count(db) == 1

    async def test_periodic_task_purges_until_cancelled(self, db) -> None:
        task = asyncio.create_task(purge_expired_periodically(db, interval=0.01))
        try:
            async with db.connection() as conn:
                await _expired_row(conn, "ratelimit:turnstile:1.2.3.4:1")
            for _ in range(200):
                if await _row_count(db) == 0:
                    break
                await asyncio.sleep(0.01)
            assert await _row_count(db) == 0
        finally:
            task.cancel()
        await asyncio.gather(task, return_exceptions=True)
        assert task.cancelled()
