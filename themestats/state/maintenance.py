"""Background upkeep of the key-value store."""
import asyncio
import logging

import aiosqlite

from themestats.state.database import DatabaseManager
from themestats.state.repositories.kv import KeyValueStore

logger = logging.getLogger(__name__)

DEFAULT_PURGE_INTERVAL = 300.0


async def purge_expired(db: DatabaseManager) -> int:
    async with db.connection() as conn:
        purged = await KeyValueStore(conn).purge_expired()
    if purged:
        logger.info("Purged %d expired counters", purged)
    return purged


async def purge_expired_periodically(db: DatabaseManager, interval: float = DEFAULT_PURGE_INTERVAL) -> None:
    """Delete expired counters and markers every ``interval`` seconds until cancelled.

    Each closed rate-limit window leaves one row per subject behind.
    """
    while True:
        await asyncio.sleep(interval)
        try:
            await purge_expired(db)
        except aiosqlite.Error:
            logger.exception("Purging expired counters failed")
