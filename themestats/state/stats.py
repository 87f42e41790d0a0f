"""Per-theme aggregate of install counts and ratings."""
import asyncio

import aiosqlite

from themestats.state.coordinator import INSTALL_COUNT_PREFIX, read_install_count
from themestats.state.models.rating import RatingStats, ThemeStats
from themestats.state.repositories.kv import KeyValueStore
from themestats.state.repositories.ratings import RatingRepository


async def collect_theme_stats(conn: aiosqlite.Connection, kv: KeyValueStore) -> dict[str, ThemeStats]:
    """Join install counters and rating aggregates; a theme may appear in either."""
    ratings = await RatingRepository(conn).get_all_stats()
    theme_ids = [key[len(INSTALL_COUNT_PREFIX):] for key in await kv.list(INSTALL_COUNT_PREFIX)]
    counts = await asyncio.gather(*(read_install_count(kv, theme_id) for theme_id in theme_ids))

    result: dict[str, ThemeStats] = {}
    for theme_id, count in zip(theme_ids, counts):
        rating = ratings.pop(theme_id, RatingStats(average=0, count=0))
        result[theme_id] = ThemeStats(installs=count, rating=rating.average, rating_count=rating.count)
    for theme_id, rating in ratings.items():
        result[theme_id] = ThemeStats(installs=0, rating=rating.average, rating_count=rating.count)
    return result
