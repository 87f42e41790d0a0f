"""Rating repository."""
import aiosqlite
from datetime import datetime, timezone
from themestats.state.models.rating import RatingStats


class RatingRepository:
    def __init__(self, conn: aiosqlite.Connection) -> None: self._conn = conn

    async def upsert(self, theme_id: str, key_id: str, rating: int) -> None:
        await self._conn.execute(
            "INSERT INTO ratings (theme_id, key_id, rating, updated_at) VALUES (?, ?, ?, ?) "
            "ON CONFLICT(theme_id, key_id) DO UPDATE SET rating = excluded.rating, updated_at = excluded.updated_at",
            (theme_id, key_id.lower(), rating, datetime.now(timezone.utc).isoformat()),
        )
        await self._conn.commit()

    async def has_rating(self, theme_id: str, key_id: str) -> bool:
        c = await self._conn.execute(
            "SELECT 1 FROM ratings WHERE theme_id = ? AND key_id = ?", (theme_id, key_id.lower()),
        )
        return await c.fetchone() is not None

    async def get_stats(self, theme_id: str) -> RatingStats:
        c = await self._conn.execute(
            "SELECT AVG(rating) AS avg_rating, COUNT(*) AS rating_count FROM ratings WHERE theme_id = ?", (theme_id,),
        )
        r = await c.fetchone()
        return RatingStats.from_aggregate(r["avg_rating"], r["rating_count"])

    async def get_all_stats(self) -> dict[str, RatingStats]:
        c = await self._conn.execute(
            "SELECT theme_id, AVG(rating) AS avg_rating, COUNT(*) AS rating_count FROM ratings GROUP BY theme_id"
        )
        return {r["theme_id"]: RatingStats.from_aggregate(r["avg_rating"], r["rating_count"]) for r in await c.fetchall()}

    async def get_user_ratings(self, key_id: str) -> dict[str, int]:
        c = await self._conn.execute("SELECT theme_id, rating FROM ratings WHERE key_id = ?", (key_id.lower(),))
        return {r["theme_id"]: r["rating"] for r in await c.fetchall()}
