"""Rating aggregate models."""
import math
from dataclasses import dataclass


@dataclass(frozen=True)
class RatingStats:
    average: float
    count: int

    @classmethod
    def from_aggregate(cls, avg_rating: float | None, rating_count: int | None) -> "RatingStats":
        """Round the average half-up to one decimal; a theme without ratings averages 0."""
        average = math.floor(avg_rating * 10 + 0.5) / 10 if avg_rating else 0
        return cls(average=average, count=rating_count or 0)


@dataclass(frozen=True)
class ThemeStats:
    installs: int
    rating: float
    rating_count: int

    def to_dict(self) -> dict:
        return {"installs": self.installs, "rating": self.rating, "ratingCount": self.rating_count}
