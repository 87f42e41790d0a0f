"""State models."""
from themestats.state.models.public_key import PublicKeyIdentity
from themestats.state.models.rating import RatingStats, ThemeStats
__all__ = ["PublicKeyIdentity", "RatingStats", "ThemeStats"]
