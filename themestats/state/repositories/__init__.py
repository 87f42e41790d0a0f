"""Repositories."""
from themestats.state.repositories.identities import IdentityRepository
from themestats.state.repositories.kv import KeyValueStore
from themestats.state.repositories.ratings import RatingRepository
__all__ = [
    "IdentityRepository",
    "KeyValueStore",
    "RatingRepository",
]
