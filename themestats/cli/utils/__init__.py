"""CLI utilities."""

from .config import ClientConfig, ConfigError, ConfigManager
from .validation import validate_api_url, validate_rating, validate_theme_id

__all__ = [
    "ConfigManager",
    "ClientConfig",
    "ConfigError",
    "validate_api_url",
    "validate_rating",
    "validate_theme_id",
]
