"""Input validation utilities for CLI commands."""

import re


def validate_api_url(api_url: str) -> str:
    """Validate and return the service base URL. Raises ValueError if invalid."""
    if not api_url or not api_url.strip():
        raise ValueError("API URL cannot be empty")
    api_url = api_url.strip().rstrip("/")
    if not api_url.startswith(("https://", "http://localhost", "http://127.0.0.1")):
        raise ValueError("API URL must use HTTPS (http is allowed for localhost only)")
    return api_url


def validate_theme_id(theme_id: str) -> str:
    """Validate and return theme ID. Raises ValueError if invalid."""
    if not theme_id or not theme_id.strip():
        raise ValueError("Theme ID cannot be empty")
    theme_id = theme_id.strip()
    if len(theme_id) > 100:
        raise ValueError("Theme ID cannot exceed 100 characters")
    if not re.match(r"^[A-Za-z0-9-]+$", theme_id):
        raise ValueError("Theme ID can only contain letters, numbers, and hyphens")
    return theme_id


def validate_rating(rating: int) -> int:
    if not 1 <= rating <= 5:
        raise ValueError("Rating must be between 1 and 5")
    return rating
