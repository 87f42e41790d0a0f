"""Helpers shared by the route handlers."""
import re

from fastapi import Request

from themestats.errors import InvalidThemeIdError
from themestats.server.models.requests import THEME_ID_PATTERN

_THEME_ID_RE = re.compile(THEME_ID_PATTERN)
MAX_THEME_ID_LENGTH = 100


def client_ip(request: Request, header: str) -> str:
    """Client address from the trusted proxy header, else the socket peer."""
    forwarded = request.headers.get(header)
    if forwarded:
        return forwarded.strip()
    return request.client.host if request.client else "unknown"


def validate_theme_id(theme_id: str) -> str:
    """Return ``theme_id`` or raise :class:`InvalidThemeIdError`.

    Used as a path dependency, so it runs before the request body is parsed.
    """
    if not theme_id or len(theme_id) > MAX_THEME_ID_LENGTH or not _THEME_ID_RE.match(theme_id):
        raise InvalidThemeIdError()
    return theme_id
