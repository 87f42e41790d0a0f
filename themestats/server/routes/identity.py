"""GET /api/identity/{key_id} endpoint handler."""
from fastapi import APIRouter

from themestats.errors import InvalidKeyIdError, NotFoundError
from themestats.protocol.keys import is_valid_key_id
from themestats.server.models.responses import IdentityResponse
from themestats.state.database import DatabaseManager
from themestats.state.identity import lookup_identity


def create_identity_router(db: DatabaseManager) -> APIRouter:
    """Create identity router with injected dependencies."""
    router = APIRouter()

    @router.get("/{key_id}", response_model=IdentityResponse, tags=["identity"])
    async def get_identity(key_id: str) -> IdentityResponse:
        """Public profile of a registered key: id, display name, registration time."""
        if not is_valid_key_id(key_id):
            raise InvalidKeyIdError()
        async with db.connection() as conn:
            identity = await lookup_identity(conn, key_id)
        if identity is None:
            raise NotFoundError("Identity not found")
        return IdentityResponse(
            key_id=identity.key_id,
            display_name=identity.display_name,
            created_at=identity.registered_at.isoformat(),
        )

    return router
