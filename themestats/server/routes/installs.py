"""POST /api/install/{theme_id} endpoint handler."""
from fastapi import APIRouter, Depends, Request, status

from themestats.server.models.requests import InstallRequest
from themestats.server.models.responses import InstallResponse
from themestats.server.routes._helpers import client_ip, validate_theme_id
from themestats.state.coordinator import MutationCoordinator


def create_installs_router(coordinator: MutationCoordinator, client_ip_header: str) -> APIRouter:
    """Create installs router with injected dependencies."""
    router = APIRouter()

    @router.post(
        "/{theme_id}",
        response_model=InstallResponse,
        response_model_exclude_none=True,
        status_code=status.HTTP_200_OK,
        tags=["installs"],
    )
    async def record_install(
        request: Request, body: InstallRequest, theme_id: str = Depends(validate_theme_id),
    ) -> InstallResponse:
        """Count an install of a theme, once per identity.

        Idempotent: a repeat from the same identity returns the current
        count with ``alreadyCounted`` instead of an error.
        """
        outcome = await coordinator.record_install(
            theme_id, body.to_envelope(), client_ip(request, client_ip_header),
        )
        return InstallResponse(count=outcome.count, already_counted=outcome.already_counted or None)

    return router
