"""Health check endpoint."""

from fastapi import APIRouter, Depends

from ... import __version__
from ...ehr.client import EHRClient, get_client
from ..models.responses import HealthResponse

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health_check(client: EHRClient = Depends(get_client)) -> HealthResponse:
    """Check API health status."""
    return HealthResponse(
        status="ok",
        backend_configured=client.settings.check() is None,
        version=__version__,
    )
