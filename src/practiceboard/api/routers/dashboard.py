"""Dashboard landing-page summary."""

from __future__ import annotations

import asyncio
import logging

from fastapi import APIRouter, Depends

from ...ehr.client import EHRClient, get_client
from ...ehr.dashboard import bundle_resources, compute_stats
from ..models.responses import DashboardResponse
from ..security import require_access_token

logger = logging.getLogger(__name__)

router = APIRouter(tags=["dashboard"])

PAGE_SIZE = "50"

SOURCES = (
    ("patients", "/Patient"),
    ("appointments", "/Appointment"),
    ("allergies", "/AllergyIntolerance"),
)


@router.get("/dashboard", response_model=DashboardResponse)
async def dashboard(
    token: str = Depends(require_access_token),
    client: EHRClient = Depends(get_client),
) -> DashboardResponse:
    """Patient count, today's appointments, critical allergies, active cases.

    The three searches run concurrently; a source that fails counts as
    empty and is named in ``errors``.
    """
    results = await asyncio.gather(
        *(client.get(path, token, params={"_count": PAGE_SIZE}) for _, path in SOURCES),
        return_exceptions=True,
    )

    resources = {}
    errors = []
    for (name, _), result in zip(SOURCES, results):
        if isinstance(result, Exception):
            logger.error("Error fetching %s for dashboard: %s", name, result)
            errors.append(name)
            resources[name] = []
        else:
            resources[name] = bundle_resources(result)

    stats = compute_stats(
        resources["patients"],
        resources["appointments"],
        resources["allergies"],
    )
    return DashboardResponse(**stats, errors=errors)
