"""Provider (Practitioner) endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request

from ...ehr.client import EHRClient, get_client
from ...ehr.resources import build_practitioner
from ...ehr.search import forward_params
from ..models.requests import PractitionerRequest
from ..security import require_access_token
from ..services.proxy import upstream_failure

router = APIRouter(prefix="/provider", tags=["providers"])


@router.get("")
async def search_providers(
    request: Request,
    token: str = Depends(require_access_token),
    client: EHRClient = Depends(get_client),
):
    """Search the practice's providers."""
    params = forward_params("Practitioner", request.query_params)
    try:
        return await client.get("/Practitioner", token, params=params)
    except Exception as e:
        return upstream_failure("fetching providers", e)


@router.post("", status_code=201)
async def create_provider(
    body: PractitionerRequest,
    token: str = Depends(require_access_token),
    client: EHRClient = Depends(get_client),
):
    resource = build_practitioner(body.model_dump(exclude_unset=True))
    try:
        return await client.post("/Practitioner", token, resource)
    except Exception as e:
        return upstream_failure("creating provider", e)


@router.get("/{provider_id}")
async def get_provider(
    provider_id: str,
    token: str = Depends(require_access_token),
    client: EHRClient = Depends(get_client),
):
    try:
        return await client.get(f"/Practitioner/{provider_id}", token)
    except Exception as e:
        return upstream_failure("getting provider", e)
