"""AllergyIntolerance endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request

from ...ehr.client import EHRClient, get_client
from ...ehr.resources import build_allergy
from ...ehr.search import forward_params
from ..models.requests import AllergyRequest
from ..security import require_access_token
from ..services.proxy import reconciliation_message, upstream_failure, with_message

router = APIRouter(prefix="/allergies", tags=["allergies"])


@router.get("")
async def search_allergies(
    request: Request,
    token: str = Depends(require_access_token),
    client: EHRClient = Depends(get_client),
):
    """Search allergies (by patient, clinical status, criticality, ...)."""
    params = forward_params("AllergyIntolerance", request.query_params)
    try:
        return await client.get("/AllergyIntolerance", token, params=params)
    except Exception as e:
        return upstream_failure("fetching allergies", e)


@router.post("", status_code=201)
async def create_allergy(
    body: AllergyRequest,
    token: str = Depends(require_access_token),
    client: EHRClient = Depends(get_client),
):
    """Document an allergy.

    Dashboard severities and free-text manifestations are coded before the
    resource is sent.
    """
    resource = build_allergy(body.model_dump(exclude_unset=True))
    try:
        data = await client.post("/AllergyIntolerance", token, resource)
    except Exception as e:
        return upstream_failure("creating allergy", e)
    return with_message(data, reconciliation_message("AllergyIntolerance", "created"))


@router.get("/{allergy_id}")
async def get_allergy(
    allergy_id: str,
    token: str = Depends(require_access_token),
    client: EHRClient = Depends(get_client),
):
    try:
        return await client.get(f"/AllergyIntolerance/{allergy_id}", token)
    except Exception as e:
        return upstream_failure("getting allergy", e)


@router.put("/{allergy_id}")
async def update_allergy(
    allergy_id: str,
    body: AllergyRequest,
    token: str = Depends(require_access_token),
    client: EHRClient = Depends(get_client),
):
    resource = build_allergy(body.model_dump(exclude_unset=True), allergy_id)
    try:
        data = await client.put(f"/AllergyIntolerance/{allergy_id}", token, resource)
    except Exception as e:
        return upstream_failure("updating allergy", e)
    return with_message(data, reconciliation_message("AllergyIntolerance", "updated"))
