"""Condition (problem list / diagnosis) endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request

from ...ehr.client import EHRClient, get_client
from ...ehr.resources import build_condition, build_condition_update
from ...ehr.search import forward_params
from ..models.requests import ConditionRequest
from ..security import require_access_token
from ..services.proxy import reconciliation_message, upstream_failure, with_message

router = APIRouter(prefix="/conditions", tags=["conditions"])


@router.get("")
async def search_conditions(
    request: Request,
    token: str = Depends(require_access_token),
    client: EHRClient = Depends(get_client),
):
    params = forward_params("Condition", request.query_params)
    try:
        return await client.get("/Condition", token, params=params)
    except Exception as e:
        return upstream_failure("fetching conditions", e)


@router.post("", status_code=201)
async def create_condition(
    body: ConditionRequest,
    token: str = Depends(require_access_token),
    client: EHRClient = Depends(get_client),
):
    """Add a condition; ``category`` may be a label such as "Diagnosis"."""
    payload = body.model_dump(exclude_unset=True)
    payload.pop("id", None)
    resource = build_condition(payload)
    try:
        data = await client.post("/Condition", token, resource)
    except Exception as e:
        return upstream_failure("creating condition", e)
    return with_message(data, reconciliation_message("Condition", "created"))


@router.put("")
async def update_condition_by_body(
    body: ConditionRequest,
    token: str = Depends(require_access_token),
    client: EHRClient = Depends(get_client),
):
    """Update a condition whose id travels in the body."""
    resource = build_condition_update(body.model_dump(exclude_unset=True))
    try:
        data = await client.put(f"/Condition/{resource['id']}", token, resource)
    except Exception as e:
        return upstream_failure("updating condition", e)
    return with_message(data, reconciliation_message("Condition", "updated"))


@router.get("/{condition_id}")
async def get_condition(
    condition_id: str,
    token: str = Depends(require_access_token),
    client: EHRClient = Depends(get_client),
):
    try:
        return await client.get(f"/Condition/{condition_id}", token)
    except Exception as e:
        return upstream_failure("getting condition", e)


@router.put("/{condition_id}")
async def update_condition(
    condition_id: str,
    body: ConditionRequest,
    token: str = Depends(require_access_token),
    client: EHRClient = Depends(get_client),
):
    resource = build_condition(body.model_dump(exclude_unset=True), condition_id)
    try:
        data = await client.put(f"/Condition/{condition_id}", token, resource)
    except Exception as e:
        return upstream_failure("updating condition", e)
    return with_message(data, reconciliation_message("Condition", "updated"))
