"""Medication endpoints.

Listing and reading work on the Medication catalogue; recording a
medication for a patient creates a MedicationStatement.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends, Request

from ...ehr.client import EHRClient, get_client
from ...ehr.resources import build_medication_statement, build_medication_update
from ...ehr.search import forward_params
from ..models.requests import MedicationStatementRequest
from ..security import require_access_token
from ..services.proxy import reconciliation_message, upstream_failure, with_message

router = APIRouter(prefix="/medications", tags=["medications"])


@router.get("")
async def search_medications(
    request: Request,
    token: str = Depends(require_access_token),
    client: EHRClient = Depends(get_client),
):
    params = forward_params("Medication", request.query_params)
    try:
        return await client.get("/Medication", token, params=params)
    except Exception as e:
        return upstream_failure("fetching medications", e)


@router.post("", status_code=201)
async def create_medication_statement(
    body: MedicationStatementRequest,
    token: str = Depends(require_access_token),
    client: EHRClient = Depends(get_client),
):
    """Record a medication the patient is taking."""
    resource = build_medication_statement(body.model_dump(exclude_unset=True))
    try:
        data = await client.post("/MedicationStatement", token, resource)
    except Exception as e:
        return upstream_failure("creating medication statement", e)
    return with_message(data, reconciliation_message("MedicationStatement", "created"))


@router.get("/{medication_id}")
async def get_medication(
    medication_id: str,
    token: str = Depends(require_access_token),
    client: EHRClient = Depends(get_client),
):
    try:
        return await client.get(f"/Medication/{medication_id}", token)
    except Exception as e:
        return upstream_failure("getting medication", e)


@router.put("/{medication_id}")
async def update_medication(
    medication_id: str,
    body: dict[str, Any] = Body(...),
    token: str = Depends(require_access_token),
    client: EHRClient = Depends(get_client),
):
    """Update a medication's ``status`` or ``effectivePeriod``.

    Any other clinical field in the body is rejected with 400.
    """
    resource = build_medication_update(medication_id, body)
    try:
        data = await client.put(f"/Medication/{medication_id}", token, resource)
    except Exception as e:
        return upstream_failure("updating medication", e)
    return with_message(data, reconciliation_message("Medication", "updated"))
