"""Patient endpoints.

Proxies Patient search, read, create and update to the backend.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from ...ehr.client import EHRClient, get_client
from ...ehr.resources import build_patient, build_patient_from_form, build_patient_update
from ...ehr.search import forward_params
from ..models.requests import PatientFormRequest, PatientRequest
from ..security import require_access_token
from ..services.proxy import forwarded_headers, upstream_failure

router = APIRouter(prefix="/patients", tags=["patients"])

# Backend-specific header controlling duplicate/merge handling on writes
CONTENT_FLAG = "Content-Flag"


@router.get("")
async def search_patients(
    request: Request,
    token: str = Depends(require_access_token),
    client: EHRClient = Depends(get_client),
):
    """Search patients. Supported FHIR search parameters are forwarded."""
    try:
        return await client.get(
            "/Patient", token, params=forward_params("Patient", request.query_params)
        )
    except Exception as e:
        return upstream_failure("fetching patients", e)


@router.post("", status_code=201)
async def create_patient(
    body: PatientRequest,
    request: Request,
    token: str = Depends(require_access_token),
    client: EHRClient = Depends(get_client),
):
    """Create a patient record."""
    resource = build_patient(body.model_dump(exclude_unset=True))
    try:
        return await client.post(
            "/Patient",
            token,
            resource,
            headers=forwarded_headers(request.headers, (CONTENT_FLAG,)),
        )
    except Exception as e:
        return upstream_failure("creating patient", e)


@router.put("")
async def update_patient(
    body: PatientRequest,
    request: Request,
    token: str = Depends(require_access_token),
    client: EHRClient = Depends(get_client),
):
    """Replace a patient record; the id travels in the body."""
    resource = build_patient_update(body.model_dump(exclude_unset=True))
    try:
        return await client.put(
            f"/Patient/{resource['id']}",
            token,
            resource,
            headers=forwarded_headers(request.headers, (CONTENT_FLAG,)),
        )
    except Exception as e:
        return upstream_failure("updating patient", e)


@router.get("/{patient_id}")
async def get_patient(
    patient_id: str,
    token: str = Depends(require_access_token),
    client: EHRClient = Depends(get_client),
):
    """Read a single patient."""
    try:
        return await client.get(f"/Patient/{patient_id}", token)
    except Exception as e:
        return upstream_failure("getting patient", e)


@router.put("/{patient_id}")
async def update_patient_form(
    patient_id: str,
    body: PatientFormRequest,
    token: str = Depends(require_access_token),
    client: EHRClient = Depends(get_client),
):
    """Update a patient from the dashboard's edit dialog.

    The backend's status code and body are passed through as they are.
    """
    resource = build_patient_from_form(patient_id, body.model_dump(exclude_none=True))
    try:
        response = await client.put_raw(f"/Patient/{patient_id}", token, resource)
        return JSONResponse(status_code=response.status_code, content=response.json())
    except Exception as e:
        return upstream_failure("updating patient", e)
