"""Appointment and slot endpoints.

Responses to writes carry ``mmpmStatus``, the practice-management name for
the appointment's FHIR status (e.g. ``booked`` is shown as ``confirmed``).
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request

from ...ehr.client import EHRClient, get_client
from ...ehr.mappings import map_appointment_status
from ...ehr.resources import build_appointment, build_appointment_update
from ...ehr.search import forward_params, slot_params
from ..models.requests import AppointmentRequest
from ..security import require_access_token
from ..services.proxy import upstream_failure, with_message

router = APIRouter(prefix="/appointments", tags=["appointments"])


@router.get("")
async def search_appointments(
    request: Request,
    token: str = Depends(require_access_token),
    client: EHRClient = Depends(get_client),
):
    """Search appointments by patient, practitioner, date, status, ..."""
    params = forward_params("Appointment", request.query_params)
    try:
        return await client.get("/Appointment", token, params=params)
    except Exception as e:
        return upstream_failure("fetching appointments", e)


@router.post("", status_code=201)
async def create_appointment(
    body: AppointmentRequest,
    token: str = Depends(require_access_token),
    client: EHRClient = Depends(get_client),
):
    """Book an appointment.

    Requires at least one Patient/Location/Practitioner participant, a
    start time, and either an end time or a duration.
    """
    payload = body.model_dump(exclude_unset=True)
    resource = build_appointment(payload)
    try:
        data = await client.post("/Appointment", token, resource)
    except Exception as e:
        return upstream_failure("creating appointment", e)

    status = data.get("status") or resource["status"]
    return with_message(
        data,
        "Appointment created successfully",
        mmpmStatus=map_appointment_status(status),
    )


@router.get("/slots")
async def search_slots(
    request: Request,
    token: str = Depends(require_access_token),
    client: EHRClient = Depends(get_client),
):
    """Find open slots for an appointment type."""
    params = slot_params(request.query_params)
    try:
        return await client.get("/Slot", token, params=params)
    except Exception as e:
        return upstream_failure("fetching slots", e)


@router.get("/{appointment_id}")
async def get_appointment(
    appointment_id: str,
    token: str = Depends(require_access_token),
    client: EHRClient = Depends(get_client),
):
    try:
        return await client.get(f"/Appointment/{appointment_id}", token)
    except Exception as e:
        return upstream_failure("getting appointment", e)


@router.put("/{appointment_id}")
async def update_appointment(
    appointment_id: str,
    body: AppointmentRequest,
    token: str = Depends(require_access_token),
    client: EHRClient = Depends(get_client),
):
    """Reschedule, cancel or otherwise update an appointment."""
    resource = build_appointment_update(appointment_id, body.model_dump(exclude_unset=True))
    try:
        data = await client.put(f"/Appointment/{appointment_id}", token, resource)
    except Exception as e:
        return upstream_failure("updating appointment", e)

    status = data.get("status") or resource.get("status") or "pending"
    return with_message(
        data,
        "Appointment updated successfully",
        mmpmStatus=map_appointment_status(status),
    )
