"""DiagnosticReport endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request

from ...ehr.client import EHRClient, get_client
from ...ehr.resources import build_diagnostic_report, build_diagnostic_report_update
from ...ehr.search import forward_params
from ..models.requests import DiagnosticReportRequest
from ..security import require_access_token
from ..services.proxy import upstream_failure

router = APIRouter(prefix="/diagnostic-report", tags=["diagnostic-reports"])


@router.get("")
async def search_diagnostic_reports(
    request: Request,
    token: str = Depends(require_access_token),
    client: EHRClient = Depends(get_client),
):
    params = forward_params("DiagnosticReport", request.query_params)
    try:
        return await client.get("/DiagnosticReport", token, params=params)
    except Exception as e:
        return upstream_failure("fetching diagnostic reports", e)


@router.post("", status_code=201)
async def create_diagnostic_report(
    body: DiagnosticReportRequest,
    token: str = Depends(require_access_token),
    client: EHRClient = Depends(get_client),
):
    payload = body.model_dump(exclude_unset=True)
    payload.pop("id", None)
    resource = build_diagnostic_report(payload)
    try:
        return await client.post("/DiagnosticReport", token, resource)
    except Exception as e:
        return upstream_failure("creating diagnostic report", e)


@router.put("")
async def update_diagnostic_report(
    body: DiagnosticReportRequest,
    token: str = Depends(require_access_token),
    client: EHRClient = Depends(get_client),
):
    """Update a report whose id travels in the body."""
    resource = build_diagnostic_report_update(body.model_dump(exclude_unset=True))
    try:
        return await client.put(f"/DiagnosticReport/{resource['id']}", token, resource)
    except Exception as e:
        return upstream_failure("updating diagnostic report", e)


@router.get("/{report_id}")
async def get_diagnostic_report(
    report_id: str,
    token: str = Depends(require_access_token),
    client: EHRClient = Depends(get_client),
):
    try:
        return await client.get(f"/DiagnosticReport/{report_id}", token)
    except Exception as e:
        return upstream_failure("getting diagnostic report", e)
