"""Billing (ChargeItem) endpoints.

List and read fall back to sample charges when the backend cannot serve
ChargeItem and ``billing_mock_fallback`` is on.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Body, Depends, Query, Request

from ...ehr import mock
from ...ehr.client import EHRClient, get_client
from ...ehr.dashboard import search_charges
from ...ehr.resources import build_charge_item
from ...ehr.search import charge_params, inbound_charge_params
from ..config import APIConfig, get_config
from ..models.requests import ChargeRequest
from ..models.responses import MessageResponse
from ..security import require_access_token
from ..services.proxy import upstream_failure

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/billing", tags=["billing"])


def _fallback(what: str, exc: Exception) -> None:
    logger.warning("Error fetching %s, serving sample data: %s", what, exc)


@router.get("")
async def list_charges(
    request: Request,
    q: str | None = Query(None, description="Free-text filter over the results"),
    token: str = Depends(require_access_token),
    client: EHRClient = Depends(get_client),
    config: APIConfig = Depends(get_config),
):
    """List charges, optionally for one ``patient``."""
    try:
        bundle = await client.get(
            "/ChargeItem", token, params=charge_params(request.query_params)
        )
    except Exception as e:
        if not config.billing_mock_fallback:
            return upstream_failure("fetching charges", e)
        _fallback("charges", e)
        bundle = mock.charge_bundle()

    return search_charges(bundle, q) if q else bundle


@router.post("", status_code=201)
async def create_charge(
    body: ChargeRequest,
    token: str = Depends(require_access_token),
    client: EHRClient = Depends(get_client),
):
    """Post a billable charge with one CPT-coded line."""
    resource = build_charge_item(body.model_dump())
    try:
        return await client.post("/ChargeItem", token, resource)
    except Exception as e:
        return upstream_failure("creating charge", e)


@router.get("/inbound")
async def list_inbound_charges(
    request: Request,
    token: str = Depends(require_access_token),
    client: EHRClient = Depends(get_client),
    config: APIConfig = Depends(get_config),
):
    """Charges received from outside systems awaiting review."""
    try:
        return await client.get(
            "/ChargeItem", token, params=inbound_charge_params(request.query_params)
        )
    except Exception as e:
        if not config.billing_mock_fallback:
            return upstream_failure("fetching inbound charges", e)
        _fallback("inbound charges", e)
        return mock.inbound_charge_bundle()


@router.get("/inbound/{charge_id}")
async def get_inbound_charge(
    charge_id: str,
    token: str = Depends(require_access_token),
    client: EHRClient = Depends(get_client),
    config: APIConfig = Depends(get_config),
):
    try:
        return await client.get(f"/ChargeItem/INBOUND|{charge_id}", token)
    except Exception as e:
        if not config.billing_mock_fallback:
            return upstream_failure("getting inbound billing", e)
        _fallback("inbound billing", e)
        return mock.inbound_charge_item(charge_id)


@router.get("/{charge_id}")
async def get_charge(
    charge_id: str,
    token: str = Depends(require_access_token),
    client: EHRClient = Depends(get_client),
    config: APIConfig = Depends(get_config),
):
    try:
        return await client.get(f"/ChargeItem/{charge_id}", token)
    except Exception as e:
        if not config.billing_mock_fallback:
            return upstream_failure("getting billing", e)
        _fallback("billing", e)
        return mock.charge_item(charge_id)


@router.put("/{charge_id}")
async def update_charge(
    charge_id: str,
    body: dict[str, Any] = Body(...),
    token: str = Depends(require_access_token),
    client: EHRClient = Depends(get_client),
):
    """Replace a charge with the ChargeItem given in the body."""
    try:
        return await client.put(f"/ChargeItem/{charge_id}", token, body)
    except Exception as e:
        return upstream_failure("updating billing", e)


@router.delete("/{charge_id}", response_model=MessageResponse)
async def delete_charge(
    charge_id: str,
    token: str = Depends(require_access_token),
    client: EHRClient = Depends(get_client),
):
    try:
        await client.delete(f"/ChargeItem/{charge_id}", token)
    except Exception as e:
        return upstream_failure("deleting billing", e)
    return MessageResponse(message="Charge item deleted successfully")
