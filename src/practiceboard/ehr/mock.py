"""Sample billing data served when the ChargeItem endpoints are unavailable.

The billing pages stay usable in sandboxes where the backend does not
expose ChargeItem. Served only when the fallback toggle is enabled.
"""

from __future__ import annotations

import copy
from typing import Any

from .mappings import CPT_SYSTEM

_FULL_URL = "https://your-base-url/apiportal/ema/fhir/v2/ChargeItem/{id}"


def _charge(
    charge_id: str,
    status: str,
    patient: tuple[str, str],
    encounter: str,
    occurred: str,
    cost: float,
    description: str,
    cpt: tuple[str, str],
    note: str | None = None,
) -> dict[str, Any]:
    resource: dict[str, Any] = {
        "resourceType": "ChargeItem",
        "id": charge_id,
        "status": status,
        "subject": {"reference": f"Patient/{patient[0]}", "display": patient[1]},
        "context": {"reference": f"Encounter/{encounter}"},
        "occurrenceDateTime": occurred,
        "totalCost": {"value": cost, "currency": "USD"},
        "financialTransactionDetail": [
            {
                "description": description,
                "unitCost": {"value": cost, "currency": "USD"},
                "quantity": {"valueDecimal": 1},
                "code": {
                    "coding": [{"system": CPT_SYSTEM, "code": cpt[0], "display": cpt[1]}]
                },
            }
        ],
    }
    if note:
        resource["note"] = [{"text": note}]
    return resource


JOHN_DOE = ("67890", "John Doe")
JANE_SMITH = ("12345", "Jane Smith")

OFFICE_VISIT = ("99213", "Office Visit Level 3")
CBC = ("85025", "Complete Blood Count")
CONSULT = ("99243", "Office Consultation Level 3")

SAMPLE_CHARGES = [
    _charge(
        "charge-001", "billable", JOHN_DOE, "enc-001", "2025-01-15T10:30:00Z",
        150.00, "Office Visit - Level 3", OFFICE_VISIT,
    ),
    _charge(
        "charge-002", "billable", JOHN_DOE, "enc-002", "2025-01-14T14:15:00Z",
        75.00, "Laboratory Test - CBC", CBC,
    ),
    _charge(
        "charge-003", "billable", JANE_SMITH, "enc-003", "2025-01-13T09:00:00Z",
        200.00, "Specialist Consultation", CONSULT,
    ),
]

SAMPLE_INBOUND_CHARGES = [
    _charge(
        "inbound-001", "inbound", JOHN_DOE, "enc-001", "2025-01-15T10:30:00Z",
        150.00, "Inbound Office Visit - Level 3", OFFICE_VISIT,
        note="Inbound charge from external system",
    ),
    _charge(
        "inbound-002", "inbound", JANE_SMITH, "enc-002", "2025-01-14T14:15:00Z",
        200.00, "Inbound Specialist Consultation", CONSULT,
        note="Inbound charge from referral system",
    ),
]


def _searchset(resources: list[dict[str, Any]]) -> dict[str, Any]:
    return {
        "resourceType": "Bundle",
        "type": "searchset",
        "total": len(resources),
        "entry": [
            {"fullUrl": _FULL_URL.format(id=r["id"]), "resource": copy.deepcopy(r)}
            for r in resources
        ],
    }


def charge_bundle() -> dict[str, Any]:
    """Sample searchset of billable charges."""
    return _searchset(SAMPLE_CHARGES)


def inbound_charge_bundle() -> dict[str, Any]:
    """Sample searchset of inbound charges."""
    return _searchset(SAMPLE_INBOUND_CHARGES)


def charge_item(charge_id: str) -> dict[str, Any]:
    """Sample billable charge carrying the requested id."""
    return {**copy.deepcopy(SAMPLE_CHARGES[0]), "id": charge_id}


def inbound_charge_item(charge_id: str) -> dict[str, Any]:
    """Sample inbound charge carrying the requested id."""
    return {**copy.deepcopy(SAMPLE_INBOUND_CHARGES[0]), "id": charge_id}
