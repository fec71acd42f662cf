"""Search parameters forwarded to the backend, per resource type.

Only the parameters listed here reach the backend; anything else the
browser sends is dropped. Order is preserved so upstream URLs are stable.
"""

from __future__ import annotations

from collections.abc import Mapping

from .errors import InvalidResourceError

SEARCH_PARAMS: dict[str, tuple[str, ...]] = {
    "Patient": (
        "_count",
        "_lastUpdated",
        "address-postalcode",
        "active",
        "birthdate",
        "email",
        "family",
        "gender",
        "general-practitioner",
        "given",
        "identifier",
        "language",
        "page",
        "phone",
        "us-core-ethnicity",
        "us-core-race",
        "referral-source",
    ),
    "AllergyIntolerance": (
        "_count",
        "page",
        "patient",
        "_lastUpdated",
        "clinical-status",
        "verification-status",
        "category",
        "criticality",
        "type",
        "code",
        "identifier",
    ),
    "Appointment": (
        "_count",
        "page",
        "patient",
        "_lastUpdated",
        "date",
        "status",
        "practitioner",
        "location",
        "service-type",
        "appointment-type",
    ),
    "Slot": (
        "appointment-type",
        "date",
        "identifier",
        "_count",
        "page",
        "_lastUpdated",
        "status",
        "schedule",
        "service-type",
        "service-category",
    ),
    "Condition": (
        "_count",
        "page",
        "patient",
        "_lastUpdated",
        "clinical-status",
        "verification-status",
        "category",
        "severity",
        "onset-date",
        "recorded-date",
        "code",
        "identifier",
    ),
    "DiagnosticReport": (
        "_count",
        "_lastUpdated",
        "encounter",
        "page",
        "patient",
        "requisition",
        "type",
        "status",
        "category",
        "date",
        "code",
        "identifier",
    ),
    "Practitioner": (
        "_count",
        "_lastUpdated",
        "active",
        "email",
        "family",
        "given",
        "identifier",
        "page",
        "phone",
        "type",
    ),
    "Medication": (
        "_count",
        "_lastUpdated",
        "code",
        "identifier",
        "page",
        "status",
        "form",
        "ingredient",
        "ingredient-code",
    ),
}

DEFAULT_CHARGE_COUNT = "50"


def forward_params(resource_type: str, query: Mapping[str, str]) -> dict[str, str]:
    """Pick the whitelisted, non-empty search parameters for *resource_type*."""
    allowed = SEARCH_PARAMS[resource_type]
    return {name: query[name] for name in allowed if query.get(name)}


def slot_params(query: Mapping[str, str]) -> dict[str, str]:
    """Slot search parameters; ``appointment-type`` is mandatory."""
    if not query.get("appointment-type"):
        raise InvalidResourceError(
            "Missing required parameter",
            "appointment-type is required",
        )
    return forward_params("Slot", query)


def charge_params(query: Mapping[str, str]) -> dict[str, str]:
    """ChargeItem search: page size plus optional patient subject."""
    params = {"_count": query.get("_count") or DEFAULT_CHARGE_COUNT}
    patient = query.get("patient")
    if patient:
        params["subject"] = f"Patient/{patient}"
    return params


def inbound_charge_params(query: Mapping[str, str]) -> dict[str, str]:
    """Inbound ChargeItem search: page size plus status (default inbound)."""
    return {
        "_count": query.get("_count") or DEFAULT_CHARGE_COUNT,
        "status": query.get("status") or "inbound",
    }
