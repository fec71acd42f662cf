"""Dashboard aggregation over FHIR search results."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

UPCOMING_LIMIT = 5
ACTIVE_STATUSES = {"confirmed", "pending"}


def bundle_resources(bundle: Any) -> list[dict[str, Any]]:
    """Resources from a searchset Bundle (or a bare list of resources)."""
    if isinstance(bundle, list):
        return [r for r in bundle if isinstance(r, dict)]
    if isinstance(bundle, dict) and isinstance(bundle.get("entry"), list):
        return [
            entry["resource"]
            for entry in bundle["entry"]
            if isinstance(entry, dict) and isinstance(entry.get("resource"), dict)
        ]
    return []


def _parse_datetime(value: str) -> datetime | None:
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except (AttributeError, ValueError):
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _appointment_when(appointment: dict[str, Any]) -> str | None:
    return appointment.get("date") or appointment.get("start")


def _patient_display(appointment: dict[str, Any]) -> str:
    if appointment.get("patient"):
        return str(appointment["patient"])
    for participant in appointment.get("participant") or []:
        actor = participant.get("actor") or {}
        if "Patient" in str(actor.get("reference", "")):
            return actor.get("display") or "Unknown"
    return "Unknown"


def _appointment_type(appointment: dict[str, Any]) -> str:
    if appointment.get("type") and isinstance(appointment["type"], str):
        return appointment["type"]
    codings = (appointment.get("appointmentType") or {}).get("coding") or []
    if codings:
        return codings[0].get("display") or "Unknown"
    return "Unknown"


def is_critical_allergy(allergy: dict[str, Any]) -> bool:
    """True when any reaction is recorded as severe."""
    return any(
        str(reaction.get("severity") or "").lower() == "severe"
        for reaction in allergy.get("reaction") or []
    )


def upcoming_appointments(
    appointments: list[dict[str, Any]],
    now: datetime,
    limit: int = UPCOMING_LIMIT,
) -> list[dict[str, Any]]:
    """The next *limit* appointments starting at or after *now*."""
    dated = []
    for appointment in appointments:
        when = _parse_datetime(_appointment_when(appointment) or "")
        if when is not None and when >= now:
            dated.append((when, appointment))
    dated.sort(key=lambda pair: pair[0])

    upcoming = []
    for when, appointment in dated[:limit]:
        upcoming.append(
            {
                "id": appointment.get("id") or "N/A",
                "time": when.strftime("%H:%M"),
                "patient": _patient_display(appointment),
                "type": _appointment_type(appointment),
                "status": appointment.get("status") or "Unknown",
                "priority": appointment.get("priority") or "normal",
                "date": _appointment_when(appointment),
            }
        )
    return upcoming


def compute_stats(
    patients: list[dict[str, Any]],
    appointments: list[dict[str, Any]],
    allergies: list[dict[str, Any]],
    now: datetime | None = None,
) -> dict[str, Any]:
    """Headline numbers and upcoming appointments for the dashboard."""
    now = now or datetime.now(timezone.utc)
    today = now.date().isoformat()

    todays = [a for a in appointments if today in (_appointment_when(a) or "")]
    active = [
        a for a in appointments if str(a.get("status") or "").lower() in ACTIVE_STATUSES
    ]

    return {
        "total_patients": len(patients),
        "todays_appointments": len(todays),
        "critical_allergies": sum(1 for a in allergies if is_critical_allergy(a)),
        "active_cases": len(active),
        "upcoming_appointments": upcoming_appointments(appointments, now),
    }


def _charge_matches(charge: dict[str, Any], term: str) -> bool:
    subject = (charge.get("subject") or {}).get("display") or ""
    haystack = [subject, charge.get("id") or "", charge.get("status") or ""]
    haystack.extend(
        detail.get("description") or ""
        for detail in charge.get("financialTransactionDetail") or []
    )
    return any(term in str(value).lower() for value in haystack)


def search_charges(bundle: dict[str, Any], term: str) -> dict[str, Any]:
    """Filter a ChargeItem searchset by a free-text term.

    Matches the patient display, charge id, status, or any line
    description, case-insensitively. An empty term returns the bundle as is.
    """
    term = term.strip().lower()
    if not term:
        return bundle

    entries = [
        entry
        for entry in bundle.get("entry") or []
        if _charge_matches(entry.get("resource") or {}, term)
    ]
    return {**bundle, "total": len(entries), "entry": entries}
