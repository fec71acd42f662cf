"""Build FHIR resources from dashboard request bodies.

Bodies arrive as plain dicts (already parsed by the API layer). Optional
fields are copied only when they carry a value; boolean flags such as
``active`` are copied whenever they were sent.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from .errors import InvalidResourceError
from .mappings import (
    CPT_SYSTEM,
    PARTICIPANT_TYPES,
    US_CORE_ETHNICITY_URL,
    US_CORE_RACE_URL,
    map_condition_category,
    map_manifestation,
    map_severity,
)

PATIENT_FIELDS = (
    "identifier",
    "active",
    "name",
    "telecom",
    "gender",
    "birthDate",
    "deceasedBoolean",
    "address",
    "maritalStatus",
    "contact",
    "communication",
    "generalPractitioner",
    "referralSource",
)
PATIENT_FLAGS = ("active", "deceasedBoolean")

ALLERGY_FIELDS = ("clinicalStatus", "code", "patient", "onset", "recordedDate", "reaction")

CONDITION_FIELDS = ("clinicalStatus", "subject", "code", "onset", "recordedDate", "category")

APPOINTMENT_FIELDS = (
    "appointmentType",
    "start",
    "end",
    "minutesDuration",
    "description",
    "reportableReason",
    "supportingInformation",
    "comment",
    "cancelationReason",
)

PRACTITIONER_FIELDS = (
    "identifier",
    "active",
    "name",
    "telecom",
    "gender",
    "birthDate",
    "address",
    "qualification",
    "communication",
)

DIAGNOSTIC_REPORT_FIELDS = (
    "identifier",
    "basedOn",
    "status",
    "category",
    "code",
    "subject",
    "encounter",
    "effectiveDateTime",
    "effectivePeriod",
    "issued",
    "performer",
    "resultsInterpreter",
    "specimen",
    "result",
    "imagingStudy",
    "media",
    "conclusion",
    "conclusionCode",
    "presentedForm",
)

MEDICATION_UPDATABLE = ("status", "effectivePeriod")
MEDICATION_IMMUTABLE = (
    "informationSource",
    "subject",
    "medicationCodeableConcept",
    "dosage",
    "reasonCode",
    "note",
)


def _copy_fields(
    body: dict[str, Any],
    fields: tuple[str, ...],
    flags: tuple[str, ...] = (),
) -> dict[str, Any]:
    """Copy set fields from *body*; *flags* are copied even when falsy."""
    out: dict[str, Any] = {}
    for name in fields:
        value = body.get(name)
        if name in flags:
            if value is not None:
                out[name] = value
        elif value:
            out[name] = value
    return out


def _require_id(body: dict[str, Any], label: str) -> str:
    resource_id = body.get("id")
    if not resource_id:
        raise InvalidResourceError(f"{label} ID is required for update")
    return str(resource_id)


# =============================================================================
# Patient
# =============================================================================


def build_patient(body: dict[str, Any], resource_id: str | None = None) -> dict[str, Any]:
    """Patient resource from a FHIR-shaped body.

    ``race`` and ``ethnicity`` (CodeableConcepts) become US Core extensions.
    """
    resource: dict[str, Any] = {"resourceType": "Patient"}
    if resource_id:
        resource["id"] = resource_id
    resource.update(_copy_fields(body, PATIENT_FIELDS, PATIENT_FLAGS))

    extensions = []
    if body.get("race"):
        extensions.append({"url": US_CORE_RACE_URL, "valueCodeableConcept": body["race"]})
    if body.get("ethnicity"):
        extensions.append(
            {"url": US_CORE_ETHNICITY_URL, "valueCodeableConcept": body["ethnicity"]}
        )
    if extensions:
        resource["extension"] = extensions
    return resource


def build_patient_update(body: dict[str, Any]) -> dict[str, Any]:
    """Patient resource for an update whose id travels in the body."""
    return build_patient(body, _require_id(body, "Patient"))


def _compact(values: dict[str, Any]) -> dict[str, Any]:
    return {k: v for k, v in values.items() if v}


def _pick(section: Any, *keys: str) -> list[Any]:
    section = section if isinstance(section, dict) else {}
    return [section.get(key) for key in keys]


def _human_name(family: Any, given: Any) -> dict[str, Any]:
    return _compact({"family": family, "given": [given] if given else None})


def _telecom(phone: Any, email: Any, phone_use: str | None = None) -> list[dict[str, Any]]:
    telecom = []
    if phone:
        telecom.append(_compact({"system": "phone", "value": phone, "use": phone_use}))
    if email:
        telecom.append({"system": "email", "value": email})
    return telecom


def build_patient_from_form(resource_id: str, form: dict[str, Any]) -> dict[str, Any]:
    """Patient resource from the dashboard's edit-patient form.

    The form uses flat fields (``dob``, ``phone``, ``email``, ``status``...)
    and a single emergency contact. Blank form fields are left out rather than
    sent as null. ``telecom`` and ``contact`` are always sent so that
    cleared values are cleared upstream too.
    """
    resource: dict[str, Any] = {"resourceType": "Patient", "id": resource_id}

    name = _human_name(*_pick(form.get("name"), "family", "given"))
    if name:
        resource["name"] = [name]
    if form.get("dob"):
        resource["birthDate"] = form["dob"]
    if form.get("status"):
        resource["active"] = form["status"] == "active"

    line, city, state, postal_code, country = _pick(
        form.get("address"), "line", "city", "state", "postalCode", "country"
    )
    address = _compact(
        {
            "line": [line] if line else None,
            "city": city,
            "state": state,
            "postalCode": postal_code,
            "country": country,
        }
    )
    if address:
        resource["address"] = [address]

    resource["telecom"] = _telecom(form.get("phone"), form.get("email"), "mobile")

    contact = []
    family, given, phone, email, relationship = _pick(
        form.get("emergencyContact"), "family", "given", "phone", "email", "relationship"
    )
    emergency = _compact(
        {
            "name": _human_name(family, given),
            "telecom": _telecom(phone, email),
            "relationship": [{"text": relationship}] if relationship else None,
        }
    )
    if emergency:
        contact.append(emergency)
    resource["contact"] = contact
    return resource


# =============================================================================
# AllergyIntolerance
# =============================================================================


def _translate_reaction(reaction: dict[str, Any]) -> dict[str, Any]:
    out = dict(reaction)

    severity = reaction.get("severity")
    if severity and isinstance(severity, str):
        mapped = map_severity(severity)
        if mapped:
            out["severity"] = mapped
        else:
            out.pop("severity")

    manifestation = reaction.get("manifestation")
    if manifestation and isinstance(manifestation, str):
        out["manifestation"] = [{"coding": [map_manifestation(manifestation)]}]

    return out


def build_allergy(body: dict[str, Any], resource_id: str | None = None) -> dict[str, Any]:
    """AllergyIntolerance with dashboard severities and manifestations coded."""
    fields = dict(body)
    reaction = fields.get("reaction")
    if reaction and isinstance(reaction, list):
        fields["reaction"] = [
            _translate_reaction(r) if isinstance(r, dict) else r for r in reaction
        ]

    resource: dict[str, Any] = {"resourceType": "AllergyIntolerance"}
    if resource_id:
        resource["id"] = resource_id
    resource.update(_copy_fields(fields, ALLERGY_FIELDS))
    return resource


# =============================================================================
# Condition
# =============================================================================


def build_condition(body: dict[str, Any], resource_id: str | None = None) -> dict[str, Any]:
    """Condition resource; a plain category label becomes a coded category."""
    fields = dict(body)
    category = fields.get("category")
    if category and isinstance(category, str):
        fields["category"] = [{"coding": [map_condition_category(category)]}]

    resource: dict[str, Any] = {"resourceType": "Condition"}
    if resource_id:
        resource["id"] = resource_id
    resource.update(_copy_fields(fields, CONDITION_FIELDS))
    return resource


def build_condition_update(body: dict[str, Any]) -> dict[str, Any]:
    return build_condition(body, _require_id(body, "Condition"))


# =============================================================================
# Appointment
# =============================================================================


def _validate_participants(participant: Any) -> None:
    if not participant or not isinstance(participant, list):
        raise InvalidResourceError(
            "Missing required field",
            "participant is required and must be an array with at least one participant",
        )
    for p in participant:
        reference = p.get("reference") if isinstance(p, dict) else None
        if not reference or not isinstance(reference, str):
            raise InvalidResourceError(
                "Invalid participant",
                "Each participant must have a reference field",
            )
        if reference.split("/")[0] not in PARTICIPANT_TYPES:
            raise InvalidResourceError(
                "Invalid participant type",
                f"Participant reference must be one of: {', '.join(PARTICIPANT_TYPES)}",
            )


def _participants(participant: list[dict[str, Any]]) -> list[dict[str, Any]]:
    return [
        {
            "actor": {"reference": p.get("reference")},
            "status": p.get("status") or "accepted",
        }
        for p in participant
    ]


def build_appointment(body: dict[str, Any]) -> dict[str, Any]:
    """New Appointment. Validates participants and timing.

    Raises:
        InvalidResourceError: When participants, start, or end/duration
            are missing or malformed.
    """
    participant = body.get("participant")
    _validate_participants(participant)

    if not body.get("start"):
        raise InvalidResourceError("Missing required field", "start (datetime) is required")
    if not body.get("end") and not body.get("minutesDuration"):
        raise InvalidResourceError(
            "Missing required field",
            "Either end (datetime) or minutesDuration (integer) is required",
        )

    resource: dict[str, Any] = {
        "resourceType": "Appointment",
        "status": body.get("status") or "pending",
        "participant": _participants(participant),
    }
    resource.update(_copy_fields(body, APPOINTMENT_FIELDS))
    return resource


def build_appointment_update(resource_id: str, body: dict[str, Any]) -> dict[str, Any]:
    """Appointment update; only fields that were sent are included."""
    resource: dict[str, Any] = {"resourceType": "Appointment", "id": resource_id}
    if body.get("status"):
        resource["status"] = body["status"]
    participant = body.get("participant")
    if participant and isinstance(participant, list):
        resource["participant"] = _participants(
            [p for p in participant if isinstance(p, dict)]
        )
    resource.update(_copy_fields(body, APPOINTMENT_FIELDS))
    return resource


# =============================================================================
# Medication
# =============================================================================


def build_medication_statement(body: dict[str, Any]) -> dict[str, Any]:
    """MedicationStatement recording a medication for a patient."""
    if not body.get("subject"):
        raise InvalidResourceError(
            "Missing required field",
            "subject (patient reference) is required",
        )
    if not body.get("medicationCodeableConcept"):
        raise InvalidResourceError(
            "Missing required field",
            "medicationCodeableConcept is required",
        )

    resource: dict[str, Any] = {
        "resourceType": "MedicationStatement",
        "status": body.get("status") or "active",
        "subject": body["subject"],
        "medicationCodeableConcept": body["medicationCodeableConcept"],
    }
    resource.update(_copy_fields(body, ("effectivePeriod", "dosage")))
    return resource


def build_medication_update(resource_id: str, body: dict[str, Any]) -> dict[str, Any]:
    """Medication update limited to ``status`` and ``effectivePeriod``.

    Raises:
        InvalidResourceError: When an immutable field is present or nothing
            updatable was sent.
    """
    attempted = [name for name in MEDICATION_IMMUTABLE if name in body]
    if attempted:
        raise InvalidResourceError(
            "Immutable fields cannot be updated",
            "The following fields are immutable and cannot be updated: "
            + ", ".join(attempted),
            immutableFields=attempted,
        )

    update = {name: body[name] for name in MEDICATION_UPDATABLE if name in body}
    if not update:
        raise InvalidResourceError(
            "No valid fields provided for update",
            "Only 'status' and 'effectivePeriod' fields can be updated",
        )

    return {"resourceType": "Medication", "id": resource_id, **update}


# =============================================================================
# Practitioner / DiagnosticReport
# =============================================================================


def build_practitioner(body: dict[str, Any]) -> dict[str, Any]:
    resource: dict[str, Any] = {"resourceType": "Practitioner"}
    resource.update(_copy_fields(body, PRACTITIONER_FIELDS, ("active",)))
    return resource


def build_diagnostic_report(
    body: dict[str, Any],
    resource_id: str | None = None,
) -> dict[str, Any]:
    resource: dict[str, Any] = {"resourceType": "DiagnosticReport"}
    if resource_id:
        resource["id"] = resource_id
    resource.update(_copy_fields(body, DIAGNOSTIC_REPORT_FIELDS))
    return resource


def build_diagnostic_report_update(body: dict[str, Any]) -> dict[str, Any]:
    return build_diagnostic_report(body, _require_id(body, "DiagnosticReport"))


# =============================================================================
# ChargeItem
# =============================================================================


def build_charge_item(body: dict[str, Any], now: datetime | None = None) -> dict[str, Any]:
    """Billable ChargeItem with a single CPT-coded transaction line."""
    now = now or datetime.now(timezone.utc)
    cost = body.get("cost")
    currency = body.get("currency")
    description = body.get("description")

    return {
        "resourceType": "ChargeItem",
        "status": "billable",
        "subject": {"reference": f"Patient/{body.get('patientId')}"},
        "context": {"reference": f"Encounter/{body.get('encounterId')}"},
        "occurrenceDateTime": now.isoformat().replace("+00:00", "Z"),
        "totalCost": {"value": cost, "currency": currency},
        "attendingProviderId": body.get("providerId"),
        "financialTransactionDetail": [
            {
                "description": description,
                "unitCost": {"value": cost, "currency": currency},
                "quantity": {"valueDecimal": 1},
                "code": {
                    "coding": [
                        {
                            "system": CPT_SYSTEM,
                            "code": body.get("code"),
                            "display": description,
                        }
                    ]
                },
            }
        ],
    }
