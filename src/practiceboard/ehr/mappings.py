"""Translation tables between the dashboard vocabulary and FHIR codes."""

from __future__ import annotations

SNOMED_SYSTEM = "http://snomed.info/sct"
CONDITION_CATEGORY_SYSTEM = "http://terminology.hl7.org/CodeSystem/condition-category"
CPT_SYSTEM = "http://www.ama-assn.org/go/cpt"

US_CORE_RACE_URL = "http://hl7.org/fhir/us/core/STU3.1/StructureDefinition-us-core-race.html"
US_CORE_ETHNICITY_URL = "http://hl7.org/fhir/us/core/StructureDefinition/us-core-ethnicity"

# =============================================================================
# Allergy reactions
# =============================================================================

# Dashboard severities are finer grained than FHIR's mild/moderate/severe.
# Empty string means "send no severity".
REACTION_SEVERITY = {
    "unspecified": "",
    "mild": "mild",
    "mild to moderate": "mild",
    "moderate": "moderate",
    "moderate to severe": "moderate",
    "severe": "severe",
    "fatal": "severe",
}

MANIFESTATIONS = {
    "Anaphylaxis": "417516000",
    "Angioedema": "41291007",
    "Diarrhea": "62315008",
    "Dizziness": "404640003",
    "Fatigue": "84229001",
    "GI upset": "162059005",
    "Hives": "126485001",
    "Liver toxicity": "197354009",
    "Nausea": "422587007",
    "Rash": "162415008",
    "Shortness of breath": "267036007",
    "Swelling": "65124004",
    "Weal": "247472004",
    "Other": "419199007",
}

# =============================================================================
# Conditions
# =============================================================================

CONDITION_CATEGORIES = {
    "Problem": ("problem-list-item", "Problem List Item"),
    "Condition": ("encounter-diagnosis", "Encounter Diagnosis"),
    "Diagnosis": ("encounter-diagnosis", "Encounter Diagnosis"),
    "Symptom": ("symptom", "Symptom"),
    "Finding": ("finding", "Finding"),
    "Complaint": ("complaint", "Complaint"),
    "Functional Limitation": ("functional-limitation", "Functional Limitation"),
    "Health Status": ("health-status", "Health Status"),
}

# =============================================================================
# Appointments
# =============================================================================

NOT_SUPPORTED = "NOT SUPPORTED in MMPM"

APPOINTMENT_STATUS = {
    "pending": "pending",
    "booked": "confirmed",
    "arrived": "arrived",
    "fulfilled": "checked-out",
    "cancelled": "cancelled",
    "noshow": "no show",
    "entered-in-error": NOT_SUPPORTED,
    "checkedin": "checked in",
    "waitlist": NOT_SUPPORTED,
}

PARTICIPANT_TYPES = ("Patient", "Location", "Practitioner")


def map_severity(severity: str) -> str | None:
    """Map a dashboard reaction severity to a FHIR severity.

    Returns None when the value has no FHIR counterpart.
    """
    return REACTION_SEVERITY.get(severity) or None


def map_manifestation(manifestation: str) -> dict[str, str]:
    """Map free-text manifestation to a SNOMED coding, defaulting to Other."""
    if manifestation not in MANIFESTATIONS:
        manifestation = "Other"
    return {
        "system": SNOMED_SYSTEM,
        "code": MANIFESTATIONS[manifestation],
        "display": manifestation,
    }


def map_condition_category(label: str) -> dict[str, str]:
    """Map a category label to a condition-category coding."""
    code, display = CONDITION_CATEGORIES.get(label, CONDITION_CATEGORIES["Problem"])
    return {"system": CONDITION_CATEGORY_SYSTEM, "code": code, "display": display}


def map_appointment_status(status: str) -> str:
    """Map a FHIR appointment status to the practice-management status."""
    return APPOINTMENT_STATUS.get(status, status)
