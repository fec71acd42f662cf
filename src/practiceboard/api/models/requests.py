"""API request schemas.

Clinical bodies mirror the FHIR element names the dashboard sends; nested
FHIR structures (CodeableConcept, Reference, Period...) are passed through
untouched, so they are typed loosely.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

FhirElement = dict[str, Any]


# =============================================================================
# Auth
# =============================================================================


class LoginRequest(BaseModel):
    """Practice credentials for the password grant."""

    username: str = Field(..., description="Practice portal username", min_length=1)
    password: str = Field(..., description="Practice portal password", min_length=1)


# =============================================================================
# Patient
# =============================================================================


class PatientRequest(BaseModel):
    """FHIR-shaped patient body used by create and update-by-body."""

    id: str | None = Field(None, description="Patient id (required for update)")
    identifier: list[FhirElement] | None = None
    active: bool | None = None
    name: list[FhirElement] | None = None
    telecom: list[FhirElement] | None = None
    gender: str | None = Field(None, description="male, female, other, unknown")
    birthDate: str | None = Field(None, description="Date of birth (YYYY-MM-DD)")
    deceasedBoolean: bool | None = None
    address: list[FhirElement] | None = None
    maritalStatus: FhirElement | None = None
    contact: list[FhirElement] | None = None
    communication: list[FhirElement] | None = None
    generalPractitioner: list[FhirElement] | None = None
    referralSource: Any = None
    race: FhirElement | None = Field(None, description="US Core race CodeableConcept")
    ethnicity: FhirElement | None = Field(
        None, description="US Core ethnicity CodeableConcept"
    )


class PersonName(BaseModel):
    family: str | None = None
    given: str | None = None


class PostalAddress(BaseModel):
    line: str | None = None
    city: str | None = None
    state: str | None = None
    postalCode: str | None = None
    country: str | None = None


class EmergencyContact(BaseModel):
    family: str | None = None
    given: str | None = None
    phone: str | None = None
    email: str | None = None
    relationship: str | None = None


class PatientFormRequest(BaseModel):
    """Flat body from the dashboard's edit-patient dialog."""

    name: PersonName | None = None
    email: str | None = None
    phone: str | None = None
    dob: str | None = Field(None, description="Date of birth (YYYY-MM-DD)")
    address: PostalAddress | None = None
    emergencyContact: EmergencyContact | None = None
    status: str | None = Field(None, description="'active' or 'inactive'")


# =============================================================================
# Clinical
# =============================================================================


class AllergyRequest(BaseModel):
    """AllergyIntolerance body.

    Each reaction may carry a dashboard severity (e.g. "mild to moderate")
    and a free-text manifestation (e.g. "Hives"); both are coded on the way
    out.
    """

    clinicalStatus: FhirElement | None = None
    code: FhirElement | None = None
    patient: FhirElement | None = None
    onset: Any = None
    recordedDate: str | None = None
    reaction: list[FhirElement] | None = None


class ConditionRequest(BaseModel):
    """Condition body; ``category`` may be a plain label such as "Problem"."""

    id: str | None = None
    clinicalStatus: FhirElement | None = None
    subject: FhirElement | None = None
    code: FhirElement | None = None
    onset: Any = None
    recordedDate: str | None = None
    category: str | list[FhirElement] | None = None


class MedicationStatementRequest(BaseModel):
    status: str | None = None
    subject: FhirElement | None = Field(None, description="Patient reference")
    medicationCodeableConcept: FhirElement | None = None
    effectivePeriod: FhirElement | None = None
    dosage: list[FhirElement] | None = None


class DiagnosticReportRequest(BaseModel):
    id: str | None = None
    identifier: list[FhirElement] | None = None
    basedOn: list[FhirElement] | None = None
    status: str | None = None
    category: list[FhirElement] | None = None
    code: FhirElement | None = None
    subject: FhirElement | None = None
    encounter: FhirElement | None = None
    effectiveDateTime: str | None = None
    effectivePeriod: FhirElement | None = None
    issued: str | None = None
    performer: list[FhirElement] | None = None
    resultsInterpreter: list[FhirElement] | None = None
    specimen: list[FhirElement] | None = None
    result: list[FhirElement] | None = None
    imagingStudy: list[FhirElement] | None = None
    media: list[FhirElement] | None = None
    conclusion: str | None = None
    conclusionCode: list[FhirElement] | None = None
    presentedForm: list[FhirElement] | None = None


# =============================================================================
# Scheduling / directory
# =============================================================================


class AppointmentRequest(BaseModel):
    """Appointment body. Participants are ``{"reference": "Patient/1"}``."""

    participant: list[FhirElement] | None = None
    appointmentType: FhirElement | None = None
    start: str | None = None
    end: str | None = None
    minutesDuration: int | None = None
    status: str | None = None
    description: str | None = None
    reportableReason: Any = None
    supportingInformation: list[FhirElement] | None = None
    comment: str | None = None
    cancelationReason: FhirElement | None = None


class PractitionerRequest(BaseModel):
    identifier: list[FhirElement] | None = None
    active: bool | None = None
    name: list[FhirElement] | None = None
    telecom: list[FhirElement] | None = None
    gender: str | None = None
    birthDate: str | None = None
    address: list[FhirElement] | None = None
    qualification: list[FhirElement] | None = None
    communication: list[FhirElement] | None = None


# =============================================================================
# Billing
# =============================================================================


class ChargeRequest(BaseModel):
    """New charge from the billing dialog."""

    patientId: str = Field(..., description="Patient id", min_length=1)
    providerId: str | None = Field(None, description="Attending provider id")
    encounterId: str | None = Field(None, description="Encounter id")
    description: str = Field(..., description="Line description", min_length=1)
    code: str = Field(..., description="CPT code (e.g. '99213')", min_length=1)
    cost: float = Field(..., description="Unit cost")
    currency: str = Field(default="USD", description="ISO 4217 currency")
