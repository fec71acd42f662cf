"""API data models."""

from .requests import (
    AllergyRequest,
    AppointmentRequest,
    ChargeRequest,
    ConditionRequest,
    DiagnosticReportRequest,
    LoginRequest,
    MedicationStatementRequest,
    PatientFormRequest,
    PatientRequest,
    PractitionerRequest,
)
from .responses import (
    DashboardResponse,
    HealthResponse,
    LoginResponse,
    MessageResponse,
    UpcomingAppointment,
)

__all__ = [
    # Request models
    "LoginRequest",
    "PatientRequest",
    "PatientFormRequest",
    "AllergyRequest",
    "ConditionRequest",
    "MedicationStatementRequest",
    "DiagnosticReportRequest",
    "AppointmentRequest",
    "PractitionerRequest",
    "ChargeRequest",
    # Response models
    "HealthResponse",
    "MessageResponse",
    "LoginResponse",
    "DashboardResponse",
    "UpcomingAppointment",
]
