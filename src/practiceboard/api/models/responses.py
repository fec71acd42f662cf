"""API response schemas.

Most endpoints pass FHIR JSON through untouched and have no schema here.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = "ok"
    backend_configured: bool = False
    version: str = "0.1.0"


class MessageResponse(BaseModel):
    """Plain acknowledgement."""

    message: str


class LoginResponse(BaseModel):
    message: str
    tokenData: dict[str, Any] = Field(default_factory=dict)


class UpcomingAppointment(BaseModel):
    """One row of the dashboard's upcoming-appointments list."""

    id: str
    time: str = Field(..., description="Start time (HH:MM)")
    patient: str
    type: str
    status: str
    priority: str = "normal"
    date: str | None = None


class DashboardResponse(BaseModel):
    """Headline numbers for the dashboard landing page."""

    total_patients: int = 0
    todays_appointments: int = 0
    critical_allergies: int = 0
    active_cases: int = 0
    upcoming_appointments: list[UpcomingAppointment] = Field(default_factory=list)
    errors: list[str] = Field(
        default_factory=list,
        description="Sources that could not be fetched",
    )
