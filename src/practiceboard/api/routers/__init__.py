"""API routers."""

from .allergies import router as allergies_router
from .appointments import router as appointments_router
from .auth import router as auth_router
from .billing import router as billing_router
from .conditions import router as conditions_router
from .dashboard import router as dashboard_router
from .diagnostic_reports import router as diagnostic_reports_router
from .health import router as health_router
from .medications import router as medications_router
from .patients import router as patients_router
from .providers import router as providers_router

__all__ = [
    "allergies_router",
    "appointments_router",
    "auth_router",
    "billing_router",
    "conditions_router",
    "dashboard_router",
    "diagnostic_reports_router",
    "health_router",
    "medications_router",
    "patients_router",
    "providers_router",
]
