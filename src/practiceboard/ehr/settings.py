"""Connection settings for the practice-management backend."""

from __future__ import annotations

import os
from dataclasses import dataclass

DEFAULT_FHIR_PATH = "/apiportal/ema/fhir/v2"

DEFAULT_SCOPE = (
    "patients:read patient:write clinical:read clinical:write "
    "appointments:read appointments:write doctors:read "
    "billing:read billing:write report:read"
)


@dataclass
class EHRSettings:
    """Where the backend lives and how we identify ourselves to it."""

    base_url: str = ""
    api_key: str = ""
    client_id: str = ""
    client_secret: str = ""
    redirect_uri: str = ""
    password_auth_url: str = ""
    fhir_path: str = DEFAULT_FHIR_PATH
    scope: str = DEFAULT_SCOPE
    timeout: float = 30.0

    @classmethod
    def from_env(cls) -> EHRSettings:
        """Load settings from ``EHR_*`` environment variables."""
        return cls(
            base_url=os.getenv("EHR_BASE_URL", "").rstrip("/"),
            api_key=os.getenv("EHR_API_KEY", ""),
            client_id=os.getenv("EHR_CLIENT_ID", ""),
            client_secret=os.getenv("EHR_CLIENT_SECRET", ""),
            redirect_uri=os.getenv("EHR_REDIRECT_URI", ""),
            password_auth_url=os.getenv("EHR_PASSWORD_AUTH_URL", ""),
            fhir_path=os.getenv("EHR_FHIR_PATH", DEFAULT_FHIR_PATH),
            scope=os.getenv("EHR_SCOPE", DEFAULT_SCOPE),
            timeout=float(os.getenv("EHR_TIMEOUT", "30")),
        )

    @property
    def fhir_base(self) -> str:
        return f"{self.base_url}{self.fhir_path}"

    @property
    def token_url(self) -> str:
        return f"{self.base_url}/o/token"

    def check(self) -> str | None:
        """Return an error message when the backend is not configured."""
        if not self.base_url or not self.api_key:
            return "EHR backend not configured (EHR_BASE_URL, EHR_API_KEY)"
        return None


_settings: EHRSettings | None = None


def get_settings() -> EHRSettings:
    """Get the global backend settings."""
    global _settings
    if _settings is None:
        _settings = EHRSettings.from_env()
    return _settings
