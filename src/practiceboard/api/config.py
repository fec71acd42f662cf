"""API configuration settings."""

from __future__ import annotations

import os
from dataclasses import dataclass, field

REFRESH_COOKIE_MAX_AGE = 60 * 60 * 24 * 30  # 30 days


def _flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("true", "1", "yes")


@dataclass
class APIConfig:
    """Configuration for the PracticeBoard API."""

    # Server settings
    host: str = "0.0.0.0"
    port: int = 8000
    debug: bool = False
    log_level: str = "INFO"

    # CORS settings
    cors_origins: list[str] = field(default_factory=lambda: ["*"])
    cors_allow_credentials: bool = True
    cors_allow_methods: list[str] = field(default_factory=lambda: ["*"])
    cors_allow_headers: list[str] = field(default_factory=lambda: ["*"])

    # Session cookies
    cookie_secure: bool = True
    refresh_cookie_max_age: int = REFRESH_COOKIE_MAX_AGE

    # Serve sample charges when the ChargeItem endpoints fail
    billing_mock_fallback: bool = True

    # Built SPA; empty means "don't serve a frontend"
    static_dir: str = ""

    @classmethod
    def from_env(cls) -> APIConfig:
        """Load configuration from environment variables."""
        return cls(
            host=os.getenv("PRACTICEBOARD_HOST", "0.0.0.0"),
            port=int(os.getenv("PRACTICEBOARD_PORT", "8000")),
            debug=_flag("PRACTICEBOARD_DEBUG", ""),
            log_level=os.getenv("PRACTICEBOARD_LOG_LEVEL", "INFO").upper(),
            cors_origins=os.getenv("PRACTICEBOARD_CORS_ORIGINS", "*").split(","),
            cookie_secure=_flag("PRACTICEBOARD_COOKIE_SECURE", "true"),
            billing_mock_fallback=_flag("PRACTICEBOARD_BILLING_MOCK_FALLBACK", "true"),
            static_dir=os.getenv("PRACTICEBOARD_STATIC_DIR", ""),
        )


# Global config instance
_config: APIConfig | None = None


def get_config() -> APIConfig:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = APIConfig.from_env()
    return _config
