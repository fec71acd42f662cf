"""Session cookies holding the backend's OAuth tokens."""

from __future__ import annotations

from fastapi import Request
from fastapi.responses import Response

from ..ehr.oauth import TokenSet
from .config import APIConfig

ACCESS_COOKIE = "access_token"
REFRESH_COOKIE = "refresh_token"


class NotAuthenticatedError(Exception):
    """No usable session cookie on the request."""

    def __init__(self, message: str = "No access token found"):
        super().__init__(message)
        self.message = message


def require_access_token(request: Request) -> str:
    """FastAPI dependency returning the caller's bearer token.

    Raises:
        NotAuthenticatedError: When the ``access_token`` cookie is absent.
    """
    token = request.cookies.get(ACCESS_COOKIE)
    if not token:
        raise NotAuthenticatedError()
    return token


def set_token_cookies(response: Response, tokens: TokenSet, config: APIConfig) -> None:
    """Store a token pair as httpOnly, SameSite=strict cookies."""
    response.set_cookie(
        ACCESS_COOKIE,
        tokens.access_token,
        max_age=tokens.expires_in,
        path="/",
        httponly=True,
        secure=config.cookie_secure,
        samesite="strict",
    )
    if tokens.refresh_token:
        response.set_cookie(
            REFRESH_COOKIE,
            tokens.refresh_token,
            max_age=config.refresh_cookie_max_age,
            path="/",
            httponly=True,
            secure=config.cookie_secure,
            samesite="strict",
        )


def clear_token_cookies(response: Response, config: APIConfig) -> None:
    """Expire both session cookies."""
    for name in (ACCESS_COOKIE, REFRESH_COOKIE):
        response.set_cookie(
            name,
            "",
            max_age=0,
            path="/",
            httponly=True,
            secure=config.cookie_secure,
            samesite="strict",
        )
