"""Login redirect for browser page requests."""

from __future__ import annotations

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import RedirectResponse

from .security import ACCESS_COOKIE

PUBLIC_PREFIXES = (
    "/login",
    "/api/auth/login",
    "/api/auth/callback",
    "/api/auth/refresh",
    "/api/health",
    "/docs",
    "/redoc",
    "/openapi.json",
)

IGNORED_PREFIXES = ("/assets/", "/static/", "/favicon.ico", "/public/")


class LoginRedirectMiddleware(BaseHTTPMiddleware):
    """Send signed-out browsers to ``/login`` and signed-in ones away from it.

    API routes are left alone without a session so they can answer with
    their own 401 JSON.
    """

    async def dispatch(self, request: Request, call_next):
        path = request.url.path
        if path.startswith(IGNORED_PREFIXES):
            return await call_next(request)

        has_token = bool(request.cookies.get(ACCESS_COOKIE))
        is_public = path.startswith(PUBLIC_PREFIXES)

        if not has_token and not is_public and not path.startswith("/api/"):
            return RedirectResponse("/login", status_code=307)

        if has_token and path == "/login":
            return RedirectResponse("/", status_code=307)

        return await call_next(request)
