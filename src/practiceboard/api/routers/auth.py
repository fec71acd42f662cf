"""Sign-in, OAuth callback, token refresh and sign-out.

Tokens issued by the backend are kept in httpOnly cookies; the browser
never sees them in script.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import JSONResponse, RedirectResponse

from ...ehr.errors import TokenError
from ...ehr.oauth import OAuthClient, get_oauth_client
from ..config import APIConfig, get_config
from ..models.requests import LoginRequest
from ..models.responses import LoginResponse, MessageResponse
from ..security import REFRESH_COOKIE, clear_token_cookies, set_token_cookies

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


def _token_failure(exc: TokenError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"error": exc.detail})


@router.post("/login", response_model=LoginResponse)
async def login(
    request: LoginRequest,
    oauth: OAuthClient = Depends(get_oauth_client),
    config: APIConfig = Depends(get_config),
):
    """Sign in with practice credentials and store the session cookies."""
    try:
        tokens = await oauth.password_login(request.username, request.password)
    except TokenError as e:
        return _token_failure(e)

    logger.info("User %s signed in", request.username)
    response = JSONResponse(
        content={"message": "Login successful", "tokenData": tokens.model_dump()}
    )
    set_token_cookies(response, tokens, config)
    return response


@router.get("/redirect")
async def authorize_redirect(oauth: OAuthClient = Depends(get_oauth_client)):
    """Start the authorization-code flow."""
    return RedirectResponse(oauth.authorize_url(), status_code=307)


@router.get("/callback", response_model=MessageResponse)
async def oauth_callback(
    code: str | None = Query(None, description="Authorization code"),
    oauth: OAuthClient = Depends(get_oauth_client),
    config: APIConfig = Depends(get_config),
):
    """Finish the authorization-code flow."""
    if not code:
        return JSONResponse(status_code=400, content={"error": "Missing code"})

    try:
        tokens = await oauth.exchange_code(code)
    except TokenError as e:
        return _token_failure(e)

    response = JSONResponse(content={"message": "Token stored successfully"})
    set_token_cookies(response, tokens, config)
    return response


@router.api_route("/refresh", methods=["GET", "POST"], response_model=MessageResponse)
async def refresh_tokens(
    request: Request,
    oauth: OAuthClient = Depends(get_oauth_client),
    config: APIConfig = Depends(get_config),
):
    """Renew the access token using the refresh-token cookie."""
    refresh_token = request.cookies.get(REFRESH_COOKIE)
    if not refresh_token:
        return JSONResponse(status_code=401, content={"error": "No refresh token found"})

    try:
        tokens = await oauth.refresh(refresh_token)
    except TokenError as e:
        return _token_failure(e)

    response = JSONResponse(content={"message": "Access token refreshed"})
    set_token_cookies(response, tokens, config)
    return response


@router.post("/logout", response_model=MessageResponse)
async def logout(config: APIConfig = Depends(get_config)):
    """Clear the session cookies."""
    response = JSONResponse(content={"message": "Logged out successfully"})
    clear_token_cookies(response, config)
    return response
