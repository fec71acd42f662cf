"""OAuth2 token endpoints of the practice-management backend.

Supports the three grants the dashboard uses:

- ``password``: username/password sign-in from the login page
- ``authorization_code``: redirect flow via ``/o/authorize``
- ``refresh_token``: renewing an expired access token

Tokens are never stored here; the API layer puts them in cookies.
"""

from __future__ import annotations

import logging
from urllib.parse import quote

import httpx
from pydantic import BaseModel, ConfigDict, Field

from .errors import TokenError
from .settings import EHRSettings, get_settings

logger = logging.getLogger(__name__)


class TokenSet(BaseModel):
    """Token endpoint response."""

    model_config = ConfigDict(extra="allow")

    access_token: str = Field(..., description="Bearer token for FHIR calls")
    refresh_token: str | None = Field(None, description="Token used to renew access")
    expires_in: int = Field(default=3600, description="Access token lifetime (seconds)")
    token_type: str = Field(default="Bearer")
    scope: str | None = None


class OAuthClient:
    """Token grant client."""

    def __init__(
        self,
        settings: EHRSettings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._settings = settings or get_settings()
        self._transport = transport

    def authorize_url(self) -> str:
        """Build the authorization-code redirect URL."""
        s = self._settings
        return (
            f"{s.base_url}/o/authorize/"
            f"?redirect_uri={quote(s.redirect_uri, safe='')}"
            f"&response_type=code"
            f"&client_id={s.client_id}"
            f"&scope={quote(s.scope, safe='')}"
        )

    async def exchange_code(self, code: str) -> TokenSet:
        """Trade an authorization code for tokens."""
        return await self._request_token(
            self._settings.token_url,
            {
                "grant_type": "authorization_code",
                "code": code,
                "redirect_uri": self._settings.redirect_uri,
                "client_id": self._settings.client_id,
                "client_secret": self._settings.client_secret,
            },
        )

    async def password_login(self, username: str, password: str) -> TokenSet:
        """Sign in with practice credentials (resource owner password grant)."""
        return await self._request_token(
            self._settings.password_auth_url or self._settings.token_url,
            {
                "grant_type": "password",
                "username": username,
                "password": password,
            },
            api_key=True,
        )

    async def refresh(self, refresh_token: str) -> TokenSet:
        """Renew the access token."""
        return await self._request_token(
            self._settings.token_url,
            {
                "grant_type": "refresh_token",
                "refresh_token": refresh_token,
            },
            api_key=True,
        )

    async def _request_token(
        self,
        url: str,
        form: dict[str, str],
        api_key: bool = False,
    ) -> TokenSet:
        headers = {
            "Content-Type": "application/x-www-form-urlencoded",
            "accept": "application/json",
        }
        if api_key:
            headers["x-api-key"] = self._settings.api_key

        async with httpx.AsyncClient(
            timeout=self._settings.timeout,
            transport=self._transport,
        ) as client:
            response = await client.post(url, data=form, headers=headers)

        try:
            payload = response.json()
        except ValueError:
            payload = response.text

        if response.is_error:
            logger.warning(
                "Token request (%s) failed with status %s",
                form["grant_type"],
                response.status_code,
            )
            raise TokenError(response.status_code, payload)

        if not isinstance(payload, dict) or "access_token" not in payload:
            raise TokenError(502, {"message": "Token response missing access_token"})

        return TokenSet.model_validate(payload)


_oauth: OAuthClient | None = None


def get_oauth_client() -> OAuthClient:
    """Get or create the global OAuth client."""
    global _oauth
    if _oauth is None:
        _oauth = OAuthClient()
    return _oauth
