"""FHIR client for the practice-management backend.

Every call carries the signed-in user's bearer token (taken from the
browser cookie by the API layer) plus the portal ``x-api-key``. The client
itself holds no token state.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from .settings import EHRSettings, get_settings

logger = logging.getLogger(__name__)

FHIR_JSON = "application/fhir+json"


class EHRClient:
    """Async FHIR R4 client for the practice-management backend."""

    def __init__(
        self,
        settings: EHRSettings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._settings = settings or get_settings()
        self._transport = transport

    @property
    def settings(self) -> EHRSettings:
        return self._settings

    def _headers(self, token: str, body: bool = False) -> dict[str, str]:
        headers = {
            "accept": FHIR_JSON,
            "authorization": f"Bearer {token}",
            "x-api-key": self._settings.api_key,
        }
        if body:
            headers["Content-Type"] = FHIR_JSON
        return headers

    def _url(self, path: str) -> str:
        return f"{self._settings.fhir_base}{path}"

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=self._settings.timeout,
            transport=self._transport,
        )

    async def get(self, path: str, token: str, params: dict | None = None) -> dict:
        """GET request to the FHIR API.

        Args:
            path: API path (e.g., "/Patient" or "/Patient/123")
            token: Bearer token of the signed-in user
            params: Optional query parameters, forwarded as given

        Returns:
            Response JSON as dict

        Raises:
            httpx.HTTPStatusError: On HTTP errors
        """
        async with self._client() as client:
            response = await client.get(
                self._url(path),
                params=params or None,
                headers=self._headers(token),
            )
            logger.debug("GET %s -> %s", response.request.url, response.status_code)
            response.raise_for_status()
            return response.json()

    async def post(
        self,
        path: str,
        token: str,
        data: dict,
        headers: dict[str, str] | None = None,
    ) -> dict:
        """POST a FHIR resource.

        Raises:
            httpx.HTTPStatusError: On HTTP errors
        """
        async with self._client() as client:
            response = await client.post(
                self._url(path),
                json=data,
                headers={**self._headers(token, body=True), **(headers or {})},
            )
            logger.debug("POST %s -> %s", path, response.status_code)
            response.raise_for_status()
            return response.json()

    async def put(
        self,
        path: str,
        token: str,
        data: dict,
        headers: dict[str, str] | None = None,
    ) -> dict:
        """PUT (replace) a FHIR resource.

        Raises:
            httpx.HTTPStatusError: On HTTP errors
        """
        response = await self.put_raw(path, token, data, headers)
        response.raise_for_status()
        return response.json()

    async def put_raw(
        self,
        path: str,
        token: str,
        data: dict,
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        """PUT a FHIR resource and hand back the response unchecked."""
        async with self._client() as client:
            response = await client.put(
                self._url(path),
                json=data,
                headers={**self._headers(token, body=True), **(headers or {})},
            )
            logger.debug("PUT %s -> %s", path, response.status_code)
            return response

    async def delete(self, path: str, token: str) -> None:
        """DELETE a FHIR resource.

        Raises:
            httpx.HTTPStatusError: On HTTP errors
        """
        headers: dict[str, Any] = self._headers(token)
        headers.pop("accept")
        async with self._client() as client:
            response = await client.delete(self._url(path), headers=headers)
            logger.debug("DELETE %s -> %s", path, response.status_code)
            response.raise_for_status()


# Global client instance
_client: EHRClient | None = None


def get_client() -> EHRClient:
    """Get or create global EHR client instance."""
    global _client
    if _client is None:
        _client = EHRClient()
    return _client
