"""Errors raised while talking to (or preparing requests for) the backend."""

from __future__ import annotations

from typing import Any


class InvalidResourceError(Exception):
    """A request body cannot be turned into a valid FHIR resource.

    Rendered by the API as ``400 {"error": ..., "message": ..., **extra}``.
    """

    def __init__(self, error: str, message: str | None = None, **extra: Any):
        super().__init__(message or error)
        self.error = error
        self.message = message
        self.extra = extra

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {"error": self.error}
        if self.extra:
            body.update(self.extra)
        if self.message is not None:
            body["message"] = self.message
        return body


class TokenError(Exception):
    """The OAuth token endpoint refused a grant."""

    def __init__(self, status_code: int, detail: Any):
        super().__init__(f"Token request failed with status {status_code}")
        self.status_code = status_code
        self.detail = detail
