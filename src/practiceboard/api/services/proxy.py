"""Shared plumbing for the pass-through routers."""

from __future__ import annotations

import logging
from typing import Any

import httpx
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)

RECONCILIATION_NOTE = (
    "Note: Changes require reconciliation by the Practice before being added "
    "to the Patient's chart."
)


def describe_error(exc: Exception) -> str:
    """Short, browser-safe description of an upstream failure."""
    if isinstance(exc, httpx.HTTPStatusError):
        return f"API request failed with status: {exc.response.status_code}"
    if isinstance(exc, httpx.TimeoutException):
        return "Request to EHR backend timed out"
    if isinstance(exc, httpx.RequestError):
        return f"Could not reach EHR backend: {type(exc).__name__}"
    return str(exc) or type(exc).__name__


def upstream_failure(action: str, exc: Exception) -> JSONResponse:
    """Log *exc* and answer ``500 {"message": "Error <action>", "error": ...}``."""
    logger.error("Error %s: %s", action, exc)
    return JSONResponse(
        status_code=500,
        content={"message": f"Error {action}", "error": describe_error(exc)},
    )


def with_message(data: dict[str, Any], message: str, **extra: Any) -> dict[str, Any]:
    """Backend payload plus a human-readable message for the UI."""
    return {**data, "message": message, **extra}


def reconciliation_message(resource_type: str, verb: str) -> str:
    """E.g. "Condition created successfully. Note: Changes require ..."."""
    return f"{resource_type} {verb} successfully. {RECONCILIATION_NOTE}"


def forwarded_headers(headers: Any, names: tuple[str, ...]) -> dict[str, str]:
    """Copy selected browser request headers through to the backend."""
    return {name: headers[name] for name in names if headers.get(name)}
