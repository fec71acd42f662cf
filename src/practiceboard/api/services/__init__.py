"""API services."""

from .proxy import (
    forwarded_headers,
    reconciliation_message,
    upstream_failure,
    with_message,
)

__all__ = [
    "forwarded_headers",
    "reconciliation_message",
    "upstream_failure",
    "with_message",
]
