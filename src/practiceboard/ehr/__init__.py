"""Practice-management backend (FHIR R4) integration.

Provides:
- EHRClient: bearer-token FHIR client for the backend
- OAuthClient: password, authorization-code and refresh grants
- resource builders translating dashboard bodies to FHIR resources
- search-parameter forwarding rules per resource type

Usage:
    from practiceboard.ehr import get_client, forward_params

    bundle = await get_client().get(
        "/Patient", token, params=forward_params("Patient", query)
    )
"""

from .client import EHRClient, get_client
from .errors import InvalidResourceError, TokenError
from .oauth import OAuthClient, TokenSet, get_oauth_client
from .search import charge_params, forward_params, inbound_charge_params, slot_params
from .settings import EHRSettings, get_settings

__all__ = [
    # Clients
    "EHRClient",
    "get_client",
    "OAuthClient",
    "TokenSet",
    "get_oauth_client",
    # Settings
    "EHRSettings",
    "get_settings",
    # Errors
    "InvalidResourceError",
    "TokenError",
    # Search
    "forward_params",
    "slot_params",
    "charge_params",
    "inbound_charge_params",
]
