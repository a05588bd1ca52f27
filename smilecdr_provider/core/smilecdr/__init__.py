"""SmileCDR JSON admin API client library.

Architecture:
- client.py: HTTP client with basic authentication and error mapping
- openid_clients.py: OIDC client registration (create, fetch, overwrite, list)
- identity_providers.py: Trusted OIDC servers (create, fetch, overwrite, delete, list)
- exceptions.py: Typed exceptions for error handling

Usage:
    from smilecdr_provider.core.models import ScopeSelector
    from smilecdr_provider.core.smilecdr import SmileCdrClient, OpenIdClientService

    client = SmileCdrClient("http://localhost:9000", "admin", "password")
    service = OpenIdClientService(client)
    oidc_client = service.get(ScopeSelector("Master", "smart_auth"), "my-app")
"""
from .client import SmileCdrClient, REQUEST_TIMEOUT, DEFAULT_BASE_URL
from .exceptions import (
    SmileCdrError,
    SmileCdrAPIError,
    ValidationError,
    NotFoundError,
    ConflictError,
    TransportError,
    ProviderNotConfiguredError,
)
from .openid_clients import OpenIdClientService
from .identity_providers import IdentityProviderService

__all__ = [
    # Client
    "SmileCdrClient",
    "REQUEST_TIMEOUT",
    "DEFAULT_BASE_URL",

    # Exceptions
    "SmileCdrError",
    "SmileCdrAPIError",
    "ValidationError",
    "NotFoundError",
    "ConflictError",
    "TransportError",
    "ProviderNotConfiguredError",

    # Services
    "OpenIdClientService",
    "IdentityProviderService",
]
