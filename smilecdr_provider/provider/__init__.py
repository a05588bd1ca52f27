"""Host runtime adapter: schemas, generic resource data and CRUD entry points."""
from .provider import DATA_SOURCES, RESOURCES, Provider
from .resource_data import ResourceData
from .resources import (
    IdentityProviderResource,
    OpenIdClientResource,
    OpenIdClientsDataSource,
    Resource,
)

__all__ = [
    "Provider",
    "RESOURCES",
    "DATA_SOURCES",
    "ResourceData",
    "Resource",
    "OpenIdClientResource",
    "IdentityProviderResource",
    "OpenIdClientsDataSource",
]
