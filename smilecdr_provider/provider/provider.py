"""Provider entry point: configuration plus resource and data source registry."""
from __future__ import annotations
import logging
from typing import Dict, Optional

from ..config import ProviderConfig, load_settings
from ..core.smilecdr import ProviderNotConfiguredError, SmileCdrClient
from .resource_data import ResourceData
from .resources import (
    IdentityProviderResource,
    OpenIdClientResource,
    OpenIdClientsDataSource,
    Resource,
)
from .schema import PROVIDER_SCHEMA

logger = logging.getLogger(__name__)

RESOURCES: Dict[str, Resource] = {
    OpenIdClientResource.type_name: OpenIdClientResource(),
    IdentityProviderResource.type_name: IdentityProviderResource(),
}

DATA_SOURCES = {
    OpenIdClientsDataSource.type_name: OpenIdClientsDataSource(),
}


class Provider:
    """Holds the configured SmileCDR client shared by every operation.

    Usage:
        provider = Provider.configure(load_settings())
        resource = provider.resource("smilecdr_openid_client")
        d = resource.new_data({"client_id": "app1", "client_name": "App 1"})
        resource.create(d, provider.client)
    """

    schema = PROVIDER_SCHEMA

    def __init__(self, config: ProviderConfig, client: Optional[SmileCdrClient] = None):
        self.config = config
        self._client = client

    @classmethod
    def configure(cls, config: ProviderConfig) -> "Provider":
        """Build a provider; without complete credentials it stays unconfigured."""
        if not config.is_configured:
            logger.warning("SmileCDR provider is not configured: base_url, username and password are required")
            return cls(config)
        return cls(config, SmileCdrClient.from_config(config))

    @classmethod
    def from_data(cls, d: ResourceData) -> "Provider":
        """Configure from provider-block attributes (environment defaults applied)."""
        config = load_settings(
            base_url=d.get("base_url"),
            username=d.get("username"),
            password=d.get("password"),
        )
        return cls.configure(config)

    @property
    def client(self) -> SmileCdrClient:
        if self._client is None:
            raise ProviderNotConfiguredError(
                "SmileCDR provider is not configured; set base_url, username and password "
                "(or SMILECDR_BASE_URL, SMILECDR_USERNAME, SMILECDR_PASSWORD)"
            )
        return self._client

    @staticmethod
    def resource(type_name: str) -> Resource:
        try:
            return RESOURCES[type_name]
        except KeyError:
            raise KeyError(f"Unknown resource type {type_name!r}") from None

    @staticmethod
    def data_source(type_name: str) -> OpenIdClientsDataSource:
        try:
            return DATA_SOURCES[type_name]
        except KeyError:
            raise KeyError(f"Unknown data source {type_name!r}") from None
