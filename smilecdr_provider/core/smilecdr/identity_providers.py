"""SmileCDR OpenID Connect server (identity provider) operations."""
from __future__ import annotations
import logging
from typing import List
from urllib.parse import quote

from ..models import OpenIdIdentityProvider, ScopeSelector
from ..transformer import IdentityProviderTransformer
from .client import SmileCdrClient
from .exceptions import NotFoundError

logger = logging.getLogger(__name__)


def servers_path(scope: ScopeSelector) -> str:
    return f"/openid-connect-servers/{quote(scope.node_id, safe='')}/{quote(scope.module_id, safe='')}"


class IdentityProviderService:
    """Service for managing trusted OIDC servers of a SMART auth module.

    SmileCDR has no archive flag for servers, so removal is a real DELETE.
    """

    kind = "smilecdr_openid_identity_provider"
    supports_archive = False

    def __init__(self, client: SmileCdrClient):
        self.client = client

    def create(self, record: OpenIdIdentityProvider) -> OpenIdIdentityProvider:
        payload = IdentityProviderTransformer.to_api(record)
        payload.pop("pid", None)
        resp = self.client.post(servers_path(record.scope), json=payload)
        created = IdentityProviderTransformer.from_api(self.client.json_body(resp))
        logger.info("Created identity provider %s (pid=%s)", created.name, created.pid)
        return created

    def get(self, scope: ScopeSelector, name: str) -> OpenIdIdentityProvider:
        """Return the server whose name matches exactly.

        Raises:
            NotFoundError: If no server has that name
        """
        for provider in self.list(scope):
            if provider.name == name:
                return provider
        raise NotFoundError(f"Identity provider {name!r} not found", servers_path(scope))

    def update(self, record: OpenIdIdentityProvider) -> OpenIdIdentityProvider:
        """Overwrite every attribute of an existing server.

        Raises:
            NotFoundError: If record carries no pid, or the pid is not the one
                registered under record.name
        """
        path = f"{servers_path(record.scope)}/{self._resolve(record)}"
        resp = self.client.put(path, json=IdentityProviderTransformer.to_api(record))
        updated = IdentityProviderTransformer.from_api(self.client.json_body(resp))
        logger.info("Updated identity provider %s (pid=%s)", updated.name, updated.pid)
        return updated

    def delete(self, record: OpenIdIdentityProvider) -> None:
        self.client.delete(f"{servers_path(record.scope)}/{self._resolve(record)}")
        logger.info("Deleted identity provider %s (pid=%s)", record.name, record.pid)

    def list(self, scope: ScopeSelector) -> List[OpenIdIdentityProvider]:
        resp = self.client.get(servers_path(scope))
        return [IdentityProviderTransformer.from_api(item) for item in self.client.json_body(resp)]

    def _resolve(self, record: OpenIdIdentityProvider) -> int:
        """Return record.pid once it is confirmed to belong to record.name.

        Servers are addressed by pid alone, so the pid must match the server
        registered under record.name.
        """
        if record.pid is None:
            raise NotFoundError(f"Identity provider {record.name!r} has no pid; read it first")
        current = self.get(record.scope, record.name)
        if current.pid != record.pid:
            raise NotFoundError(
                f"Identity provider {record.name!r} has pid {current.pid}, not {record.pid}",
                servers_path(record.scope),
            )
        return record.pid
