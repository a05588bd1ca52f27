"""SmileCDR OpenID Connect client operations."""
from __future__ import annotations
import logging
from typing import List
from urllib.parse import quote

from ..models import OpenIdClient, ScopeSelector
from ..transformer import OpenIdClientTransformer
from .client import SmileCdrClient
from .exceptions import NotFoundError

logger = logging.getLogger(__name__)


def clients_path(scope: ScopeSelector) -> str:
    return f"/openid-connect-clients/{quote(scope.node_id, safe='')}/{quote(scope.module_id, safe='')}"


class OpenIdClientService:
    """Service for managing OIDC clients of a SMART auth module."""

    kind = "smilecdr_openid_client"
    supports_archive = True

    def __init__(self, client: SmileCdrClient):
        """Initialize client service.

        Args:
            client: Configured SmileCDR client
        """
        self.client = client

    def create(self, record: OpenIdClient) -> OpenIdClient:
        """Register a new OIDC client.

        Args:
            record: Desired client (pid is ignored)

        Returns:
            The stored client, including its server-assigned pid

        Raises:
            ConflictError: If an active client already uses the client_id
        """
        payload = OpenIdClientTransformer.to_api(record)
        payload.pop("pid", None)
        resp = self.client.post(clients_path(record.scope), json=payload)
        created = OpenIdClientTransformer.from_api(self.client.json_body(resp))
        logger.info("Created OIDC client %s (pid=%s)", created.client_id, created.pid)
        return created

    def get(self, scope: ScopeSelector, client_id: str) -> OpenIdClient:
        """Fetch the most recent client registered under client_id, archived or not.

        Raises:
            NotFoundError: If no client matches
        """
        path = f"{clients_path(scope)}/{quote(client_id, safe='')}"
        resp = self.client.get(path)
        return OpenIdClientTransformer.from_api(self.client.json_body(resp))

    def update(self, record: OpenIdClient) -> OpenIdClient:
        """Overwrite every attribute of an existing client.

        Raises:
            NotFoundError: If record carries no pid, or the pid is stale
        """
        if record.pid is None:
            raise NotFoundError(f"OIDC client {record.client_id!r} has no pid; read it first")
        path = f"{clients_path(record.scope)}/{quote(record.client_id, safe='')}"
        resp = self.client.put(path, json=OpenIdClientTransformer.to_api(record))
        updated = OpenIdClientTransformer.from_api(self.client.json_body(resp))
        logger.info("Updated OIDC client %s (pid=%s)", updated.client_id, updated.pid)
        return updated

    def list(self, scope: ScopeSelector) -> List[OpenIdClient]:
        """Return every client stored in the node/module."""
        resp = self.client.get(clients_path(scope))
        return [OpenIdClientTransformer.from_api(item) for item in self.client.json_body(resp)]
