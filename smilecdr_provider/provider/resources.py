"""Resource and data source implementations for the host runtime.

This is the only place where generic ResourceData is converted to and from
typed records; the CRUD functions delegate everything else to Reconciler.
"""
from __future__ import annotations
import logging
from dataclasses import fields
from typing import Any, Dict

from ..core.models import (
    ClientSecret,
    DeclaredResource,
    OpenIdClient,
    OpenIdIdentityProvider,
    ScopeSelector,
    UserPermission,
)
from ..core.reconciler import Reconciler
from ..core.smilecdr import (
    IdentityProviderService,
    NotFoundError,
    OpenIdClientService,
    SmileCdrClient,
    ValidationError,
)
from .resource_data import ResourceData
from .schema import (
    IDENTITY_PROVIDER_SCHEMA,
    OPENID_CLIENT_SCHEMA,
    OPENID_CLIENTS_DATA_SOURCE_SCHEMA,
)

logger = logging.getLogger(__name__)


# ─────────────────────────────────────────────────────────────────────────────
# ResourceData <-> typed records
# ─────────────────────────────────────────────────────────────────────────────
def resource_data_to_openid_client(d: ResourceData) -> OpenIdClient:
    """Build a typed OpenIdClient from generic resource data."""
    values = _scalar_values(d, OpenIdClient, ("client_secrets", "permissions"))
    values["client_secrets"] = [
        ClientSecret(
            secret=item.get("secret") or "",
            description=item.get("description") or "",
            activation=item.get("activation") or None,
            expiration=item.get("expiration") or None,
            pid=item.get("pid"),
        )
        for item in d.get("client_secrets")
    ]
    values["permissions"] = [
        UserPermission(item["permission"], item.get("argument") or "")
        for item in d.get("permissions")
    ]
    return OpenIdClient(**values)


def resource_data_to_identity_provider(d: ResourceData) -> OpenIdIdentityProvider:
    """Build a typed OpenIdIdentityProvider from generic resource data."""
    return OpenIdIdentityProvider(**_scalar_values(d, OpenIdIdentityProvider, ()))


def record_to_resource_data(record: DeclaredResource, d: ResourceData) -> None:
    """Copy every attribute of a typed record onto resource data."""
    for f in fields(record):
        if f.name in d.schema:
            d.set(f.name, getattr(record, f.name))


def _scalar_values(d: ResourceData, model: type, nested: tuple) -> Dict[str, Any]:
    values: Dict[str, Any] = {}
    defaults = model()
    for f in fields(model):
        if f.name in nested:
            continue
        value = d.get(f.name)
        if value is None:
            value = getattr(defaults, f.name)
        if f.name == "pid" and not value:
            value = None
        values[f.name] = list(value) if isinstance(value, list) else value
    return values


# ─────────────────────────────────────────────────────────────────────────────
# Resources
# ─────────────────────────────────────────────────────────────────────────────
class Resource:
    """CRUD + import for one resource type, over a configured SmileCdrClient."""

    type_name = ""
    schema: Dict = {}
    model: type = DeclaredResource
    service_class: type = object

    def to_record(self, d: ResourceData) -> DeclaredResource:
        raise NotImplementedError

    def new_data(self, raw: Dict[str, Any] | None = None, id: str = "") -> ResourceData:
        return ResourceData(self.schema, raw, id=id)

    def reconciler(self, client: SmileCdrClient) -> Reconciler:
        return Reconciler(self.service_class(client))

    def create(self, d: ResourceData, client: SmileCdrClient) -> None:
        """Create the remote object, then store id, pid and read-back state.

        When the read-back fails, id and pid are still recorded before the
        error propagates, so a later read can complete the state.
        """
        d.validate()
        record = self.to_record(d)
        try:
            self.reconciler(client).create(record)
        finally:
            if record.server_identity is not None:
                d.set_id(record.natural_key)
                d.set("pid", record.server_identity)
        record_to_resource_data(record, d)

    def read(self, d: ResourceData, client: SmileCdrClient) -> None:
        """Refresh ``d`` from SmileCDR; clear the id when the object is gone."""
        record = self.to_record(d)
        key = record.natural_key or d.id
        try:
            current = self.reconciler(client).read(key, record.scope)
        except NotFoundError:
            logger.warning("%s %s no longer exists remotely; dropping it from state", self.type_name, key)
            d.set_id("")
            return
        if current.is_archived:
            logger.warning("%s %s was archived remotely; dropping it from state", self.type_name, key)
            d.set_id("")
            return
        d.set_id(current.natural_key)
        record_to_resource_data(current, d)

    def update(self, d: ResourceData, client: SmileCdrClient) -> None:
        """Overwrite the remote object with ``d`` and read it back.

        Raises:
            ValidationError: If the natural key differs from the stored id
        """
        d.validate()
        record = self.to_record(d)
        if d.id and record.natural_key != d.id:
            raise ValidationError(
                f"cannot change from {d.id!r} to {record.natural_key!r}; destroy and re-create instead",
                record.natural_key_field,
            )
        d.set_id(record.natural_key)
        self.reconciler(client).update(record)
        self.read(d, client)

    def delete(self, d: ResourceData, client: SmileCdrClient) -> None:
        """Archive (or delete) the remote object and clear the id."""
        record = self.to_record(d)
        self.reconciler(client).delete(record)
        if "archived_at" in d.schema:
            d.set("archived_at", record.archived_at)
        d.set_id("")

    def import_state(self, import_id: str, d: ResourceData) -> ResourceData:
        """Prepare state for import by natural key.

        Accepts ``<key>`` or ``<node_id>/<module_id>/<key>``; a following read
        fills in everything else.
        """
        parts = import_id.split("/")
        if len(parts) == 3:
            node_id, module_id, key = parts
            d.set("node_id", node_id)
            d.set("module_id", module_id)
        else:
            key = import_id
        if not key:
            raise ValidationError("import id must not be empty")
        d.set(self.natural_key_field, key)
        d.set_id(key)
        return d

    def carry_computed(self, d: ResourceData, prior: ResourceData) -> None:
        """Copy server-assigned values from ``prior`` state onto freshly declared ``d``."""
        d.set("pid", prior.get("pid"))

    @property
    def natural_key_field(self) -> str:
        return self.model.natural_key_field


class OpenIdClientResource(Resource):
    type_name = "smilecdr_openid_client"
    schema = OPENID_CLIENT_SCHEMA
    model = OpenIdClient
    service_class = OpenIdClientService

    def to_record(self, d: ResourceData) -> OpenIdClient:
        return resource_data_to_openid_client(d)

    def carry_computed(self, d: ResourceData, prior: ResourceData) -> None:
        """Also keep generated secrets, so re-declaring a secret does not rotate it.

        A declared secret matches the first unused prior secret with the same
        description whose value is equal, or any value when none is declared.
        """
        super().carry_computed(d, prior)
        available = list(prior.get("client_secrets"))
        secrets = []
        for secret in d.get("client_secrets"):
            secret = dict(secret)
            for candidate in available:
                if candidate["description"] != secret["description"]:
                    continue
                if secret["secret"] and secret["secret"] != candidate["secret"]:
                    continue
                secret["secret"] = candidate["secret"]
                secret["pid"] = candidate["pid"]
                available.remove(candidate)
                break
            secrets.append(secret)
        d.set("client_secrets", secrets)


class IdentityProviderResource(Resource):
    type_name = "smilecdr_openid_identity_provider"
    schema = IDENTITY_PROVIDER_SCHEMA
    model = OpenIdIdentityProvider
    service_class = IdentityProviderService

    def to_record(self, d: ResourceData) -> OpenIdIdentityProvider:
        return resource_data_to_identity_provider(d)


# ─────────────────────────────────────────────────────────────────────────────
# Data sources
# ─────────────────────────────────────────────────────────────────────────────
class OpenIdClientsDataSource:
    """Lists every OIDC client of one node/module."""

    type_name = "smilecdr_openid_client"
    schema = OPENID_CLIENTS_DATA_SOURCE_SCHEMA

    def new_data(self, raw: Dict[str, Any] | None = None) -> ResourceData:
        return ResourceData(self.schema, raw)

    def read(self, d: ResourceData, client: SmileCdrClient) -> None:
        scope = ScopeSelector(d.get("node_id"), d.get("module_id"))
        records = OpenIdClientService(client).list(scope)
        clients = []
        for record in records:
            item = ResourceData(OPENID_CLIENT_SCHEMA)
            record_to_resource_data(record, item)
            clients.append(item.to_dict())
        d.set("clients", clients)
        d.set_id(f"{scope.node_id}/{scope.module_id}")
