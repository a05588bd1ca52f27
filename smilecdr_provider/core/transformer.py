"""Typed record <-> SmileCDR admin API JSON transformations.

SmileCDR speaks camelCase JSON; records use snake_case attributes.

Usage:
    # Record -> SmileCDR
    payload = OpenIdClientTransformer.to_api(client)

    # SmileCDR -> record
    client = OpenIdClientTransformer.from_api(payload)
"""
from __future__ import annotations
from dataclasses import fields
from typing import Any, Dict, List

from .models import (
    ClientSecret,
    DEFAULT_MODULE_ID,
    DEFAULT_NODE_ID,
    OpenIdClient,
    OpenIdIdentityProvider,
    UserPermission,
)


def to_camel(name: str) -> str:
    """Convert a snake_case attribute name to SmileCDR camelCase."""
    head, *rest = name.split("_")
    return head + "".join(part.capitalize() for part in rest)


class _RecordTransformer:
    """Field-by-field mapping shared by the concrete transformers."""

    model: type = object
    nested: tuple = ()

    @classmethod
    def _scalar_fields(cls) -> List[str]:
        return [f.name for f in fields(cls.model) if f.name not in cls.nested]

    @classmethod
    def _scalars_to_api(cls, record) -> Dict[str, Any]:
        payload: Dict[str, Any] = {}
        for name in cls._scalar_fields():
            value = getattr(record, name)
            if name == "pid" and value is None:
                continue
            if isinstance(value, list):
                value = list(value)
            payload[to_camel(name)] = value
        return payload

    @classmethod
    def _scalars_from_api(cls, payload: Dict[str, Any]) -> Dict[str, Any]:
        values: Dict[str, Any] = {}
        defaults = cls.model()
        for name in cls._scalar_fields():
            value = payload.get(to_camel(name))
            if value is None:
                value = getattr(defaults, name)
            elif isinstance(value, list):
                value = list(value)
            values[name] = value
        values["node_id"] = values.get("node_id") or DEFAULT_NODE_ID
        values["module_id"] = values.get("module_id") or DEFAULT_MODULE_ID
        return values


class OpenIdClientTransformer(_RecordTransformer):
    """Bidirectional transformer for OIDC client representations."""

    model = OpenIdClient
    nested = ("client_secrets", "permissions")

    @classmethod
    def to_api(cls, client: OpenIdClient) -> Dict[str, Any]:
        """Convert an OpenIdClient to the admin API payload.

        Every attribute is emitted, defaults included, so a PUT replaces the
        whole remote record.
        """
        payload = cls._scalars_to_api(client)
        payload["clientSecrets"] = [
            cls._secret_to_api(secret) for secret in client.client_secrets
        ]
        payload["permissions"] = [
            {"permission": perm.permission, "argument": perm.argument or None}
            for perm in client.permissions
        ]
        return payload

    @classmethod
    def from_api(cls, payload: Dict[str, Any]) -> OpenIdClient:
        """Convert an admin API payload to an OpenIdClient.

        Missing or null values fall back to the record defaults.
        """
        values = cls._scalars_from_api(payload)
        values["client_secrets"] = [
            ClientSecret(
                secret=item.get("secret") or "",
                description=item.get("description") or "",
                activation=item.get("activation"),
                expiration=item.get("expiration"),
                pid=item.get("pid"),
            )
            for item in payload.get("clientSecrets") or []
        ]
        values["permissions"] = [
            UserPermission(item["permission"], item.get("argument") or "")
            for item in payload.get("permissions") or []
        ]
        return OpenIdClient(**values)

    @staticmethod
    def _secret_to_api(secret: ClientSecret) -> Dict[str, Any]:
        item = {
            "secret": secret.secret,
            "description": secret.description,
            "activation": secret.activation or None,
            "expiration": secret.expiration or None,
        }
        if secret.pid is not None:
            item["pid"] = secret.pid
        return item


class IdentityProviderTransformer(_RecordTransformer):
    """Bidirectional transformer for OIDC server (identity provider) representations."""

    model = OpenIdIdentityProvider

    @classmethod
    def to_api(cls, provider: OpenIdIdentityProvider) -> Dict[str, Any]:
        return cls._scalars_to_api(provider)

    @classmethod
    def from_api(cls, payload: Dict[str, Any]) -> OpenIdIdentityProvider:
        return OpenIdIdentityProvider(**cls._scalars_from_api(payload))
