"""Declarative attribute schemas for provider, resources and data sources."""
from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Union

from ..core.permissions import AUTHORIZATION_FLOWS, PERMISSION_TYPES, RESPONSE_TYPES
from ..core.smilecdr.client import DEFAULT_BASE_URL
from ..core.smilecdr.exceptions import ValidationError
from ..core.validators import validate_client_id, validate_rfc3339

TYPE_STRING = "string"
TYPE_INT = "int"
TYPE_BOOL = "bool"
TYPE_SET = "set"
TYPE_LIST = "list"

ZERO_VALUES = {
    TYPE_STRING: "",
    TYPE_INT: 0,
    TYPE_BOOL: False,
}

Validator = Callable[[Any, str], Any]


@dataclass(frozen=True)
class Field:
    """One attribute of a schema.

    ``elem`` is either a scalar type name (sets/lists of strings) or a nested
    schema (sets/lists of records). ``env`` names an environment variable
    consulted before ``default``.
    """
    type: str
    required: bool = False
    computed: bool = False
    default: Any = None
    validate: Optional[Validator] = None
    elem: Union[str, Dict[str, "Field"], None] = None
    sensitive: bool = False
    env: Optional[str] = None

    @property
    def is_collection(self) -> bool:
        return self.type in (TYPE_SET, TYPE_LIST)

    @property
    def is_nested(self) -> bool:
        return isinstance(self.elem, dict)

    def zero(self) -> Any:
        if self.is_collection:
            return []
        return ZERO_VALUES.get(self.type)


def string_in(allowed: frozenset) -> Validator:
    """Validator accepting only members of ``allowed``."""
    def _validate(value: Any, field: str) -> Any:
        if value not in allowed:
            raise ValidationError(f"{value!r} is not one of the accepted values", field)
        return value
    return _validate


def rfc3339(value: Any, field: str) -> Any:
    return validate_rfc3339(value, field)


def client_id(value: Any, field: str) -> Any:
    return validate_client_id(value, field)


PROVIDER_SCHEMA: Dict[str, Field] = {
    "base_url": Field(TYPE_STRING, default=DEFAULT_BASE_URL, env="SMILECDR_BASE_URL"),
    "username": Field(TYPE_STRING, env="SMILECDR_USERNAME"),
    "password": Field(TYPE_STRING, sensitive=True, env="SMILECDR_PASSWORD"),
}

CLIENT_SECRET_SCHEMA: Dict[str, Field] = {
    "pid": Field(TYPE_INT, computed=True),
    "secret": Field(TYPE_STRING, default="", sensitive=True),
    "description": Field(TYPE_STRING, default=""),
    "activation": Field(TYPE_STRING, validate=rfc3339),
    "expiration": Field(TYPE_STRING, validate=rfc3339),
}

PERMISSION_SCHEMA: Dict[str, Field] = {
    "permission": Field(TYPE_STRING, required=True, validate=string_in(PERMISSION_TYPES)),
    "argument": Field(TYPE_STRING, default=""),
}

OPENID_CLIENT_SCHEMA: Dict[str, Field] = {
    "pid": Field(TYPE_INT, computed=True),
    "node_id": Field(TYPE_STRING, default="Master"),
    "module_id": Field(TYPE_STRING, default="smart_auth"),
    "access_token_validity_seconds": Field(TYPE_INT, default=300),
    "allowed_grant_types": Field(TYPE_SET, elem=TYPE_STRING, validate=string_in(AUTHORIZATION_FLOWS)),
    "auto_approve_scopes": Field(TYPE_SET, elem=TYPE_STRING),
    "auto_grant_scopes": Field(TYPE_SET, elem=TYPE_STRING),
    "client_id": Field(TYPE_STRING, required=True, validate=client_id),
    "client_name": Field(TYPE_STRING, required=True),
    "client_secrets": Field(TYPE_SET, elem=CLIENT_SECRET_SCHEMA),
    "fixed_scope": Field(TYPE_BOOL, default=False),
    "refresh_token_validity_seconds": Field(TYPE_INT, default=86400),
    "registered_redirect_uris": Field(TYPE_SET, elem=TYPE_STRING),
    "scopes": Field(TYPE_SET, elem=TYPE_STRING),
    "secret_required": Field(TYPE_BOOL, default=False),
    "secret_client_can_change": Field(TYPE_BOOL, default=False),
    "enabled": Field(TYPE_BOOL, default=True),
    "can_introspect_any_tokens": Field(TYPE_BOOL, default=False),
    "can_introspect_own_tokens": Field(TYPE_BOOL, default=False),
    "always_require_approval": Field(TYPE_BOOL, default=False),
    "can_reissue_tokens": Field(TYPE_BOOL, default=False),
    "permissions": Field(TYPE_SET, elem=PERMISSION_SCHEMA),
    "remember_approved_scopes": Field(TYPE_BOOL, default=False),
    "attestation_accepted": Field(TYPE_BOOL, default=False),
    "public_jwks_uri": Field(TYPE_STRING),
    "jwks_url": Field(TYPE_STRING),
    "archived_at": Field(TYPE_STRING, validate=rfc3339),
    "created_by_app_sphere": Field(TYPE_BOOL, default=False),
}

IDENTITY_PROVIDER_SCHEMA: Dict[str, Field] = {
    "pid": Field(TYPE_INT, computed=True),
    "node_id": Field(TYPE_STRING, default="Master"),
    "module_id": Field(TYPE_STRING, default="smart_auth"),
    "name": Field(TYPE_STRING, required=True),
    "issuer": Field(TYPE_STRING, required=True),
    "notes": Field(TYPE_STRING),
    "token_introspection_client_id": Field(TYPE_STRING),
    "token_introspection_client_secret": Field(TYPE_STRING, sensitive=True),
    "validation_jwk_text": Field(TYPE_STRING),
    "validation_jwk_file": Field(TYPE_STRING),
    "federation_registration_id": Field(TYPE_STRING),
    "federation_request_scopes": Field(TYPE_STRING),
    "federation_authorization_url": Field(TYPE_STRING),
    "federation_token_url": Field(TYPE_STRING),
    "federation_user_info_url": Field(TYPE_STRING),
    "federation_jwk_set_url": Field(TYPE_STRING),
    "federation_auth_script_text": Field(TYPE_STRING),
    "federation_user_mapping_script_text": Field(TYPE_STRING),
    "custom_token_params": Field(TYPE_STRING),
    "response_type": Field(TYPE_STRING, validate=string_in(RESPONSE_TYPES)),
    "organization_id": Field(TYPE_STRING),
    "fhir_endpoint_url": Field(TYPE_STRING),
    "auth_well_known_config_url": Field(TYPE_STRING),
}

OPENID_CLIENTS_DATA_SOURCE_SCHEMA: Dict[str, Field] = {
    "node_id": Field(TYPE_STRING, default="Master"),
    "module_id": Field(TYPE_STRING, default="smart_auth"),
    "clients": Field(TYPE_LIST, computed=True, elem=OPENID_CLIENT_SCHEMA),
}
