"""Typed records for SmileCDR OpenID Connect objects.

Each record is the desired (or observed) state of one remote object. The
natural key is chosen by the caller and never changes; ``pid`` is assigned
by SmileCDR on creation and must accompany every later update.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, Optional

DEFAULT_NODE_ID = "Master"
DEFAULT_MODULE_ID = "smart_auth"


@dataclass(frozen=True)
class ScopeSelector:
    """Node/module partition that SmileCDR stores OIDC objects under."""

    node_id: str = DEFAULT_NODE_ID
    module_id: str = DEFAULT_MODULE_ID


class DeclaredResource:
    """Mixin giving records a uniform identity surface."""

    natural_key_field = ""

    @property
    def natural_key(self) -> str:
        return getattr(self, self.natural_key_field) or ""

    @property
    def server_identity(self) -> Optional[int]:
        return getattr(self, "pid", None)

    @property
    def scope(self) -> ScopeSelector:
        return ScopeSelector(self.node_id, self.module_id)

    @property
    def is_archived(self) -> bool:
        return bool(getattr(self, "archived_at", None))


@dataclass
class ClientSecret:
    secret: str = ""
    description: str = ""
    activation: Optional[str] = None
    expiration: Optional[str] = None
    pid: Optional[int] = None


@dataclass
class UserPermission:
    permission: str
    argument: str = ""


@dataclass
class OpenIdClient(DeclaredResource):
    """An OpenID Connect client registered in a SmileCDR SMART auth module."""

    natural_key_field = "client_id"

    client_id: str = ""
    client_name: str = ""
    pid: Optional[int] = None
    node_id: str = DEFAULT_NODE_ID
    module_id: str = DEFAULT_MODULE_ID
    access_token_validity_seconds: int = 300
    refresh_token_validity_seconds: int = 86400
    allowed_grant_types: List[str] = field(default_factory=list)
    auto_approve_scopes: List[str] = field(default_factory=list)
    auto_grant_scopes: List[str] = field(default_factory=list)
    registered_redirect_uris: List[str] = field(default_factory=list)
    scopes: List[str] = field(default_factory=list)
    client_secrets: List[ClientSecret] = field(default_factory=list)
    permissions: List[UserPermission] = field(default_factory=list)
    fixed_scope: bool = False
    secret_required: bool = False
    secret_client_can_change: bool = False
    enabled: bool = True
    can_introspect_any_tokens: bool = False
    can_introspect_own_tokens: bool = False
    always_require_approval: bool = False
    can_reissue_tokens: bool = False
    remember_approved_scopes: bool = False
    attestation_accepted: bool = False
    created_by_app_sphere: bool = False
    public_jwks_uri: str = ""
    jwks_url: str = ""
    archived_at: Optional[str] = None


@dataclass
class OpenIdIdentityProvider(DeclaredResource):
    """A trusted OpenID Connect server (external identity provider)."""

    natural_key_field = "name"

    name: str = ""
    issuer: str = ""
    pid: Optional[int] = None
    node_id: str = DEFAULT_NODE_ID
    module_id: str = DEFAULT_MODULE_ID
    notes: str = ""
    token_introspection_client_id: str = ""
    token_introspection_client_secret: str = ""
    validation_jwk_text: str = ""
    validation_jwk_file: str = ""
    federation_registration_id: str = ""
    federation_request_scopes: str = ""
    federation_authorization_url: str = ""
    federation_token_url: str = ""
    federation_user_info_url: str = ""
    federation_jwk_set_url: str = ""
    federation_auth_script_text: str = ""
    federation_user_mapping_script_text: str = ""
    custom_token_params: str = ""
    response_type: str = ""
    organization_id: str = ""
    fhir_endpoint_url: str = ""
    auth_well_known_config_url: str = ""
