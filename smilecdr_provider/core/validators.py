"""Attribute validation for declared OIDC objects.

Every helper raises ValidationError naming the offending attribute, so the
message can be surfaced to the caller verbatim.
"""
from __future__ import annotations
import re
from datetime import datetime, timezone
from typing import Iterable, Optional

from .models import OpenIdClient, OpenIdIdentityProvider
from .permissions import AUTHORIZATION_FLOWS, PERMISSION_TYPES, RESPONSE_TYPES
from .smilecdr.exceptions import ValidationError

CLIENT_ID_PATTERN = re.compile(r"^[A-Za-z0-9][A-Za-z0-9._~:-]{0,199}$")


def validate_client_id(value: str, field: str = "client_id") -> str:
    """Validate an OIDC client identifier.

    Args:
        value: Raw client id
        field: Attribute name for error messages

    Returns:
        The client id unchanged

    Raises:
        ValidationError: If the client id is empty or contains invalid characters
    """
    if not value:
        raise ValidationError("must not be empty", field)
    if not CLIENT_ID_PATTERN.match(value):
        raise ValidationError(
            f"{value!r} must start with a letter or digit and contain only "
            "letters, digits, '.', '_', '~', ':' or '-' (max 200 characters)",
            field,
        )
    return value


def parse_rfc3339(value: str, field: str) -> datetime:
    """Parse an RFC 3339 timestamp (date, 'T', time and offset are mandatory).

    Raises:
        ValidationError: If the value is not an RFC 3339 timestamp
    """
    if not isinstance(value, str) or "T" not in value.upper():
        raise ValidationError(f"{value!r} is not a valid RFC 3339 timestamp", field)
    normalized = value[:-1] + "+00:00" if value.endswith(("Z", "z")) else value
    try:
        parsed = datetime.fromisoformat(normalized)
    except ValueError:
        raise ValidationError(f"{value!r} is not a valid RFC 3339 timestamp", field) from None
    if parsed.tzinfo is None:
        raise ValidationError(f"{value!r} is missing a UTC offset", field)
    return parsed


def validate_rfc3339(value: Optional[str], field: str) -> Optional[str]:
    """Validate an optional RFC 3339 attribute; empty values pass."""
    if value:
        parse_rfc3339(value, field)
    return value


def now_rfc3339() -> str:
    """Current UTC time formatted as RFC 3339 with second precision."""
    return datetime.now(timezone.utc).replace(microsecond=0).isoformat().replace("+00:00", "Z")


def validate_choices(values: Iterable[str], allowed: frozenset, field: str) -> None:
    """Ensure every value belongs to an enumerated set."""
    for value in values:
        if value not in allowed:
            raise ValidationError(f"{value!r} is not one of the accepted values", field)


def validate_non_negative(value: int, field: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ValidationError(f"{value!r} must be a non-negative integer", field)
    return value


def validate_openid_client(client: OpenIdClient) -> OpenIdClient:
    """Validate a declared OIDC client before it is sent to SmileCDR.

    Raises:
        ValidationError: On the first invalid attribute
    """
    validate_client_id(client.client_id)
    if not client.client_name:
        raise ValidationError("must not be empty", "client_name")
    if not client.node_id:
        raise ValidationError("must not be empty", "node_id")
    if not client.module_id:
        raise ValidationError("must not be empty", "module_id")
    validate_non_negative(client.access_token_validity_seconds, "access_token_validity_seconds")
    validate_non_negative(client.refresh_token_validity_seconds, "refresh_token_validity_seconds")
    validate_choices(client.allowed_grant_types, AUTHORIZATION_FLOWS, "allowed_grant_types")
    validate_choices(
        (perm.permission for perm in client.permissions),
        PERMISSION_TYPES,
        "permissions.permission",
    )
    for secret in client.client_secrets:
        validate_rfc3339(secret.activation, "client_secrets.activation")
        validate_rfc3339(secret.expiration, "client_secrets.expiration")
    validate_rfc3339(client.archived_at, "archived_at")
    return client


def validate_identity_provider(provider: OpenIdIdentityProvider) -> OpenIdIdentityProvider:
    """Validate a declared identity provider before it is sent to SmileCDR.

    Raises:
        ValidationError: On the first invalid attribute
    """
    if not provider.name or not provider.name.strip():
        raise ValidationError("must not be empty", "name")
    if not provider.issuer:
        raise ValidationError("must not be empty", "issuer")
    if not provider.node_id:
        raise ValidationError("must not be empty", "node_id")
    if not provider.module_id:
        raise ValidationError("must not be empty", "module_id")
    validate_choices([provider.response_type], RESPONSE_TYPES, "response_type")
    return provider
