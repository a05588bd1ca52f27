"""Declarative synchronization of typed records against SmileCDR.

The reconciler owns the create/read/update/delete protocol:

    Absent --create--> Active --update*--> Active --delete--> Archived --create--> Active
    Active --read raises NotFoundError--> Absent

It is parameterized by a service (OpenIdClientService, IdentityProviderService)
exposing ``create``, ``get``, ``update`` and, for kinds SmileCDR cannot
archive, ``delete``.
"""
from __future__ import annotations
import logging
from dataclasses import fields
from typing import Callable, Optional

from .models import DeclaredResource, OpenIdClient, OpenIdIdentityProvider, ScopeSelector
from .smilecdr.exceptions import NotFoundError, ValidationError
from .validators import now_rfc3339, validate_identity_provider, validate_openid_client

logger = logging.getLogger(__name__)

VALIDATORS = {
    OpenIdClient: validate_openid_client,
    OpenIdIdentityProvider: validate_identity_provider,
}


class Reconciler:
    """Keeps one kind of SmileCDR object consistent with declared records."""

    def __init__(self, service, clock: Callable[[], str] = now_rfc3339):
        """Initialize reconciler.

        Args:
            service: Remote store service for this resource kind
            clock: Returns the archive timestamp (RFC 3339)
        """
        self.service = service
        self.clock = clock

    def create(self, desired: DeclaredResource) -> int:
        """Create the remote object and read it back into ``desired``.

        Issues two round trips. If the read-back fails the object exists
        remotely with ``desired.pid`` set, and the error propagates so the
        caller can read again.

        Returns:
            The server-assigned pid

        Raises:
            ValidationError: Natural key missing or attribute invalid
            ConflictError: An active object already uses the natural key
            TransportError: Network or protocol failure
        """
        if not desired.natural_key:
            raise ValidationError("must not be empty", desired.natural_key_field)
        self._validate(desired)

        created = self.service.create(desired)
        desired.pid = created.pid
        logger.info("%s %s created (pid=%s)", self.service.kind, desired.natural_key, desired.pid)

        current = self.read(desired.natural_key, desired.scope)
        self._merge(desired, current)
        return desired.pid

    def read(self, key: str, scope: Optional[ScopeSelector] = None) -> DeclaredResource:
        """Return the remote state of ``key`` within ``scope``.

        Raises:
            NotFoundError: No remote object matches; callers drop local state
        """
        return self.service.get(scope or ScopeSelector(), key)

    def update(self, desired: DeclaredResource) -> None:
        """Overwrite every remote attribute with ``desired``.

        Raises:
            NotFoundError: ``desired`` has no pid, or the pid is stale
            ValidationError: Attribute invalid
            TransportError: Network or protocol failure
        """
        if desired.server_identity is None:
            raise NotFoundError(
                f"{self.service.kind} {desired.natural_key!r} has no server identity; create or read it first"
            )
        self._validate(desired)
        self.service.update(desired)
        logger.info("%s %s updated (pid=%s)", self.service.kind, desired.natural_key, desired.pid)

    def delete(self, desired: DeclaredResource) -> None:
        """Remove ``desired`` logically.

        Clients are archived: ``archived_at`` is stamped and the record is
        updated, leaving the remote row queryable. Kinds without an archive
        flag are deleted by the service. Errors propagate unchanged.
        """
        if not self.service.supports_archive:
            if desired.server_identity is None:
                raise NotFoundError(f"{self.service.kind} {desired.natural_key!r} has no server identity")
            self.service.delete(desired)
            logger.info("%s %s deleted (pid=%s)", self.service.kind, desired.natural_key, desired.pid)
            return

        desired.archived_at = self.clock()
        self.update(desired)
        logger.info("%s %s archived at %s", self.service.kind, desired.natural_key, desired.archived_at)

    @staticmethod
    def _validate(record: DeclaredResource) -> None:
        validator = VALIDATORS.get(type(record))
        if validator:
            validator(record)

    @staticmethod
    def _merge(target: DeclaredResource, source: DeclaredResource) -> None:
        """Copy the observed remote state onto the caller's record."""
        for f in fields(source):
            setattr(target, f.name, getattr(source, f.name))
