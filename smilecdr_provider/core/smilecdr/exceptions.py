"""SmileCDR-specific exceptions for error handling."""
from __future__ import annotations
from typing import Optional


class SmileCdrError(Exception):
    """Base exception for all SmileCDR operations."""
    pass


class ValidationError(SmileCdrError):
    """Attribute value is malformed or outside its allowed set.

    Raised locally before any request is sent, and for HTTP 400/422
    responses from the admin API.

    Attributes:
        message: Human readable reason
        field: Attribute that failed validation, if known
        status_code: HTTP status code when the API rejected the payload
        endpoint: API endpoint that rejected the payload
    """

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        status_code: Optional[int] = None,
        endpoint: str = "",
    ):
        self.message = message
        self.field = field
        self.status_code = status_code
        self.endpoint = endpoint
        prefix = f"{field}: " if field else ""
        super().__init__(f"{prefix}{message}")


class SmileCdrAPIError(SmileCdrError):
    """HTTP error from the SmileCDR admin API.

    Attributes:
        status_code: HTTP status code (None when no response was received)
        message: Error message from response
        endpoint: API endpoint that failed
    """

    def __init__(self, status_code: Optional[int], message: str, endpoint: str = ""):
        self.status_code = status_code
        self.message = message
        self.endpoint = endpoint
        location = f" {endpoint}" if endpoint else ""
        super().__init__(f"[{status_code}]{location}: {message}")


class NotFoundError(SmileCdrAPIError):
    """Remote record is absent (or the supplied pid does not match it)."""

    def __init__(self, message: str, endpoint: str = ""):
        super().__init__(404, message, endpoint)


class ConflictError(SmileCdrAPIError):
    """Create rejected - an active record already uses the natural key."""

    def __init__(self, message: str, endpoint: str = ""):
        super().__init__(409, message, endpoint)


class TransportError(SmileCdrAPIError):
    """Network failure, unreadable response, or unexpected HTTP status."""
    pass


class ProviderNotConfiguredError(SmileCdrError):
    """Provider credentials are incomplete - no client could be built."""
    pass
