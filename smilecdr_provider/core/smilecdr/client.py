"""Low-level HTTP client for the SmileCDR JSON admin API.

Handles basic authentication, JSON encoding and status to exception mapping.
"""
from __future__ import annotations
import logging
from typing import Optional, Dict, Any

import requests

from .exceptions import (
    ConflictError,
    NotFoundError,
    TransportError,
    ValidationError,
)

REQUEST_TIMEOUT = 10
DEFAULT_BASE_URL = "http://localhost:9000"

logger = logging.getLogger(__name__)


class SmileCdrClient:
    """HTTP client for the SmileCDR admin API.

    Features:
    - HTTP basic authentication on every request
    - Centralized error handling (status code -> typed exception)
    - Network failures surfaced as TransportError

    Usage:
        client = SmileCdrClient("http://localhost:9000", "admin", "password")
        response = client.get("/openid-connect-clients/Master/smart_auth")
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        username: str = "",
        password: str = "",
        timeout: float = REQUEST_TIMEOUT,
        verify_tls: bool = True,
    ):
        """Initialize SmileCDR client.

        Args:
            base_url: SmileCDR JSON admin endpoint (defaults to http://localhost:9000)
            username: Admin username
            password: Admin password
            timeout: Request timeout in seconds
            verify_tls: Verify server certificates for https endpoints
        """
        self.base_url = (base_url or DEFAULT_BASE_URL).rstrip("/")
        self.username = username
        self._password = password
        self.timeout = timeout
        self.verify_tls = verify_tls

    @classmethod
    def from_config(cls, config) -> "SmileCdrClient":
        """Build a client from a ProviderConfig."""
        return cls(
            config.base_url,
            config.username,
            config.password,
            timeout=config.request_timeout,
            verify_tls=config.verify_tls,
        )

    @property
    def auth(self) -> tuple:
        return (self.username, self._password)

    def get(self, path: str, params: Optional[Dict] = None, **kwargs) -> requests.Response:
        """Execute GET request.

        Args:
            path: API endpoint path (e.g., "/openid-connect-clients/Master/smart_auth")
            params: Query parameters
            **kwargs: Additional arguments for requests.get

        Returns:
            Response object

        Raises:
            SmileCdrError: On HTTP or network error
        """
        url = f"{self.base_url}{path}"
        logger.debug("GET %s", url)
        try:
            resp = requests.get(
                url,
                params=params,
                auth=self.auth,
                headers=self._headers(kwargs.pop("headers", {})),
                timeout=self.timeout,
                verify=self.verify_tls,
                **kwargs,
            )
        except requests.RequestException as exc:
            raise TransportError(None, str(exc), url) from exc
        self._handle_error(resp)
        return resp

    def post(self, path: str, json: Optional[Any] = None, **kwargs) -> requests.Response:
        """Execute POST request with a JSON payload.

        Raises:
            SmileCdrError: On HTTP or network error
        """
        url = f"{self.base_url}{path}"
        logger.debug("POST %s", url)
        try:
            resp = requests.post(
                url,
                json=json,
                auth=self.auth,
                headers=self._headers(kwargs.pop("headers", {})),
                timeout=self.timeout,
                verify=self.verify_tls,
                **kwargs,
            )
        except requests.RequestException as exc:
            raise TransportError(None, str(exc), url) from exc
        self._handle_error(resp)
        return resp

    def put(self, path: str, json: Optional[Any] = None, **kwargs) -> requests.Response:
        """Execute PUT request with a JSON payload.

        Raises:
            SmileCdrError: On HTTP or network error
        """
        url = f"{self.base_url}{path}"
        logger.debug("PUT %s", url)
        try:
            resp = requests.put(
                url,
                json=json,
                auth=self.auth,
                headers=self._headers(kwargs.pop("headers", {})),
                timeout=self.timeout,
                verify=self.verify_tls,
                **kwargs,
            )
        except requests.RequestException as exc:
            raise TransportError(None, str(exc), url) from exc
        self._handle_error(resp)
        return resp

    def delete(self, path: str, **kwargs) -> requests.Response:
        """Execute DELETE request.

        Raises:
            SmileCdrError: On HTTP or network error
        """
        url = f"{self.base_url}{path}"
        logger.debug("DELETE %s", url)
        try:
            resp = requests.delete(
                url,
                auth=self.auth,
                headers=self._headers(kwargs.pop("headers", {})),
                timeout=self.timeout,
                verify=self.verify_tls,
                **kwargs,
            )
        except requests.RequestException as exc:
            raise TransportError(None, str(exc), url) from exc
        self._handle_error(resp)
        return resp

    @staticmethod
    def json_body(resp: requests.Response) -> Any:
        """Decode a JSON response body.

        Raises:
            TransportError: If the body is not valid JSON
        """
        try:
            return resp.json()
        except ValueError as exc:
            raise TransportError(resp.status_code, f"Invalid JSON in response: {exc}", resp.url) from exc

    @staticmethod
    def _headers(extra: Dict[str, str]) -> Dict[str, str]:
        headers = {"Accept": "application/json", "Content-Type": "application/json"}
        headers.update(extra)
        return headers

    def _handle_error(self, resp: requests.Response) -> None:
        """Centralized error handling for HTTP responses.

        Args:
            resp: Response object to check

        Raises:
            ValidationError: 400 / 422
            NotFoundError: 404
            ConflictError: 409
            TransportError: Any other status >= 400
        """
        if resp.status_code < 400:
            return
        if resp.status_code in (400, 422):
            raise ValidationError(resp.text, status_code=resp.status_code, endpoint=resp.url)
        if resp.status_code == 404:
            raise NotFoundError(resp.text, resp.url)
        if resp.status_code == 409:
            raise ConflictError(resp.text, resp.url)
        raise TransportError(resp.status_code, resp.text, resp.url)
