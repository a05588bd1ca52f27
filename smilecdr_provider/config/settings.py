"""Settings loader with environment variable and Docker secrets integration."""
from __future__ import annotations
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from ..core.smilecdr.client import DEFAULT_BASE_URL, REQUEST_TIMEOUT

logger = logging.getLogger(__name__)


def _load_secret_from_file(secret_name: str, env_var: str | None = None) -> str | None:
    """
    Load secret from /run/secrets (Docker secrets pattern).

    Priority:
    1. /run/secrets/{secret_name} (Docker secrets mount)
    2. Environment variable (fallback)

    Args:
        secret_name: Name of the secret file in /run/secrets
        env_var: Optional environment variable name to check as fallback

    Returns:
        Secret value or None if not found
    """
    secret_file = Path("/run/secrets") / secret_name

    if secret_file.exists() and secret_file.is_file():
        try:
            secret_value = secret_file.read_text().strip()
            if secret_value:
                logger.debug("Loaded %s from /run/secrets", secret_name)
                return secret_value
        except OSError as e:
            logger.warning("Failed to read /run/secrets/%s: %s", secret_name, e)

    if env_var:
        secret_value = os.getenv(env_var)
        if secret_value:
            logger.debug("Loaded %s from environment", env_var)
            return secret_value

    return None


def _env_bool(var_name: str, default: bool) -> bool:
    raw = os.environ.get(var_name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


@dataclass
class ProviderConfig:
    """Provider configuration container.

    Built once by load_settings() and passed to every operation.
    """
    base_url: str = DEFAULT_BASE_URL
    username: str = ""
    password: str = field(default="", repr=False)
    request_timeout: float = REQUEST_TIMEOUT
    verify_tls: bool = True

    @property
    def is_configured(self) -> bool:
        """True when base URL and both credentials are present."""
        return bool(self.base_url and self.username and self.password)


def load_settings(
    base_url: Optional[str] = None,
    username: Optional[str] = None,
    password: Optional[str] = None,
) -> ProviderConfig:
    """Load provider settings.

    Priority per setting: explicit argument > /run/secrets (password only)
    > environment variable > default.

    Environment:
        SMILECDR_BASE_URL, SMILECDR_USERNAME, SMILECDR_PASSWORD,
        SMILECDR_REQUEST_TIMEOUT, SMILECDR_VERIFY_TLS
    """
    resolved_base_url = base_url or os.environ.get("SMILECDR_BASE_URL") or DEFAULT_BASE_URL
    resolved_username = username or os.environ.get("SMILECDR_USERNAME", "")
    resolved_password = password or _load_secret_from_file("smilecdr_password", "SMILECDR_PASSWORD") or ""

    timeout_raw = os.environ.get("SMILECDR_REQUEST_TIMEOUT", "")
    try:
        request_timeout = float(timeout_raw) if timeout_raw.strip() else REQUEST_TIMEOUT
    except ValueError:
        raise RuntimeError(f"SMILECDR_REQUEST_TIMEOUT must be a number, got {timeout_raw!r}") from None

    config = ProviderConfig(
        base_url=resolved_base_url.rstrip("/"),
        username=resolved_username,
        password=resolved_password,
        request_timeout=request_timeout,
        verify_tls=_env_bool("SMILECDR_VERIFY_TLS", True),
    )
    logger.info(
        "SmileCDR base_url=%s; username=%s; password=%s",
        config.base_url,
        config.username or "<unset>",
        "***" if config.password else "<unset>",
    )
    return config
