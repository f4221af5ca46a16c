"""Settings loader with environment variable and Docker secrets integration."""
from __future__ import annotations
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional
from urllib.parse import urlparse

from scimclient.core.exceptions import ConfigError

logger = logging.getLogger(__name__)

SECRETS_DIR = Path("/run/secrets")

DEFAULT_REQUEST_TIMEOUT = 10


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
    secret_file = SECRETS_DIR / secret_name

    # Priority 1: Read from /run/secrets
    if secret_file.exists() and secret_file.is_file():
        try:
            secret_value = secret_file.read_text().strip()
        except OSError as exc:
            logger.warning("Failed to read %s: %s", secret_file, exc)
        else:
            if secret_value:
                logger.debug("Loaded %s from %s", secret_name, SECRETS_DIR)
                return secret_value

    # Priority 2: Fallback to environment variable
    if env_var:
        secret_value = os.getenv(env_var)
        if secret_value:
            logger.debug("Loaded %s from environment", env_var)
            return secret_value

    return None


def _env_bool(var_name: str, default: bool = False) -> bool:
    value = os.environ.get(var_name)
    if value is None or not value.strip():
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class ClientConfig:
    """SCIM client configuration container.

    ``service_url`` is the base URI of the SCIM server's resources, see
    https://tools.ietf.org/html/rfc7644#section-1.3
    """
    service_url: str
    ignore_redirects: bool = False
    disable_discovery: bool = False
    disable_etag: bool = False
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT

    def __post_init__(self):
        if not self.service_url:
            raise ConfigError("service_url is a required configuration parameter")
        parsed = urlparse(self.service_url)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ConfigError(f"service_url is not a valid http(s) URL: {self.service_url!r}")
        # Resource endpoints all start with a slash
        self.service_url = self.service_url.rstrip("/")


@dataclass
class OAuthConfig:
    """OAuth2 client-credentials parameters for API authentication."""
    token_url: str
    client_id: str
    client_secret: str
    scope: Optional[str] = None

    def __repr__(self) -> str:
        return f"OAuthConfig(token_url={self.token_url!r}, client_id={self.client_id!r}, client_secret='***')"


def _require(values: dict) -> None:
    missing: List[str] = [name for name, value in values.items() if not value]
    if missing:
        raise ConfigError(f"Missing required environment variable(s): {', '.join(missing)}")


def load_client_config() -> ClientConfig:
    """Load SCIM client settings from SCIM_* environment variables.

    Raises:
        ConfigError: If SCIM_SERVICE_URL is missing or invalid
    """
    service_url = os.environ.get("SCIM_SERVICE_URL", "").strip()
    _require({"SCIM_SERVICE_URL": service_url})

    timeout_raw = os.environ.get("SCIM_REQUEST_TIMEOUT", "").strip()
    try:
        request_timeout = float(timeout_raw) if timeout_raw else DEFAULT_REQUEST_TIMEOUT
    except ValueError as exc:
        raise ConfigError(f"SCIM_REQUEST_TIMEOUT must be a number, got {timeout_raw!r}") from exc

    config = ClientConfig(
        service_url=service_url,
        ignore_redirects=_env_bool("SCIM_IGNORE_REDIRECTS"),
        disable_discovery=_env_bool("SCIM_DISABLE_DISCOVERY"),
        disable_etag=_env_bool("SCIM_DISABLE_ETAG"),
        request_timeout=request_timeout,
    )
    logger.info(
        "SCIM client config: service_url=%s, etag=%s, discovery=%s",
        config.service_url,
        "off" if config.disable_etag else "on",
        "off" if config.disable_discovery else "on",
    )
    return config


def load_oauth_config() -> OAuthConfig:
    """Load OAuth2 client-credentials settings from OAUTH_* variables.

    The client secret is read from /run/secrets/oauth_client_secret first and
    falls back to OAUTH_CLIENT_SECRET.

    Raises:
        ConfigError: If any required value is missing
    """
    token_url = os.environ.get("OAUTH_TOKEN_URL", "").strip()
    client_id = os.environ.get("OAUTH_CLIENT_ID", "").strip()
    client_secret = _load_secret_from_file("oauth_client_secret", "OAUTH_CLIENT_SECRET") or ""
    _require({
        "OAUTH_TOKEN_URL": token_url,
        "OAUTH_CLIENT_ID": client_id,
        "OAUTH_CLIENT_SECRET": client_secret,
    })

    scope = os.environ.get("OAUTH_SCOPE", "").strip() or None
    logger.info("OAuth config: token_url=%s, client_id=%s, secret=***", token_url, client_id)
    return OAuthConfig(token_url=token_url, client_id=client_id, client_secret=client_secret, scope=scope)
