"""Configuration module for the SCIM client."""
from .settings import ClientConfig, OAuthConfig, load_client_config, load_oauth_config

__all__ = ["ClientConfig", "OAuthConfig", "load_client_config", "load_oauth_config"]
