"""SCIM HTTP client.

Usage:
    from scimclient.client import ScimClient, client_from_env

    client = client_from_env()
    response = client.query_users_by_user_name("bjensen")
"""
from .client import (
    ScimClient,
    client_from_env,
    SCIM_MEDIA_TYPE,
)

__all__ = [
    "ScimClient",
    "client_from_env",
    "SCIM_MEDIA_TYPE",
]
