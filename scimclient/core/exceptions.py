"""SCIM client exceptions for error handling."""
from __future__ import annotations
from typing import Optional


class ScimClientError(Exception):
    """Base exception for all SCIM client operations."""
    pass


class ParseError(ScimClientError):
    """JSON could not be decoded into the target resource.

    Attributes:
        field: Wire name of the field that failed, or None for the whole document
        body: Raw payload that failed (may be truncated in the message)
    """

    def __init__(self, message: str, field: Optional[str] = None, body: Optional[str] = None):
        self.field = field
        self.body = body
        if field:
            message = f"{field}: {message}"
        super().__init__(message)


class ExtensionError(ScimClientError):
    """Base exception for extension accessor failures."""

    def __init__(self, urn: str, message: str):
        self.urn = urn
        super().__init__(f"{urn}: {message}")


class DuplicateExtensionError(ExtensionError):
    """Extension to be added already exists - use update_extension() instead."""

    def __init__(self, urn: str):
        super().__init__(urn, "extension already exists in resource - use update_extension() instead")


class MissingExtensionError(ExtensionError):
    """Extension is not present in the resource."""

    def __init__(self, urn: str):
        super().__init__(urn, "extension does not exist in resource - use add_extension() instead")


class UnknownResourceTypeError(ScimClientError):
    """Resource type is not registered in the resource registry."""

    def __init__(self, resource_type: Optional[str]):
        self.resource_type = resource_type
        super().__init__(f"Unknown resource type: {resource_type!r}")


class ScimAPIError(ScimClientError):
    """HTTP error from a SCIM service provider.

    Attributes:
        status: HTTP status code
        detail: Human-readable message (ErrorResponse.detail or response text)
        scim_type: SCIM detail error keyword, when the server sent one
        endpoint: URL that failed
    """

    def __init__(self, status: int, detail: str, endpoint: str, scim_type: Optional[str] = None):
        self.status = status
        self.detail = detail
        self.endpoint = endpoint
        self.scim_type = scim_type
        label = f"[{status}]" if not scim_type else f"[{status} {scim_type}]"
        super().__init__(f"{label} {endpoint}: {detail}")


class ConfigError(ScimClientError):
    """Required configuration is missing or invalid."""
    pass
