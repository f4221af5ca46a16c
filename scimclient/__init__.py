"""Client-side data layer for SCIM 2.0 (RFC 7643 / RFC 7644).

To decode and encode resources:
    from scimclient import decode, encode, User

To talk to a service provider:
    from scimclient.client import ScimClient, client_from_env

Note: the HTTP client is not imported here so that the data layer can be used
without touching requests.
"""
from .core.codec import Field, Record, decode, encode
from .core.enterprise_user import ENTERPRISE_USER_URN, EnterpriseUser, Manager
from .core.exceptions import (
    ConfigError,
    DuplicateExtensionError,
    ExtensionError,
    MissingExtensionError,
    ParseError,
    ScimAPIError,
    ScimClientError,
    UnknownResourceTypeError,
)
from .core.group import GROUP_URN, Group
from .core.protocol import (
    ErrorResponse,
    ListResponse,
    SearchRequest,
    decode_list_response,
    encode_list_response,
)
from .core.registry import GenericResource, ResourceRegistry, get_resource_registry
from .core.resource import CommonAttributes, Meta
from .core.resource_type import ResourceType
from .core.schema import Schema
from .core.service_provider_config import ServiceProviderConfig
from .core.user import USER_URN, User

__all__ = [
    # Codec
    "Field",
    "Record",
    "decode",
    "encode",

    # Resources
    "CommonAttributes",
    "Meta",
    "User",
    "USER_URN",
    "Group",
    "GROUP_URN",
    "EnterpriseUser",
    "ENTERPRISE_USER_URN",
    "Manager",
    "ResourceType",
    "Schema",
    "ServiceProviderConfig",
    "GenericResource",

    # Registry and protocol
    "ResourceRegistry",
    "get_resource_registry",
    "ListResponse",
    "SearchRequest",
    "ErrorResponse",
    "decode_list_response",
    "encode_list_response",

    # Exceptions
    "ScimClientError",
    "ParseError",
    "ExtensionError",
    "DuplicateExtensionError",
    "MissingExtensionError",
    "UnknownResourceTypeError",
    "ScimAPIError",
    "ConfigError",
]
