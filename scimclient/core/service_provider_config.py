"""SCIM ServiceProviderConfig resource (RFC 7643 section 5)."""
from __future__ import annotations
from dataclasses import dataclass
from typing import List, Optional

from .codec import Boolean, Field, Integer, ListOf, Nested, Record, String
from .resource import CommonAttributes
from .resource_type import builtin_resource_type

SERVICE_PROVIDER_CONFIG_URN = "urn:ietf:params:scim:schemas:core:2.0:ServiceProviderConfig"

SERVICE_PROVIDER_CONFIG_RESOURCE_TYPE = builtin_resource_type(
    "ServiceProviderConfig",
    "/ServiceProviderConfig",
    SERVICE_PROVIDER_CONFIG_URN,
    "SCIM Service Provider Config - See https://tools.ietf.org/html/rfc7643#section-5",
)

# Authentication scheme types
OAUTH = "oauth"
OAUTH2 = "oauth2"
OAUTH_BEARER_TOKEN = "oauthbearertoken"
HTTP_BASIC = "httpbasic"
HTTP_DIGEST = "httpdigest"

_SUPPORTED = Field("supported", "supported", Boolean())


@dataclass
class SupportedConfig(Record):
    """Feature block that only says whether the feature is supported."""
    supported: Optional[bool] = None

    FIELDS = (_SUPPORTED,)


@dataclass
class BulkConfig(SupportedConfig):
    max_operations: Optional[int] = None
    max_payload_size: Optional[int] = None

    FIELDS = SupportedConfig.FIELDS + (
        Field("max_operations", "maxOperations", Integer()),
        Field("max_payload_size", "maxPayloadSize", Integer()),
    )


@dataclass
class FilterConfig(SupportedConfig):
    max_results: Optional[int] = None

    FIELDS = SupportedConfig.FIELDS + (
        Field("max_results", "maxResults", Integer()),
    )


@dataclass
class AuthenticationScheme(Record):
    type: Optional[str] = None
    name: Optional[str] = None
    description: Optional[str] = None
    spec_uri: Optional[str] = None
    documentation_uri: Optional[str] = None
    primary: Optional[bool] = None

    FIELDS = (
        Field("type", "type", String()),
        Field("name", "name", String()),
        Field("description", "description", String()),
        Field("spec_uri", "specUri", String()),
        Field("documentation_uri", "documentationUri", String()),
        Field("primary", "primary", Boolean()),
    )


@dataclass
class ServiceProviderConfig(CommonAttributes):
    """Capabilities advertised by a SCIM service provider."""
    documentation_uri: Optional[str] = None
    patch: Optional[SupportedConfig] = None
    bulk: Optional[BulkConfig] = None
    filter: Optional[FilterConfig] = None
    change_password: Optional[SupportedConfig] = None
    sort: Optional[SupportedConfig] = None
    etag: Optional[SupportedConfig] = None
    authentication_schemes: Optional[List[AuthenticationScheme]] = None

    URN = SERVICE_PROVIDER_CONFIG_URN
    RESOURCE_TYPE = SERVICE_PROVIDER_CONFIG_RESOURCE_TYPE

    FIELDS = CommonAttributes.FIELDS + (
        Field("documentation_uri", "documentationUri", String()),
        Field("patch", "patch", Nested(SupportedConfig)),
        Field("bulk", "bulk", Nested(BulkConfig)),
        Field("filter", "filter", Nested(FilterConfig)),
        Field("change_password", "changePassword", Nested(SupportedConfig)),
        Field("sort", "sort", Nested(SupportedConfig)),
        Field("etag", "etag", Nested(SupportedConfig)),
        Field("authentication_schemes", "authenticationSchemes", ListOf(Nested(AuthenticationScheme))),
    )

    def supports_etag(self) -> bool:
        return bool(self.etag and self.etag.supported)
