"""SCIM ResourceType descriptor (RFC 7643 section 6).

A ResourceType names a kind of resource, the endpoint that serves it and the
URN of its canonical schema. Descriptors are static metadata: the built-in
ones below are registered once and must not be mutated afterwards.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import List, Optional

from .codec import Boolean, Field, ListOf, Nested, Record, String
from .resource import CommonAttributes

RESOURCE_TYPE_URN = "urn:ietf:params:scim:schemas:core:2.0:ResourceType"


@dataclass
class SchemaExtension(Record):
    """Extension schema allowed on a resource type."""
    schema: Optional[str] = None
    required: Optional[bool] = None

    FIELDS = (
        Field("schema", "schema", String()),
        Field("required", "required", Boolean()),
    )


@dataclass
class ResourceType(CommonAttributes):
    """Metadata about a SCIM resource type."""
    name: Optional[str] = None
    description: Optional[str] = None
    endpoint: Optional[str] = None
    schema: Optional[str] = None
    schema_extensions: Optional[List[SchemaExtension]] = None

    URN = RESOURCE_TYPE_URN

    FIELDS = CommonAttributes.FIELDS + (
        Field("name", "name", String()),
        Field("description", "description", String()),
        Field("endpoint", "endpoint", String()),
        Field("schema", "schema", String()),
        Field("schema_extensions", "schemaExtensions", ListOf(Nested(SchemaExtension))),
    )


def builtin_resource_type(name: str, endpoint: str, schema: str, description: str) -> ResourceType:
    """Build the descriptor for one of the protocol's built-in resource types."""
    return ResourceType(
        schemas=[RESOURCE_TYPE_URN],
        id=name,
        name=name,
        endpoint=endpoint,
        schema=schema,
        description=description,
    )


RESOURCE_TYPE_RESOURCE_TYPE = builtin_resource_type(
    "ResourceType",
    "/ResourceTypes",
    RESOURCE_TYPE_URN,
    "SCIM ResourceType - See https://tools.ietf.org/html/rfc7643#section-6",
)

ResourceType.RESOURCE_TYPE = RESOURCE_TYPE_RESOURCE_TYPE
