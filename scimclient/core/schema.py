"""SCIM Schema resource (RFC 7643 section 7)."""
from __future__ import annotations
from dataclasses import dataclass
from typing import List, Optional

from .codec import Boolean, Field, ListOf, Nested, Record, String
from .resource import CommonAttributes
from .resource_type import builtin_resource_type

SCHEMA_URN = "urn:ietf:params:scim:schemas:core:2.0:Schema"

SCHEMA_RESOURCE_TYPE = builtin_resource_type(
    "Schema",
    "/Schemas",
    SCHEMA_URN,
    "SCIM Schema - See https://tools.ietf.org/html/rfc7643#section-7",
)

# Attribute data types
STRING = "string"
BOOLEAN = "boolean"
DECIMAL = "decimal"
INTEGER = "integer"
DATE_TIME = "dateTime"
REFERENCE = "reference"
COMPLEX = "complex"

# Mutability
READ_ONLY = "readOnly"
READ_WRITE = "readWrite"
IMMUTABLE = "immutable"
WRITE_ONLY = "writeOnly"

# Returned
ALWAYS = "always"
NEVER = "never"
DEFAULT = "default"
REQUEST = "request"

# Uniqueness
NONE = "none"
SERVER = "server"
GLOBAL = "global"


@dataclass
class Attribute(Record):
    """Definition of one schema attribute; complex attributes nest sub-attributes."""
    name: Optional[str] = None
    type: Optional[str] = None
    sub_attributes: Optional[List["Attribute"]] = None
    multi_valued: Optional[bool] = None
    description: Optional[str] = None
    required: Optional[bool] = None
    canonical_values: Optional[List[str]] = None
    case_exact: Optional[bool] = None
    mutability: Optional[str] = None
    returned: Optional[str] = None
    uniqueness: Optional[str] = None
    reference_types: Optional[List[str]] = None

    FIELDS = (
        Field("name", "name", String()),
        Field("type", "type", String()),
        Field("sub_attributes", "subAttributes", ListOf(Nested(lambda: Attribute))),
        Field("multi_valued", "multiValued", Boolean()),
        Field("description", "description", String()),
        Field("required", "required", Boolean()),
        Field("canonical_values", "canonicalValues", ListOf(String())),
        Field("case_exact", "caseExact", Boolean()),
        Field("mutability", "mutability", String()),
        Field("returned", "returned", String()),
        Field("uniqueness", "uniqueness", String()),
        Field("reference_types", "referenceTypes", ListOf(String())),
    )


@dataclass
class Schema(CommonAttributes):
    name: Optional[str] = None
    description: Optional[str] = None
    attributes: Optional[List[Attribute]] = None

    URN = SCHEMA_URN
    RESOURCE_TYPE = SCHEMA_RESOURCE_TYPE

    FIELDS = CommonAttributes.FIELDS + (
        Field("name", "name", String()),
        Field("description", "description", String()),
        Field("attributes", "attributes", ListOf(Nested(Attribute))),
    )

    def attribute(self, name: str) -> Optional[Attribute]:
        """Return the top-level attribute called ``name`` (case-insensitive)."""
        for attr in self.attributes or []:
            if attr.name and attr.name.lower() == name.lower():
                return attr
        return None
