"""SCIM Group resource (RFC 7643 section 4.2)."""
from __future__ import annotations
from dataclasses import dataclass
from typing import List, Optional

from .codec import Field, ListOf, Nested, String
from .resource import CommonAttributes, StringMultivalued
from .resource_type import builtin_resource_type

GROUP_URN = "urn:ietf:params:scim:schemas:core:2.0:Group"

GROUP_RESOURCE_TYPE = builtin_resource_type(
    "Group",
    "/Groups",
    GROUP_URN,
    "SCIM Group - See https://tools.ietf.org/html/rfc7643#section-4.2",
)

# Reference to a group member; sub-attributes are immutable once set
MemberRef = StringMultivalued


@dataclass
class Group(CommonAttributes):
    display_name: Optional[str] = None
    members: Optional[List[MemberRef]] = None

    URN = GROUP_URN
    RESOURCE_TYPE = GROUP_RESOURCE_TYPE

    FIELDS = CommonAttributes.FIELDS + (
        Field("display_name", "displayName", String()),
        Field("members", "members", ListOf(Nested(MemberRef))),
    )
