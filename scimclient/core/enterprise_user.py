"""SCIM Enterprise User extension (RFC 7643 section 4.3)."""
from __future__ import annotations
from dataclasses import dataclass
from typing import Optional

from .codec import Field, Nested, Record, String

ENTERPRISE_USER_URN = "urn:ietf:params:scim:schemas:extension:enterprise:2.0:User"


@dataclass
class Manager(Record):
    """Reference to the user's manager, with a little cargo data."""
    value: Optional[str] = None
    ref: Optional[str] = None
    display_name: Optional[str] = None

    FIELDS = (
        Field("value", "value", String()),
        Field("ref", "$ref", String()),
        Field("display_name", "displayName", String()),
    )


@dataclass
class EnterpriseUser(Record):
    """Attributes for users that belong to, or act for, an organization."""
    employee_number: Optional[str] = None
    cost_center: Optional[str] = None
    organization: Optional[str] = None
    division: Optional[str] = None
    department: Optional[str] = None
    manager: Optional[Manager] = None

    URN = ENTERPRISE_USER_URN

    FIELDS = (
        Field("employee_number", "employeeNumber", String()),
        Field("cost_center", "costCenter", String()),
        Field("organization", "organization", String()),
        Field("division", "division", String()),
        Field("department", "department", String()),
        Field("manager", "manager", Nested(Manager)),
    )
