"""SCIM common attributes and the extension accessor API.

See RFC 7643 section 3 (resources) and section 3.3 (extensions).

Every resource carries an extension bag: the JSON members of the decoded
document that are not known fields of the resource type. Extension payloads
live in the bag under their URN, next to any other cargo members the service
provider sent. The bag is written back on encode, so a client returns all the
members it was originally given.

A single resource instance is not safe for concurrent mutation; callers must
serialize access to it.
"""
from __future__ import annotations
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, ClassVar, List, Optional, TYPE_CHECKING

from .codec import Boolean, Field, ListOf, Nested, Record, String, Timestamp, load, dump
from .exceptions import DuplicateExtensionError, MissingExtensionError, ParseError

if TYPE_CHECKING:
    from .resource_type import ResourceType

logger = logging.getLogger(__name__)

# Bag keys with this prefix are treated as extension payloads
URN_PREFIX = "urn:"


@dataclass
class Meta(Record):
    """Resource metadata (RFC 7643 section 3.1)."""
    resource_type: Optional[str] = None
    created: Optional[datetime] = None
    last_modified: Optional[datetime] = None
    location: Optional[str] = None
    version: Optional[str] = None

    FIELDS = (
        Field("resource_type", "resourceType", String()),
        Field("created", "created", Timestamp()),
        Field("last_modified", "lastModified", Timestamp()),
        Field("location", "location", String()),
        Field("version", "version", String()),
    )


@dataclass
class Multivalued(Record):
    """Sub-attributes shared by multi-valued attributes (RFC 7643 section 2.4)."""
    type: Optional[str] = None
    display: Optional[str] = None
    primary: Optional[bool] = None
    ref: Optional[str] = None

    FIELDS = (
        Field("type", "type", String()),
        Field("display", "display", String()),
        Field("primary", "primary", Boolean()),
        Field("ref", "$ref", String()),
    )


@dataclass
class StringMultivalued(Multivalued):
    """Multi-valued attribute whose significant value is a string."""
    value: Optional[str] = None
    key: Optional[str] = None

    FIELDS = Multivalued.FIELDS + (
        Field("value", "value", String()),
        Field("key", "key", String()),
    )


def extension_urn(extension: Any) -> str:
    """Return the URN that identifies an extension record.

    Raises:
        TypeError: If ``extension`` does not declare a URN
    """
    urn = getattr(extension, "URN", None)
    if not isinstance(urn, str) or not urn:
        raise TypeError(f"{type(extension).__name__} does not declare a URN")
    return urn


@dataclass
class CommonAttributes(Record):
    """Attributes shared by every SCIM resource (RFC 7643 section 3.1).

    Subclasses set ``URN`` and ``RESOURCE_TYPE`` and extend ``FIELDS``.
    """
    URN: ClassVar[str] = ""
    RESOURCE_TYPE: ClassVar[Optional["ResourceType"]] = None

    id: Optional[str] = None
    external_id: Optional[str] = None
    meta: Optional[Meta] = None
    schemas: Optional[List[str]] = None

    FIELDS = (
        Field("id", "id", String()),
        Field("external_id", "externalId", String()),
        Field("meta", "meta", Nested(Meta)),
        Field("schemas", "schemas", ListOf(String())),
    )

    def resource_type(self) -> Optional["ResourceType"]:
        """Return the descriptor for this resource's type."""
        return self.RESOURCE_TYPE

    # ─────────────────────────────────────────────────────────────────────
    # Extension accessor API
    # ─────────────────────────────────────────────────────────────────────
    def add_extension(self, extension: Record) -> None:
        """Store a new extension under its URN.

        Raises:
            DuplicateExtensionError: If the URN is already present
        """
        urn = extension_urn(extension)
        if self.has_extension_by_urn(urn):
            raise DuplicateExtensionError(urn)
        self._put_extension(urn, extension)

    def update_extension(self, extension: Record) -> None:
        """Overwrite an extension already stored under its URN.

        Raises:
            MissingExtensionError: If the URN is not present
        """
        urn = extension_urn(extension)
        if not self.has_extension_by_urn(urn):
            raise MissingExtensionError(urn)
        self._put_extension(urn, extension)

    def get_extension(self, extension: Record) -> Record:
        """Decode the stored payload for the extension's URN into ``extension``.

        Args:
            extension: Record to populate in place

        Returns:
            ``extension``, populated

        Raises:
            MissingExtensionError: If the URN is not present
            ParseError: If the stored payload does not fit the extension type
        """
        urn = extension_urn(extension)
        if urn not in self._additional:
            raise MissingExtensionError(urn)
        payload = self._additional[urn]
        if not isinstance(payload, dict):
            raise ParseError("extension payload is not a JSON object", field=urn)
        return load(extension, payload, urn)

    def has_extension(self, extension: Record) -> bool:
        """Return whether an entry exists under the extension's URN."""
        return self.has_extension_by_urn(extension_urn(extension))

    def has_extension_by_urn(self, urn: str) -> bool:
        """Return whether an entry exists under ``urn``."""
        return urn in self._additional

    def remove_extension(self, extension: Record) -> None:
        """Delete the entry under the extension's URN; absent entries are ignored."""
        self.remove_extension_by_urn(extension_urn(extension))

    def remove_extension_by_urn(self, urn: str) -> None:
        """Delete the entry under ``urn``; absent entries are ignored.

        The URN is also dropped from ``schemas``.
        """
        self._additional.pop(urn, None)
        if self.schemas and urn in self.schemas:
            self.schemas = [s for s in self.schemas if s != urn]

    def get_extension_urns(self) -> List[str]:
        """Return the bag keys that look like extension URNs.

        The ``urn:`` prefix is a heuristic: it separates extension payloads
        from incidental cargo members, nothing more.
        """
        return [key for key in self._additional if key.startswith(URN_PREFIX)]

    def _put_extension(self, urn: str, extension: Record) -> None:
        self._additional[urn] = dump(extension)
        # Extension schema must be listed alongside the base schema
        if self.schemas is None:
            self.schemas = [self.URN] if self.URN else []
        if urn not in self.schemas:
            self.schemas.append(urn)
        logger.debug("Stored extension %s on %s", urn, type(self).__name__)
