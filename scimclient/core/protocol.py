"""SCIM protocol messages (RFC 7644): ListResponse, SearchRequest, ErrorResponse.

The ListResponse decoder is polymorphic: every element of ``Resources`` is
decoded into the record class registered for its own resource type, so one
query against the server root may return Users and Groups side by side.

Usage:
    response = decode_list_response(body)
    for resource in response.resources or []:
        if isinstance(resource, User):
            ...
"""
from __future__ import annotations
import json
import logging
from dataclasses import dataclass, field
from typing import Any, List, Optional, Union

from .codec import Converter, Field, Integer, ListOf, Raw, Record, String, dump, json_type, load, parse_object
from .exceptions import ParseError, UnknownResourceTypeError
from .registry import ResourceRegistry, get_resource_registry
from .resource import CommonAttributes

logger = logging.getLogger(__name__)

ERROR_RESPONSE_URN = "urn:ietf:params:scim:api:messages:2.0:Error"
LIST_RESPONSE_URN = "urn:ietf:params:scim:api:messages:2.0:ListResponse"
SEARCH_REQUEST_URN = "urn:ietf:params:scim:api:messages:2.0:SearchRequest"

ASCENDING = "ascending"
DESCENDING = "descending"


@dataclass
class ErrorResponse(Record):
    """Error body returned by a service provider (RFC 7644 section 3.12)."""
    schemas: Optional[List[str]] = None
    scim_type: Optional[str] = None
    detail: Optional[str] = None
    # Some servers send the HTTP status as a number instead of a string
    status: Any = None

    FIELDS = (
        Field("schemas", "schemas", ListOf(String())),
        Field("scim_type", "scimType", String()),
        Field("detail", "detail", String()),
        Field("status", "status", Raw()),
    )


@dataclass
class SearchRequest(Record):
    """Query sent with POST to ``.search`` (RFC 7644 section 3.4.3)."""
    schemas: List[str] = field(default_factory=lambda: [SEARCH_REQUEST_URN])
    attributes: Optional[List[str]] = None
    excluded_attributes: Optional[List[str]] = None
    filter: Optional[str] = None
    sort_by: Optional[str] = None
    sort_order: Optional[str] = None
    start_index: Optional[int] = None
    count: Optional[int] = None

    FIELDS = (
        Field("schemas", "schemas", ListOf(String())),
        Field("attributes", "attributes", ListOf(String())),
        Field("excluded_attributes", "excludedAttributes", ListOf(String())),
        Field("filter", "filter", String()),
        Field("sort_by", "sortBy", String()),
        Field("sort_order", "sortOrder", String()),
        Field("start_index", "startIndex", Integer()),
        Field("count", "count", Integer()),
    )

    @classmethod
    def from_format(cls, template: str, *args: Any) -> "SearchRequest":
        """Build a request whose filter is ``template.format(*args)``."""
        return cls(filter=template.format(*args))


class _ResourceList(Converter):
    """``Resources`` array: decoded per element by decode_list_response."""

    def decode(self, value: Any, path: str) -> list:
        if not isinstance(value, list):
            raise ParseError(f"expected array, got {json_type(value)}", field=path)
        return value

    def encode(self, value: list) -> list:
        return [dump(r) if isinstance(r, Record) else r for r in value]


@dataclass
class ListResponse(Record):
    """Paged result of a list or query operation (RFC 7644 section 3.4.2)."""
    schemas: Optional[List[str]] = None
    items_per_page: Optional[int] = None
    start_index: Optional[int] = None
    total_results: Optional[int] = None
    resources: Optional[List[CommonAttributes]] = None

    FIELDS = (
        Field("schemas", "schemas", ListOf(String())),
        Field("items_per_page", "itemsPerPage", Integer()),
        Field("start_index", "startIndex", Integer()),
        Field("total_results", "totalResults", Integer()),
        Field("resources", "Resources", _ResourceList()),
    )


def resource_type_name(element: dict, registry: ResourceRegistry) -> Optional[str]:
    """Identify the resource type of one ``Resources`` element.

    ``meta.resourceType`` wins; otherwise the first ``schemas`` entry that is
    the canonical schema of a registered type is used.
    """
    meta = element.get("meta")
    if isinstance(meta, dict) and isinstance(meta.get("resourceType"), str):
        return meta["resourceType"]

    schemas = element.get("schemas")
    if isinstance(schemas, list):
        for urn in schemas:
            if not isinstance(urn, str):
                continue
            rt, found = registry.lookup_by_schema(urn)
            if found:
                return rt.name
    return None


def decode_resource(element: Any, registry: Optional[ResourceRegistry] = None, path: str = "") -> CommonAttributes:
    """Decode one parsed resource object into its registered record class.

    Raises:
        ParseError: If ``element`` is not an object or a known field is mistyped
        UnknownResourceTypeError: If the type cannot be identified or is not registered
    """
    registry = registry or get_resource_registry()
    if not isinstance(element, dict):
        raise ParseError("resource is not a JSON object", field=path or None)

    name = resource_type_name(element, registry)
    resource = registry.new_resource(name) if name else None
    if resource is None:
        raise UnknownResourceTypeError(name)

    logger.debug("Decoding %s as %s", path or "resource", type(resource).__name__)
    return load(resource, element, path)


def decode_list_response(
    data: Union[bytes, bytearray, str],
    registry: Optional[ResourceRegistry] = None,
) -> ListResponse:
    """Decode a ListResponse envelope, dispatching each resource by type.

    Args:
        data: Raw JSON of the envelope
        registry: Registry used for dispatch (defaults to the process-wide one)

    Returns:
        ListResponse whose ``resources`` keep the input order (None when the
        envelope has no ``Resources`` member)

    Raises:
        ParseError: Malformed JSON or mistyped envelope/resource fields
        UnknownResourceTypeError: An element's type is not registered
    """
    registry = registry or get_resource_registry()
    response = load(ListResponse(), parse_object(data))

    # An absent Resources member stays absent so the envelope re-encodes as sent
    if response.resources is not None:
        response.resources = [
            decode_resource(element, registry, f"Resources[{i}]")
            for i, element in enumerate(response.resources)
        ]
    logger.debug(
        "Decoded ListResponse: %d of %s result(s)",
        len(response.resources or []),
        response.total_results,
    )
    return response


def encode_list_response(response: ListResponse) -> bytes:
    """Encode a ListResponse envelope as UTF-8 JSON."""
    return json.dumps(dump(response), ensure_ascii=False).encode("utf-8")
