"""Search filter helpers for common lookups."""
from __future__ import annotations
import json

from .protocol import SearchRequest

# Filter values are JSON string literals, so json.dumps handles quoting
RESOURCES_BY_EXTERNAL_ID = "externalId eq {}"
USER_BY_USER_NAME = "userName eq {}"


def quote(value: str) -> str:
    """Render ``value`` as a SCIM filter string literal."""
    return json.dumps(value, ensure_ascii=False)


def by_external_id(external_id: str) -> SearchRequest:
    return SearchRequest.from_format(RESOURCES_BY_EXTERNAL_ID, quote(external_id))


def by_user_name(user_name: str) -> SearchRequest:
    return SearchRequest.from_format(USER_BY_USER_NAME, quote(user_name))
