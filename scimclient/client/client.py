"""HTTP client for SCIM 2.0 service providers.

Handles OAuth2 client-credentials authentication, token refresh and the
resource operations of RFC 7644. Payloads go through the extensible-resource
codec, so extension data returned by the server survives a read-modify-write
cycle.
"""
from __future__ import annotations
import json
import logging
from dataclasses import replace
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional, TypeVar

import requests

from scimclient.config.settings import ClientConfig, OAuthConfig, load_client_config, load_oauth_config
from scimclient.core import query
from scimclient.core.codec import decode, encode, load
from scimclient.core.exceptions import ParseError, ScimAPIError
from scimclient.core.protocol import (
    ASCENDING,
    ErrorResponse,
    ListResponse,
    SearchRequest,
    decode_list_response,
)
from scimclient.core.registry import ResourceRegistry
from scimclient.core.resource import CommonAttributes
from scimclient.core.resource_type import RESOURCE_TYPE_RESOURCE_TYPE, ResourceType
from scimclient.core.schema import SCHEMA_RESOURCE_TYPE, Schema
from scimclient.core.service_provider_config import ServiceProviderConfig
from scimclient.core.user import USER_RESOURCE_TYPE

logger = logging.getLogger(__name__)

SCIM_MEDIA_TYPE = "application/scim+json"

# Token lifetime assumed when the token endpoint omits expires_in
DEFAULT_TOKEN_TTL = 60
TOKEN_REFRESH_SKEW = 10

T = TypeVar("T", bound=CommonAttributes)


class ScimClient:
    """HTTP client for a SCIM service provider.

    Features:
    - OAuth2 client-credentials token with automatic refresh
    - Centralized error handling (SCIM ErrorResponse bodies become ScimAPIError)
    - If-Match headers from meta.version unless ETags are disabled
    - Per-element type dispatch for query results

    Usage:
        client = ScimClient(ClientConfig("https://scim.example.com/scim/v2"))
        client.authenticate_client_credentials(oauth_config)
        user = client.retrieve_resource(User(), "2819c223")

    A client wraps one requests.Session; use one client per thread.
    """

    def __init__(
        self,
        config: ClientConfig,
        session: Optional[requests.Session] = None,
        registry: Optional[ResourceRegistry] = None,
    ):
        """Initialize SCIM client.

        Args:
            config: Client settings
            session: HTTP session (a new one is created when omitted)
            registry: Resource registry for list decoding and discovery (a fresh
                one with the built-in types when omitted)
        """
        self.config = config
        self.session = session or requests.Session()
        # discover() registers server types into this registry
        self.registry = registry if registry is not None else ResourceRegistry()
        self._token: Optional[str] = None
        self._token_expires_at: Optional[datetime] = None
        self._oauth: Optional[OAuthConfig] = None
        self._discovered = False

    # ─────────────────────────────────────────────────────────────────────
    # Authentication
    # ─────────────────────────────────────────────────────────────────────
    def authenticate_client_credentials(self, oauth: OAuthConfig) -> str:
        """Fetch a token with the client-credentials grant and keep it for auto-refresh.

        Args:
            oauth: Token endpoint and client credentials

        Returns:
            Access token
        """
        self._oauth = oauth
        self._fetch_token()
        return self._token

    def set_token(self, token: str, expires_in: int = 3600) -> None:
        """Use a pre-obtained bearer token (no automatic refresh)."""
        self._oauth = None
        self._token = token
        self._token_expires_at = datetime.now() + timedelta(seconds=expires_in)

    def _fetch_token(self) -> None:
        oauth = self._oauth
        data = {
            "grant_type": "client_credentials",
            "client_id": oauth.client_id,
            "client_secret": oauth.client_secret,
        }
        if oauth.scope:
            data["scope"] = oauth.scope
        resp = self.session.post(oauth.token_url, data=data, timeout=self.config.request_timeout)
        if resp.status_code != 200:
            raise ScimAPIError(resp.status_code, resp.text, oauth.token_url)
        payload = resp.json()
        self._token = payload["access_token"]
        ttl = payload.get("expires_in") or DEFAULT_TOKEN_TTL
        self._token_expires_at = datetime.now() + timedelta(seconds=int(ttl))
        logger.info("Obtained access token for client_id=%s (expires in %ss)", oauth.client_id, ttl)

    def _ensure_authenticated(self) -> None:
        """Refresh the token if it has expired or is about to."""
        if self._oauth is None or self._token_expires_at is None:
            return
        if datetime.now() >= self._token_expires_at - timedelta(seconds=TOKEN_REFRESH_SKEW):
            logger.debug("Access token expiring, refreshing")
            self._fetch_token()

    # ─────────────────────────────────────────────────────────────────────
    # HTTP
    # ─────────────────────────────────────────────────────────────────────
    def _request(self, method: str, path: str, body: Optional[bytes] = None,
                 headers: Optional[Dict[str, str]] = None) -> requests.Response:
        """Execute a request against the service URL.

        Raises:
            ScimAPIError: On HTTP error
        """
        self._ensure_authenticated()
        url = f"{self.config.service_url}{path}"
        headers = dict(headers or {})
        headers["Accept"] = SCIM_MEDIA_TYPE
        if body is not None:
            headers["Content-Type"] = SCIM_MEDIA_TYPE
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"

        logger.info("%s %s", method, url)
        resp = self.session.request(
            method,
            url,
            data=body,
            headers=headers,
            timeout=self.config.request_timeout,
            allow_redirects=not self.config.ignore_redirects,
        )
        self._handle_error(resp)
        return resp

    def _handle_error(self, resp: requests.Response) -> None:
        """Centralized error handling for HTTP responses.

        Raises:
            ScimAPIError: If response status indicates error
        """
        if 200 <= resp.status_code < 300:
            return
        detail = resp.text or resp.reason or ""
        scim_type = None
        try:
            error = decode(resp.content, ErrorResponse())
        except ParseError:
            logger.debug("Error body from %s is not a SCIM ErrorResponse", resp.url)
        else:
            detail = error.detail or detail
            scim_type = error.scim_type
        logger.warning("SCIM request failed: [%s] %s", resp.status_code, resp.url)
        raise ScimAPIError(resp.status_code, detail, resp.url, scim_type)

    def _if_match(self, resource: CommonAttributes) -> Dict[str, str]:
        if self.config.disable_etag or resource.meta is None or not resource.meta.version:
            return {}
        return {"If-Match": resource.meta.version}

    @staticmethod
    def _endpoint(resource: CommonAttributes) -> str:
        rt = resource.resource_type()
        if rt is None or not rt.endpoint:
            raise ValueError(f"{type(resource).__name__} has no resource type endpoint")
        return rt.endpoint

    @staticmethod
    def _resource_path(resource: CommonAttributes) -> str:
        if not resource.id:
            raise ValueError(f"{type(resource).__name__} has no id")
        return f"{ScimClient._endpoint(resource)}/{resource.id}"

    # ─────────────────────────────────────────────────────────────────────
    # Resource operations
    # ─────────────────────────────────────────────────────────────────────
    def retrieve_resource(self, resource: T, resource_id: str) -> T:
        """Populate ``resource`` with the server's copy of ``resource_id``."""
        resp = self._request("GET", f"{self._endpoint(resource)}/{resource_id}")
        return decode(resp.content, resource)

    def create_resource(self, resource: T) -> T:
        """POST ``resource``; it is updated in place with the server's response
        (generated id and meta)."""
        resp = self._request("POST", self._endpoint(resource), body=encode(resource))
        return decode(resp.content, resource)

    def replace_resource(self, resource: T) -> T:
        """PUT ``resource`` over the stored copy, sending If-Match from meta.version."""
        resp = self._request(
            "PUT",
            self._resource_path(resource),
            body=encode(resource),
            headers=self._if_match(resource),
        )
        return decode(resp.content, resource)

    def delete_resource(self, resource: CommonAttributes) -> None:
        """DELETE the stored copy of ``resource``."""
        self._request("DELETE", self._resource_path(resource), headers=self._if_match(resource))

    def query_resource_type(self, rt: ResourceType, search: SearchRequest) -> ListResponse:
        """POST a search to the resource type's ``.search`` endpoint."""
        return self._query(f"{rt.endpoint}/.search", search)

    def query_server(self, search: SearchRequest) -> ListResponse:
        """POST a search across every resource type on the server."""
        if not self.config.disable_discovery and not self._discovered:
            self.discover()
        return self._query("/.search", search)

    def _query(self, path: str, search: SearchRequest) -> ListResponse:
        # Some providers reject searches without an explicit sort order
        if search.sort_order is None:
            sorted_search = replace(search, sort_order=ASCENDING)
            sorted_search._additional = dict(search._additional)
            sorted_search._nulls = set(search._nulls)
            search = sorted_search
        resp = self._request("POST", path, body=encode(search))
        return decode_list_response(resp.content, self.registry)

    # Convenience queries
    def query_resource_type_by_external_id(self, rt: ResourceType, external_id: str) -> ListResponse:
        return self.query_resource_type(rt, query.by_external_id(external_id))

    def query_server_by_external_id(self, external_id: str) -> ListResponse:
        return self.query_server(query.by_external_id(external_id))

    def query_users_by_user_name(self, user_name: str) -> ListResponse:
        return self.query_resource_type(USER_RESOURCE_TYPE, query.by_user_name(user_name))

    # ─────────────────────────────────────────────────────────────────────
    # Server discovery
    # ─────────────────────────────────────────────────────────────────────
    def get_service_provider_config(self) -> ServiceProviderConfig:
        return self.retrieve_singleton(ServiceProviderConfig())

    def retrieve_singleton(self, resource: T) -> T:
        """GET a resource served directly at its endpoint (no id)."""
        resp = self._request("GET", self._endpoint(resource))
        return decode(resp.content, resource)

    def get_resource_types(self) -> List[ResourceType]:
        return self._discovery_list(RESOURCE_TYPE_RESOURCE_TYPE.endpoint, ResourceType)

    def get_schemas(self) -> List[Schema]:
        return self._discovery_list(SCHEMA_RESOURCE_TYPE.endpoint, Schema)

    def _discovery_list(self, path: str, cls: type) -> list:
        """Read a discovery endpoint; servers answer with a ListResponse or a bare array."""
        resp = self._request("GET", path)
        try:
            parsed: Any = json.loads(resp.content)
        except ValueError as exc:
            raise ParseError(f"malformed JSON: {exc}", body=resp.text[:200]) from exc
        if isinstance(parsed, dict):
            parsed = parsed.get("Resources") or []
        if not isinstance(parsed, list):
            raise ParseError("expected a list of resources", field=path)

        resources = []
        for i, item in enumerate(parsed):
            if not isinstance(item, dict):
                raise ParseError("resource is not a JSON object", field=f"{path}[{i}]")
            resources.append(load(cls(), item, f"{path}[{i}]"))
        return resources

    def discover(self) -> List[ResourceType]:
        """Register the server's resource types that this registry does not know yet.

        Types registered this way decode as GenericResource.
        """
        resource_types = self.get_resource_types()
        added = []
        for rt in resource_types:
            if rt.name and not self.registry.lookup(rt.name)[1]:
                self.registry.register(rt)
                added.append(rt.name)
        self._discovered = True
        if added:
            logger.info("Registered server resource types: %s", ", ".join(added))
        return resource_types


def client_from_env(session: Optional[requests.Session] = None,
                    registry: Optional[ResourceRegistry] = None) -> ScimClient:
    """Build an authenticated client from SCIM_* and OAUTH_* environment variables.

    Raises:
        ConfigError: If required variables are missing
        ScimAPIError: If the token request fails
    """
    client = ScimClient(load_client_config(), session=session, registry=registry)
    client.authenticate_client_credentials(load_oauth_config())
    return client
