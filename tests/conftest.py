"""Pytest shared fixtures."""
import json
import pathlib
import sys
from typing import Optional

# Add project root to Python path
ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import pytest
import requests

from scimclient.config.settings import ClientConfig, OAuthConfig


# ─────────────────────────────────────────────────────────────────────────────
# Network Guard Rails
# ─────────────────────────────────────────────────────────────────────────────
@pytest.fixture(autouse=True)
def _block_network(monkeypatch):
    """Prevent unit tests from hitting live SCIM or token endpoints."""

    def _fail(self, method, url, *args, **kwargs):
        raise RuntimeError(f"Unexpected HTTP {method} in unit test: {url}")

    monkeypatch.setattr(requests.Session, "request", _fail)


# ─────────────────────────────────────────────────────────────────────────────
# Stub HTTP session
# ─────────────────────────────────────────────────────────────────────────────
class StubResponse:
    def __init__(self, payload=None, status_code: int = 200, url: str = "", text: Optional[str] = None):
        if text is None:
            text = json.dumps(payload) if payload is not None else ""
        self.text = text
        self.content = text.encode("utf-8")
        self.status_code = status_code
        self.url = url
        self.reason = "OK" if status_code < 400 else "Error"
        self._payload = payload

    def json(self):
        return json.loads(self.text)


class StubSession:
    """Records requests and replays queued responses in order."""

    def __init__(self):
        self.calls = []
        self.responses = []

    def queue(self, payload=None, status_code: int = 200, text: Optional[str] = None) -> None:
        self.responses.append((payload, status_code, text))

    def _next(self, url):
        if not self.responses:
            raise AssertionError(f"No stub response queued for {url}")
        payload, status_code, text = self.responses.pop(0)
        return StubResponse(payload, status_code, url=url, text=text)

    def request(self, method, url, **kwargs):
        self.calls.append(dict(method=method, url=url, **kwargs))
        return self._next(url)

    def post(self, url, **kwargs):
        return self.request("POST", url, **kwargs)


@pytest.fixture()
def session():
    return StubSession()


@pytest.fixture()
def client_config():
    return ClientConfig(service_url="https://scim.example.com/scim/v2/")


@pytest.fixture()
def oauth_config():
    return OAuthConfig(
        token_url="https://auth.example.com/oauth/token",
        client_id="scim-client",
        client_secret="s3cr3t",
    )


@pytest.fixture()
def bjensen():
    """RFC 7643 section 8.2 style full user with an enterprise extension and cargo data."""
    return {
        "schemas": [
            "urn:ietf:params:scim:schemas:core:2.0:User",
            "urn:ietf:params:scim:schemas:extension:enterprise:2.0:User",
        ],
        "id": "2819c223-7f76-453a-919d-413861904646",
        "externalId": "701984",
        "userName": "bjensen@example.com",
        "name": {
            "formatted": "Ms. Barbara J Jensen, III",
            "familyName": "Jensen",
            "givenName": "Barbara",
            "middleName": "Jane",
            "honorificPrefix": "Ms.",
            "honorificSuffix": "III",
        },
        "displayName": "Babs Jensen",
        "nickName": "Babs",
        "profileUrl": "https://login.example.com/bjensen",
        "emails": [
            {"value": "bjensen@example.com", "type": "work", "primary": True},
            {"value": "babs@jensen.org", "type": "home"},
        ],
        "addresses": [
            {
                "type": "work",
                "streetAddress": "100 Universal City Plaza",
                "locality": "Hollywood",
                "region": "CA",
                "postalCode": "91608",
                "country": "USA",
                "formatted": "100 Universal City Plaza\nHollywood, CA 91608 USA",
                "primary": True,
            }
        ],
        "phoneNumbers": [{"value": "555-555-5555", "type": "work"}],
        "groups": [
            {
                "value": "e9e30dba-f08f-4109-8486-d5c6a331660a",
                "$ref": "https://example.com/v2/Groups/e9e30dba-f08f-4109-8486-d5c6a331660a",
                "display": "Tour Guides",
            }
        ],
        "userType": "Employee",
        "title": "Tour Guide",
        "preferredLanguage": "en-US",
        "locale": "en-US",
        "timezone": "America/Los_Angeles",
        "active": True,
        "urn:ietf:params:scim:schemas:extension:enterprise:2.0:User": {
            "employeeNumber": "701984",
            "costCenter": "4130",
            "organization": "Universal Studios",
            "division": "Theme Park",
            "department": "Tour Operations",
            "manager": {
                "value": "26118915-6090-4610-87e4-49d8ca9f808d",
                "$ref": "../Users/26118915-6090-4610-87e4-49d8ca9f808d",
                "displayName": "John Smith",
            },
        },
        "urn:example:cargo": ["opaque", 1, None],
        "cargoProperty": {"nested": {"deep": True}},
        "meta": {
            "resourceType": "User",
            "created": "2010-01-23T04:56:22Z",
            "lastModified": "2011-05-13T04:42:34Z",
            "version": 'W/"3694e05e9dff591"',
            "location": "https://example.com/v2/Users/2819c223-7f76-453a-919d-413861904646",
        },
    }
