import json
from dataclasses import dataclass
from typing import Optional

import pytest

from scimclient.core.codec import Field, Integer, Record, String, decode, encode
from scimclient.core.enterprise_user import ENTERPRISE_USER_URN, EnterpriseUser, Manager
from scimclient.core.exceptions import (
    DuplicateExtensionError,
    ExtensionError,
    MissingExtensionError,
    ParseError,
)
from scimclient.core.group import Group
from scimclient.core.user import USER_URN, User

BADGE_URN = "urn:example:params:scim:schemas:extension:badge:2.0:User"


@dataclass
class Badge(Record):
    number: Optional[int] = None
    site: Optional[str] = None

    URN = BADGE_URN

    FIELDS = (
        Field("number", "number", Integer()),
        Field("site", "site", String()),
    )


def test_extension_lifecycle():
    user = User(user_name="bjensen")

    user.add_extension(EnterpriseUser(employee_number="701984"))
    assert user.has_extension(EnterpriseUser())
    assert user.schemas == [USER_URN, ENTERPRISE_USER_URN]

    with pytest.raises(DuplicateExtensionError):
        user.add_extension(EnterpriseUser(employee_number="other"))

    user.update_extension(EnterpriseUser(employee_number="42", cost_center="4130"))
    got = user.get_extension(EnterpriseUser())
    assert got.employee_number == "42"
    assert got.cost_center == "4130"

    user.remove_extension(EnterpriseUser())
    assert not user.has_extension(EnterpriseUser())
    assert user.schemas == [USER_URN]

    # Removing twice is harmless
    user.remove_extension(EnterpriseUser())


def test_update_missing_extension_raises():
    with pytest.raises(MissingExtensionError) as exc:
        User().update_extension(EnterpriseUser(department="Ops"))
    assert exc.value.urn == ENTERPRISE_USER_URN
    assert isinstance(exc.value, ExtensionError)


def test_get_missing_extension_raises():
    with pytest.raises(MissingExtensionError):
        User().get_extension(EnterpriseUser())


def test_get_extension_rejects_non_object_payload():
    user = decode(json.dumps({"userName": "u", BADGE_URN: "not-an-object"}), User())
    with pytest.raises(ParseError) as exc:
        user.get_extension(Badge())
    assert exc.value.field == BADGE_URN


def test_get_extension_reports_mistyped_member_path():
    user = decode(json.dumps({"userName": "u", BADGE_URN: {"number": "seven"}}), User())
    with pytest.raises(ParseError) as exc:
        user.get_extension(Badge())
    assert exc.value.field == f"{BADGE_URN}.number"


def test_added_extension_is_encoded_under_its_urn():
    user = User(user_name="u")
    user.add_extension(EnterpriseUser(manager=Manager(value="26118915", display_name="John Smith")))
    body = json.loads(encode(user))
    assert body[ENTERPRISE_USER_URN] == {"manager": {"value": "26118915", "displayName": "John Smith"}}
    assert body["schemas"] == [USER_URN, ENTERPRISE_USER_URN]


def test_extension_payload_round_trips_unknown_members():
    payload = {"number": 7, "site": "HQ", "color": "blue"}
    user = decode(json.dumps({"userName": "u", BADGE_URN: payload}), User())
    badge = user.get_extension(Badge())
    assert badge.number == 7
    badge.site = "Annex"
    user.update_extension(badge)
    assert json.loads(encode(user))[BADGE_URN] == {"number": 7, "site": "Annex", "color": "blue"}


def test_get_extension_urns_filters_cargo_members():
    data = {
        "userName": "u",
        ENTERPRISE_USER_URN: {},
        "cargoProperty": {"a": 1},
        BADGE_URN: {"number": 1},
        "notAnUrn": True,
    }
    user = decode(json.dumps(data), User())
    assert user.get_extension_urns() == [ENTERPRISE_USER_URN, BADGE_URN]


def test_has_and_remove_by_urn():
    group = decode(json.dumps({"displayName": "g", "urn:example:cargo": [1, 2]}), Group())
    assert group.has_extension_by_urn("urn:example:cargo")
    group.remove_extension_by_urn("urn:example:cargo")
    assert not group.has_extension_by_urn("urn:example:cargo")
    assert json.loads(encode(group)) == {"displayName": "g"}


def test_add_extension_keeps_existing_schemas():
    group = Group(schemas=["custom:schema"])
    group.add_extension(Badge(number=1))
    assert group.schemas == ["custom:schema", BADGE_URN]


def test_record_without_urn_is_not_an_extension():
    with pytest.raises(TypeError):
        User().add_extension(Manager(value="x"))


def test_resource_type_descriptor():
    assert User().resource_type().name == "User"
    assert User().resource_type().endpoint == "/Users"
    assert Group().resource_type().endpoint == "/Groups"
