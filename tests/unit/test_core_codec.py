import json
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

import pytest

from scimclient.core.codec import (
    Field,
    Integer,
    Record,
    String,
    Timestamp,
    decode,
    dump,
    encode,
    format_timestamp,
    parse_timestamp,
)
from scimclient.core.exceptions import ParseError
from scimclient.core.schema import Schema
from scimclient.core.user import User


@dataclass
class Widget(Record):
    label: Optional[str] = None
    size: Optional[int] = None
    cache: Optional[str] = None
    seen: Optional[datetime] = None

    FIELDS = (
        Field("label", "label", String()),
        Field("size", "size", Integer()),
        Field("cache", "cache", String(), ignore=True),
        Field("seen", "seen", Timestamp()),
    )


def test_unknown_members_survive_round_trip():
    data = {"label": "a", "size": 3, "extra": {"x": [1, 2]}, "urn:example:ext": {"k": "v"}}
    widget = decode(json.dumps(data), Widget())
    assert widget.label == "a"
    assert widget.size == 3
    assert json.loads(encode(widget)) == data


def test_unset_fields_are_omitted():
    assert json.loads(encode(Widget(label="only"))) == {"label": "only"}


def test_explicit_null_round_trips():
    widget = decode(b'{"label": null, "size": 2}', Widget())
    assert widget.label is None
    assert json.loads(encode(widget)) == {"label": None, "size": 2}

    user = decode(b'{"userName": "u", "externalId": null}', User())
    assert json.loads(encode(user)) == {"userName": "u", "externalId": None}


def test_explicit_null_is_replaced_once_set():
    widget = decode(b'{"label": null}', Widget())
    widget.label = "now set"
    assert json.loads(encode(widget)) == {"label": "now set"}


def test_decode_into_populated_record_discards_previous_state():
    user = decode(b'{"userName": "a", "nickName": "old", "externalId": null, "extra": 1}', User())
    decode(b'{"userName": "b"}', user)
    assert user.nick_name is None
    assert json.loads(encode(user)) == {"userName": "b"}


def test_ignored_field_stays_in_leftovers():
    widget = decode(b'{"cache": "stale"}', Widget())
    assert widget.cache is None
    widget.cache = "fresh"
    assert dump(widget) == {"cache": "stale"}


def test_known_field_wins_over_leftover_of_same_name():
    widget = Widget(label="typed")
    widget._additional = {"label": "raw", "other": 1}
    assert dump(widget) == {"label": "typed", "other": 1}


def test_decode_accepts_str_and_bytes():
    assert decode('{"label": "s"}', Widget()).label == "s"
    assert decode("{\"label\": \"é\"}".encode("utf-8"), Widget()).label == "é"


def test_encode_is_utf8_without_ascii_escaping():
    body = encode(Widget(label="Jürgen"))
    assert "Jürgen".encode("utf-8") in body


@pytest.mark.parametrize("payload", [b"", b"{", b"[1, 2]", b'"text"', b"\xff\xfe"])
def test_malformed_or_non_object_payload_raises_parse_error(payload):
    with pytest.raises(ParseError) as exc:
        decode(payload, Widget())
    assert exc.value.field is None


def test_mistyped_field_reports_its_name():
    with pytest.raises(ParseError) as exc:
        decode(b'{"size": "big"}', Widget())
    assert exc.value.field == "size"
    assert "expected integer" in str(exc.value)


def test_boolean_is_not_an_integer():
    with pytest.raises(ParseError):
        decode(b'{"size": true}', Widget())


def test_nested_error_path_includes_parent():
    with pytest.raises(ParseError) as exc:
        decode(b'{"userName": "u", "name": {"givenName": 5}}', User())
    assert exc.value.field == "name.givenName"


def test_error_message_preview_is_truncated():
    with pytest.raises(ParseError) as exc:
        decode("{" + "x" * 500, Widget())
    assert len(exc.value.body) < 500
    assert exc.value.body.endswith("...")


def test_nested_records_keep_their_own_unknown_members():
    data = {
        "userName": "u",
        "name": {"givenName": "G", "pronunciation": "gee"},
        "emails": [{"value": "u@example.com", "verified": True}],
    }
    user = decode(json.dumps(data), User())
    assert user.name.given_name == "G"
    assert user.emails[0].value == "u@example.com"
    assert json.loads(encode(user)) == data


def test_self_referencing_attributes_decode():
    data = {
        "id": "urn:example:schema",
        "attributes": [
            {
                "name": "address",
                "type": "complex",
                "subAttributes": [{"name": "street", "type": "string", "caseExact": False}],
            }
        ],
    }
    schema = decode(json.dumps(data), Schema())
    assert schema.attribute("ADDRESS").sub_attributes[0].name == "street"
    assert schema.attribute("missing") is None
    assert json.loads(encode(schema)) == data


def test_duplicate_wire_name_is_rejected_at_class_definition():
    with pytest.raises(TypeError):
        @dataclass
        class Broken(Record):
            a: Optional[str] = None
            b: Optional[str] = None

            FIELDS = (
                Field("a", "same", String()),
                Field("b", "same", String()),
            )


def test_wire_names_follow_field_table():
    assert Widget.wire_names() == ("label", "size", "seen")
    assert "externalId" in User.wire_names()


def test_from_dict_and_to_dict():
    widget = Widget.from_dict({"label": "d", "rest": 1})
    assert widget.to_dict() == {"label": "d", "rest": 1}


# ─────────────────────────────────────────────────────────────────────────────
# Timestamps
# ─────────────────────────────────────────────────────────────────────────────
def test_timestamp_with_designator():
    ts = parse_timestamp("2010-01-23T04:56:22Z")
    assert ts == datetime(2010, 1, 23, 4, 56, 22, tzinfo=timezone.utc)
    assert format_timestamp(ts) == "2010-01-23T04:56:22Z"


def test_timestamp_without_zone_is_taken_as_utc():
    ts = parse_timestamp("2010-01-23T04:56:22")
    assert ts.tzinfo is not None
    assert ts.utcoffset() == timedelta(0)
    assert format_timestamp(ts) == "2010-01-23T04:56:22Z"


def test_timestamp_keeps_explicit_offset():
    ts = parse_timestamp("2011-05-13T04:42:34+02:00")
    assert ts.utcoffset() == timedelta(hours=2)
    assert format_timestamp(ts) == "2011-05-13T04:42:34+02:00"


def test_invalid_timestamp_raises_parse_error():
    with pytest.raises(ParseError) as exc:
        decode(b'{"seen": "yesterday"}', Widget())
    assert exc.value.field == "seen"


def test_naive_datetime_is_written_as_utc():
    assert format_timestamp(datetime(2020, 1, 1, 12, 0, 0)) == "2020-01-01T12:00:00Z"
