"""SCIM 2.0 extensible-resource codec.

Bidirectional conversion between JSON documents and typed records. Every
record type declares an explicit field table (``FIELDS``) mapping Python
attribute names to wire names; base-type fields are flattened into the derived
table by listing them alongside the derived type's own fields:

    @dataclass
    class User(CommonAttributes):
        user_name: Optional[str] = None

        FIELDS = CommonAttributes.FIELDS + (
            Field("user_name", "userName", String()),
        )

Members of a JSON object that no field claims are kept on the record (for a
resource this is its extension bag) and written back on encode, so that

    encode(decode(data, User()))

reproduces every member of ``data`` (member order is not preserved).

Unset attributes are ``None`` and are omitted on encode. A JSON ``null`` for a
known field decodes to ``None`` (RFC 7643 section 2.5 treats null and
unassigned as equivalent) and is written back as ``null`` until the field is
given a value.

Usage:
    user = decode(body, User())
    body = encode(user)
"""
from __future__ import annotations
import json
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, ClassVar, Dict, Optional, Set, Tuple, Type, TypeVar, Union

from .exceptions import ParseError

logger = logging.getLogger(__name__)

R = TypeVar("R", bound="Record")

# Longest slice of a payload echoed back in a ParseError message
_BODY_PREVIEW = 200


# ─────────────────────────────────────────────────────────────────────────────
# Converters
# ─────────────────────────────────────────────────────────────────────────────
class Converter:
    """Converts one wire fragment to a Python value and back."""

    def decode(self, value: Any, path: str) -> Any:
        raise NotImplementedError

    def encode(self, value: Any) -> Any:
        raise NotImplementedError


class Raw(Converter):
    """Any JSON value, kept as parsed."""

    def decode(self, value: Any, path: str) -> Any:
        return value

    def encode(self, value: Any) -> Any:
        return value


class String(Converter):
    def decode(self, value: Any, path: str) -> str:
        if not isinstance(value, str):
            raise ParseError(f"expected string, got {json_type(value)}", field=path)
        return value

    def encode(self, value: str) -> str:
        return value


class Boolean(Converter):
    def decode(self, value: Any, path: str) -> bool:
        if not isinstance(value, bool):
            raise ParseError(f"expected boolean, got {json_type(value)}", field=path)
        return value

    def encode(self, value: bool) -> bool:
        return value


class Integer(Converter):
    def decode(self, value: Any, path: str) -> int:
        # bool is a subclass of int in Python but not in JSON
        if isinstance(value, bool) or not isinstance(value, int):
            raise ParseError(f"expected integer, got {json_type(value)}", field=path)
        return value

    def encode(self, value: int) -> int:
        return value


class Timestamp(Converter):
    """RFC 3339 date-time, tolerant of a missing UTC designator.

    Some service providers render local date-times without a zone
    (``2010-01-23T04:56:22``); those are read as UTC. Values are always
    written back with an explicit designator.
    """

    def decode(self, value: Any, path: str) -> datetime:
        if not isinstance(value, str):
            raise ParseError(f"expected RFC 3339 timestamp, got {json_type(value)}", field=path)
        return parse_timestamp(value, path)

    def encode(self, value: datetime) -> str:
        return format_timestamp(value)


class ListOf(Converter):
    """JSON array whose items share one converter."""

    def __init__(self, item: Converter):
        self.item = item

    def decode(self, value: Any, path: str) -> list:
        if not isinstance(value, list):
            raise ParseError(f"expected array, got {json_type(value)}", field=path)
        return [self.item.decode(v, f"{path}[{i}]") for i, v in enumerate(value)]

    def encode(self, value: list) -> list:
        return [self.item.encode(v) for v in value]


class Nested(Converter):
    """JSON object decoded into a record type.

    ``target`` may be a zero-argument callable returning the record class, for
    self-referencing types whose class is not yet bound.
    """

    def __init__(self, target: Union[Type["Record"], Callable[[], Type["Record"]]]):
        self._target = target

    @property
    def target(self) -> Type["Record"]:
        if isinstance(self._target, type):
            return self._target
        return self._target()

    def decode(self, value: Any, path: str) -> "Record":
        if not isinstance(value, dict):
            raise ParseError(f"expected object, got {json_type(value)}", field=path)
        return load(self.target(), value, path)

    def encode(self, value: "Record") -> dict:
        return dump(value)


# ─────────────────────────────────────────────────────────────────────────────
# Field table
# ─────────────────────────────────────────────────────────────────────────────
@dataclass(frozen=True)
class Field:
    """One entry of a record's field-to-wire-name table.

    Attributes:
        attr: Python attribute name on the record
        wire: JSON member name
        converter: Fragment converter
        ignore: Skip this field in both directions
    """
    attr: str
    wire: str
    converter: Converter = field(default_factory=Raw)
    ignore: bool = False


@dataclass
class Record:
    """Base class for every type the codec reads and writes.

    Subclasses are dataclasses that declare ``FIELDS``. The index from wire
    name to field is built once, when the subclass is defined.
    """
    FIELDS: ClassVar[Tuple[Field, ...]] = ()
    _wire_index: ClassVar[Dict[str, Field]] = {}

    _additional: Dict[str, Any] = field(default_factory=dict, init=False, repr=False)
    # Wire names of known fields that arrived as an explicit JSON null
    _nulls: Set[str] = field(default_factory=set, init=False, repr=False, compare=False)

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        index: Dict[str, Field] = {}
        for f in cls.FIELDS:
            if f.ignore:
                continue
            if f.wire in index:
                raise TypeError(f"{cls.__name__}: duplicate wire name {f.wire!r}")
            index[f.wire] = f
        cls._wire_index = index

    @classmethod
    def wire_names(cls) -> Tuple[str, ...]:
        """Return the wire names this type decodes as known fields."""
        return tuple(cls._wire_index)

    @classmethod
    def from_dict(cls: Type[R], members: Dict[str, Any]) -> R:
        """Build a record from an already-parsed JSON object."""
        return load(cls(), members)

    def to_dict(self) -> Dict[str, Any]:
        """Return the JSON object for this record (known fields plus leftovers)."""
        return dump(self)


# ─────────────────────────────────────────────────────────────────────────────
# Object-level conversion
# ─────────────────────────────────────────────────────────────────────────────
def load(target: R, members: Dict[str, Any], path: str = "") -> R:
    """Populate ``target`` in place from a parsed JSON object.

    The record's previous state is discarded: known fields absent from
    ``members`` end up unset, and whatever is left replaces the record's
    leftover members.

    Raises:
        ParseError: If a known member has the wrong JSON type
    """
    remaining = dict(members)
    nulls: Set[str] = set()
    for f in type(target).FIELDS:
        if f.ignore:
            continue
        if f.wire not in remaining:
            setattr(target, f.attr, None)
            continue
        fragment = remaining.pop(f.wire)
        if fragment is None:
            nulls.add(f.wire)
            setattr(target, f.attr, None)
            continue
        field_path = f"{path}.{f.wire}" if path else f.wire
        setattr(target, f.attr, f.converter.decode(fragment, field_path))

    if remaining:
        logger.debug("%s: kept %d unknown member(s): %s", type(target).__name__, len(remaining), list(remaining))
    target._additional = remaining
    target._nulls = nulls
    return target


def dump(record: Record) -> Dict[str, Any]:
    """Return the JSON object for ``record``.

    Leftover members are emitted first and then overlaid by known fields, so a
    known field always wins over a leftover member of the same name. A known
    field that was decoded from an explicit ``null`` and is still unset is
    written back as ``null``.
    """
    out = dict(record._additional)
    for f in type(record).FIELDS:
        if f.ignore:
            continue
        out.pop(f.wire, None)
        value = getattr(record, f.attr)
        if value is not None:
            out[f.wire] = f.converter.encode(value)
        elif f.wire in record._nulls:
            out[f.wire] = None
    return out


def parse_object(data: Union[bytes, bytearray, str]) -> Dict[str, Any]:
    """Parse raw JSON that must be a single object.

    Raises:
        ParseError: If ``data`` is not well-formed JSON or not an object
    """
    if isinstance(data, (bytes, bytearray)):
        try:
            data = data.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise ParseError(f"payload is not UTF-8: {exc}", body=_preview(data)) from exc
    try:
        parsed = json.loads(data)
    except (TypeError, ValueError) as exc:
        raise ParseError(f"malformed JSON: {exc}", body=_preview(data)) from exc
    if not isinstance(parsed, dict):
        raise ParseError(f"expected JSON object, got {json_type(parsed)}", body=_preview(data))
    return parsed


def decode(data: Union[bytes, bytearray, str], target: R) -> R:
    """Decode a JSON document into ``target`` and return it.

    Args:
        data: Raw JSON (bytes or str) holding one object
        target: Record to populate (normally freshly constructed)

    Returns:
        ``target``, populated

    Raises:
        ParseError: Malformed JSON, or a known field of the wrong type
    """
    return load(target, parse_object(data))


def encode(record: Record) -> bytes:
    """Encode ``record`` as a UTF-8 JSON document."""
    return json.dumps(dump(record), ensure_ascii=False).encode("utf-8")


# ─────────────────────────────────────────────────────────────────────────────
# Timestamps
# ─────────────────────────────────────────────────────────────────────────────
def parse_timestamp(value: str, path: str = "") -> datetime:
    """Parse an RFC 3339 date-time; a value without a zone is taken as UTC.

    Raises:
        ParseError: If ``value`` is not an RFC 3339 date-time
    """
    text = value.strip()
    if text[-1:] in ("Z", "z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError as exc:
        raise ParseError(f"invalid RFC 3339 timestamp {value!r}", field=path or None) from exc
    if parsed.tzinfo is None:
        logger.debug("Timestamp %r has no zone designator, assuming UTC", value)
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def format_timestamp(value: datetime) -> str:
    """Render a datetime as RFC 3339, using ``Z`` for UTC."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    text = value.isoformat()
    if text.endswith("+00:00"):
        text = text[:-6] + "Z"
    return text


# ─────────────────────────────────────────────────────────────────────────────
# Helpers
# ─────────────────────────────────────────────────────────────────────────────
def json_type(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "array"
    if isinstance(value, dict):
        return "object"
    return type(value).__name__


def _preview(data: Any) -> Optional[str]:
    if data is None:
        return None
    if isinstance(data, (bytes, bytearray)):
        data = data.decode("utf-8", errors="replace")
    text = str(data)
    return text if len(text) <= _BODY_PREVIEW else text[:_BODY_PREVIEW] + "..."
