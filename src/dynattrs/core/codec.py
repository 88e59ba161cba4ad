"""
Blob codec: mapping of attribute name ➜ value  <->  JSON text.

Keys are canonicalized to ``str`` on both sides. ``None`` and blank text
decode to ``None`` ("no dynamic attributes yet").

JSON-native values are stored as-is. Dates, times, datetimes, timedeltas,
UUIDs, Decimals, tuples and sets are wrapped in a ``{"__dynattrs_type__": ...,
"value": ...}`` object so decoding restores the original type. Any other
value is refused.
"""

from __future__ import annotations

import datetime as dt
import decimal
import uuid
from typing import Any, Callable, Dict, Mapping

from pydantic_core import PydanticSerializationError, from_json, to_json

from ..errors import BlobDecodeError, BlobEncodeError

TYPE_TAG = "__dynattrs_type__"

_RESTORE: Dict[str, Callable[[Any], Any]] = {
    "datetime": dt.datetime.fromisoformat,
    "date": dt.date.fromisoformat,
    "time": dt.time.fromisoformat,
    "timedelta": lambda v: dt.timedelta(days=v[0], seconds=v[1], microseconds=v[2]),
    "uuid": uuid.UUID,
    "decimal": decimal.Decimal,
    "tuple": lambda v: tuple(_restore(i) for i in v),
    "set": lambda v: {_restore(i) for i in v},
    "frozenset": lambda v: frozenset(_restore(i) for i in v),
    "dict": lambda v: {k: _restore(i) for k, i in v},
}


def _tag(kind: str, value: Any) -> Dict[str, Any]:
    return {TYPE_TAG: kind, "value": value}


def _prepare(value: Any) -> Any:
    """Turn ``value`` into JSON-native data, tagging what JSON can't hold."""
    if value is None or isinstance(value, (bool, int, float, str)):
        return value
    if isinstance(value, dict):
        items = {str(k): _prepare(v) for k, v in value.items()}
        if TYPE_TAG in items:
            # would be mistaken for a tag on the way back
            return _tag("dict", [[k, v] for k, v in items.items()])
        return items
    if isinstance(value, list):
        return [_prepare(v) for v in value]
    if isinstance(value, tuple):
        return _tag("tuple", [_prepare(v) for v in value])
    if isinstance(value, frozenset):
        return _tag("frozenset", [_prepare(v) for v in value])
    if isinstance(value, set):
        return _tag("set", [_prepare(v) for v in value])
    # datetime is a date subclass
    if isinstance(value, dt.datetime):
        return _tag("datetime", value.isoformat())
    if isinstance(value, dt.date):
        return _tag("date", value.isoformat())
    if isinstance(value, dt.time):
        return _tag("time", value.isoformat())
    if isinstance(value, dt.timedelta):
        return _tag("timedelta", [value.days, value.seconds, value.microseconds])
    if isinstance(value, uuid.UUID):
        return _tag("uuid", str(value))
    if isinstance(value, decimal.Decimal):
        return _tag("decimal", str(value))
    raise BlobEncodeError(f"cannot store {type(value).__name__} in dynamic attributes")


def _restore(value: Any) -> Any:
    if isinstance(value, list):
        return [_restore(v) for v in value]
    if not isinstance(value, dict):
        return value
    if set(value) == {TYPE_TAG, "value"}:
        kind = value[TYPE_TAG]
        if kind not in _RESTORE:
            raise BlobDecodeError(f"unknown dynamic attribute type tag {kind!r}")
        try:
            return _RESTORE[kind](value["value"])
        except (TypeError, ValueError, ArithmeticError) as exc:
            raise BlobDecodeError(f"malformed {kind} value in dynamic attributes blob: {exc}") from exc
    return {k: _restore(v) for k, v in value.items()}


def encode(mapping: Mapping[Any, Any]) -> str:
    """Serialize ``mapping`` to JSON text."""
    data = {str(k): _prepare(v) for k, v in mapping.items()}
    try:
        return to_json(data).decode("utf-8")
    except PydanticSerializationError as exc:
        raise BlobEncodeError(f"cannot serialize dynamic attributes: {exc}") from exc


def decode(text: str | bytes | None) -> Dict[str, Any] | None:
    """Parse stored blob text; malformed input is fatal."""
    if text is None:
        return None
    try:
        if isinstance(text, bytes):
            text = text.decode("utf-8")
        if not text.strip():
            return None
        data = from_json(text)
    except ValueError as exc:  # UnicodeDecodeError included
        raise BlobDecodeError(f"malformed dynamic attributes blob: {exc}") from exc
    if not isinstance(data, dict):
        raise BlobDecodeError(
            f"dynamic attributes blob must hold an object, got {type(data).__name__}"
        )
    return {str(k): _restore(v) for k, v in data.items()}
