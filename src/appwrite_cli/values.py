"""Value kinds and a big-integer aware JSON codec for API responses.

Appwrite returns 64-bit identifiers and counters that do not fit in a
double. Python's :mod:`json` already decodes integers exactly, but the
renderer still needs to tell those values apart from ordinary numbers, so
:func:`decode_json` wraps every integer beyond the 53-bit safe range in
:class:`BigInteger`.

The renderer never inspects Python types directly; it asks :func:`kind_of`
for one of the four :class:`ValueKind` members and branches on that.
"""

from __future__ import annotations

import enum
import json
from typing import Any

MAX_SAFE_INTEGER = 2**53 - 1


class ValueKind(str, enum.Enum):
    """Closed set of shapes a decoded response value can take."""

    SCALAR = "scalar"
    BIG_INTEGER = "big_integer"
    RECORD = "record"
    LIST = "list"


class BigInteger(int):
    """An integer outside the range a float64 can represent exactly.

    Behaves like a normal :class:`int`; ``str()`` and JSON encoding yield the
    exact decimal digits.
    """

    def __repr__(self) -> str:
        return f"BigInteger({int.__repr__(self)})"

    # int subclasses inherit str() from repr(); keep the bare digits.
    def __str__(self) -> str:
        return int.__repr__(self)


def kind_of(value: Any) -> ValueKind:
    """Classify *value* into a :class:`ValueKind`.

    ``None``, strings, booleans, plain ints and floats are all scalars.
    """
    if isinstance(value, BigInteger):
        return ValueKind.BIG_INTEGER
    if isinstance(value, dict):
        return ValueKind.RECORD
    if isinstance(value, (list, tuple)):
        return ValueKind.LIST
    return ValueKind.SCALAR


def _parse_int(text: str) -> int:
    value = int(text)
    if abs(value) > MAX_SAFE_INTEGER:
        return BigInteger(value)
    return value


def decode_json(text: str | bytes) -> Any:
    """Decode a JSON document, wrapping unsafe integers in :class:`BigInteger`.

    Raises:
        json.JSONDecodeError: If *text* is not valid JSON.
    """
    return json.loads(text, parse_int=_parse_int)


def encode_json(data: Any, indent: int | None = 2) -> str:
    """Encode *data* as JSON text, keeping big integers exact."""
    return json.dumps(data, indent=indent, ensure_ascii=False, default=str)


def compact_json(data: Any) -> str:
    """Single-line JSON used for nested values inside table cells."""
    return json.dumps(data, separators=(",", ":"), ensure_ascii=False, default=str)


def format_scalar(value: Any) -> str:
    """Display text for a scalar value.

    ``None`` prints as ``null`` and booleans as ``true``/``false`` so the
    key/value listing reads the same as the JSON the server sent.
    """
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)
