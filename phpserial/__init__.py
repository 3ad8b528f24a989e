"""phpserial — read and write PHP serialize() text without PHP.

Encode Python values into the format PHP's unserialize() accepts, and
decode what PHP's serialize() produces.

Quick start:
    >>> from phpserial import serialize, unserialize
    >>> serialize({"name": "Zoë", "tags": ["a", "b"]})
    'O:8:"stdClass":2:{s:4:"name";s:4:"Zoë";s:4:"tags";a:2:{i:0;s:1:"a";i:1;s:1:"b";}}'
    >>> unserialize('a:2:{s:1:"a";i:1;s:1:"b";i:2;}')
    {'a': 1, 'b': 2}

Arrays whose keys run 0, 1, 2, ... decode to lists; every other array and
every object decodes to a dict.  Floats and ints stay distinct on both
sides: 1.0 encodes as d:1.0; and i:1; decodes to int.
"""

from __future__ import annotations

from typing import Any, Union

from ._constants import INT64_MAX, INT64_MIN
from ._core import byte_length, encode_value, parse_at
from ._errors import ERR_PARSE, ERR_TYPE, ERR_UTF8, ParseError
from ._host import to_value

__version__ = "1.0.0"

__all__ = [
    # Public API functions
    "serialize",
    "unserialize",
    "parse_at",
    "byte_length",
    "is_serialized",
    "to_value",
    # Exception
    "ParseError",
    # Error codes
    "ERR_PARSE",
    "ERR_TYPE",
    "ERR_UTF8",
    # Bounds
    "INT64_MIN",
    "INT64_MAX",
]


# ── Core API ──────────────────────────────────────────────────

def serialize(value: Any, assoc: bool = False,
              include_non_enumerable: bool = False) -> str:
    """Serialize `value` into text PHP's unserialize() can read.

    dicts and objects encode as stdClass objects unless `assoc` is set,
    in which case they encode as associative arrays.  Object attributes
    starting with "_" are left out unless `include_non_enumerable` is set.

    Never raises for unsupported types: anything the codec cannot
    represent (functions, modules, sets, ...) is written as null.
    """
    return encode_value(to_value(value, include_non_enumerable), assoc)


def _as_text(text: Any) -> str:
    if isinstance(text, str):
        return text
    if isinstance(text, (bytes, bytearray)):
        try:
            return bytes(text).decode("utf-8")
        except UnicodeDecodeError as e:
            raise ParseError(e.start, len(text), ERR_UTF8, "invalid UTF-8 at byte {}".format(e.start))
    raise ParseError(0, None, ERR_TYPE, "Unexpected type {}".format(type(text).__name__))


def unserialize(text: Union[str, bytes]) -> Any:
    """Decode serialize-format text into Python values.

    Raises ParseError when the input is malformed; `.offset` and
    `.total_length` are both UTF-8 byte counts.  Input after the first
    complete value is ignored.
    """
    text = _as_text(text)
    try:
        value, _consumed = parse_at(text)
    except ParseError as e:
        e.offset = byte_length(text[:e.offset])
        e.total_length = byte_length(text)
        raise
    return value


def is_serialized(text: Union[str, bytes]) -> bool:
    """True when `text` is exactly one well-formed value with nothing trailing."""
    try:
        text = _as_text(text)
        _value, consumed = parse_at(text)
    except ParseError:
        return False
    return consumed == len(text)

