"""Serialize-format core: byte length, value encoder, recursive-descent parser.

The value model is the closed set of native types:

    None   → N;
    bool   → b:0; / b:1;
    int    → i:<n>;            (signed 64-bit only, see below)
    float  → d:<repr>; / d:NAN; / d:INF; / d:-INF;
    str    → s:<bytes>:"...";  (length is the UTF-8 byte count)
    list   → a:<n>:{i:0;<v0>i:1;<v1>...}
    dict   → O:8:"stdClass":<n>:{<k><v>...}  or  a:<n>:{...} with assoc=True

Two quirks of the grammar drive most of the code below.  String lengths
are counted in bytes, not characters, so the parser walks a payload
character by character until the running byte total hits the declared
count.  And arrays carry no list/dict distinction: a parsed array only
comes back as a list when its keys are exactly 0, 1, 2, ... in order.

Nesting depth is bounded only by the interpreter's recursion limit.
"""

from __future__ import annotations

import math
import re
from typing import Any, Dict, List, Tuple

from ._constants import (
    ARRAY_HDR,
    DOUBLE_INF,
    DOUBLE_NAN,
    INT64_MAX,
    INT64_MIN,
    STDCLASS_HDR,
    TAG_ARRAY,
    TAG_BOOL,
    TAG_DOUBLE,
    TAG_INT,
    TAG_NULL,
    TAG_OBJECT,
    TAG_STRING,
    VALUE_TERMINATORS,
    VISIBILITY_SENTINEL,
)
from ._errors import ParseError


# ── Byte length (UTF-8) ──────────────────────────────────────
# A Python str holds code points, so astral characters are one item and
# count 4.  A str can still carry an explicit surrogate pair (e.g. text
# decoded with "surrogatepass"); the pair is one character on the wire,
# so the low half only adds the one byte the high half is missing.

def _utf8_width(cp: int) -> int:
    if cp <= 0x7F:
        return 1
    if cp <= 0x7FF:
        return 2
    if cp <= 0xFFFF:
        return 3
    return 4


def _is_high_surrogate(cp: int) -> bool:
    return 0xD800 <= cp <= 0xDBFF


def _is_low_surrogate(cp: int) -> bool:
    return 0xDC00 <= cp <= 0xDFFF


def byte_length(text: str) -> int:
    """Return the number of bytes `text` occupies as UTF-8."""
    if text.isascii():
        return len(text)
    total = 0
    prev = 0
    for ch in text:
        cp = ord(ch)
        if _is_low_surrogate(cp) and _is_high_surrogate(prev):
            total += 1
            prev = 0
            continue
        total += _utf8_width(cp)
        prev = cp
    return total


# ── Encode ───────────────────────────────────────────────────

def _encode_double(val: float) -> str:
    if math.isnan(val):
        return "d:{};".format(DOUBLE_NAN)
    if math.isinf(val):
        return "d:{}{};".format("" if val > 0 else "-", DOUBLE_INF)
    return "d:{};".format(repr(val))


def _encode_int(val: int) -> str:
    # Outside int64 there is no i: form the reader could hold, so the
    # number travels as a double.
    if val < INT64_MIN or val > INT64_MAX:
        try:
            return _encode_double(float(val))
        except OverflowError:
            return _encode_double(math.inf if val > 0 else -math.inf)
    return "i:{};".format(val)


def _encode_string(val: str) -> str:
    return 's:{}:"'.format(byte_length(val)) + str.__str__(val) + '";'


def _encode_key(key: Any) -> str:
    # bool before int: True is an int in Python but not a valid key kind.
    if isinstance(key, bool):
        return _encode_int(int(key))
    if isinstance(key, int):
        return _encode_int(key)
    if isinstance(key, str):
        return _encode_string(key)
    return _encode_string(str(key))


def encode_value(val: Any, assoc: bool = False) -> str:
    """Encode a value from the closed model into serialize-format text.

    `assoc` selects the associative-array header for dicts instead of the
    generic stdClass object header.  Anything outside the model encodes
    as null; callers wanting richer conversion go through to_value() first.
    """
    if val is None:
        return "N;"

    # ── bool must be checked before int ──────────────────────
    if isinstance(val, bool):
        return "b:{};".format(1 if val else 0)

    if isinstance(val, int):
        return _encode_int(val)

    if isinstance(val, float):
        return _encode_double(val)

    if isinstance(val, str):
        return _encode_string(val)

    if isinstance(val, list):
        parts: List[str] = ["a:{}:{{".format(len(val))]
        for index, item in enumerate(val):
            parts.append(_encode_int(index))
            parts.append(encode_value(item, assoc))
        parts.append("}")
        return "".join(parts)

    if isinstance(val, dict):
        header = ARRAY_HDR if assoc else STDCLASS_HDR
        parts = ["{}{}:{{".format(header, len(val))]
        for k, v in val.items():
            parts.append(_encode_key(k))
            parts.append(encode_value(v, assoc))
        parts.append("}")
        return "".join(parts)

    # Unknown becomes null.
    return "N;"


# ── Decode ───────────────────────────────────────────────────
# Positions are absolute indices into the input text.  Every failure
# raises ParseError at the absolute position where matching stopped, so
# a failure deep inside nested containers already carries the offset a
# top-level caller needs.

_BOOL_RE = re.compile(r"b:([01]);")
_INT_RE = re.compile(r"i:(-?[0-9]+);")
_INF_RE = re.compile(r"d:(-)?INF;")
# PHP itself writes exponents as "E+25", Python as "e+25", so a signed
# exponent is accepted alongside the bare and negative forms.
_DOUBLE_RE = re.compile(r"d:(-?(?:[0-9]+\.?[0-9]*|[0-9]*\.?[0-9]+)(?:[eE][+-]?[0-9]+)?);")
_STRING_HDR_RE = re.compile(r's:([0-9]+):"')
_CONTAINER_HDR_RE = re.compile(r'(a|O:[0-9]+:".+?"):([0-9]+):\{')
_VISIBILITY_RE = re.compile(r"^{0}.+{0}".format(re.escape(VISIBILITY_SENTINEL)))


def _strip_visibility(key: Any) -> Any:
    """Drop the "\\0Class\\0" / "\\0*\\0" prefix of private/protected names."""
    if isinstance(key, str) and key.startswith(VISIBILITY_SENTINEL):
        return _VISIBILITY_RE.sub("", key, count=1)
    return key


def _is_key(val: Any) -> bool:
    return isinstance(val, str) or (isinstance(val, int) and not isinstance(val, bool))


def _to_int(digits: str, pos: int) -> int:
    # int() refuses digit runs past sys.get_int_max_str_digits().
    try:
        return int(digits)
    except ValueError:
        raise ParseError(pos)


def _decode_string(text: str, pos: int) -> Tuple[str, int]:
    m = _STRING_HDR_RE.match(text, pos)
    if m is None:
        raise ParseError(pos)
    declared = _to_int(m.group(1), pos)
    start = off = m.end()

    # Fast path: an all-ASCII payload is exactly `declared` characters.
    candidate = text[start:start + declared]
    if len(candidate) == declared and candidate.isascii():
        count = declared
        off = start + declared
    else:
        count = 0
        end = len(text)
        while count < declared and off < end:
            cp = ord(text[off])
            if off > start and _is_low_surrogate(cp) and _is_high_surrogate(ord(text[off - 1])):
                count += 1
            else:
                count += _utf8_width(cp)
            off += 1

    if count != declared:
        raise ParseError(off)
    if text[off:off + 1] != '"':
        raise ParseError(off)
    value = text[start:off]
    off += 1
    # Absorb the trailing delimiter when present.
    if text[off:off + 1] in (";", "}"):
        off += 1
    return value, off


def _decode_container(text: str, pos: int) -> Tuple[Any, int]:
    m = _CONTAINER_HDR_RE.match(text, pos)
    if m is None:
        raise ParseError(pos)
    elements = _to_int(m.group(2), pos) * 2
    off = m.end()

    # Fill both shapes until a key breaks the 0, 1, 2, ... run; objects
    # never surface as lists.
    is_list = m.group(1) == TAG_ARRAY
    items: List[Any] = []
    mapping: Dict[Any, Any] = {}
    key: Any = None

    for index in range(elements):
        item_start = off
        item, off = _decode_one(text, off)
        # Each element must end on ';' or '}'.
        if text[off - 1] not in VALUE_TERMINATORS:
            raise ParseError(off)

        if index % 2 == 0:
            if not _is_key(item):
                raise ParseError(item_start)
            key = item
            continue

        if is_list and isinstance(key, int) and key == len(items):
            items.append(item)
        else:
            is_list = False
        mapping[_strip_visibility(key)] = item

    if text[off:off + 1] != "}":
        raise ParseError(off)
    return (items if is_list else mapping), off + 1


def _decode_one(text: str, pos: int) -> Tuple[Any, int]:
    """Decode one value starting at `pos`.  Returns (value, end position)."""
    if text.startswith(TAG_NULL + ";", pos):
        return None, pos + 2

    tag = text[pos:pos + 1]

    if tag == TAG_BOOL:
        m = _BOOL_RE.match(text, pos)
        if m:
            return m.group(1) == "1", m.end()

    elif tag == TAG_INT:
        m = _INT_RE.match(text, pos)
        if m:
            return _to_int(m.group(1), pos), m.end()

    elif tag == TAG_DOUBLE:
        if text.startswith("d:{};".format(DOUBLE_NAN), pos):
            return math.nan, pos + 6
        m = _INF_RE.match(text, pos)
        if m:
            return (-math.inf if m.group(1) else math.inf), m.end()
        m = _DOUBLE_RE.match(text, pos)
        if m:
            return float(m.group(1)), m.end()

    elif tag == TAG_STRING:
        return _decode_string(text, pos)

    elif tag in (TAG_ARRAY, TAG_OBJECT):
        return _decode_container(text, pos)

    raise ParseError(pos)


def parse_at(text: str, offset: int = 0) -> Tuple[Any, int]:
    """Parse one value at `offset`.  Returns (value, characters consumed).

    Trailing input after the value is left alone; compare the consumed
    count against the remaining length to detect it.
    """
    value, end = _decode_one(text, offset)
    return value, end - offset
