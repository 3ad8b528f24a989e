"""Grammar tags, headers and numeric bounds for the serialize format.

The format is the one produced by PHP's serialize(): every value starts
with a single tag character, scalars end with ';', containers wrap their
key/value elements in '{...}'.
"""

from __future__ import annotations

# ── Tag characters ───────────────────────────────────────────
TAG_NULL: str = "N"
TAG_BOOL: str = "b"
TAG_INT: str = "i"
TAG_DOUBLE: str = "d"
TAG_STRING: str = "s"
TAG_ARRAY: str = "a"
TAG_OBJECT: str = "O"

# Characters that may legally end a value inside a container.
VALUE_TERMINATORS: str = ";}"

# Generic-object header used when a dict is not sent as an associative
# array.  "stdClass" is 8 bytes, hence the 8.
STDCLASS_HDR: str = 'O:8:"stdClass":'
ARRAY_HDR: str = "a:"

# Special double payloads.
DOUBLE_NAN: str = "NAN"
DOUBLE_INF: str = "INF"

# ── Signed 64-bit integer range ──────────────────────────────
# Python ints are arbitrary-precision.  Anything outside this range has
# no i: encoding and goes out through the d: path instead.
INT64_MIN: int = -(2**63)
INT64_MAX: int = 2**63 - 1

# Private and protected property names are prefixed with a marker
# wrapped in NUL bytes: "\0Class\0prop" or "\0*\0prop".
VISIBILITY_SENTINEL: str = "\x00"
