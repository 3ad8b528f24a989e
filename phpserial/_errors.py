"""Error codes and the exception raised by the parser.

Serialization never fails: values the codec does not understand encode as
null.  Parsing fails with a single exception type whose offset points at
the position where the grammar stopped matching.
"""

from __future__ import annotations

from typing import Optional

# ── Error codes ──────────────────────────────────────────────
ERR_PARSE: str = "ERR_PARSE"  # input does not match the grammar
ERR_UTF8: str = "ERR_UTF8"    # bytes input is not valid UTF-8
ERR_TYPE: str = "ERR_TYPE"    # unserialize() given something that is not text


class ParseError(Exception):
    """Raised when input does not match a grammar production.

    `.offset` is where matching failed.  Nested failures are reported at
    their absolute position, so a caller parsing a container sees where
    inside it things went wrong.  parse_at() reports a character index
    into the str it was given; unserialize() converts it to a UTF-8 byte
    offset, and for undecodable bytes input it is the first bad byte.
    `.total_length` is the byte length of the whole input; unserialize()
    fills it in, and it stays None for raw parse_at() failures.
    """

    def __init__(self, offset: int, total_length: Optional[int] = None,
                 code: str = ERR_PARSE, msg: str = "") -> None:
        super().__init__(offset, total_length, code, msg)
        self.offset = offset
        self.total_length = total_length
        self.code = code
        self.msg = msg

    def __str__(self) -> str:
        if self.msg:
            return self.msg
        if self.total_length is None:
            return "Error at offset {}".format(self.offset)
        return "Error at offset {} of {} bytes".format(self.offset, self.total_length)
