"""JSON bridge for the command-line tool.

JSON → value:
    object  → dict   (key order kept, duplicate keys: last wins)
    array   → list
    string  → str
    integer → int    (json.loads already keeps integral tokens as int)
    float   → float  (NaN / Infinity / -Infinity tokens accepted)
    true/false/null → bool / None

value → JSON:
    int dict keys become strings (JSON keys are always strings); NaN and
    the infinities are written as the non-standard JSON constants, the
    same way json.dumps does by default.
"""

from __future__ import annotations

import json
from typing import Any, Optional, Union

from ._errors import ERR_UTF8, ParseError


def json_to_value(raw: Union[bytes, str]) -> Any:
    """Parse JSON text into the value model."""
    if isinstance(raw, bytes):
        try:
            raw = raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise ParseError(e.start, len(raw), ERR_UTF8, "invalid UTF-8 in JSON input")
    return json.loads(raw)


def value_to_json(val: Any, indent: Optional[int] = None) -> str:
    """Render a decoded value as JSON text."""
    return json.dumps(_jsonable(val), ensure_ascii=False, indent=indent)


def _jsonable(val: Any) -> Any:
    if isinstance(val, dict):
        return {str(k): _jsonable(v) for k, v in val.items()}
    if isinstance(val, list):
        return [_jsonable(v) for v in val]
    return val
