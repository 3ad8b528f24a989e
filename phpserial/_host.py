"""Host boundary: turn arbitrary Python objects into the closed value model.

The core encoder only knows None, bool, int, float, str, list and dict.
Everything else is normalized here before it crosses into the core:

  - Enum member      → its .value (converted again)
  - numbers.Integral → int,  numbers.Real → float
  - bytes/bytearray  → str (UTF-8, undecodable bytes replaced)
  - tuple, other Sequences → list
  - Mapping          → dict, keys coerced to int or str
  - dataclass        → dict of fields in declaration order
  - plain instance   → dict of its attributes (vars())
  - functions, classes, modules and anything unrecognized → None

Attributes whose names start with "_" are treated the way non-enumerable
properties are treated elsewhere: they are skipped unless
include_non_enumerable is set.  Reference cycles are not detected; a
cyclic structure recurses until RecursionError.
"""

from __future__ import annotations

import dataclasses
import enum
import numbers
import types
from collections.abc import Mapping, Sequence
from typing import Any, Dict, List, Union

Key = Union[int, str]

# Handles that have a __dict__ but are not data.
_OPAQUE_TYPES = (
    type,
    types.ModuleType,
    types.FunctionType,
    types.BuiltinFunctionType,
    types.MethodType,
)


def _to_key(key: Any) -> Key:
    # Enum first: str- and int-mixin members would pass the checks below.
    if isinstance(key, enum.Enum):
        return _to_key(key.value)
    # bool before int (same subclass trap as the encoder)
    if isinstance(key, bool):
        return int(key)
    if isinstance(key, int):
        return int(key)
    if isinstance(key, str):
        return str.__str__(key)
    return str(key)


def _public(name: str, include_non_enumerable: bool) -> bool:
    return include_non_enumerable or not name.startswith("_")


def _object_fields(obj: Any, include_non_enumerable: bool) -> Dict[Key, Any]:
    if dataclasses.is_dataclass(obj):
        return {
            f.name: getattr(obj, f.name)
            for f in dataclasses.fields(obj)
            if _public(f.name, include_non_enumerable)
        }
    return {
        name: value
        for name, value in vars(obj).items()
        if _public(name, include_non_enumerable)
    }


def to_value(obj: Any, include_non_enumerable: bool = False) -> Any:
    """Convert `obj` into a tree of None/bool/int/float/str/list/dict."""
    if obj is None or isinstance(obj, bool):
        return obj

    # Before str: a str-mixin member is a str whose __str__ is the member name.
    if isinstance(obj, enum.Enum):
        return to_value(obj.value, include_non_enumerable)

    # str subclasses may override __str__ or __format__; keep only the text.
    if isinstance(obj, str):
        return str.__str__(obj)

    # int and float subclasses collapse to the plain type.
    if isinstance(obj, numbers.Integral):
        return int(obj)
    if isinstance(obj, numbers.Real):
        return float(obj)

    if isinstance(obj, (bytes, bytearray)):
        return bytes(obj).decode("utf-8", errors="replace")

    if isinstance(obj, Mapping):
        return {
            _to_key(k): to_value(v, include_non_enumerable)
            for k, v in obj.items()
        }

    if isinstance(obj, Sequence):
        result: List[Any] = [to_value(item, include_non_enumerable) for item in obj]
        return result

    if isinstance(obj, _OPAQUE_TYPES) or callable(obj):
        return None

    if dataclasses.is_dataclass(obj) or hasattr(obj, "__dict__"):
        return {
            k: to_value(v, include_non_enumerable)
            for k, v in _object_fields(obj, include_non_enumerable).items()
        }

    # Unknown becomes null: sets, complex numbers, slotted C-level objects.
    return None
