#!/usr/bin/env python3
# tools/roundtrip_runner.py
#
# Seeded round-trip invariants for phpserial.
#
# This runner:
# - generates random value trees (null/bool/int/float/str/list/dict)
# - checks encode stability, decode(encode(v)) == v, full consumption
# - checks that truncating a valid encoding never decodes silently
#
# Exit code:
#   0 -> all checks passed
#   1 -> invariant violation

import os, sys, json, math, random
from typing import Any, Dict, List

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
sys.path.insert(0, ROOT)

from phpserial import ParseError, byte_length, is_serialized, parse_at, serialize, unserialize

SEED = int(os.environ.get("PHPSER_SEED", "1337"))
TRIALS = int(os.environ.get("PHPSER_TRIALS", "2000"))
MAX_GEN_DEPTH = int(os.environ.get("PHPSER_GEN_MAX_DEPTH", "5"))
MAX_KEYS = int(os.environ.get("PHPSER_GEN_MAX_KEYS", "6"))
MAX_LIST = int(os.environ.get("PHPSER_GEN_MAX_LIST", "6"))
MAX_STR = int(os.environ.get("PHPSER_GEN_MAX_STR", "24"))

random.seed(SEED)

def rand_text() -> str:
    # Mostly printable ASCII, with 2-, 3- and 4-byte characters mixed in,
    # plus the characters the grammar itself uses.
    out = []
    n = random.randint(0, MAX_STR)
    for _ in range(n):
        r = random.random()
        if r < 0.60:
            out.append(chr(random.randint(0x20, 0x7E)))
        elif r < 0.70:
            out.append(random.choice('";:{}'))
        elif r < 0.80:
            out.append(chr(random.randint(0x80, 0x7FF)))
        elif r < 0.93:
            out.append(chr(random.randint(0x0800, 0xD7FF)))  # exclude surrogates
        else:
            out.append(chr(random.randint(0x10000, 0x10FFFF)))
    return "".join(out)

def rand_key() -> Any:
    if random.random() < 0.3:
        return random.randint(-1000, 1000)
    k = rand_text()
    # a leading NUL reads back as a visibility marker
    return k.lstrip("\x00")

def rand_scalar() -> Any:
    r = random.random()
    if r < 0.10:
        return None
    if r < 0.20:
        return random.random() < 0.5
    if r < 0.45:
        return random.randint(-(2**63), 2**63 - 1)
    if r < 0.60:
        return random.choice([0.0, -1.5, 1e21, 1e-7, math.inf, -math.inf,
                              random.uniform(-1e6, 1e6)])
    return rand_text()

def gen_value(depth: int) -> Any:
    if depth >= MAX_GEN_DEPTH:
        return rand_scalar()
    r = random.random()
    if r < 0.30:
        d: Dict[Any, Any] = {}
        for _ in range(random.randint(0, MAX_KEYS)):
            d[rand_key()] = gen_value(depth + 1)
        return d
    if r < 0.55:
        return [gen_value(depth + 1) for _ in range(random.randint(0, MAX_LIST))]
    return rand_scalar()

def fail(label: str, context: Dict[str, Any]) -> int:
    print("INVARIANT FAIL:", label)
    print("CTX:", json.dumps(context, ensure_ascii=False, default=repr)[:2000])
    return 1

def main() -> int:
    for t in range(TRIALS):
        v = gen_value(0)

        # (1) encode stability
        s1 = serialize(v)
        s2 = serialize(v)
        if s1 != s2:
            return fail("encode stability", {"trial": t})

        # (2) round trip (objects never collapse into lists)
        if unserialize(s1) != v:
            return fail("round trip", {"trial": t, "text": s1})

        # (3) the whole encoding is consumed
        if parse_at(s1)[1] != len(s1) or not is_serialized(s1):
            return fail("full consumption", {"trial": t, "text": s1})

        # (4) byte length agrees with the UTF-8 codec
        if byte_length(s1) != len(s1.encode("utf-8")):
            return fail("byte length", {"trial": t, "text": s1})

        # (5) a truncated container never parses
        if s1.endswith("}"):
            cut = random.randint(1, len(s1) - 1)
            try:
                unserialize(s1[:cut])
            except ParseError:
                pass
            else:
                return fail("truncation accepted", {"trial": t, "text": s1, "cut": cut})

    print(f"OK: invariants passed for TRIALS={TRIALS} seed={SEED}")
    return 0

if __name__ == "__main__":
    raise SystemExit(main())
