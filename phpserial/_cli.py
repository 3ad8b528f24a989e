"""phpserial command-line interface.

Usage:
    echo '{"a":"b"}' | phpserial encode [--assoc]
    echo 'a:1:{i:0;s:1:"x";}' | phpserial decode [--indent N]
    phpserial check --input dump.txt
    phpserial version
"""

from __future__ import annotations

import argparse
import json
import sys
from typing import List, Optional

from . import (
    ParseError,
    __version__,
    is_serialized,
    serialize,
    unserialize,
)
from ._json_adapter import json_to_value, value_to_json


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="phpserial",
        description="Convert between JSON and PHP serialize() text",
    )
    sub = parser.add_subparsers(dest="command")

    # ── encode ──
    enc_p = sub.add_parser("encode", help="JSON in, serialized text out")
    enc_p.add_argument("--assoc", action="store_true",
                       help="Write JSON objects as associative arrays, not stdClass")
    enc_p.add_argument("--input", "-i", metavar="FILE",
                       help="Read JSON from FILE instead of stdin")

    # ── decode ──
    dec_p = sub.add_parser("decode", help="Serialized text in, JSON out")
    dec_p.add_argument("--input", "-i", metavar="FILE",
                       help="Read serialized text from FILE instead of stdin")
    dec_p.add_argument("--indent", type=int, default=None, metavar="N",
                       help="Pretty-print the JSON output")

    # ── check ──
    chk_p = sub.add_parser("check", help="Exit 0 if input is one well-formed value")
    chk_p.add_argument("--input", "-i", metavar="FILE",
                       help="Read serialized text from FILE instead of stdin")

    # ── version ──
    sub.add_parser("version", help="Print version and exit")

    return parser


def _read_input(filepath: Optional[str]) -> bytes:
    """Read bytes from a file or stdin."""
    if filepath:
        with open(filepath, "rb") as f:
            return f.read()
    if sys.stdin.isatty():
        print("phpserial: reading from stdin (Ctrl-D to end)...", file=sys.stderr)
    return sys.stdin.buffer.read()


def _strip_newline(raw: bytes) -> bytes:
    # Shell pipelines append one; serialized text never ends with one.
    if raw.endswith(b"\r\n"):
        return raw[:-2]
    if raw.endswith(b"\n"):
        return raw[:-1]
    return raw


def _cmd_encode(args: argparse.Namespace) -> None:
    value = json_to_value(_read_input(args.input))
    print(serialize(value, assoc=args.assoc))


def _cmd_decode(args: argparse.Namespace) -> None:
    raw = _strip_newline(_read_input(args.input))
    print(value_to_json(unserialize(raw), indent=args.indent))


def _cmd_check(args: argparse.Namespace) -> int:
    raw = _strip_newline(_read_input(args.input))
    return 0 if is_serialized(raw) else 1


def main(argv: Optional[List[str]] = None) -> None:
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    if args.command == "version":
        print(f"phpserial {__version__}")
        return

    try:
        if args.command == "encode":
            _cmd_encode(args)
        elif args.command == "decode":
            _cmd_decode(args)
        elif args.command == "check":
            sys.exit(_cmd_check(args))
    except ParseError as e:
        print(f"phpserial: error [{e.code}]: {e}", file=sys.stderr)
        sys.exit(2)
    except json.JSONDecodeError as e:
        print(f"phpserial: JSON parse error: {e}", file=sys.stderr)
        sys.exit(2)


if __name__ == "__main__":
    main()
