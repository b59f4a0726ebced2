"""Command line utilities for Hermes."""

from __future__ import annotations

import argparse
import subprocess
import sys
from typing import Sequence

from .config import ParseOptions, QueryStringOptions, parse_size
from .encoding import RawPayload
from .exceptions import HTTPError
from .forms import decode_form
from .metadata import PROJECT_NAME, __version__
from .querystring import strict_parse_query
from .serialization import json_encode

QUALITY_COMMANDS: tuple[tuple[str, ...], ...] = (
    ("ruff", "check"),
    ("ty", "check", "src"),
    ("pytest",),
)


def main(argv: Sequence[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    return args.func(args)


def quality() -> int:
    """Run the project quality checks in sequence."""

    for command in QUALITY_COMMANDS:
        print(f"$ {' '.join(command)}", flush=True)
        result = subprocess.run(command, check=False)
        if result.returncode != 0:
            return result.returncode
    return 0


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog=PROJECT_NAME, description="Decode url-encoded form bodies")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    sub = parser.add_subparsers(dest="command", required=True)

    decode = sub.add_parser("decode", help="Decode a url-encoded body and print it as JSON")
    decode.add_argument("body", nargs="?", help="Body to decode, read from stdin when omitted")
    decode.add_argument("--depth", type=int, default=5, help="Maximum nesting depth to expand")
    decode.add_argument("--no-allow-dots", dest="allow_dots", action="store_false", help="Keep dotted keys literal")
    decode.add_argument("--array-limit", type=int, default=20, help="Largest index that still builds a list")
    decode.add_argument("--strict", action="store_true", help="Reject list indices above the array limit")
    decode.add_argument("--raw", action="store_true", help="Print the raw body next to the parsed result")
    decode.add_argument("--null-empty", action="store_true", help="Convert empty string values to null")
    decode.add_argument("--limit", default="56kb", help="Maximum body size, e.g. 56kb or 1mb")
    decode.set_defaults(func=_cmd_decode)

    check = sub.add_parser("quality", help="Run ruff, ty and pytest")
    check.set_defaults(func=lambda _args: quality())
    return parser


def _cmd_decode(args: argparse.Namespace) -> int:
    if args.body is None:
        content = sys.stdin.buffer.read().rstrip(b"\r\n")
    else:
        content = args.body.encode()
    options = ParseOptions(
        query_string_options=QueryStringOptions(
            depth=args.depth,
            allow_dots=args.allow_dots,
            array_limit=args.array_limit,
        ),
        parser_override=strict_parse_query if args.strict else None,
        return_raw_body=args.raw,
        convert_empty_strings_to_null=args.null_empty,
        limit=parse_size(args.limit),
    )
    try:
        result = decode_form(RawPayload(content=content), options)
    except HTTPError as exc:
        print(f"{exc.status} {exc.message}", file=sys.stderr)
        return 1
    print(json_encode(result).decode())
    return 0


__all__ = ["QUALITY_COMMANDS", "main", "quality"]
