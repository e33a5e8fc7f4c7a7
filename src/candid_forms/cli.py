"""Command-line access to Candid argument building and validation."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from candid_forms.interface import CandidInterface
from candid_forms.literals import compose_args
from candid_forms.resolver import TypeResolver


def _read_source(path: Path) -> str:
    with open(path, encoding="utf-8") as f:
        return f.read()


def cmd_methods(args: argparse.Namespace) -> int:
    interface = CandidInterface.from_source(_read_source(args.file))
    for method in interface.methods:
        print(method.signature())
    return 0


def cmd_resolve(args: argparse.Namespace) -> int:
    resolver = TypeResolver(_read_source(args.file))
    print(resolver.resolve_type(args.type, strict=args.strict))
    return 0


def cmd_example(args: argparse.Namespace) -> int:
    form = CandidInterface.from_source(_read_source(args.file)).form(args.method)
    print(form.example())
    return 0


def cmd_validate(args: argparse.Namespace) -> int:
    form = CandidInterface.from_source(_read_source(args.file)).form(args.method)
    json_text = sys.stdin.read() if args.json == "-" else args.json
    result = form.validate(json_text, strict_variants=args.strict_variants)
    if result.ok:
        print("OK")
        return 0
    for error in result.errors:
        print(error)
    return 2


def cmd_build(args: argparse.Namespace) -> int:
    form = CandidInterface.from_source(_read_source(args.file)).form(args.method)
    print(json.dumps(form.build(args.values), indent=2 if args.pretty else None, allow_nan=False))
    return 0


def cmd_compose(args: argparse.Namespace) -> int:
    print(compose_args(args.values))
    return 0


def build_arg_parser() -> argparse.ArgumentParser:
    arg_parser = argparse.ArgumentParser(
        prog="candid-forms",
        description="Build, validate and preview Candid method arguments",
    )
    arg_parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    sub = arg_parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("methods", help="List the methods of a .did file")
    p.add_argument("file", type=Path, help="Path to the .did file")
    p.set_defaults(func=cmd_methods)

    p = sub.add_parser("resolve", help="Expand aliases in a type expression")
    p.add_argument("file", type=Path, help="Path to the .did file")
    p.add_argument("type", help="Type expression to resolve")
    p.add_argument("--strict", action="store_true", help="Fail on unknown type names")
    p.set_defaults(func=cmd_resolve)

    p = sub.add_parser("example", help="Print an example JSON argument for a method")
    p.add_argument("file", type=Path, help="Path to the .did file")
    p.add_argument("method", help="Method name")
    p.set_defaults(func=cmd_example)

    p = sub.add_parser("validate", help="Check JSON arguments for a method")
    p.add_argument("file", type=Path, help="Path to the .did file")
    p.add_argument("method", help="Method name")
    p.add_argument("json", nargs="?", default="-", help="JSON text (default: read stdin)")
    p.add_argument(
        "--strict-variants",
        action="store_true",
        help="Check variant case names and payloads",
    )
    p.set_defaults(func=cmd_validate)

    p = sub.add_parser("build", help="Convert raw values into canonical JSON arguments")
    p.add_argument("file", type=Path, help="Path to the .did file")
    p.add_argument("method", help="Method name")
    p.add_argument("values", nargs="*", help="One raw value per argument")
    p.add_argument("--pretty", action="store_true", help="Indent the output")
    p.set_defaults(func=cmd_build)

    p = sub.add_parser("compose", help="Join raw Candid literals into an argument tuple")
    p.add_argument("values", nargs="*", help="Candid value literals")
    p.set_defaults(func=cmd_compose)

    return arg_parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = build_arg_parser().parse_args(argv)
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    if getattr(args, "file", None) is not None and not args.file.exists():
        print(f"Error: File not found: {args.file}", file=sys.stderr)
        return 1
    try:
        return args.func(args)
    except (ValueError, SyntaxError, KeyError) as e:
        # CandidError is a ValueError
        message = e.args[0] if isinstance(e, KeyError) else e
        print(f"Error: {message}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
