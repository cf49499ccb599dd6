"""
Command Line Entry Point
Compile simplified element requests (JSON) into a document tree.
"""

import argparse
import sys
from typing import Sequence

from returns.pipeline import is_successful

from .compiler import StyleCompiler
from .core import configure_logging, create_container, get_logger, get_settings, safe_json_dumps
from .core.json import JSONParseError, extract_json
from .paths import get_property_metadata
from .tree import MAX_TREE_DEPTH, validate_tree


logger = get_logger(__name__)


def _parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="stylebridge", description=__doc__.strip().splitlines()[1])
    commands = parser.add_subparsers(dest="command", required=True)

    compile_cmd = commands.add_parser("compile", help="Compile a JSON request (or list of requests)")
    compile_cmd.add_argument("source", nargs="?", default="-", help="Request file, or - for stdin")
    compile_cmd.add_argument("--indent", type=int, default=2)
    compile_cmd.add_argument("--strict", action="store_true", help="Fail on unknown property names")

    describe_cmd = commands.add_parser("describe", help="Show how a simplified property is stored")
    describe_cmd.add_argument("name")
    describe_cmd.add_argument("--element", default=None, help="Simplified element type")

    validate_cmd = commands.add_parser("validate", help="Check a stored element tree (JSON)")
    validate_cmd.add_argument("source", nargs="?", default="-", help="Tree file, or - for stdin")
    validate_cmd.add_argument("--max-depth", type=int, default=MAX_TREE_DEPTH)
    return parser


def _read(source: str) -> str:
    if source == "-":
        return sys.stdin.read()
    with open(source, encoding="utf-8") as handle:
        return handle.read()


def _compile(args: argparse.Namespace) -> int:
    settings = get_settings()
    if args.strict:
        settings = settings.model_copy(update={"strict_unknown_properties": True})
    compiler = create_container(settings).get(StyleCompiler)

    try:
        text = _read(args.source)
    except OSError as e:
        logger.error("request_unreadable", source=args.source, error=str(e))
        print(f"error: cannot read {args.source}: {e}", file=sys.stderr)
        return 2

    result = compiler.compile_json(text)
    if not is_successful(result):
        error = result.failure()
        print(safe_json_dumps(error.to_dict(), indent=args.indent), file=sys.stderr)
        return 1

    document = result.unwrap()
    for warning in document.warnings:
        print(f"warning: {warning.code}: {warning.message}", file=sys.stderr)
    print(safe_json_dumps(document.tree, indent=args.indent))
    return 0


def _describe(args: argparse.Namespace) -> int:
    metadata = get_property_metadata(args.name, args.element)
    print(safe_json_dumps(metadata, indent=2))
    return 0 if metadata["type"] != "unknown" else 1


def _validate(args: argparse.Namespace) -> int:
    try:
        tree = extract_json(_read(args.source), repair=False)
    except OSError as e:
        print(f"error: cannot read {args.source}: {e}", file=sys.stderr)
        return 2
    except JSONParseError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2

    report = validate_tree(tree, max_depth=args.max_depth)
    print(safe_json_dumps(report.to_dict(), indent=2))
    return 0 if report.is_valid else 1


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point."""
    args = _parser().parse_args(argv)
    settings = get_settings()
    configure_logging(settings.log_level, settings.json_logs)

    if args.command == "compile":
        return _compile(args)
    if args.command == "validate":
        return _validate(args)
    return _describe(args)


if __name__ == "__main__":
    sys.exit(main())
