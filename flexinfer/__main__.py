"""CLI entry point for flexinfer.

Reads a design tree from a JSON file and prints the annotated tree, layout
statistics, or the configuration variables that tune the detectors.
"""

import argparse
import json
import sys
from pathlib import Path

from dotenv import load_dotenv

from flexinfer.config import (
    get_environment,
    get_environment_info,
    get_log_level,
    list_environment_variables,
)
from flexinfer.core import get_logger, setup_logging
from flexinfer.layout import analyze_layout, doc_layout_parser, layout_parser
from flexinfer.schema import NodeSchema, export_json_schema

# Load environment variables from .env file
load_dotenv()

logger = get_logger("cli")


def _load_tree(path: Path) -> NodeSchema:
    data = json.loads(path.read_text(encoding="utf-8"))
    return NodeSchema.model_validate(data)


def _emit(text: str, output: Path | None) -> None:
    if output is None:
        print(text)
        return
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(text + "\n", encoding="utf-8")
    logger.info(f"Wrote {output}")


# =============================================================================
# Commands
# =============================================================================


def cmd_infer(args: argparse.Namespace) -> int:
    """Handle the infer command."""
    try:
        tree = _load_tree(args.file)
        parser = doc_layout_parser if args.doc else layout_parser
        result = parser(tree)
    except (OSError, ValueError) as e:
        logger.error(f"Layout inference failed: {e}")
        return 1

    _emit(result.model_dump_json(by_alias=True, exclude_none=True, indent=2), args.output)
    return 0


def cmd_analyze(args: argparse.Namespace) -> int:
    """Handle the analyze command."""
    try:
        stats = analyze_layout(_load_tree(args.file))
    except (OSError, ValueError) as e:
        logger.error(f"Layout analysis failed: {e}")
        return 1

    print(json.dumps(stats.to_dict(), indent=2))
    return 0


def cmd_env(args: argparse.Namespace) -> int:
    """List configuration variables with their current values."""
    variables = list_environment_variables(args.category)
    if not variables:
        logger.error(f"Unknown category: {args.category}")
        return 1

    current_category = None
    for var in variables:
        info = get_environment_info(var)
        if info.category != current_category:
            current_category = info.category
            print(f"\n[{current_category}]")
        print(f"  {info.name} = {get_environment(var)!r}")
        if info.description:
            print(f"      {info.description}")
    return 0


def cmd_schema(args: argparse.Namespace) -> int:
    """Print the JSON Schema of accepted design trees."""
    _emit(json.dumps(export_json_schema(), indent=2), args.output)
    return 0


# =============================================================================
# Entry Point
# =============================================================================


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="flexinfer",
        description="Infer flex layout from absolutely positioned design trees",
    )
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # infer command
    infer_parser = subparsers.add_parser(
        "infer",
        help="Annotate a design tree with inferred layout",
    )
    infer_parser.add_argument("file", type=Path, help="Design tree JSON file")
    infer_parser.add_argument(
        "--output",
        "-o",
        type=Path,
        help="Write the annotated tree here instead of stdout",
    )
    infer_parser.add_argument(
        "--doc",
        action="store_true",
        help="Treat the root as a Document whose children are pages",
    )
    infer_parser.set_defaults(func=cmd_infer)

    # analyze command
    analyze_parser = subparsers.add_parser(
        "analyze",
        help="Print layout statistics for a design tree",
    )
    analyze_parser.add_argument("file", type=Path, help="Design tree JSON file")
    analyze_parser.set_defaults(func=cmd_analyze)

    # env command
    env_parser = subparsers.add_parser(
        "env",
        help="List configuration environment variables",
    )
    env_parser.add_argument(
        "--category",
        "-c",
        help="Only show one category (e.g. split, strategy, logging)",
    )
    env_parser.set_defaults(func=cmd_env)

    # schema command
    schema_parser = subparsers.add_parser(
        "schema",
        help="Print the design tree JSON Schema",
    )
    schema_parser.add_argument(
        "--output",
        "-o",
        type=Path,
        help="Write the schema here instead of stdout",
    )
    schema_parser.set_defaults(func=cmd_schema)

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the CLI."""
    parser = build_parser()
    args = parser.parse_args(sys.argv[1:] if argv is None else argv)

    if not args.command:
        parser.print_help()
        return 1

    setup_logging(get_log_level())
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
