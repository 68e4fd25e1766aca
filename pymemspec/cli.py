"""Command-line interface for PyMemSpec.
Provides two commands:
1. Build and check a harness: pymemspec check harness.py -f function_name
2. Write a default configuration: pymemspec init
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from pymemspec import __version__
from pymemspec.api import build_harness_file
from pymemspec.config import init_config, load_config
from pymemspec.core.errors import HarnessError, error_kind
from pymemspec.logging import LogLevel, configure_logging
from pymemspec.reporting.formatters import format_result

EXIT_OK = 0
EXIT_UNSAT = 1
EXIT_HARNESS_ERROR = 2

ERROR_TITLES = {
    "policy-violation": "Region policy violation",
    "empty-array": "Empty array",
    "use-before-resolve": "Value used before resolution",
    "collaborator": "Backend error",
    "type": "Type error",
    "limit": "Limit exceeded",
}


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with subcommands."""
    parser = argparse.ArgumentParser(
        prog="pymemspec",
        description="PyMemSpec - memory-layout specifications for symbolic execution harnesses",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Build the harness defined by swap_spec(ctx) and check it
  pymemspec check harnesses.py -f swap_spec
  # Include postconditions in the consistency check
  pymemspec check harnesses.py -f swap_spec --post
  # JSON report
  pymemspec check harnesses.py -f swap_spec --format json
  # Write pymemspec.toml with default settings
  pymemspec init
        """,
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"PyMemSpec {__version__}",
    )
    subparsers = parser.add_subparsers(dest="command", help="Command to run")
    check_parser = subparsers.add_parser(
        "check",
        help="Build a harness and check its constraints",
        description="Run a harness function and check that its constraints are consistent",
    )
    check_parser.add_argument(
        "file",
        type=str,
        help="Python file defining the harness function",
    )
    check_parser.add_argument(
        "-f",
        "--function",
        type=str,
        required=True,
        help="Harness function name; it receives the HarnessContext",
    )
    check_parser.add_argument(
        "--format",
        type=str,
        choices=["text", "json"],
        default=None,
        help="Output format (default: from config, else text)",
    )
    check_parser.add_argument(
        "-o",
        "--output",
        type=str,
        help="Output file path (default: stdout)",
    )
    check_parser.add_argument(
        "--post",
        action="store_true",
        help="Include postconditions in the check",
    )
    check_parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Configuration file (default: search upwards from the harness file)",
    )
    check_parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log every construction step",
    )
    init_parser = subparsers.add_parser(
        "init",
        help="Write a default pymemspec.toml",
    )
    init_parser.add_argument(
        "directory",
        type=str,
        nargs="?",
        default=".",
        help="Directory to create the config in (default: current)",
    )
    return parser


def cmd_check(args) -> int:
    """Build a harness file and report it."""
    path = Path(args.file)
    if not path.exists():
        print(f"Error: File not found: {path}", file=sys.stderr)
        return EXIT_HARNESS_ERROR
    config_path = Path(args.config) if args.config else None
    config = load_config(config_path, start_dir=path.parent)
    level = LogLevel.DEBUG if (args.verbose or config.output.verbose) else LogLevel.NORMAL
    if config.output.quiet and not args.verbose:
        level = LogLevel.QUIET
    logger = configure_logging(level=level, color=config.output.color)
    try:
        result = build_harness_file(path, args.function, config=config)
        check = result.check(include_postconditions=args.post)
    except HarnessError as e:
        title = ERROR_TITLES.get(error_kind(e), "Harness error")
        logger.error(f"{title}: {e}")
        return EXIT_HARNESS_ERROR
    except (ImportError, AttributeError, SyntaxError) as e:
        logger.error(f"Cannot load harness: {e}")
        return EXIT_HARNESS_ERROR
    except Exception as e:
        logger.error(f"Harness failed: {type(e).__name__}: {e}")
        return EXIT_HARNESS_ERROR
    fmt = args.format or config.output.format
    kwargs = {}
    if fmt == "text":
        kwargs = {
            "show_facts": config.output.show_facts,
            "show_constraints": config.output.show_constraints,
        }
    output = format_result(result, fmt, check, **kwargs)
    if args.output:
        Path(args.output).write_text(output, encoding="utf-8")
        logger.success(f"Report written to {args.output}")
    else:
        print(output)
    return EXIT_OK if check.is_sat else EXIT_UNSAT


def cmd_init(args) -> int:
    """Write a default configuration file."""
    try:
        path = init_config(Path(args.directory))
    except FileExistsError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    print(f"Created {path}")
    return EXIT_OK


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)
    if args.command == "check":
        return cmd_check(args)
    if args.command == "init":
        return cmd_init(args)
    parser.print_help()
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
