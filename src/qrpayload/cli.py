"""
Command-line interface for QRPayload.

Provides subcommands for generating a payload string from fields and for
detecting the type of a raw payload string. This module is the entry point
referenced in pyproject.toml as ``qrpayload.cli:main``.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Any

import structlog

from .detector import detect_data_type
from .generators import UnsupportedPayloadTypeError, generate_data
from .models import DetectionResult, PayloadType

logger = structlog.get_logger(__name__)


# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

def configure_logging(verbose: bool = False) -> None:
    """
    Send library and CLI log output to stderr.

    stdout is reserved for payload output so that it can be piped into a QR
    renderer. ``verbose`` lowers the threshold from WARNING to DEBUG.
    """
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        stream=sys.stderr,
        level=level,
        format="%(levelname)s %(name)s: %(message)s",
    )
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(colors=False),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.PrintLoggerFactory(sys.stderr),
        cache_logger_on_first_use=False,
    )


# ---------------------------------------------------------------------------
# ANSI color helpers
# ---------------------------------------------------------------------------

def _supports_color() -> bool:
    """Return True if stdout appears to support ANSI color codes."""
    if not hasattr(sys.stdout, "isatty"):
        return False
    return sys.stdout.isatty()


def _color(text: str, code: str) -> str:
    """Wrap *text* in ANSI escape codes if the terminal supports it."""
    if not _supports_color():
        return text
    return f"\033[{code}m{text}\033[0m"


def _green(text: str) -> str:
    return _color(text, "32")


def _bold(text: str) -> str:
    return _color(text, "1")


def _dim(text: str) -> str:
    return _color(text, "2")


# ---------------------------------------------------------------------------
# Output formatting helpers
# ---------------------------------------------------------------------------

def _print_header(text: str) -> None:
    """Print a section header with visual separation."""
    print()
    print(_bold(f"  {text}"))
    print(_dim(f"  {'-' * len(text)}"))


def _print_detection(result: DetectionResult) -> None:
    """Print a detection result as a labelled field list."""
    _print_header(f"Detected: {result.type.value}")
    if not result.parsed_data:
        print(f"  {_dim('No fields extracted.')}")
        return
    for key, value in result.parsed_data.items():
        shown = value if isinstance(value, str) else json.dumps(value)
        print(f"  {key + ':':<16s} {_green(shown)}")


# ---------------------------------------------------------------------------
# Subcommand handlers
# ---------------------------------------------------------------------------

def _parse_fields(raw: list[str]) -> dict[str, str]:
    """Parse 'KEY=VALUE' strings into a field mapping."""
    fields: dict[str, str] = {}
    for item in raw:
        if "=" not in item:
            raise ValueError(f"field must be in KEY=VALUE format, got: {item!r}")
        key, value = item.split("=", 1)
        fields[key.strip()] = value
    return fields


def _handle_generate(args: argparse.Namespace) -> int:
    """Handle the 'generate' subcommand."""
    data: dict[str, Any] = {}
    if args.json:
        loaded = json.loads(args.json)
        if not isinstance(loaded, dict):
            print("Error: --json must be a JSON object")
            return 1
        data.update(loaded)
    try:
        data.update(_parse_fields(args.field))
    except ValueError as exc:
        print(f"Error: {exc}")
        return 1

    payload = generate_data(args.type, data)
    if not payload:
        logger.warning("Empty payload, required fields missing", payload_type=args.type)
        return 1

    logger.debug("Generated payload", payload_type=args.type, length=len(payload))
    print(payload)
    return 0


def _handle_detect(args: argparse.Namespace) -> int:
    """Handle the 'detect' subcommand."""
    raw = sys.stdin.read() if args.input == "-" else args.input
    if args.input == "-":
        raw = raw.removesuffix("\n").removesuffix("\r")

    result = detect_data_type(raw)
    logger.debug("Detected payload", payload_type=result.type.value, fields=len(result.parsed_data))

    if args.pretty:
        _print_detection(result)
    else:
        print(result.model_dump_json(by_alias=True, indent=2))
    return 0


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------

def _build_parser() -> argparse.ArgumentParser:
    """Build and return the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="qrpayload",
        description="QRPayload: build and detect QR code payload strings.",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {_get_version()}",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        default=False,
        help="Log debug output to stderr",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # --- generate ---
    generate_parser = subparsers.add_parser(
        "generate",
        help="Generate a payload string from fields",
    )
    generate_parser.add_argument(
        "type",
        choices=[t.value for t in PayloadType],
        help="Payload type to generate",
    )
    generate_parser.add_argument(
        "--field",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Payload field (repeatable, e.g. 'ssid=MyNet' or 'firstName=Jane')",
    )
    generate_parser.add_argument(
        "--json",
        default=None,
        metavar="OBJECT",
        help="Payload fields as a JSON object; --field values override it",
    )

    # --- detect ---
    detect_parser = subparsers.add_parser(
        "detect",
        help="Detect the type of a payload string and extract its fields",
    )
    detect_parser.add_argument(
        "input",
        help="The payload string, or '-' to read it from stdin",
    )
    detect_parser.add_argument(
        "--pretty",
        action="store_true",
        default=False,
        help="Print a readable summary instead of JSON",
    )

    return parser


def _get_version() -> str:
    """Return the package version string."""
    from . import __version__
    return __version__


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

def main(argv: list[str] | None = None) -> None:
    """
    Main entry point for the QRPayload CLI.

    Parses arguments, dispatches to the appropriate subcommand handler,
    and exits with the appropriate code.

    Args:
        argv: Optional argument list for testing. Defaults to sys.argv[1:].
    """
    parser = _build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    if not args.command:
        parser.print_help()
        sys.exit(0)

    handlers = {
        "generate": _handle_generate,
        "detect": _handle_detect,
    }

    handler = handlers.get(args.command)
    if handler is None:
        parser.print_help()
        sys.exit(1)

    try:
        exit_code = handler(args)
        sys.exit(exit_code)
    except (UnsupportedPayloadTypeError, json.JSONDecodeError) as exc:
        print(f"\nError: {exc}")
        sys.exit(1)
    except KeyboardInterrupt:
        print("\nInterrupted.")
        sys.exit(130)


if __name__ == "__main__":
    main()
