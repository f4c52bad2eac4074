#!/usr/bin/env python3
"""Unified command-line interface for ecoreceipt.

Usage:
    ecoreceipt parse <file> [--json] [--legacy-score]
    ecoreceipt scan <image> [--json] [--legacy-score]
    ecoreceipt serve [--host] [--port]
"""

import argparse
import logging
from collections.abc import Callable, Sequence

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8000


def _coerce_exit_code(code: object) -> int:
    if code is None:
        return 0
    if isinstance(code, int):
        return code
    return 1


def _run_command(command: Callable[[argparse.Namespace], None], args: argparse.Namespace) -> int:
    """
    Run a command handler that may call sys.exit().

    This keeps process termination centralized in this module's entrypoint.
    """
    try:
        command(args)
    except SystemExit as exc:
        return _coerce_exit_code(exc.code)
    return 0


def _add_output_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--json", action="store_true", help="Print the stored record as JSON instead of a summary")
    parser.add_argument(
        "--legacy-score",
        action="store_true",
        help="Use the unweighted keyword-tier eco scorer",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ecoreceipt",
        description="Receipt parsing and eco scoring",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Commands:
  parse <file>               Parse saved OCR text or a Google Vision JSON response
  scan <image>               OCR a receipt image with Google Vision, then parse it
  serve [--host] [--port]    Start the parse API server

Environment:
  GOOGLE_VISION_API_KEY      API key used by scan
  ECORECEIPT_HOME            Directory holding config/receipt_rules.toml (default: cwd)
  ECORECEIPT_LOG_LEVEL       DEBUG, INFO, WARNING or ERROR (default: INFO)
""",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    parse_parser = subparsers.add_parser("parse", help="Parse saved OCR output")
    parse_parser.add_argument("file", help="Path to a .txt OCR dump or a Vision .json response")
    _add_output_options(parse_parser)

    scan_parser = subparsers.add_parser("scan", help="Scan a receipt image")
    scan_parser.add_argument("image", help="Path to receipt image")
    _add_output_options(scan_parser)

    serve_parser = subparsers.add_parser("serve", help="Start the parse API server")
    serve_parser.add_argument("--host", default=DEFAULT_HOST, help=f"Host to bind to (default: {DEFAULT_HOST})")
    serve_parser.add_argument("--port", type=int, default=DEFAULT_PORT, help=f"Port to bind to (default: {DEFAULT_PORT})")

    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Main entry point for the CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    if args.verbose:
        from ecoreceipt.runtime import set_log_level

        set_log_level(logging.DEBUG)

    if args.command == "parse":
        from ecoreceipt.cli.receipt import cmd_parse

        return _run_command(cmd_parse, args)
    elif args.command == "scan":
        from ecoreceipt.cli.receipt import cmd_scan

        return _run_command(cmd_scan, args)
    elif args.command == "serve":
        from ecoreceipt.cli.receipt import cmd_serve

        return _run_command(cmd_serve, args)

    return 1


if __name__ == "__main__":
    raise SystemExit(main())
