from __future__ import annotations

import argparse
import sys
from typing import Any, Literal

from loguru import logger

from serpstream import __version__
from serpstream.errors import ExitCode, SearchError
from serpstream.output import Envelope, EnvelopeMeta, print_json

OutputMode = Literal["json", "plain", "text"]

# (flag, default, argparse kwargs); defaults are suppressed on subcommand parsers
# so a flag given before the subcommand is not overwritten by the subparser.
_GLOBAL_FLAGS: tuple[tuple[str, Any, dict[str, Any]], ...] = (
    ("--json", False, {"action": "store_true", "help": "Output machine-readable JSON"}),
    ("--pretty", False, {"action": "store_true", "help": "Indented JSON (implies --json)"}),
    ("--plain", False, {"action": "store_true", "help": "One result per line, for piping"}),
    ("--verbose", False, {"action": "store_true", "help": "Debug logging to stderr"}),
    ("--timeout", 10.0, {"type": float, "help": "Per-request timeout in seconds"}),
    ("--proxy", None, {"type": str, "help": "Proxy URL (http, https or socks5)"}),
    ("--insecure", False, {"action": "store_true", "help": "Skip TLS certificate checks"}),
)


def output_mode(args: argparse.Namespace) -> OutputMode:
    if getattr(args, "json", False) or getattr(args, "pretty", False):
        return "json"
    if getattr(args, "plain", False):
        return "plain"
    return "text"


def add_global_flags(parser: argparse.ArgumentParser, *, suppress_defaults: bool) -> None:
    for flag, default, kwargs in _GLOBAL_FLAGS:
        parser.add_argument(
            flag, default=argparse.SUPPRESS if suppress_defaults else default, **kwargs
        )


def configure_logging(args: argparse.Namespace) -> None:
    level = "DEBUG" if getattr(args, "verbose", False) else "WARNING"
    logger.remove()
    logger.add(sys.stderr, level=level, format="<level>{level:<7}</level> | {message}")
    logger.enable("serpstream")


def emit_envelope(
    args: argparse.Namespace,
    *,
    command: str,
    meta: EnvelopeMeta,
    data: Any = None,
    warnings: list[str] | None = None,
    error: SearchError | None = None,
) -> int:
    """Write the JSON envelope for `command` and return the process exit code."""
    envelope = Envelope(
        command=command,
        version=__version__,
        meta=meta,
        data=data,
        warnings=list(warnings or []),
        error=None if error is None else error.to_error_dict(),
    )
    print_json(envelope.to_dict(), pretty=bool(getattr(args, "pretty", False)))
    return ExitCode.OK if error is None else error.exit_code


def report_error(args: argparse.Namespace, error: SearchError) -> int:
    print(f"error: {error.message}", file=sys.stderr)
    if error.details and getattr(args, "verbose", False):
        print(f"details: {error.details}", file=sys.stderr)
    return error.exit_code
