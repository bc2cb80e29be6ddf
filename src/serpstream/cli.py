from __future__ import annotations

import argparse
import sys
import time

from serpstream import __version__
from serpstream.cli_support import (
    add_global_flags,
    configure_logging,
    emit_envelope,
    output_mode,
    report_error,
)
from serpstream.commands import search_cmd
from serpstream.errors import ExitCode, SearchError
from serpstream.output import EnvelopeMeta


def build_parser() -> argparse.ArgumentParser:
    global_root = argparse.ArgumentParser(add_help=False)
    add_global_flags(global_root, suppress_defaults=False)

    global_sub = argparse.ArgumentParser(add_help=False)
    add_global_flags(global_sub, suppress_defaults=True)

    parser = argparse.ArgumentParser(prog="serpstream", parents=[global_root], add_help=True)
    parser.add_argument("--version", action="version", version=__version__)
    subparsers = parser.add_subparsers(dest="command", required=True)

    search_cmd.register(subparsers, parents=[global_sub])
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args)

    start = time.time()
    warnings: list[str] = []

    try:
        return int(args._handler(args=args, start=start, warnings=warnings))
    except SearchError as e:
        if output_mode(args) != "json":
            return report_error(args, e)
        return emit_envelope(
            args,
            command=str(args.command),
            meta=EnvelopeMeta(duration_ms=int((time.time() - start) * 1000)),
            warnings=warnings,
            error=e,
        )
    except KeyboardInterrupt:
        print("interrupted", file=sys.stderr)
        return ExitCode.RUNTIME_ERROR


if __name__ == "__main__":
    raise SystemExit(main())
