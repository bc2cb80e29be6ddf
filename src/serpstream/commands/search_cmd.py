from __future__ import annotations

import argparse
import asyncio
import sys
import time
from collections.abc import Callable

from serpstream.api import search_detailed_stream
from serpstream.cli_support import OutputMode, emit_envelope, output_mode, report_error
from serpstream.errors import ExitCode, SearchError
from serpstream.output import EnvelopeMeta
from serpstream.search.source import SEARCH_URL
from serpstream.search.types import SearchOptions, SearchResult
from serpstream.timeutil import parse_seconds


def register(
    subparsers: argparse._SubParsersAction, *, parents: list[argparse.ArgumentParser]
) -> None:
    p = subparsers.add_parser("search", parents=parents, help="Search the web")
    p.set_defaults(_handler=run)

    p.add_argument("query", type=str, help="Search query")
    p.add_argument("-n", "--num-results", type=int, default=10, help="Number of results")
    p.add_argument("--lang", type=str, default="en", help="Interface language (hl)")
    p.add_argument("--region", type=str, default="", help="Country code (gl), e.g. us")
    p.add_argument(
        "--safe",
        type=str,
        choices=["active", "off"],
        default="active",
        help="Safe search mode (default: active)",
    )
    p.add_argument("--start", type=int, default=0, help="Offset of the first result")
    p.add_argument(
        "--interval",
        type=str,
        default="0",
        help="Pause between page requests (e.g. 500ms, 2s)",
    )
    p.add_argument("--user-agent", type=str, default="", help="User-Agent header")
    p.add_argument("--unique", action="store_true", help="Drop repeated URLs")
    p.add_argument(
        "--detect-blocks",
        action="store_true",
        help="Fail when a consent or bot-check page is served instead of results",
    )
    p.add_argument(
        "--advanced",
        action="store_true",
        help="Include title and description in --plain and JSON output",
    )


def options_from_args(args: argparse.Namespace) -> SearchOptions:
    try:
        interval = parse_seconds(str(args.interval))
    except ValueError as e:
        raise SearchError(
            code="invalid_usage",
            message=str(e),
            exit_code=ExitCode.INVALID_USAGE,
        ) from e

    return SearchOptions(
        language=str(args.lang),
        region=str(args.region or ""),
        safe_search=str(args.safe),
        start_offset=int(args.start),
        request_interval=interval,
        request_timeout=float(args.timeout),
        user_agent=str(args.user_agent or ""),
        proxy=args.proxy,
        verify_ssl=not bool(args.insecure),
        deduplicate=bool(args.unique),
        detect_blocks=bool(args.detect_blocks),
    )


def run(*, args: argparse.Namespace, start: float, warnings: list[str]) -> int:
    options = options_from_args(args)
    count = int(args.num_results)
    advanced = bool(args.advanced)
    mode = output_mode(args)

    results: list[SearchResult] = []
    error: SearchError | None = None
    echo = _echo_for(mode, advanced=advanced)

    def collect(result: SearchResult) -> None:
        results.append(result)
        if echo is not None:
            echo(len(results), result)

    try:
        asyncio.run(_drain(str(args.query), count, options, collect))
    except SearchError as e:
        if e.code in {"invalid_query", "invalid_options"}:
            raise
        error = e

    if error is not None and results:
        _warn(warnings, f"search stopped early; {len(results)} results kept")
    elif error is None and 0 < len(results) < count:
        _warn(warnings, f"source exhausted after {len(results)} of {count} results")

    if mode != "json":
        if error is not None:
            return report_error(args, error)
        if not results:
            print("no results", file=sys.stderr)
            return ExitCode.NOT_FOUND
        return ExitCode.OK

    if error is None and not results:
        error = SearchError(code="not_found", message="no results", exit_code=ExitCode.NOT_FOUND)
    return emit_envelope(
        args,
        command="search",
        meta=EnvelopeMeta(
            duration_ms=int((time.time() - start) * 1000),
            results=len(results),
            endpoint=SEARCH_URL,
        ),
        data={"results": [r.to_dict() if advanced else r.url for r in results]},
        warnings=warnings,
        error=error,
    )


def _warn(warnings: list[str], message: str) -> None:
    if message not in warnings:
        warnings.append(message)


async def _drain(
    query: str, count: int, options: SearchOptions, sink: Callable[[SearchResult], None]
) -> None:
    async with search_detailed_stream(query, count, options) as stream:
        async for result in stream:
            sink(result)


def _echo_for(
    mode: OutputMode, *, advanced: bool
) -> Callable[[int, SearchResult], None] | None:
    if mode == "json":
        return None

    if mode == "plain":

        def echo_plain(idx: int, r: SearchResult) -> None:
            if advanced:
                print("\t".join([r.url, r.title, r.description]), flush=True)
            else:
                print(r.url, flush=True)

        return echo_plain

    def echo_text(idx: int, r: SearchResult) -> None:
        print(f"{idx}. {r.title or r.url}")
        print(f"   {r.url}")
        if r.description:
            print(f"   {r.description}")
        sys.stdout.flush()

    return echo_text
