from __future__ import annotations

import asyncio
import random
from collections.abc import AsyncIterator, Callable
from contextlib import aclosing
from typing import TypeVar

from serpstream.errors import ExitCode, SearchError
from serpstream.search.paginator import paginate
from serpstream.search.source import HttpPageSource, PageSource
from serpstream.search.stream import ResultStream
from serpstream.search.types import SearchOptions, SearchResult

T = TypeVar("T")


def search(term: str, count: int = 10, options: SearchOptions | None = None) -> list[str]:
    """Return up to ``count`` result URLs.

    On failure the :class:`SearchError` is raised with ``partial_results``
    holding the URLs collected before it.
    """
    return asyncio.run(asearch(term, count, options))


def search_detailed(
    term: str, count: int = 10, options: SearchOptions | None = None
) -> list[SearchResult]:
    return asyncio.run(asearch_detailed(term, count, options))


async def asearch(
    term: str,
    count: int = 10,
    options: SearchOptions | None = None,
    *,
    source: PageSource | None = None,
) -> list[str]:
    return await _collect(search_stream(term, count, options, source=source))


async def asearch_detailed(
    term: str,
    count: int = 10,
    options: SearchOptions | None = None,
    *,
    source: PageSource | None = None,
) -> list[SearchResult]:
    return await _collect(search_detailed_stream(term, count, options, source=source))


def search_stream(
    term: str,
    count: int = 10,
    options: SearchOptions | None = None,
    *,
    cancel: asyncio.Event | None = None,
    source: PageSource | None = None,
    rng: random.Random | None = None,
) -> ResultStream[str]:
    return _stream(term, count, options, lambda r: r.url, cancel=cancel, source=source, rng=rng)


def search_detailed_stream(
    term: str,
    count: int = 10,
    options: SearchOptions | None = None,
    *,
    cancel: asyncio.Event | None = None,
    source: PageSource | None = None,
    rng: random.Random | None = None,
) -> ResultStream[SearchResult]:
    return _stream(term, count, options, lambda r: r, cancel=cancel, source=source, rng=rng)


def _stream(
    term: str,
    count: int,
    options: SearchOptions | None,
    project: Callable[[SearchResult], T],
    *,
    cancel: asyncio.Event | None,
    source: PageSource | None,
    rng: random.Random | None,
) -> ResultStream[T]:
    if not (term or "").strip():
        raise SearchError(
            code="invalid_query",
            message="search term must not be empty",
            exit_code=ExitCode.INVALID_USAGE,
        )
    resolved = options or SearchOptions()

    async def results() -> AsyncIterator[SearchResult]:
        # a source passed in by the caller stays open; one we build is ours to close
        page_source = source or HttpPageSource.from_options(resolved)
        try:
            pages = paginate(page_source, term, count, resolved, rng=rng, cancel=cancel)
            async with aclosing(pages):
                async for result in pages:
                    yield result
        finally:
            if source is None:
                await page_source.aclose()

    return ResultStream(results, project=project, cancel=cancel)


async def _collect(stream: ResultStream[T]) -> list[T]:
    items: list[T] = []
    async with stream:
        try:
            async for item in stream:
                items.append(item)
        except SearchError as exc:
            exc.partial_results = items
            raise
    return items
