from __future__ import annotations

import asyncio
import random
from collections.abc import AsyncIterator
from dataclasses import dataclass, field

from loguru import logger

from serpstream.errors import ExitCode, SearchError
from serpstream.search.parser import (
    DEFAULT_SELECTORS,
    Selectors,
    looks_blocked,
    parse_document,
    parse_page,
)
from serpstream.search.source import PageRequest, PageSource
from serpstream.search.types import PAGE_SIZE, SearchOptions, SearchResult
from serpstream.useragent import random_user_agent


@dataclass(slots=True)
class SearchSession:
    offset: int
    emitted: int = 0
    pages: int = 0
    seen: set[str] = field(default_factory=set)


async def paginate(
    source: PageSource,
    term: str,
    count: int,
    options: SearchOptions,
    *,
    selectors: Selectors = DEFAULT_SELECTORS,
    rng: random.Random | None = None,
    cancel: asyncio.Event | None = None,
) -> AsyncIterator[SearchResult]:
    """Fetch pages until ``count`` results were yielded or a page adds nothing new.

    Pages are requested strictly in increasing offset order, PAGE_SIZE apart.
    Errors raised by the source or the parser end the iteration.
    """
    rng = rng or random.Random()
    session = SearchSession(offset=options.start_offset)

    while session.emitted < count:
        if cancel is not None and cancel.is_set():
            logger.debug("Search cancelled before fetching start={}", session.offset)
            return

        request = PageRequest(
            term=term,
            count=count,
            offset=session.offset,
            language=options.language,
            safe_search=options.effective_safe_search,
            region=options.region,
            user_agent=options.user_agent or random_user_agent(rng),
        )
        html = await source.fetch_page(request)
        session.pages += 1

        document = parse_document(html)
        candidates = parse_page(document, selectors)
        if not candidates and options.detect_blocks:
            marker = looks_blocked(document)
            if marker:
                raise SearchError(
                    code="blocked",
                    message="search endpoint served a block or consent page",
                    exit_code=ExitCode.BLOCKED,
                    details={"offset": session.offset, "pattern": marker},
                )

        accepted = 0
        for result in candidates:
            if options.deduplicate:
                if result.url in session.seen:
                    continue
                session.seen.add(result.url)
            yield result
            accepted += 1
            session.emitted += 1
            if session.emitted >= count:
                break

        logger.debug(
            "Page start={} gave {} candidates, {} accepted",
            session.offset,
            len(candidates),
            accepted,
        )
        if accepted == 0:
            logger.info("No new results at start={}; stopping", session.offset)
            break
        if session.emitted >= count:
            break

        session.offset += PAGE_SIZE
        if options.request_interval > 0 and not await _pace(options.request_interval, cancel):
            logger.debug("Search cancelled while pacing")
            return

    logger.info("Search finished: {} results from {} pages", session.emitted, session.pages)


async def _pace(seconds: float, cancel: asyncio.Event | None) -> bool:
    """Sleep between pages; False when ``cancel`` fired first."""
    if cancel is None:
        await asyncio.sleep(seconds)
        return True
    try:
        await asyncio.wait_for(cancel.wait(), timeout=seconds)
    except TimeoutError:
        return True
    return False
