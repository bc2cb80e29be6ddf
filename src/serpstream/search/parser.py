from __future__ import annotations

import re
from dataclasses import dataclass

from bs4 import BeautifulSoup, Tag
from bs4.builder import ParserRejectedMarkup

from serpstream.errors import parse_error
from serpstream.search.redirect import decode_redirect_url
from serpstream.search.types import SearchResult


@dataclass(frozen=True, slots=True)
class Selectors:
    container: str = "div.ezO2md"
    title: str = "span.CVA68e"
    snippet: str = "span.FrIlee"


DEFAULT_SELECTORS = Selectors()

_BLOCK_PATTERNS = [
    re.compile(r"unusual traffic", re.IGNORECASE),
    re.compile(r"detected unusual", re.IGNORECASE),
    re.compile(r"captcha", re.IGNORECASE),
    re.compile(r"before you continue to google", re.IGNORECASE),
]


def parse_document(html: str) -> BeautifulSoup:
    try:
        return BeautifulSoup(html, "lxml")
    except ParserRejectedMarkup as exc:
        raise parse_error(f"could not parse search results page: {exc}") from exc


def parse_page(
    document: BeautifulSoup | Tag | str, selectors: Selectors = DEFAULT_SELECTORS
) -> list[SearchResult]:
    """Extract every result block of a page, in document order.

    Blocks without a usable link are dropped; the rest keep whatever title and
    snippet could be found.
    """
    root = parse_document(document) if isinstance(document, str) else document

    results: list[SearchResult] = []
    for container in root.select(selectors.container):
        result = extract_result(container, selectors)
        if not result.url:
            continue
        results.append(result)
    return results


def extract_result(container: Tag, selectors: Selectors = DEFAULT_SELECTORS) -> SearchResult:
    # find/select_one walk descendants depth-first, so nested sitelinks lose to
    # the primary link that precedes them
    anchor = container.find("a", href=True)
    url = ""
    if isinstance(anchor, Tag):
        url = decode_redirect_url(str(anchor.get("href") or "")) or ""

    return SearchResult(
        url=url,
        title=_text_of(container.select_one(selectors.title)),
        description=_text_of(container.select_one(selectors.snippet)),
    )


def looks_blocked(document: BeautifulSoup | Tag) -> str | None:
    """Return the marker that identifies a consent wall or bot check, if any."""
    for form in document.find_all("form", action=True):
        if "consent.google" in str(form.get("action")):
            return "consent_form"

    text = document.get_text(separator=" ")
    for pattern in _BLOCK_PATTERNS:
        if pattern.search(text):
            return pattern.pattern
    return None


def _text_of(node: Tag | None) -> str:
    if node is None:
        return ""
    return node.get_text().strip()
