from __future__ import annotations

from collections.abc import Callable, Sequence
from html import escape
from urllib.parse import quote

from serpstream.search.source import PageRequest, PageSource


def result_block(url: str, title: str = "", description: str = "") -> str:
    href = f"/url?q={quote(url, safe='')}&amp;sa=U&amp;ved=2ahUKE"
    title_html = f'<span class="CVA68e qXLe6d">{escape(title)}</span>' if title else ""
    snippet_html = (
        f'<span class="FrIlee"><span class="fYyStc">{escape(description)}</span></span>'
        if description
        else ""
    )
    return (
        '<div class="ezO2md">'
        f'<div><a class="fuLhoc ZWRArf" href="{href}">{title_html}</a></div>'
        f'<div><table><tr><td>{snippet_html}</td></tr></table></div>'
        "</div>"
    )


def results_page(urls: Sequence[str]) -> str:
    blocks = "".join(
        result_block(url, title=f"Title {url}", description=f"About {url}") for url in urls
    )
    return f"<html><head><title>results</title></head><body>{blocks}</body></html>"


class FakePageSource(PageSource):
    """Serves canned pages and records every request it receives."""

    def __init__(self, pages: Callable[[PageRequest], str] | Sequence[str | Exception]) -> None:
        self._pages = pages
        self.requests: list[PageRequest] = []
        self.closed = False

    async def fetch_page(self, request: PageRequest) -> str:
        self.requests.append(request)
        if callable(self._pages):
            return self._pages(request)
        index = len(self.requests) - 1
        page = self._pages[index] if index < len(self._pages) else results_page([])
        if isinstance(page, Exception):
            raise page
        return page

    async def aclose(self) -> None:
        self.closed = True

    @property
    def offsets(self) -> list[int]:
        return [r.offset for r in self.requests]


def numbered_pages(per_page: int) -> Callable[[PageRequest], str]:
    """Distinct URLs for every offset, ``per_page`` of them per page."""

    def page(request: PageRequest) -> str:
        base = request.offset
        return results_page([f"https://example.com/{base + i}" for i in range(per_page)])

    return page
