from __future__ import annotations

from dataclasses import dataclass

import httpx

from serpstream.errors import ExitCode, SearchError

PAGE_SIZE = 10

_PROXY_SCHEMES = {"http", "https", "socks5", "socks5h"}


@dataclass(frozen=True, slots=True)
class SearchResult:
    url: str
    title: str = ""
    description: str = ""

    def __str__(self) -> str:
        return (
            f"SearchResult(url={self.url}, title={self.title}, "
            f"description={self.description})"
        )

    def to_dict(self) -> dict:
        return {
            "url": self.url,
            "title": self.title,
            "description": self.description,
        }


@dataclass(frozen=True, slots=True)
class SearchOptions:
    language: str = "en"
    region: str = ""
    safe_search: str = "active"
    start_offset: int = 0
    request_interval: float = 0.0
    request_timeout: float = 10.0
    user_agent: str = ""
    proxy: str | None = None
    verify_ssl: bool = True
    deduplicate: bool = False
    detect_blocks: bool = False

    def __post_init__(self) -> None:
        if self.start_offset < 0:
            raise _invalid("start_offset must be >= 0", start_offset=self.start_offset)
        if self.request_interval < 0:
            raise _invalid(
                "request_interval must be >= 0", request_interval=self.request_interval
            )
        if self.request_timeout <= 0:
            raise _invalid("request_timeout must be > 0", request_timeout=self.request_timeout)
        if self.proxy:
            _check_proxy(self.proxy)

    @property
    def effective_safe_search(self) -> str:
        return self.safe_search or "active"


def _check_proxy(proxy: str) -> None:
    try:
        url = httpx.URL(proxy)
    except httpx.InvalidURL as exc:
        raise _invalid(f"invalid proxy URL: {proxy!r}", proxy=proxy) from exc
    if url.scheme not in _PROXY_SCHEMES or not url.host:
        raise _invalid(f"invalid proxy URL: {proxy!r}", proxy=proxy)


def _invalid(message: str, **details: object) -> SearchError:
    return SearchError(
        code="invalid_options",
        message=message,
        exit_code=ExitCode.INVALID_USAGE,
        details=dict(details),
    )
