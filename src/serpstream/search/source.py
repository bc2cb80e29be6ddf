from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

import httpx
from loguru import logger

from serpstream.errors import ExitCode, SearchError, status_error, transport_error
from serpstream.search.types import SearchOptions

SEARCH_URL = "https://www.google.com/search"

# Without these the endpoint answers with a consent interstitial.
CONSENT_COOKIES = {"CONSENT": "PENDING+987", "SOCS": "CAESHAgBEhIaAB"}


@dataclass(frozen=True, slots=True)
class PageRequest:
    term: str
    count: int
    offset: int
    language: str
    safe_search: str
    region: str
    user_agent: str


def build_params(request: PageRequest) -> dict[str, str]:
    params: dict[str, str] = {
        "q": request.term,
        # ask for a little more than needed; pages often carry fewer usable items
        "num": str(request.count + 2),
        "hl": request.language,
        "start": str(request.offset),
        "safe": request.safe_search,
    }
    if request.region:
        params["gl"] = request.region
    return params


def build_headers(user_agent: str) -> dict[str, str]:
    return {
        "user-agent": user_agent,
        "accept": "*/*",
        "cookie": "; ".join(f"{k}={v}" for k, v in CONSENT_COOKIES.items()),
    }


class PageSource(ABC):
    """Turns one page request into the raw results document."""

    @abstractmethod
    async def fetch_page(self, request: PageRequest) -> str:
        raise NotImplementedError

    async def aclose(self) -> None:
        return None

    async def __aenter__(self) -> PageSource:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()


class HttpPageSource(PageSource):
    def __init__(
        self,
        *,
        timeout: float = 10.0,
        proxy: str | None = None,
        verify: bool = True,
        base_url: str = SEARCH_URL,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = base_url
        client_args: dict[str, Any] = {
            "timeout": httpx.Timeout(timeout=timeout),
            "verify": verify,
        }
        if proxy:
            client_args["proxy"] = proxy
        if transport is not None:
            client_args["transport"] = transport
        try:
            self._client = httpx.AsyncClient(**client_args)
        except (ValueError, httpx.InvalidURL) as exc:
            raise SearchError(
                code="invalid_options",
                message=f"invalid proxy URL: {proxy!r}",
                exit_code=ExitCode.INVALID_USAGE,
                details={"proxy": proxy, "error": str(exc)},
            ) from exc

    @classmethod
    def from_options(cls, options: SearchOptions) -> HttpPageSource:
        return cls(
            timeout=options.request_timeout,
            proxy=options.proxy,
            verify=options.verify_ssl,
        )

    async def fetch_page(self, request: PageRequest) -> str:
        params = build_params(request)
        logger.debug("GET {} start={} num={}", self._base_url, params["start"], params["num"])
        try:
            resp = await self._client.get(
                self._base_url, params=params, headers=build_headers(request.user_agent)
            )
        except httpx.RequestError as exc:
            # transport failures, redirect loops and undecodable bodies alike
            logger.warning("Search request failed at start={}: {}", request.offset, exc)
            raise transport_error(
                f"search request failed: {exc.__class__.__name__}",
                url=self._base_url,
                cause=str(exc),
            ) from exc

        if resp.status_code != 200:
            logger.warning(
                "Search endpoint returned HTTP {} at start={}", resp.status_code, request.offset
            )
            raise status_error(resp.status_code, url=str(resp.url))
        return resp.text

    async def aclose(self) -> None:
        await self._client.aclose()
