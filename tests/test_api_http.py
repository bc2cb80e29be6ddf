from __future__ import annotations

import httpx
import pytest
import respx
from httpx import Response
from serp_pages import results_page

from serpstream import ExitCode, SearchError, SearchOptions, search, search_detailed
from serpstream.search.source import SEARCH_URL


def test_search_collects_urls_across_pages() -> None:
    first = results_page([f"https://example.com/{i}" for i in range(10)])
    second = results_page([f"https://example.com/{i}" for i in range(10, 20)])

    with respx.mock:
        route = respx.get(url__startswith=SEARCH_URL).mock(
            side_effect=[Response(200, text=first), Response(200, text=second)]
        )
        urls = search("python", 15, SearchOptions(user_agent="test-agent"))

    assert urls == [f"https://example.com/{i}" for i in range(15)]
    starts = [call.request.url.params["start"] for call in route.calls]
    assert starts == ["0", "10"]
    assert all(call.request.headers["user-agent"] == "test-agent" for call in route.calls)


def test_search_status_error_keeps_partial_results() -> None:
    first = results_page([f"https://example.com/{i}" for i in range(10)])

    with respx.mock:
        route = respx.get(url__startswith=SEARCH_URL).mock(
            side_effect=[Response(200, text=first), Response(500)]
        )
        with pytest.raises(SearchError) as exc:
            search("python", 25)

    assert exc.value.code == "status_error"
    assert exc.value.status == 500
    assert exc.value.partial_results == [f"https://example.com/{i}" for i in range(10)]
    assert route.call_count == 2


def test_search_detailed_returns_records() -> None:
    page = results_page(["https://docs.python.org/3/", "https://www.python.org/"])

    with respx.mock:
        respx.get(url__startswith=SEARCH_URL).mock(return_value=Response(200, text=page))
        results = search_detailed("python", 2, SearchOptions(region="gb"))

    assert [r.url for r in results] == ["https://docs.python.org/3/", "https://www.python.org/"]
    assert results[1].title == "Title https://www.python.org/"


def test_search_undecodable_page_keeps_partial_results() -> None:
    first = results_page([f"https://example.com/{i}" for i in range(10)])
    broken = Response(
        200, headers={"content-encoding": "gzip"}, stream=httpx.ByteStream(b"not gzip")
    )

    with respx.mock:
        respx.get(url__startswith=SEARCH_URL).mock(
            side_effect=[Response(200, text=first), broken]
        )
        with pytest.raises(SearchError) as exc:
            search("python", 15)

    assert exc.value.code == "transport_error"
    assert exc.value.partial_results == [f"https://example.com/{i}" for i in range(10)]


def test_search_rejects_unusable_proxy_before_any_request() -> None:
    with respx.mock:
        route = respx.get(url__startswith=SEARCH_URL).mock(return_value=Response(200))
        with pytest.raises(SearchError) as exc:
            search("python", 5, SearchOptions(proxy="notaurl"))

    assert exc.value.code == "invalid_options"
    assert exc.value.exit_code == ExitCode.INVALID_USAGE
    assert not route.called


def test_search_sends_term_as_given() -> None:
    page = results_page(["https://example.com/0"])

    with respx.mock:
        route = respx.get(url__startswith=SEARCH_URL).mock(return_value=Response(200, text=page))
        search(" python  asyncio ", 1)

    assert route.calls.last.request.url.params["q"] == " python  asyncio "
