from __future__ import annotations

from urllib.parse import quote

import pytest

from serpstream.search.redirect import decode_redirect_url


@pytest.mark.parametrize(
    "url",
    [
        "https://example.com/",
        "https://example.com/a b?x=1&y=2#frag",
        "https://example.com/café?q=%41",
    ],
)
def test_decode_round_trip(url: str) -> None:
    href = f"/url?q={quote(url, safe='')}&sa=U&ved=abc"
    assert decode_redirect_url(href) == url


def test_decode_truncates_tracking_params() -> None:
    href = "/url?q=https://example.com/page&sa=U&usg=AOvVaw"
    assert decode_redirect_url(href) == "https://example.com/page"


def test_decode_plus_is_space() -> None:
    assert decode_redirect_url("/url?q=https://example.com/a+b") == "https://example.com/a b"


@pytest.mark.parametrize(
    "href",
    [
        None,
        "",
        "https://example.com/direct",
        "/search?q=python&start=10",
        "/url?q=&sa=U",
        "/url?q=https://example.com/%zz",
        "/url?q=https://example.com/%ff%fe",
    ],
)
def test_decode_rejects(href: str | None) -> None:
    assert decode_redirect_url(href) is None
