from __future__ import annotations

import re
from urllib.parse import unquote_plus

REDIRECT_PREFIX = "/url?q="

_BAD_ESCAPE_RE = re.compile(r"%(?![0-9A-Fa-f]{2})")


def decode_redirect_url(href: str | None) -> str | None:
    """Return the destination wrapped in a ``/url?q=`` redirect link, or None.

    Anything after the first ``&`` is tracking noise and is dropped before
    decoding. Malformed escapes and non-redirect links yield None.
    """
    if not href or not href.startswith(REDIRECT_PREFIX):
        return None

    encoded = href[len(REDIRECT_PREFIX) :].split("&", 1)[0]
    if not encoded or _BAD_ESCAPE_RE.search(encoded):
        return None

    try:
        decoded = unquote_plus(encoded, errors="strict")
    except UnicodeDecodeError:
        return None
    return decoded or None
