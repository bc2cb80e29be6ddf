from __future__ import annotations

import random

# The results markup parsed by serpstream.search.parser is what the endpoint
# serves to text-mode browsers, so generated agents all claim to be Lynx.


def random_user_agent(rng: random.Random | None = None) -> str:
    """Build a Lynx user agent string with randomized component versions."""
    rng = rng or random.Random()

    lynx = f"Lynx/{rng.randint(2, 3)}.{rng.randint(8, 9)}.{rng.randint(0, 2)}"
    libwww = f"libwww-FM/{rng.randint(2, 3)}.{rng.randint(13, 15)}"
    ssl_mm = f"SSL-MM/{rng.randint(1, 2)}.{rng.randint(3, 5)}"
    openssl = f"OpenSSL/{rng.randint(1, 3)}.{rng.randint(0, 4)}.{rng.randint(0, 9)}"
    return f"{lynx} {libwww} {ssl_mm} {openssl}"
