from __future__ import annotations

import pytest

from serpstream.timeutil import parse_seconds


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("0", 0.0),
        ("3", 3.0),
        ("2s", 2.0),
        ("500ms", 0.5),
        ("1.5m", 90.0),
        ("1h", 3600.0),
        ("  250MS  ", 0.25),
    ],
)
def test_parse_seconds(value: str, expected: float) -> None:
    assert parse_seconds(value) == pytest.approx(expected)


@pytest.mark.parametrize("value", ["bogus", "-1s", "2d", ""])
def test_parse_seconds_rejects_invalid(value: str) -> None:
    with pytest.raises(ValueError):
        parse_seconds(value)
