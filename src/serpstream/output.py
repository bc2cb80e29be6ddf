from __future__ import annotations

import json
import sys
from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True, slots=True)
class EnvelopeMeta:
    duration_ms: int
    results: int = 0
    endpoint: str | None = None


@dataclass(frozen=True, slots=True)
class Envelope:
    """Top-level JSON document written by every `--json` invocation."""

    command: str
    version: str
    meta: EnvelopeMeta
    data: Any = None
    warnings: list[str] = field(default_factory=list)
    error: dict[str, Any] | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_dict(self) -> dict[str, Any]:
        return {
            "ok": self.ok,
            "command": self.command,
            "version": self.version,
            "data": self.data if self.data is not None else {},
            "warnings": list(self.warnings),
            "error": self.error,
            "meta": {
                "duration_ms": self.meta.duration_ms,
                "results": self.meta.results,
                "endpoint": self.meta.endpoint,
            },
        }


def print_json(payload: dict[str, Any], *, pretty: bool) -> None:
    json.dump(
        payload,
        sys.stdout,
        ensure_ascii=False,
        indent=2 if pretty else None,
        separators=None if pretty else (",", ":"),
    )
    sys.stdout.write("\n")
