from __future__ import annotations

from dataclasses import dataclass
from typing import Any


class ExitCode:
    OK = 0
    RUNTIME_ERROR = 1
    INVALID_USAGE = 2
    NOT_FOUND = 3
    BLOCKED = 4


@dataclass(eq=False, slots=True)
class SearchError(Exception):
    code: str
    message: str
    exit_code: int = ExitCode.RUNTIME_ERROR
    details: dict[str, Any] | None = None
    # results collected before the failure, filled in by the collecting wrappers
    partial_results: list[Any] | None = None

    def __str__(self) -> str:
        return self.message

    @property
    def status(self) -> int | None:
        if not self.details:
            return None
        status = self.details.get("status")
        return status if isinstance(status, int) else None

    def to_error_dict(self) -> dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details,
        }


def transport_error(message: str, *, url: str, cause: str) -> SearchError:
    return SearchError(
        code="transport_error",
        message=message,
        exit_code=ExitCode.RUNTIME_ERROR,
        details={"url": url, "error": cause},
    )


def status_error(status: int, *, url: str) -> SearchError:
    return SearchError(
        code="status_error",
        message=f"search endpoint returned HTTP {status}",
        exit_code=ExitCode.BLOCKED if status == 429 else ExitCode.RUNTIME_ERROR,
        details={"status": status, "url": url},
    )


def parse_error(message: str) -> SearchError:
    return SearchError(code="parse_error", message=message, exit_code=ExitCode.RUNTIME_ERROR)
