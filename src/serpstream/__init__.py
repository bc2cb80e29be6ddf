from __future__ import annotations

from loguru import logger

__version__ = "0.1.0"

from serpstream.api import (
    asearch,
    asearch_detailed,
    search,
    search_detailed,
    search_detailed_stream,
    search_stream,
)
from serpstream.errors import ExitCode, SearchError
from serpstream.search.types import SearchOptions, SearchResult

# Library logging stays silent until an application opts in with
# logger.enable("serpstream"); the CLI does.
logger.disable("serpstream")

__all__ = [
    "ExitCode",
    "SearchError",
    "SearchOptions",
    "SearchResult",
    "__version__",
    "asearch",
    "asearch_detailed",
    "search",
    "search_detailed",
    "search_detailed_stream",
    "search_stream",
]
