"""Core client and error types for sitesleuth."""

from sitesleuth.core.exceptions import (
    GenerationAPIError,
    GenerationTransportError,
    HistorySourceError,
    MalformedResponseError,
    QueryInProgressError,
    SiteSleuthError,
)

__all__ = [
    "GenerationAPIError",
    "GenerationTransportError",
    "HistorySourceError",
    "MalformedResponseError",
    "QueryInProgressError",
    "SiteSleuthError",
]
