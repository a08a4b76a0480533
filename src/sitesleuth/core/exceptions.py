"""Core exception types for sitesleuth."""

from __future__ import annotations

from typing import Optional


class SiteSleuthError(Exception):
    """Base error for sitesleuth runtime failures."""


class GenerationAPIError(SiteSleuthError):
    """Raised when a generation endpoint rejects a request or answers badly."""

    def __init__(self, message: str, *, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class GenerationTransportError(SiteSleuthError):
    """Raised when a generation endpoint cannot be reached."""


class MalformedResponseError(SiteSleuthError):
    """Raised when model output does not have the expected JSON shape."""


class HistorySourceError(SiteSleuthError):
    """Raised when browsing history cannot be read."""


class QueryInProgressError(SiteSleuthError):
    """Raised when a query arrives while another one is still being processed."""
