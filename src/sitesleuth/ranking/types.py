"""Shared types for the history ranking pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional, Protocol, Tuple

StatusCallback = Callable[[str], None]

SECONDS_PER_DAY = 24 * 60 * 60


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class HistoryEntry:
    """A single page from the browsing history window."""

    url: str
    title: str
    visit_count: int
    last_visit_time: datetime

    def days_since(self, now: datetime) -> int:
        """Whole days elapsed between the last visit and ``now``."""
        elapsed = (now - self.last_visit_time).total_seconds()
        return int(elapsed // SECONDS_PER_DAY)


@dataclass(frozen=True)
class ScoredEntry(HistoryEntry):
    """History entry carrying a relevance score; negative scores exclude."""

    score: float = 0.0

    @classmethod
    def from_entry(cls, entry: HistoryEntry, score: float) -> "ScoredEntry":
        return cls(
            url=entry.url,
            title=entry.title,
            visit_count=entry.visit_count,
            last_visit_time=entry.last_visit_time,
            score=score,
        )


@dataclass(frozen=True)
class Concept:
    """Weighted semantic unit derived from the query."""

    name: str
    keywords: Tuple[str, ...]
    weight: float
    is_platform: bool = False

    def matches(self, *haystacks: str) -> bool:
        return any(keyword in text for keyword in self.keywords for text in haystacks)


@dataclass(frozen=True)
class RankedResult:
    """Result record handed back to the caller."""

    url: str
    title: str
    reason: str

    def to_dict(self) -> Dict[str, str]:
        return {"url": self.url, "title": self.title, "reason": self.reason}


@dataclass(frozen=True)
class GroundingChunk:
    uri: str = ""
    title: str = ""


@dataclass(frozen=True)
class GroundingSupport:
    end_index: Optional[int] = None
    chunk_indices: Tuple[int, ...] = ()


@dataclass(frozen=True)
class GroundingMetadata:
    """Source citations attached to a grounded generation response."""

    supports: Tuple[GroundingSupport, ...] = ()
    chunks: Tuple[GroundingChunk, ...] = ()

    @classmethod
    def from_api(cls, payload: Any) -> Optional["GroundingMetadata"]:
        """Build metadata from a ``groundingMetadata`` response object."""
        if not isinstance(payload, dict):
            return None

        supports: List[GroundingSupport] = []
        for raw_support in payload.get("groundingSupports") or []:
            if not isinstance(raw_support, dict):
                continue
            segment = raw_support.get("segment") or {}
            end_index = segment.get("endIndex") if isinstance(segment, dict) else None
            indices = tuple(
                index
                for index in raw_support.get("groundingChunkIndices") or []
                if isinstance(index, int) and not isinstance(index, bool)
            )
            supports.append(
                GroundingSupport(
                    end_index=end_index if isinstance(end_index, int) else None,
                    chunk_indices=indices,
                )
            )

        chunks: List[GroundingChunk] = []
        for raw_chunk in payload.get("groundingChunks") or []:
            web = raw_chunk.get("web") if isinstance(raw_chunk, dict) else None
            if not isinstance(web, dict):
                web = {}
            chunks.append(
                GroundingChunk(
                    uri=str(web.get("uri") or ""),
                    title=str(web.get("title") or ""),
                )
            )

        return cls(supports=tuple(supports), chunks=tuple(chunks))


@dataclass(frozen=True)
class GroundedResponse:
    text: str
    metadata: Optional[GroundingMetadata] = None


class GenerationClient(Protocol):
    """Text generation endpoints used by the AI stages."""

    def generate_text(self, prompt: str) -> str: ...

    def generate_grounded(self, prompt: str) -> GroundedResponse: ...


@dataclass
class QueryContext:
    """Per-query state passed explicitly through the pipeline."""

    query: str
    client: Optional[GenerationClient] = None
    now: datetime = field(default_factory=utc_now)
    status_callback: Optional[StatusCallback] = None

    def report_status(self, message: str) -> None:
        if self.status_callback is not None:
            self.status_callback(message)
