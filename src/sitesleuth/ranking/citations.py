"""Inline source citations for grounded explanations."""

from __future__ import annotations

from typing import List, Optional

from sitesleuth.ranking.types import GroundingMetadata, GroundingSupport

DEFAULT_SOURCE_TITLE = "Source"


def _citation_links(support: GroundingSupport, metadata: GroundingMetadata) -> List[str]:
    links: List[str] = []
    for index in support.chunk_indices:
        if not 0 <= index < len(metadata.chunks):
            continue
        chunk = metadata.chunks[index]
        if chunk.uri:
            links.append(f"[{chunk.title or DEFAULT_SOURCE_TITLE}]({chunk.uri})")
    return links


def add_citations(text: str, metadata: Optional[GroundingMetadata]) -> str:
    """Splice markdown citation links into ``text`` at each support's end offset.

    Supports are applied from the highest offset down, so an insertion never
    shifts an offset that still has to be processed.
    """
    if metadata is None or not metadata.supports or not metadata.chunks:
        return text

    ordered = sorted(
        metadata.supports,
        key=lambda support: support.end_index or 0,
        reverse=True,
    )

    result = text
    for support in ordered:
        end_index = support.end_index
        if end_index is None or not support.chunk_indices:
            continue
        links = _citation_links(support, metadata)
        if links:
            citation = " " + ", ".join(links)
            result = result[:end_index] + citation + result[end_index:]

    return result
