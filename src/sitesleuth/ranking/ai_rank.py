"""Model-assisted re-ranking of keyword-filtered candidates."""

from __future__ import annotations

import json
import logging
from datetime import datetime
from typing import List, Optional, Sequence, TypeVar

from sitesleuth.config import RANKING_MAX_RESULTS, RANKING_PROMPT_WINDOW
from sitesleuth.core.exceptions import GenerationAPIError
from sitesleuth.ranking.types import HistoryEntry, QueryContext

logger = logging.getLogger(__name__)

EntryT = TypeVar("EntryT", bound=HistoryEntry)


def build_ranking_prompt(
    query: str, candidates: Sequence[HistoryEntry], now: datetime
) -> str:
    window = candidates[:RANKING_PROMPT_WINDOW]
    candidates_text = "\n".join(
        f'{index}. "{item.title}" - {item.url} '
        f"({item.visit_count} visits, {item.days_since(now)}d ago)"
        for index, item in enumerate(window, start=1)
    )
    upper = min(RANKING_PROMPT_WINDOW, len(candidates))
    return f"""
Query: "{query}"

These websites were pre-filtered as potentially relevant. Rank them by relevance to the query.

{candidates_text}

Return ONLY a JSON array of the numbers (1-{upper}) of the MOST relevant pages, ordered by relevance.
Example: [3, 1, 7, 12, 5]

Focus on pages where the TITLE or URL clearly relates to the query. Ignore generic sites like email, social media unless they specifically match.
Return 10-20 numbers max.
"""


def _as_index(value: object) -> Optional[int]:
    """Whole-number JSON value as an int; ``2.0`` counts, ``2.5`` and booleans do not."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return None


def parse_rankings(raw: str, candidates: Sequence[EntryT]) -> List[EntryT]:
    """Map a JSON array of 1-based indices back onto ``candidates``.

    Non-JSON or non-array output yields the leading candidates unranked;
    out-of-range and non-integral indices are dropped.
    """
    try:
        rankings = json.loads(raw)
    except (TypeError, ValueError):
        logger.info("ranking response was not JSON; keeping keyword order")
        return list(candidates[:RANKING_MAX_RESULTS])

    if not isinstance(rankings, list):
        logger.info("ranking response was not an array; keeping keyword order")
        return list(candidates[:RANKING_MAX_RESULTS])

    indices = (_as_index(num) for num in rankings)
    ranked = [
        candidates[index - 1]
        for index in indices
        if index is not None and 1 <= index <= len(candidates)
    ]
    return ranked[:RANKING_MAX_RESULTS]


def rank_candidates(ctx: QueryContext, candidates: Sequence[EntryT]) -> List[EntryT]:
    """Ask the plain generation endpoint to order ``candidates`` by relevance."""
    prompt = build_ranking_prompt(ctx.query, candidates, ctx.now)
    try:
        if ctx.client is None:
            raise GenerationAPIError("no generation client configured")
        raw = ctx.client.generate_text(prompt)
    except Exception as exc:
        logger.warning("AI ranking unavailable, keeping keyword order: %s", exc)
        return list(candidates[:RANKING_MAX_RESULTS])

    ranked = parse_rankings(raw, candidates)
    logger.debug(
        "AI ranking returned %d of %d candidates", len(ranked), len(candidates)
    )
    return ranked
