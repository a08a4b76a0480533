"""Candidate pool selection ahead of grounded analysis."""

from __future__ import annotations

import logging
from typing import List, Sequence

from sitesleuth.config import (
    AI_RANK_MAX_CANDIDATES,
    FALLBACK_POOL_SIZE,
    TRUNCATE_CANDIDATES,
)
from sitesleuth.ranking.ai_rank import rank_candidates
from sitesleuth.ranking.keyword_filter import smart_keyword_filter
from sitesleuth.ranking.types import HistoryEntry, QueryContext

logger = logging.getLogger(__name__)


def _emergency_candidates(
    ctx: QueryContext, history: Sequence[HistoryEntry]
) -> List[HistoryEntry]:
    try:
        filtered = smart_keyword_filter(ctx.query, history, now=ctx.now)
    except Exception as exc:
        logger.warning("keyword filter failed, no candidates selected: %s", exc)
        return []
    return list(filtered[:FALLBACK_POOL_SIZE])


def select_candidates(
    ctx: QueryContext, history: Sequence[HistoryEntry]
) -> List[HistoryEntry]:
    """Bounded candidate pool for the AI stages.

    No keyword hits falls back to the head of the history; small pools are
    re-ranked by the model; large pools are truncated by score.
    """
    try:
        filtered = smart_keyword_filter(ctx.query, history, now=ctx.now)

        if not filtered:
            logger.info("no keyword matches; using %d most recent entries", FALLBACK_POOL_SIZE)
            return list(history[:FALLBACK_POOL_SIZE])

        if len(filtered) <= AI_RANK_MAX_CANDIDATES:
            return list(rank_candidates(ctx, filtered))

        logger.info(
            "%d keyword matches exceed AI ranking limit; keeping top %d",
            len(filtered),
            TRUNCATE_CANDIDATES,
        )
        return list(filtered[:TRUNCATE_CANDIDATES])
    except Exception as exc:
        logger.warning("candidate selection failed, using keyword order: %s", exc)
        return _emergency_candidates(ctx, history)
