"""Plain heuristic scorers used when the AI stages are unavailable."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import List, Sequence, Tuple

from sitesleuth.config import MAX_RESULTS
from sitesleuth.ranking.types import HistoryEntry, RankedResult


@dataclass(frozen=True)
class FallbackWeights:
    """Weighting for :func:`score_fallback`.

    ``recency_tiers`` holds ``(max_days_exclusive, bonus)`` pairs checked in
    order; the first tier the entry falls inside wins.
    """

    title_weight: float
    url_weight: float
    visit_multiplier: float
    visit_cap: float
    recency_tiers: Tuple[Tuple[int, float], ...] = ()
    reason_template: str = "Relevant match with score: {score:.1f}"


# Used over the whole history when candidate selection fails.
HISTORY_FALLBACK = FallbackWeights(
    title_weight=3,
    url_weight=2,
    visit_multiplier=0.1,
    visit_cap=2,
    reason_template='Matched "{query}" with score: {score:.1f}',
)

# Used over the candidate pool when grounded analysis fails.
CANDIDATE_FALLBACK = FallbackWeights(
    title_weight=3,
    url_weight=2,
    visit_multiplier=0.2,
    visit_cap=3,
    recency_tiers=((7, 2), (30, 1)),
    reason_template=(
        "Relevant match with score: {score:.1f} (visited {visit_count} times)"
    ),
)


def _recency_bonus(days_since: int, tiers: Sequence[Tuple[int, float]]) -> float:
    for max_days, bonus in tiers:
        if days_since < max_days:
            return bonus
    return 0.0


def score_fallback(
    query: str,
    entries: Sequence[HistoryEntry],
    weights: FallbackWeights,
    *,
    now: datetime,
) -> List[RankedResult]:
    """Score entries on literal query-word hits plus engagement; top results only."""
    words = query.lower().split()
    scored: List[Tuple[float, HistoryEntry]] = []

    for entry in entries:
        score = 0.0
        title_lower = entry.title.lower()
        url_lower = entry.url.lower()

        for word in words:
            if word in title_lower:
                score += weights.title_weight
            if word in url_lower:
                score += weights.url_weight

        score += min(entry.visit_count * weights.visit_multiplier, weights.visit_cap)
        if weights.recency_tiers:
            score += _recency_bonus(entry.days_since(now), weights.recency_tiers)

        scored.append((score, entry))

    ranked = sorted(
        (pair for pair in scored if pair[0] > 0),
        key=lambda pair: pair[0],
        reverse=True,
    )[:MAX_RESULTS]

    return [
        RankedResult(
            url=entry.url,
            title=entry.title,
            reason=weights.reason_template.format(
                query=query, score=score, visit_count=entry.visit_count
            ),
        )
        for score, entry in ranked
    ]


def fallback_analysis(
    query: str, history: Sequence[HistoryEntry], *, now: datetime
) -> List[RankedResult]:
    return score_fallback(query, history, HISTORY_FALLBACK, now=now)


def candidate_based_fallback(
    query: str, candidates: Sequence[HistoryEntry], *, now: datetime
) -> List[RankedResult]:
    return score_fallback(query, candidates, CANDIDATE_FALLBACK, now=now)
