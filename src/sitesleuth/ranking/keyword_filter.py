"""Keyword-based pre-filter for browsing history entries."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import List, Sequence

from sitesleuth.ranking.concepts import extract_concepts, query_terms
from sitesleuth.ranking.domain_score import get_domain_score
from sitesleuth.ranking.types import Concept, HistoryEntry, ScoredEntry

logger = logging.getLogger(__name__)

MIN_CONCEPT_MATCHES = 2
PARTIAL_MATCH_FACTOR = 0.1
TITLE_WORD_BONUS = 5
URL_WORD_BONUS = 3
VISIT_BONUS_PER_VISIT = 0.05
VISIT_BONUS_CAP = 2
RECENT_DAYS = 7
RECENT_BONUS = 1


def score_entry(
    entry: HistoryEntry,
    concepts: Sequence[Concept],
    terms: Sequence[str],
    now: datetime,
) -> float:
    """Relevance score for a single entry; may be negative."""
    score = 0.0
    title_lower = entry.title.lower()
    url_lower = entry.url.lower()

    concept_matches = 0
    for concept in concepts:
        if concept.matches(title_lower, url_lower):
            concept_matches += 1
            score += concept.weight

    # Multi-concept queries are unsatisfied unless two concepts hit.
    if len(concepts) > 1 and concept_matches < MIN_CONCEPT_MATCHES:
        score *= PARTIAL_MATCH_FACTOR

    for word in terms:
        if word in title_lower:
            score += TITLE_WORD_BONUS
        if word in url_lower:
            score += URL_WORD_BONUS

    score += min(entry.visit_count * VISIT_BONUS_PER_VISIT, VISIT_BONUS_CAP)

    if entry.days_since(now) < RECENT_DAYS:
        score += RECENT_BONUS

    score += get_domain_score(entry.url, concepts)
    return score


def smart_keyword_filter(
    query: str,
    history: Sequence[HistoryEntry],
    *,
    now: datetime,
) -> List[ScoredEntry]:
    """Score every entry and keep the positive ones, best first."""
    concepts = extract_concepts(query)
    terms = query_terms(query)
    logger.debug(
        "keyword filter query_len=%d concepts=%s terms=%d entries=%d",
        len(query),
        [concept.name for concept in concepts],
        len(terms),
        len(history),
    )

    scored = [
        ScoredEntry.from_entry(entry, score_entry(entry, concepts, terms, now))
        for entry in history
    ]
    # sorted() is stable, so ties keep history order.
    filtered = sorted(
        (entry for entry in scored if entry.score > 0),
        key=lambda entry: entry.score,
        reverse=True,
    )
    logger.debug("keyword filter kept %d of %d entries", len(filtered), len(scored))
    return filtered
