"""Concept extraction from free-text history queries."""

from __future__ import annotations

from typing import List

from sitesleuth.ranking.patterns import (
    CATEGORY_PATTERNS,
    GENERIC_CONCEPT_WEIGHT,
    MIN_TOKEN_LENGTH,
    PLATFORM_PATTERNS,
    STOP_WORDS,
)
from sitesleuth.ranking.types import Concept


def query_terms(query: str) -> List[str]:
    """Lower-cased query tokens, minus stop words and very short words."""
    return [
        word
        for word in query.lower().split()
        if len(word) >= MIN_TOKEN_LENGTH and word not in STOP_WORDS
    ]


def _is_covered(word: str, concepts: List[Concept]) -> bool:
    # Substring containment in either direction counts as covered.
    return any(
        keyword in word or word in keyword
        for concept in concepts
        for keyword in concept.keywords
    )


def extract_concepts(query: str) -> List[Concept]:
    """Parse a query into platform, category and generic keyword concepts.

    Platform and category tables are each tested once, so neither kind can
    repeat. Remaining words become weight-10 generic concepts unless a
    concept already emitted covers them.
    """
    lower_query = query.lower()
    concepts: List[Concept] = []

    for name, definition in PLATFORM_PATTERNS.items():
        if definition.pattern.search(lower_query):
            concepts.append(
                Concept(
                    name=name,
                    keywords=definition.keywords,
                    weight=definition.weight,
                    is_platform=True,
                )
            )

    for name, definition in CATEGORY_PATTERNS.items():
        if definition.pattern.search(lower_query):
            concepts.append(
                Concept(
                    name=name,
                    keywords=definition.keywords,
                    weight=definition.weight,
                )
            )

    for word in query_terms(query):
        if not _is_covered(word, concepts):
            concepts.append(
                Concept(name=word, keywords=(word,), weight=GENERIC_CONCEPT_WEIGHT)
            )

    return concepts
