"""Hostname-based score adjustments for history entries."""

from __future__ import annotations

import logging
from typing import Iterable, Sequence
from urllib.parse import urlsplit

from sitesleuth.ranking.patterns import (
    DOMAIN_KEYWORD_BONUS,
    DOMAIN_KEYWORDS,
    GENERAL_DOMAIN_PENALTY,
    GENERAL_DOMAINS,
    HARD_EXCLUSION_SCORE,
    PLATFORM_DOMAINS,
    PLATFORM_MATCH_BONUS,
    SOCIAL_DOMAIN_PENALTY,
    SOCIAL_DOMAINS,
)
from sitesleuth.ranking.types import Concept

logger = logging.getLogger(__name__)


def extract_hostname(url: str) -> str:
    """Return the lower-cased hostname, or "" when the URL cannot be parsed."""
    try:
        parsed = urlsplit(url)
        hostname = parsed.hostname or ""
    except ValueError:
        return ""
    if not parsed.scheme:
        return ""
    return hostname.lower()


def hostname_matches(hostname: str, domains: Iterable[str]) -> bool:
    """True when hostname is one of ``domains`` or a subdomain of one."""
    # Label-boundary match, not substring: "microsoft.com" must not match "t.co".
    return any(
        hostname == domain or hostname.endswith("." + domain) for domain in domains
    )


def get_domain_score(url: str, concepts: Sequence[Concept]) -> float:
    """Score a URL's hostname against the query concepts.

    Returns -1000 when the query names a platform the hostname is not on;
    callers add the value to the entry score without clamping.
    """
    hostname = extract_hostname(url)
    if not hostname:
        logger.debug("domain score skipped for unparsable url=%s", url)
        return 0.0

    score = 0.0

    # A requested platform the hostname is not on excludes the entry,
    # wrong-platform domains included.
    requested = [c for c in concepts if c.name in PLATFORM_DOMAINS]
    if requested:
        platform_match = False
        for concept in requested:
            if hostname_matches(hostname, PLATFORM_DOMAINS[concept.name]):
                score += PLATFORM_MATCH_BONUS
                platform_match = True
        if not platform_match:
            return float(HARD_EXCLUSION_SCORE)

    if hostname_matches(hostname, SOCIAL_DOMAINS):
        score -= SOCIAL_DOMAIN_PENALTY
    if hostname_matches(hostname, GENERAL_DOMAINS):
        score -= GENERAL_DOMAIN_PENALTY

    for concept in concepts:
        for keyword in DOMAIN_KEYWORDS.get(concept.name, ()):
            if keyword in hostname:
                score += DOMAIN_KEYWORD_BONUS

    return score
