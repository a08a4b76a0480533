"""Static pattern tables for concept extraction and domain scoring.

All tables are built once at import time and exposed read-only:
- Platform and content-category regex patterns with keyword sets and weights
- Stop words dropped before generic keyword concepts are emitted
- Platform domain lists used for hard inclusion/exclusion
- Penalised social and general-utility domains
- Concept-to-domain keyword hints
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Pattern, Tuple


@dataclass(frozen=True)
class ConceptPattern:
    pattern: Pattern[str]
    keywords: Tuple[str, ...]
    weight: float


# ---------------------------------------------------------------------------
# Platforms named in a query. Order matters: concepts are emitted in table order.
# ---------------------------------------------------------------------------
PLATFORM_PATTERNS: Mapping[str, ConceptPattern] = MappingProxyType(
    {
        "reddit": ConceptPattern(
            re.compile(r"reddit|r/|subreddit"),
            ("reddit", "r/", "subreddit", "reddit.com"),
            25,
        ),
        "youtube": ConceptPattern(
            re.compile(r"youtube|youtu\.be"), ("youtube", "youtu.be"), 22
        ),
        "twitter": ConceptPattern(
            re.compile(r"twitter|x\.com|tweet"),
            ("twitter", "x.com", "tweet", "t.co"),
            22,
        ),
        "github": ConceptPattern(
            re.compile(r"github|gh\s"), ("github", "github.com"), 22
        ),
        "stackoverflow": ConceptPattern(
            re.compile(r"stackoverflow|stack overflow"),
            ("stackoverflow", "stack overflow"),
            20,
        ),
        "linkedin": ConceptPattern(
            re.compile(r"linkedin"), ("linkedin", "linkedin.com"), 18
        ),
        "medium": ConceptPattern(
            re.compile(r"medium\.com|medium article"), ("medium", "medium.com"), 18
        ),
        "wikipedia": ConceptPattern(
            re.compile(r"wikipedia|wiki"), ("wikipedia", "wiki"), 15
        ),
    }
)


# ---------------------------------------------------------------------------
# Content categories
# ---------------------------------------------------------------------------
CATEGORY_PATTERNS: Mapping[str, ConceptPattern] = MappingProxyType(
    {
        "video": ConceptPattern(
            re.compile(r"video|watch|stream"),
            ("video", "watch", "stream", "player"),
            15,
        ),
        "article": ConceptPattern(
            re.compile(r"article|blog|post|read"),
            ("article", "blog", "post", "read", "news"),
            12,
        ),
        "tutorial": ConceptPattern(
            re.compile(r"tutorial|guide|how to|learn"),
            ("tutorial", "guide", "how", "learn", "course"),
            14,
        ),
        "documentation": ConceptPattern(
            re.compile(r"docs|documentation|reference|api"),
            ("docs", "documentation", "reference", "api"),
            14,
        ),
        "shopping": ConceptPattern(
            re.compile(r"buy|shop|price|store|amazon|ebay"),
            ("buy", "shop", "price", "store", "cart", "order"),
            12,
        ),
        "recipe": ConceptPattern(
            re.compile(r"recipe|cook|food|meal"),
            ("recipe", "cook", "food", "meal", "ingredient"),
            12,
        ),
        "news": ConceptPattern(
            re.compile(r"news|headline|breaking"),
            ("news", "headline", "breaking", "report"),
            12,
        ),
    }
)

GENERIC_CONCEPT_WEIGHT = 10
MIN_TOKEN_LENGTH = 3

STOP_WORDS = frozenset(
    {
        # Articles, conjunctions, prepositions
        "the", "a", "an", "and", "or", "but", "in", "on", "at", "to", "for",
        "of", "with", "by", "from", "that", "this",
        # Auxiliaries and modals
        "was", "were", "is", "are", "been", "being", "have", "has", "had",
        "do", "does", "did", "will", "would", "could", "should", "may",
        "might", "can",
        # Question words and pronouns
        "about", "which", "what", "where", "when", "who", "how", "why",
        "i", "me", "my", "you", "your", "we", "our", "they", "their", "it",
        "its", "some", "any",
        # Query framing verbs
        "find", "show", "looking", "want", "need", "saw", "visited", "remember",
    }
)  # fmt: skip


# ---------------------------------------------------------------------------
# Domain scoring
# ---------------------------------------------------------------------------
PLATFORM_DOMAINS: Mapping[str, Tuple[str, ...]] = MappingProxyType(
    {
        "reddit": ("reddit.com",),
        "youtube": ("youtube.com", "youtu.be"),
        "twitter": ("twitter.com", "x.com", "t.co"),
        "github": ("github.com",),
        "stackoverflow": ("stackoverflow.com",),
    }
)

SOCIAL_DOMAINS: Tuple[str, ...] = ("facebook.com", "instagram.com", "tiktok.com")
GENERAL_DOMAINS: Tuple[str, ...] = ("gmail.com", "linkedin.com", "google.com")

PLATFORM_MATCH_BONUS = 100
HARD_EXCLUSION_SCORE = -1000
SOCIAL_DOMAIN_PENALTY = 15
GENERAL_DOMAIN_PENALTY = 25
DOMAIN_KEYWORD_BONUS = 12

DOMAIN_KEYWORDS: Mapping[str, Tuple[str, ...]] = MappingProxyType(
    {
        "wallpaper": ("wallpaper", "background", "desktop", "image", "photo", "pic"),
        "art": ("deviantart", "artstation", "pixiv", "behance", "art"),
        "gaming": ("steam", "epic", "riot", "gaming", "game"),
        "tech": ("dev", "tech", "code"),
        "chatbot": ("perplexity", "openai", "claude", "gemini", "bard"),
    }
)
