"""Search-grounded final analysis of the candidate pool."""

from __future__ import annotations

import json
import logging
from datetime import datetime
from typing import Any, List, Optional, Sequence

from sitesleuth.config import GROUNDED_PROMPT_WINDOW, MAX_RESULTS
from sitesleuth.core.exceptions import GenerationAPIError, MalformedResponseError
from sitesleuth.ranking.citations import add_citations
from sitesleuth.ranking.fallback import candidate_based_fallback
from sitesleuth.ranking.types import (
    GroundingMetadata,
    HistoryEntry,
    QueryContext,
    RankedResult,
)

logger = logging.getLogger(__name__)

CODE_FENCE = "```"
JSON_CODE_FENCE = "```json"


def build_grounded_prompt(
    query: str, candidates: Sequence[HistoryEntry], now: datetime
) -> str:
    candidates_text = "\n".join(
        f'{index}. "{page.title}" - {page.url} '
        f"(visited {page.visit_count} times, {page.days_since(now)} days ago)"
        for index, page in enumerate(candidates[:GROUNDED_PROMPT_WINDOW], start=1)
    )
    return f"""
I need to find the most relevant websites from a user's browsing history for this EXACT query: "{query}"

Here are the PRE-FILTERED candidate pages from their browsing history:
{candidates_text}

CRITICAL: These candidates have already been filtered to match the user's query. Your job is to:
1. ONLY analyze and rank the pages from the candidate list above
2. Do NOT suggest any pages that aren't in the candidate list
3. Focus on which of these candidates best match the query intent
4. If the query mentions a specific platform (like "reddit post"), ONLY return results from that platform

Important considerations:
- The user's query is: "{query}"
- Look specifically for content that matches ALL aspects of this query
- Consider the user's engagement level (visit count and recency) as a secondary factor
- Prioritize pages that have actual relevant content over popular but unrelated pages

Return your response as a JSON array with this exact format:
[
    {{
        "url": "exact_url_from_the_candidate_list_above",
        "title": "exact_title_from_the_candidate_list_above",
        "reason": "detailed explanation based on current content analysis of why this page perfectly matches the query"
    }}
]

Only return the JSON array, no additional text.
"""


def strip_code_fence(text: str) -> str:
    """Remove a surrounding markdown code fence, if any."""
    cleaned = text.strip()
    if cleaned.startswith(JSON_CODE_FENCE):
        cleaned = cleaned[len(JSON_CODE_FENCE) :]
    elif cleaned.startswith(CODE_FENCE):
        cleaned = cleaned[len(CODE_FENCE) :]
    else:
        return cleaned
    if cleaned.rstrip().endswith(CODE_FENCE):
        cleaned = cleaned.rstrip()[: -len(CODE_FENCE)]
    return cleaned.strip()


def parse_grounded_results(
    text: str, metadata: Optional[GroundingMetadata]
) -> List[RankedResult]:
    """Parse the model's JSON array into results with citations spliced in.

    Raises:
        MalformedResponseError: when the text is not a JSON array of objects.
    """
    try:
        parsed: Any = json.loads(strip_code_fence(text))
    except ValueError as e:
        raise MalformedResponseError(f"grounded response is not JSON: {e}") from e

    if not isinstance(parsed, list):
        raise MalformedResponseError("Invalid response format")
    if not all(isinstance(item, dict) for item in parsed):
        raise MalformedResponseError("grounded response items must be objects")

    # Returned URLs are not checked against the candidate list.
    results = [
        RankedResult(
            url=str(item.get("url") or ""),
            title=str(item.get("title") or ""),
            reason=add_citations(str(item.get("reason") or ""), metadata),
        )
        for item in parsed
    ]
    return results[:MAX_RESULTS]


def grounded_analysis(
    ctx: QueryContext, candidates: Sequence[HistoryEntry]
) -> List[RankedResult]:
    """Final ranking with explanations; heuristic fallback on any failure."""
    prompt = build_grounded_prompt(ctx.query, candidates, ctx.now)
    try:
        if ctx.client is None:
            raise GenerationAPIError("no generation client configured")
        response = ctx.client.generate_grounded(prompt)
        results = parse_grounded_results(response.text, response.metadata)
    except Exception as exc:
        logger.warning("grounded analysis failed, using candidate fallback: %s", exc)
        return candidate_based_fallback(ctx.query, candidates, now=ctx.now)

    logger.info("grounded analysis returned %d results", len(results))
    return results
