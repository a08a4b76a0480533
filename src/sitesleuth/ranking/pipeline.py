"""End-to-end history ranking with staged fallbacks."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional, Sequence

from sitesleuth.config import HISTORY_LOOKBACK_DAYS
from sitesleuth.core.exceptions import (
    GenerationAPIError,
    GenerationTransportError,
    HistorySourceError,
    QueryInProgressError,
)
from sitesleuth.history import HistorySource
from sitesleuth.ranking.candidates import select_candidates
from sitesleuth.ranking.fallback import fallback_analysis
from sitesleuth.ranking.grounded import grounded_analysis
from sitesleuth.ranking.types import (
    GenerationClient,
    HistoryEntry,
    QueryContext,
    RankedResult,
    StatusCallback,
    utc_now,
)

logger = logging.getLogger(__name__)

STATUS_RESULTS = "results"
STATUS_NO_MATCHES = "no_matches"
STATUS_NO_HISTORY = "no_history"
STATUS_ERROR = "error"

NO_HISTORY_MESSAGE = (
    "I couldn't find any browsing history from the last {days} days. "
    "Please make sure you have some browsing activity."
)
RESULTS_MESSAGE = 'Here are the most relevant websites from your browsing history for "{query}":'
NO_MATCHES_MESSAGE = (
    "I couldn't find any relevant websites in your browsing history for that query. "
    "Try rephrasing your request or check if you've visited related sites recently."
)
API_ERROR_MESSAGE = (
    "There was an issue with the Gemini API. "
    "Please check your API key is valid and try again."
)
NETWORK_ERROR_MESSAGE = (
    "Network error. Please check your internet connection and try again."
)
GENERIC_ERROR_MESSAGE = (
    "Sorry, there was an error processing your request. Please try again."
)


def analyze_history(
    ctx: QueryContext, history: Sequence[HistoryEntry]
) -> List[RankedResult]:
    """Rank ``history`` for ``ctx.query``: candidates, then grounded analysis."""
    try:
        ctx.report_status(
            "Step 1/2: AI filtering most relevant pages from your history..."
        )
        candidates = select_candidates(ctx, history)
        if not candidates:
            logger.info("no candidates selected; using history fallback")
            return fallback_analysis(ctx.query, history, now=ctx.now)

        ctx.report_status(
            "Step 2/2: Using Google Search grounding to enhance analysis "
            "with real-time web content..."
        )
        return grounded_analysis(ctx, candidates)
    except Exception as exc:
        logger.warning("history analysis failed, using history fallback: %s", exc)
        return fallback_analysis(ctx.query, history, now=ctx.now)


def describe_failure(exc: BaseException) -> str:
    """User-facing advisory message for a pipeline failure."""
    if isinstance(exc, HistorySourceError):
        return f"I couldn't read your browsing history: {exc}"
    if isinstance(exc, GenerationTransportError):
        return NETWORK_ERROR_MESSAGE
    if isinstance(exc, GenerationAPIError):
        return API_ERROR_MESSAGE

    message = str(exc) or "Unknown error"
    if "API" in message:
        return API_ERROR_MESSAGE
    if "network" in message.lower() or "fetch" in message.lower():
        return NETWORK_ERROR_MESSAGE
    return GENERIC_ERROR_MESSAGE


@dataclass
class QueryOutcome:
    status: str
    message: str
    results: List[RankedResult] = field(default_factory=list)


@dataclass
class AnalysisSession:
    """Accepts one query at a time against a history source."""

    history_source: HistorySource
    client: Optional[GenerationClient] = None
    lookback_days: int = HISTORY_LOOKBACK_DAYS
    status_callback: Optional[StatusCallback] = None
    is_processing: bool = False

    def process_query(
        self, query: str, *, now: Optional[datetime] = None
    ) -> QueryOutcome:
        if self.is_processing:
            raise QueryInProgressError("A query is already being processed")

        self.is_processing = True
        ctx = QueryContext(
            query=query,
            client=self.client,
            now=now or utc_now(),
            status_callback=self.status_callback,
        )
        try:
            ctx.report_status("Searching your browsing history...")
            history = self.history_source.fetch_recent(self.lookback_days)

            if not history:
                logger.info("empty history window; skipping analysis")
                return QueryOutcome(
                    status=STATUS_NO_HISTORY,
                    message=NO_HISTORY_MESSAGE.format(days=self.lookback_days),
                )

            ctx.report_status(
                f"Found {len(history)} recent visits. Analyzing with Gemini..."
            )
            results = analyze_history(ctx, history)

            if results:
                return QueryOutcome(
                    status=STATUS_RESULTS,
                    message=RESULTS_MESSAGE.format(query=query),
                    results=results,
                )
            return QueryOutcome(status=STATUS_NO_MATCHES, message=NO_MATCHES_MESSAGE)
        except Exception as exc:
            logger.exception("query processing failed")
            return QueryOutcome(status=STATUS_ERROR, message=describe_failure(exc))
        finally:
            self.is_processing = False
