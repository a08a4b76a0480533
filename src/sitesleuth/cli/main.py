"""Command-line interface for sitesleuth."""

import argparse
import json
import logging
from typing import List, Optional

from rich.console import Console
from rich.markup import escape

from sitesleuth.config import (
    HISTORY_LOOKBACK_DAYS,
    LOG_FILE,
    LOG_LEVEL,
    MAX_HISTORY_RESULTS,
)
from sitesleuth.core.api_client import client_from_config
from sitesleuth.history import ChromeHistorySource, HistorySource, JsonHistorySource
from sitesleuth.logger import setup_logging
from sitesleuth.ranking.pipeline import STATUS_ERROR, AnalysisSession, QueryOutcome

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog="sitesleuth",
        description="Find pages in your browsing history from a plain-language description.",
    )
    parser.add_argument("query", nargs="+", help="What you are looking for")
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument(
        "--history",
        metavar="FILE",
        help="JSON export of history records (url, title, visitCount, lastVisitTime)",
    )
    source.add_argument(
        "--chrome-db",
        metavar="FILE",
        help="Path to a Chrome/Chromium 'History' SQLite database",
    )
    parser.add_argument(
        "--api-key",
        help="Gemini API key (defaults to the configured environment variable)",
    )
    parser.add_argument(
        "--lookback-days",
        type=int,
        default=HISTORY_LOOKBACK_DAYS,
        help=f"History window in days (default: {HISTORY_LOOKBACK_DAYS})",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        dest="as_json",
        help="Print results as JSON instead of formatted text",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log at DEBUG level",
    )
    return parser.parse_args(argv)


def build_history_source(args: argparse.Namespace) -> HistorySource:
    if args.chrome_db:
        return ChromeHistorySource(args.chrome_db, max_results=MAX_HISTORY_RESULTS)
    return JsonHistorySource(args.history)


def render_outcome(console: Console, outcome: QueryOutcome) -> None:
    """Print the outcome message followed by numbered results."""
    console.print(escape(outcome.message))
    for index, result in enumerate(outcome.results, start=1):
        console.print()
        console.print(f"[bold]{index}. {escape(result.title or 'Untitled')}[/bold]")
        console.print(f"   [cyan]{escape(result.url)}[/cyan]")
        if result.reason:
            console.print(f"   [dim]{escape(result.reason)}[/dim]")


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    setup_logging("DEBUG" if args.verbose else LOG_LEVEL, LOG_FILE)

    console = Console()
    query = " ".join(args.query).strip()
    client = client_from_config(api_key=args.api_key)
    if not client.api_key:
        console.print(
            "[yellow]No Gemini API key configured; results will use "
            "keyword scoring only.[/yellow]"
        )

    with console.status("Searching your browsing history...") as status:
        session = AnalysisSession(
            history_source=build_history_source(args),
            client=client,
            lookback_days=args.lookback_days,
            status_callback=lambda message: status.update(escape(message)),
        )
        outcome = session.process_query(query)

    if args.as_json:
        payload = {
            "status": outcome.status,
            "message": outcome.message,
            "results": [result.to_dict() for result in outcome.results],
        }
        console.print_json(json.dumps(payload))
    else:
        render_outcome(console, outcome)

    return 1 if outcome.status == STATUS_ERROR else 0
