"""Browsing history sources feeding the ranking pipeline."""

from __future__ import annotations

import json
import logging
import shutil
import sqlite3
import tempfile
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Iterable, List, Mapping, Optional, Protocol, Sequence, Union

from sitesleuth.core.exceptions import HistorySourceError
from sitesleuth.ranking.types import HistoryEntry, utc_now

logger = logging.getLogger(__name__)

EXCLUDED_URL_PREFIXES = ("chrome://", "chrome-extension://")
WEBKIT_EPOCH = datetime(1601, 1, 1, tzinfo=timezone.utc)
CHROME_HISTORY_QUERY = """
    SELECT url, title, visit_count, last_visit_time
    FROM urls
    WHERE last_visit_time >= ?
    ORDER BY last_visit_time DESC
    LIMIT ?
"""


class HistorySource(Protocol):
    """Supplies cleaned history entries for a lookback window."""

    def fetch_recent(self, lookback_days: int) -> List[HistoryEntry]: ...


def clean_history(
    items: Iterable[HistoryEntry], *, since: Optional[datetime] = None
) -> List[HistoryEntry]:
    """Drop browser-internal, untitled and unvisited rows; newest first."""
    kept = [
        item
        for item in items
        if item.url
        and item.title
        and not item.url.startswith(EXCLUDED_URL_PREFIXES)
        and item.visit_count > 0
        and (since is None or item.last_visit_time >= since)
    ]
    kept.sort(key=lambda item: item.last_visit_time, reverse=True)
    return kept


def _window_start(lookback_days: int) -> datetime:
    return utc_now() - timedelta(days=lookback_days)


def _parse_timestamp(raw: Any) -> datetime:
    """Accept epoch milliseconds or an ISO-8601 string."""
    if isinstance(raw, bool):
        raise ValueError(f"invalid timestamp: {raw!r}")
    if isinstance(raw, (int, float)):
        try:
            return datetime.fromtimestamp(raw / 1000, tz=timezone.utc)
        except (OverflowError, OSError) as e:
            raise ValueError(f"timestamp out of range: {raw!r}") from e
    if isinstance(raw, str):
        parsed = datetime.fromisoformat(raw)
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)
        return parsed
    raise ValueError(f"invalid timestamp: {raw!r}")


def entry_from_mapping(record: Mapping[str, Any]) -> HistoryEntry:
    """Build an entry from a camelCase or snake_case history record."""
    visit_count = record.get("visitCount", record.get("visit_count", 0))
    last_visit = record.get("lastVisitTime", record.get("last_visit_time"))
    return HistoryEntry(
        url=str(record.get("url") or ""),
        title=str(record.get("title") or ""),
        visit_count=int(visit_count or 0),
        last_visit_time=_parse_timestamp(last_visit),
    )


class StaticHistorySource:
    """In-memory history, already held by the caller."""

    def __init__(self, entries: Sequence[HistoryEntry]):
        self.entries = list(entries)

    def fetch_recent(self, lookback_days: int) -> List[HistoryEntry]:
        return clean_history(self.entries, since=_window_start(lookback_days))


class JsonHistorySource:
    """History exported as a JSON array of ``{url, title, visitCount, lastVisitTime}``."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path).expanduser()

    def fetch_recent(self, lookback_days: int) -> List[HistoryEntry]:
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            raise HistorySourceError(f"Cannot read history file {self.path}: {e}") from e

        if not isinstance(raw, list):
            raise HistorySourceError(
                f"History file {self.path} must contain a JSON array"
            )

        entries: List[HistoryEntry] = []
        for index, record in enumerate(raw):
            if not isinstance(record, dict):
                logger.debug("skipping non-object history record #%d", index)
                continue
            try:
                entries.append(entry_from_mapping(record))
            except (TypeError, ValueError) as e:
                logger.debug("skipping history record #%d: %s", index, e)

        cleaned = clean_history(entries, since=_window_start(lookback_days))
        logger.info(
            "loaded %d history entries (%d after cleaning) from %s",
            len(entries),
            len(cleaned),
            self.path,
        )
        return cleaned


def webkit_to_datetime(microseconds: int) -> datetime:
    return WEBKIT_EPOCH + timedelta(microseconds=microseconds)


def datetime_to_webkit(value: datetime) -> int:
    return (value - WEBKIT_EPOCH) // timedelta(microseconds=1)


class ChromeHistorySource:
    """Reads a Chrome/Chromium ``History`` SQLite database.

    Chrome keeps the file locked while running, so it is copied to a
    temporary directory before being opened.
    """

    def __init__(self, db_path: Union[str, Path], max_results: int = 1000):
        self.db_path = Path(db_path).expanduser()
        self.max_results = max_results

    def fetch_recent(self, lookback_days: int) -> List[HistoryEntry]:
        if not self.db_path.exists():
            raise HistorySourceError(f"History database not found: {self.db_path}")

        since = _window_start(lookback_days)
        with tempfile.TemporaryDirectory() as tmp_dir:
            snapshot = Path(tmp_dir) / "History"
            try:
                shutil.copy(self.db_path, snapshot)
                conn = sqlite3.connect(snapshot)
                try:
                    rows = conn.execute(
                        CHROME_HISTORY_QUERY,
                        (datetime_to_webkit(since), self.max_results),
                    ).fetchall()
                finally:
                    conn.close()
            except (OSError, sqlite3.Error) as e:
                raise HistorySourceError(
                    f"Cannot read history database {self.db_path}: {e}"
                ) from e

        entries = [
            HistoryEntry(
                url=url or "",
                title=title or "",
                visit_count=visit_count or 0,
                last_visit_time=webkit_to_datetime(last_visit_time or 0),
            )
            for url, title, visit_count, last_visit_time in rows
        ]
        cleaned = clean_history(entries, since=since)
        logger.info(
            "read %d history rows (%d after cleaning) from %s",
            len(entries),
            len(cleaned),
            self.db_path,
        )
        return cleaned
