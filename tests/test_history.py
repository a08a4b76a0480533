import json
import sqlite3
from datetime import datetime, timedelta, timezone

import pytest

from sitesleuth.core.exceptions import HistorySourceError
from sitesleuth.history import (
    ChromeHistorySource,
    JsonHistorySource,
    StaticHistorySource,
    clean_history,
    datetime_to_webkit,
    entry_from_mapping,
    webkit_to_datetime,
)
from sitesleuth.ranking.types import HistoryEntry, utc_now


def _epoch_ms(value):
    return int(value.timestamp() * 1000)


def test_clean_history_drops_internal_and_empty_rows(make_entry, now):
    entries = [
        make_entry("https://a.example.com/", "A", days_ago=3),
        make_entry("chrome://settings", "Settings"),
        make_entry("chrome-extension://abc/popup.html", "Extension"),
        make_entry("https://b.example.com/", ""),
        make_entry("", "No URL"),
        make_entry("https://c.example.com/", "C", visit_count=0),
        make_entry("https://d.example.com/", "D", days_ago=1),
        make_entry("https://old.example.com/", "Old", days_ago=45),
    ]

    cleaned = clean_history(entries, since=now - timedelta(days=30))

    assert [entry.url for entry in cleaned] == [
        "https://d.example.com/",
        "https://a.example.com/",
    ]


def test_entry_from_mapping_accepts_both_key_styles():
    visited = datetime(2026, 2, 20, 8, 30, tzinfo=timezone.utc)

    camel = entry_from_mapping(
        {
            "url": "https://a.example.com/",
            "title": "A",
            "visitCount": 4,
            "lastVisitTime": _epoch_ms(visited),
        }
    )
    snake = entry_from_mapping(
        {
            "url": "https://a.example.com/",
            "title": "A",
            "visit_count": 4,
            "last_visit_time": "2026-02-20T08:30:00",
        }
    )

    assert camel == snake
    assert camel.last_visit_time == visited


@pytest.mark.parametrize("raw", [None, True, [1], 1e20, float("inf"), float("nan")])
def test_entry_from_mapping_rejects_bad_timestamps(raw):
    with pytest.raises(ValueError):
        entry_from_mapping({"url": "https://a.example.com/", "title": "A", "lastVisitTime": raw})


def test_static_source_applies_lookback_window():
    recent = utc_now() - timedelta(days=2)
    stale = utc_now() - timedelta(days=40)
    source = StaticHistorySource(
        [
            HistoryEntry("https://old.example.com/", "Old", 1, stale),
            HistoryEntry("https://new.example.com/", "New", 1, recent),
        ]
    )

    assert [entry.url for entry in source.fetch_recent(30)] == ["https://new.example.com/"]
    assert len(source.fetch_recent(60)) == 2


def test_json_source_skips_out_of_range_timestamps(tmp_path):
    recent_ms = int((utc_now() - timedelta(days=1)).timestamp() * 1000)
    path = tmp_path / "history.json"
    path.write_text(
        "["
        f'{{"url": "https://good.example.com/", "title": "Good", "visitCount": 1, "lastVisitTime": {recent_ms}}},'
        '{"url": "https://huge.example.com/", "title": "Huge", "visitCount": 1, "lastVisitTime": 1e20},'
        '{"url": "https://inf.example.com/", "title": "Inf", "visitCount": 1, "lastVisitTime": Infinity}'
        "]",
        encoding="utf-8",
    )

    entries = JsonHistorySource(path).fetch_recent(30)

    assert [entry.url for entry in entries] == ["https://good.example.com/"]


def test_json_source_reads_export(tmp_path):
    recent = utc_now() - timedelta(days=1)
    path = tmp_path / "history.json"
    path.write_text(
        json.dumps(
            [
                {
                    "url": "https://a.example.com/",
                    "title": "A",
                    "visitCount": 2,
                    "lastVisitTime": _epoch_ms(recent),
                },
                {
                    "url": "https://b.example.com/",
                    "title": "B",
                    "visit_count": 1,
                    "last_visit_time": (recent - timedelta(hours=5)).isoformat(),
                },
                "not an object",
                {"url": "https://c.example.com/", "title": "C", "lastVisitTime": "yesterday"},
                {
                    "url": "chrome://history",
                    "title": "History",
                    "visitCount": 9,
                    "lastVisitTime": _epoch_ms(recent),
                },
            ]
        ),
        encoding="utf-8",
    )

    entries = JsonHistorySource(path).fetch_recent(30)

    assert [entry.url for entry in entries] == [
        "https://a.example.com/",
        "https://b.example.com/",
    ]
    assert entries[0].visit_count == 2


def test_json_source_missing_file(tmp_path):
    with pytest.raises(HistorySourceError):
        JsonHistorySource(tmp_path / "missing.json").fetch_recent(30)


@pytest.mark.parametrize("content", ["{not json", '{"url": "https://a.example.com/"}'])
def test_json_source_invalid_content(tmp_path, content):
    path = tmp_path / "history.json"
    path.write_text(content, encoding="utf-8")

    with pytest.raises(HistorySourceError):
        JsonHistorySource(path).fetch_recent(30)


def test_webkit_conversion():
    value = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)

    assert webkit_to_datetime(0) == datetime(1601, 1, 1, tzinfo=timezone.utc)
    assert webkit_to_datetime(datetime_to_webkit(value)) == value


def _write_chrome_db(path, rows):
    conn = sqlite3.connect(path)
    try:
        conn.execute(
            "CREATE TABLE urls (id INTEGER PRIMARY KEY, url TEXT, title TEXT, "
            "visit_count INTEGER, last_visit_time INTEGER)"
        )
        conn.executemany(
            "INSERT INTO urls (url, title, visit_count, last_visit_time) VALUES (?, ?, ?, ?)",
            rows,
        )
        conn.commit()
    finally:
        conn.close()


def test_chrome_source_reads_recent_rows(tmp_path):
    db_path = tmp_path / "History"
    now = utc_now()
    _write_chrome_db(
        db_path,
        [
            ("https://a.example.com/", "A", 3, datetime_to_webkit(now - timedelta(days=2))),
            ("https://b.example.com/", "B", 1, datetime_to_webkit(now - timedelta(hours=1))),
            ("https://old.example.com/", "Old", 8, datetime_to_webkit(now - timedelta(days=90))),
            ("chrome://newtab/", "New Tab", 20, datetime_to_webkit(now)),
            ("https://untitled.example.com/", None, 2, datetime_to_webkit(now)),
        ],
    )

    entries = ChromeHistorySource(db_path).fetch_recent(30)

    assert [entry.url for entry in entries] == [
        "https://b.example.com/",
        "https://a.example.com/",
    ]
    assert entries[1].visit_count == 3


def test_chrome_source_honours_max_results(tmp_path):
    db_path = tmp_path / "History"
    now = utc_now()
    _write_chrome_db(
        db_path,
        [
            (f"https://p{i}.example.com/", f"P{i}", 1, datetime_to_webkit(now - timedelta(hours=i)))
            for i in range(10)
        ],
    )

    entries = ChromeHistorySource(db_path, max_results=3).fetch_recent(30)

    assert [entry.url for entry in entries] == [
        "https://p0.example.com/",
        "https://p1.example.com/",
        "https://p2.example.com/",
    ]


def test_chrome_source_missing_database(tmp_path):
    with pytest.raises(HistorySourceError, match="not found"):
        ChromeHistorySource(tmp_path / "History").fetch_recent(30)


def test_chrome_source_unreadable_database(tmp_path):
    db_path = tmp_path / "History"
    db_path.write_bytes(b"this is not a sqlite database")

    with pytest.raises(HistorySourceError):
        ChromeHistorySource(db_path).fetch_recent(30)
