"""Tests for candidate pool selection."""

from unittest.mock import patch

from sitesleuth.ranking.candidates import select_candidates
from sitesleuth.ranking.types import QueryContext


def _python_pages(make_entry, count):
    return [
        make_entry(f"https://p{i}.example.com/", f"Python page {i}", visit_count=0, days_ago=10)
        for i in range(count)
    ]


def test_no_keyword_matches_returns_head_of_history(make_entry, now, fake_client_factory):
    history = [
        make_entry(f"https://n{i}.example.com/", f"Gardening {i}", visit_count=0, days_ago=10)
        for i in range(30)
    ]
    client = fake_client_factory(text="[1]")
    ctx = QueryContext(query="kubernetes", client=client, now=now)

    assert select_candidates(ctx, history) == history[:20]
    assert client.text_prompts == []


def test_small_pool_is_ranked_by_model(make_entry, now, fake_client_factory):
    history = _python_pages(make_entry, 10)
    client = fake_client_factory(text="[2, 1]")
    ctx = QueryContext(query="python", client=client, now=now)

    selected = select_candidates(ctx, history)

    assert [entry.url for entry in selected] == [history[1].url, history[0].url]
    assert len(client.text_prompts) == 1


def test_fifty_matches_still_use_model(make_entry, now, fake_client_factory):
    history = _python_pages(make_entry, 50)
    client = fake_client_factory(text="[50]")
    ctx = QueryContext(query="python", client=client, now=now)

    selected = select_candidates(ctx, history)

    assert [entry.url for entry in selected] == [history[49].url]


def test_large_pool_is_truncated_without_model(make_entry, now, fake_client_factory):
    history = _python_pages(make_entry, 60)
    client = fake_client_factory(text="[1]")
    ctx = QueryContext(query="python", client=client, now=now)

    selected = select_candidates(ctx, history)

    assert len(selected) == 35
    assert [entry.url for entry in selected] == [entry.url for entry in history[:35]]
    assert client.text_prompts == []


def test_failure_falls_back_to_keyword_order(make_entry, now):
    history = _python_pages(make_entry, 25)
    ctx = QueryContext(query="python", client=None, now=now)

    with patch(
        "sitesleuth.ranking.candidates.rank_candidates",
        side_effect=RuntimeError("boom"),
    ):
        selected = select_candidates(ctx, history)

    assert [entry.url for entry in selected] == [entry.url for entry in history[:20]]


def test_filter_failure_yields_empty_pool(make_entry, now):
    history = _python_pages(make_entry, 5)
    ctx = QueryContext(query="python", client=None, now=now)

    with patch(
        "sitesleuth.ranking.candidates.smart_keyword_filter",
        side_effect=ValueError("bad history"),
    ):
        assert select_candidates(ctx, history) == []
