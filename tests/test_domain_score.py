"""Tests for hostname scoring against query concepts."""

import pytest

from sitesleuth.ranking.concepts import extract_concepts
from sitesleuth.ranking.domain_score import (
    extract_hostname,
    get_domain_score,
    hostname_matches,
)
from sitesleuth.ranking.types import Concept


def test_requested_platform_gets_bonus():
    concepts = extract_concepts("reddit python")
    assert get_domain_score("https://www.reddit.com/r/python", concepts) == 100


def test_wrong_platform_is_hard_excluded():
    concepts = extract_concepts("reddit python")
    assert get_domain_score("https://github.com/python/cpython", concepts) == -1000
    assert get_domain_score("https://docs.python.org/3/", concepts) == -1000


def test_any_requested_platform_is_enough():
    concepts = extract_concepts("youtube or twitter clip")
    assert get_domain_score("https://x.com/someone/status/1", concepts) == 100
    assert get_domain_score("https://youtu.be/abc", concepts) == 100


def test_subdomain_matching_is_not_substring_matching():
    concepts = extract_concepts("tweet about launch")
    # "microsoft.com" contains "t.co" as a substring but is not on t.co.
    assert get_domain_score("https://www.microsoft.com/news", concepts) == -1000


def test_platforms_without_domain_lists_do_not_exclude():
    concepts = extract_concepts("linkedin job post")
    # linkedin is a platform concept but carries no domain list.
    assert get_domain_score("https://example.com/jobs", concepts) == 0


def test_no_platform_requested_leaves_platform_domains_alone():
    concepts = extract_concepts("python packaging")
    assert get_domain_score("https://github.com/pypa/pip", concepts) == 0


def test_social_and_general_penalties():
    concepts = extract_concepts("holiday photos")
    assert get_domain_score("https://www.facebook.com/albums", concepts) == -15
    assert get_domain_score("https://mail.google.com/mail", concepts) == -25
    assert get_domain_score("https://www.linkedin.com/feed", concepts) == -25


def test_domain_keyword_bonus_per_matching_keyword():
    concepts = [Concept(name="wallpaper", keywords=("wallpaper",), weight=10)]
    # "wallpaper" and "desktop" both appear in the hostname.
    score = get_domain_score("https://desktop-wallpaper.example.org/", concepts)
    assert score == 24


def test_tech_concept_domain_bonus():
    concepts = extract_concepts("tech blog")
    assert get_domain_score("https://dev.to/some-post", concepts) == 12


@pytest.mark.parametrize("url", ["not a url", "", "http://[broken/", "/relative/path"])
def test_malformed_urls_score_zero(url):
    concepts = extract_concepts("reddit python")
    assert get_domain_score(url, concepts) == 0


def test_extract_hostname_lowercases():
    assert extract_hostname("HTTPS://WWW.Reddit.COM/r/x") == "www.reddit.com"


def test_hostname_matches():
    assert hostname_matches("old.reddit.com", ("reddit.com",))
    assert hostname_matches("reddit.com", ("reddit.com",))
    assert not hostname_matches("notreddit.com", ("reddit.com",))
    assert not hostname_matches("microsoft.com", ("t.co",))
