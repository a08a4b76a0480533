import os
from datetime import datetime, timedelta, timezone
from unittest.mock import patch

import pytest

from sitesleuth.ranking.types import GroundedResponse, HistoryEntry

FIXED_NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture(autouse=True)
def mock_settings_env_vars(tmp_path):
    """Automatically mock HOME and environment variables to ensure test isolation."""
    fake_home = tmp_path / "fake_home"
    fake_home.mkdir()

    with patch("pathlib.Path.home", return_value=fake_home):
        with patch.dict(os.environ, {"HOME": str(fake_home)}):
            os.environ.pop("GEMINI_API_KEY", None)
            yield


@pytest.fixture
def now():
    return FIXED_NOW


@pytest.fixture
def make_entry(now):
    """Factory for history entries visited ``days_ago`` days before ``now``."""

    def _make(url, title, visit_count=1, days_ago=0):
        return HistoryEntry(
            url=url,
            title=title,
            visit_count=visit_count,
            last_visit_time=now - timedelta(days=days_ago),
        )

    return _make


class FakeClient:
    """Scripted generation client recording the prompts it receives."""

    def __init__(self, text="", grounded=None, text_error=None, grounded_error=None):
        self.text = text
        self.grounded = grounded or GroundedResponse(text="[]")
        self.text_error = text_error
        self.grounded_error = grounded_error
        self.text_prompts = []
        self.grounded_prompts = []

    def generate_text(self, prompt):
        self.text_prompts.append(prompt)
        if self.text_error is not None:
            raise self.text_error
        return self.text

    def generate_grounded(self, prompt):
        self.grounded_prompts.append(prompt)
        if self.grounded_error is not None:
            raise self.grounded_error
        return self.grounded


@pytest.fixture
def fake_client_factory():
    return FakeClient
