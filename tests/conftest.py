from datetime import datetime, timedelta, timezone

import pytest

from labas.domain.srs.models import ReviewableItem

NOW = datetime(2024, 5, 15, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def make_item():
    """Factory for ReviewableItem with sensible defaults relative to NOW."""

    def _make(
        item_id="w1",
        level=1,
        due_in_days=0.0,
        total_reviews=0,
        correct_answers=0,
        last_reviewed_days_ago=None,
        text="labas",
    ):
        last = None
        if last_reviewed_days_ago is not None:
            last = NOW - timedelta(days=last_reviewed_days_ago)
        return ReviewableItem(
            id=item_id,
            level=level,
            next_review_at=NOW + timedelta(days=due_in_days),
            total_reviews=total_reviews,
            correct_answers=correct_answers,
            last_reviewed_at=last,
            text=text,
        )

    return _make


@pytest.fixture
def mock_home(tmp_path, monkeypatch):
    """Mocks Path.home() to point to a temp dir."""
    home = tmp_path / "home"
    home.mkdir()

    # Mocking HOME to a temp directory to isolate config and data files
    monkeypatch.setenv("HOME", str(home))
    for var in ("LABAS_PRIMARY_URL", "LABAS_FALLBACK_URL", "LABAS_HOST", "LABAS_PORT"):
        monkeypatch.delenv(var, raising=False)
    return home
