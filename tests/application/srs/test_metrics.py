from datetime import timedelta

import pytest

from labas.application.srs.metrics import StatsCalculator, retention_rate


@pytest.fixture
def calculator():
    return StatsCalculator()


def test_empty_stats(calculator, now):
    stats = calculator.compute_stats([], now)
    assert stats.total_words == 0
    assert stats.average_level == 0
    assert stats.retention_rate == 0
    assert stats.streak_days == 0
    assert stats.distribution.beginner == 0


def test_retention_rate_helper():
    assert retention_rate(0, 0) == 0
    assert retention_rate(3, 4) == 75.0


def test_distribution_and_average(calculator, make_item, now):
    items = [make_item(f"w{level}", level=level) for level in range(1, 11)]
    stats = calculator.compute_stats(items, now)

    assert stats.total_words == 10
    assert stats.average_level == 5.5
    assert stats.distribution.beginner == 3
    assert stats.distribution.intermediate == 3
    assert stats.distribution.advanced == 2
    assert stats.distribution.mastered == 2


def test_retention_across_items(calculator, make_item, now):
    items = [
        make_item("a", total_reviews=3, correct_answers=2),
        make_item("b", total_reviews=3, correct_answers=3),
        make_item("c"),
    ]
    stats = calculator.compute_stats(items, now)
    assert stats.retention_rate == 83.3


def test_reviews_today(calculator, make_item, now):
    items = [
        make_item("a", last_reviewed_days_ago=0),
        make_item("b", last_reviewed_days_ago=0.1),
        make_item("c", last_reviewed_days_ago=1),
        make_item("d"),
    ]
    assert calculator.compute_stats(items, now).reviews_today == 2


def test_streak_counts_consecutive_days(calculator, make_item, now):
    items = [make_item(f"w{d}", last_reviewed_days_ago=d) for d in (0, 1, 2, 4)]
    assert calculator.streak_days(items, now) == 3


def test_streak_zero_without_review_today(calculator, make_item, now):
    items = [make_item(f"w{d}", last_reviewed_days_ago=d) for d in (1, 2, 3)]
    assert calculator.streak_days(items, now) == 0


def test_streak_capped_at_one_year(calculator, make_item, now):
    items = [make_item(f"w{d}", last_reviewed_days_ago=d) for d in range(400)]
    assert calculator.streak_days(items, now) == 365


def test_recommend_overdue_and_weak(calculator, make_item, now):
    items = [
        make_item("late", due_in_days=-2),
        make_item("weak", due_in_days=3, total_reviews=4, correct_answers=1),
        make_item("fine", due_in_days=3, total_reviews=4, correct_answers=4),
    ]
    recs = {r.type: r for r in calculator.recommendations(items, now)}

    assert recs["overdue"].priority == "high"
    assert recs["overdue"].item_ids == ["late"]
    assert recs["weak_areas"].item_ids == ["weak"]
    assert "new_words" not in recs


def test_overdue_recommendation_lists_at_most_ten(calculator, make_item, now):
    items = [make_item(f"w{n}", due_in_days=-1) for n in range(15)]
    recs = calculator.recommendations(items, now)
    assert "15 overdue words" in recs[0].message
    assert len(recs[0].item_ids) == 10


def test_recommend_new_words_after_busy_day(calculator, make_item, now):
    items = [make_item(f"w{n}", due_in_days=5, last_reviewed_days_ago=0) for n in range(10)]
    types = [r.type for r in calculator.recommendations(items, now)]
    assert types == ["new_words"]


def test_recommend_maintaining_streak(calculator, make_item, now):
    items = [
        make_item(f"w{d}", due_in_days=5, last_reviewed_days_ago=d) for d in (1, 2, 3)
    ]
    recs = calculator.recommendations(items, now)
    assert [r.type for r in recs] == ["maintain_streak"]
    assert "3-day streak" in recs[0].message

    items.append(make_item("today", due_in_days=5, last_reviewed_days_ago=0))
    assert calculator.recommendations(items, now) == []
