"""
Statistics and recommendations derived from scheduling state.

This is a pure computation module with no I/O.
"""

from collections.abc import Sequence
from datetime import date, datetime, timedelta

from labas.domain.constants import (
    MAX_OVERDUE_IN_RECOMMENDATION,
    MAX_STREAK_DAYS,
    NEW_WORDS_REVIEW_THRESHOLD,
    STREAK_REMINDER_DAYS,
    WEAK_MIN_REVIEWS,
    WEAK_RETENTION_THRESHOLD,
)
from labas.domain.srs.models import (
    LearningStats,
    LevelDistribution,
    Recommendation,
    ReviewableItem,
)

from .scheduler import utcnow


def _day_of(ts: datetime, now: datetime) -> date:
    """Calendar day of ``ts`` as seen from ``now``'s timezone."""
    if ts.tzinfo is not None and now.tzinfo is not None:
        return ts.astimezone(now.tzinfo).date()
    return ts.date()


def retention_rate(correct_answers: int, total_reviews: int) -> float:
    """Percentage of correct answers; 0 when nothing was reviewed."""
    if total_reviews == 0:
        return 0.0
    return correct_answers / total_reviews * 100


class StatsCalculator:
    """
    Computes aggregate statistics over ReviewableItem collections.

    Stateless and side-effect free.
    """

    def compute_stats(
        self, items: Sequence[ReviewableItem], now: datetime | None = None
    ) -> LearningStats:
        now = now or utcnow()
        stats = LearningStats(
            total_words=len(items),
            streak_days=self.streak_days(items, now),
        )
        if not items:
            return stats

        total_level = 0
        total_correct = 0
        total_reviews = 0
        today = now.date()
        distribution = LevelDistribution()

        for item in items:
            total_level += item.level
            total_correct += item.correct_answers
            total_reviews += item.total_reviews

            if item.level <= 3:
                distribution.beginner += 1
            elif item.level <= 6:
                distribution.intermediate += 1
            elif item.level <= 8:
                distribution.advanced += 1
            else:
                distribution.mastered += 1

            if item.last_reviewed_at and _day_of(item.last_reviewed_at, now) == today:
                stats.reviews_today += 1

        stats.distribution = distribution
        stats.average_level = round(total_level / len(items), 1)
        stats.retention_rate = round(retention_rate(total_correct, total_reviews), 1)
        return stats

    def streak_days(self, items: Sequence[ReviewableItem], now: datetime | None = None) -> int:
        """
        Count consecutive days with at least one review, walking back from today.

        Stops at the first day without reviews; capped at 365.
        """
        now = now or utcnow()
        reviewed_days = {
            _day_of(item.last_reviewed_at, now)
            for item in items
            if item.last_reviewed_at is not None
        }

        streak = 0
        check = now.date()
        while streak < MAX_STREAK_DAYS and check in reviewed_days:
            streak += 1
            check -= timedelta(days=1)
        return streak

    def recommendations(
        self, items: Sequence[ReviewableItem], now: datetime | None = None
    ) -> list[Recommendation]:
        """Suggest what the learner should do next, most urgent kinds first."""
        now = now or utcnow()
        stats = self.compute_stats(items, now)
        result: list[Recommendation] = []

        overdue = [item for item in items if item.next_review_at < now]
        if overdue:
            result.append(
                Recommendation(
                    type="overdue",
                    priority="high",
                    message=(
                        f"You have {len(overdue)} overdue words. "
                        "Review them to maintain your progress!"
                    ),
                    action="Review Now",
                    item_ids=[item.id for item in overdue[:MAX_OVERDUE_IN_RECOMMENDATION]],
                )
            )

        weak = [
            item
            for item in items
            if item.total_reviews >= WEAK_MIN_REVIEWS
            and retention_rate(item.correct_answers, item.total_reviews)
            < WEAK_RETENTION_THRESHOLD
        ]
        if weak:
            result.append(
                Recommendation(
                    type="weak_areas",
                    priority="medium",
                    message=(
                        f"{len(weak)} words need extra attention. "
                        "Focus on these to improve retention."
                    ),
                    action="Practice Weak Words",
                    item_ids=[item.id for item in weak],
                )
            )

        if stats.reviews_today >= NEW_WORDS_REVIEW_THRESHOLD and not overdue:
            result.append(
                Recommendation(
                    type="new_words",
                    priority="low",
                    message="Great progress today! Ready to learn some new words?",
                    action="Add New Words",
                )
            )

        # today has no reviews yet, so the streak at risk is the one ending yesterday
        if stats.reviews_today == 0:
            at_risk = self.streak_days(items, now - timedelta(days=1))
        else:
            at_risk = 0
        if at_risk >= STREAK_REMINDER_DAYS:
            result.append(
                Recommendation(
                    type="maintain_streak",
                    priority="high",
                    message=(
                        f"Don't break your {at_risk}-day streak! "
                        "Do a quick review session."
                    ),
                    action="Quick Review",
                )
            )

        return result
