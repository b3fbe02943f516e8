"""
Spaced repetition scheduler.

Levels move along a linear scale: +1 on a correct answer (capped at 10),
-2 on a wrong one (floored at 1). The interval for a level comes from a
doubling table and is scaled by the learner's self-rated difficulty.

This is a pure computation module with no I/O.
"""

import math
from collections.abc import Iterable, Sequence
from datetime import datetime, timedelta, timezone

from labas.domain.constants import (
    DEFAULT_MULTIPLIER,
    DEFAULT_SESSION_SIZE,
    DEMOTION_STEP,
    DIFFICULTY_MULTIPLIERS,
    MAX_LEVEL,
    MIN_LEVEL,
    SRS_INTERVALS,
)
from labas.domain.srs.models import (
    ReviewableItem,
    ReviewOutcome,
    StudySuggestion,
    validate_level,
)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SrsScheduler:
    """
    Computes review schedules from answers.

    Stateless and side-effect free, except for apply_review which writes the
    outcome back onto the item it is given.
    """

    def __init__(self, intervals: Sequence[int] = SRS_INTERVALS):
        self.intervals = tuple(intervals)

    def base_interval(self, level: int) -> int:
        """Interval in days for ``level``; levels past the table use its last entry."""
        if level - 1 < len(self.intervals):
            return self.intervals[level - 1]
        return self.intervals[-1]

    def record_outcome(
        self,
        level: int,
        correct: bool,
        rating_multiplier: float = 1.0,
        now: datetime | None = None,
    ) -> ReviewOutcome:
        """
        Compute the new level and due date after one answer.

        Args:
            level: Current level, 1..10.
            correct: Whether the answer was right.
            rating_multiplier: Scales the interval (see difficulty_multiplier).
            now: Reference time; defaults to the current UTC time.

        Raises:
            InvalidLevel: If ``level`` is not an integer in [1, 10].
        """
        validate_level(level)
        if correct:
            new_level = min(level + 1, MAX_LEVEL)
        else:
            new_level = max(level - DEMOTION_STEP, MIN_LEVEL)

        interval_days = math.floor(self.base_interval(new_level) * rating_multiplier)
        now = now or utcnow()
        return ReviewOutcome(
            new_level=new_level,
            next_review_at=now + timedelta(days=interval_days),
            interval_days=interval_days,
        )

    def is_due(self, next_review_at: datetime, now: datetime | None = None) -> bool:
        return next_review_at <= (now or utcnow())

    @staticmethod
    def difficulty_multiplier(user_rating: object) -> float:
        """Map a 1/2/3 self-rating (3.0 counts as 3) to 0.5/1.0/1.5; anything else is 1.0."""
        if isinstance(user_rating, bool) or not isinstance(user_rating, (int, float)):
            return DEFAULT_MULTIPLIER
        return DIFFICULTY_MULTIPLIERS.get(user_rating, DEFAULT_MULTIPLIER)

    def apply_review(
        self,
        item: ReviewableItem,
        correct: bool,
        user_rating: int | None = None,
        now: datetime | None = None,
    ) -> ReviewOutcome:
        """Record an answer on ``item``: counters, last review time, level and due date."""
        now = now or utcnow()
        multiplier = (
            self.difficulty_multiplier(user_rating)
            if user_rating is not None
            else DEFAULT_MULTIPLIER
        )
        outcome = self.record_outcome(item.level, correct, multiplier, now=now)

        item.total_reviews += 1
        if correct:
            item.correct_answers += 1
        item.last_reviewed_at = now
        item.level = outcome.new_level
        item.next_review_at = outcome.next_review_at
        return outcome

    def select_due_batch(
        self,
        items: Iterable[ReviewableItem],
        now: datetime | None = None,
        target_size: int = DEFAULT_SESSION_SIZE,
    ) -> list[ReviewableItem]:
        """
        Pick the items to study next.

        Due items only, weakest level first, then most overdue. Equal keys keep
        their input order. At most ``target_size`` items are returned.
        """
        now = now or utcnow()
        due = [item for item in items if self.is_due(item.next_review_at, now)]
        # sorted() is stable, so ties keep input order
        ordered = sorted(due, key=lambda item: (item.level, item.next_review_at))
        return ordered[: max(target_size, 0)]

    def suggest_session(
        self,
        items: Iterable[ReviewableItem],
        now: datetime | None = None,
        target_size: int = DEFAULT_SESSION_SIZE,
    ) -> StudySuggestion:
        now = now or utcnow()
        due = [item for item in items if self.is_due(item.next_review_at, now)]
        if not due:
            return StudySuggestion(
                recommended=[],
                total_due=0,
                message="No words due for review! Great job staying on track.",
            )

        recommended = self.select_due_batch(due, now, target_size)
        message = f"{len(recommended)} words ready for review."
        if len(due) > len(recommended):
            message += f" {len(due) - len(recommended)} more words are also due."
        return StudySuggestion(recommended=recommended, total_due=len(due), message=message)
