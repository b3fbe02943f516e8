"""
Domain models for the spaced repetition scheduler.

These are pure data structures with no I/O or external dependencies.
"""

from dataclasses import dataclass, field
from datetime import datetime

from labas.domain.constants import MAX_LEVEL, MIN_LEVEL
from labas.domain.errors import InvalidLevel


def validate_level(level: object) -> int:
    """Return ``level`` unchanged if it is a valid SRS level, else raise InvalidLevel."""
    if isinstance(level, bool) or not isinstance(level, int):
        raise InvalidLevel(level)
    if not MIN_LEVEL <= level <= MAX_LEVEL:
        raise InvalidLevel(level)
    return level


@dataclass
class ReviewableItem:
    """
    A vocabulary entry tracked by the scheduler.

    Attributes:
        id: Unique identifier.
        level: Mastery tier, 1 (new) to 10 (mastered).
        next_review_at: When the item becomes due.
        total_reviews: Number of recorded answers.
        correct_answers: Number of recorded correct answers.
        last_reviewed_at: Time of the most recent answer, if any.
        text: Lithuanian word or phrase (display and pronunciation only).
        translation: Optional gloss (display only).
    """

    id: str
    next_review_at: datetime
    level: int = MIN_LEVEL
    total_reviews: int = 0
    correct_answers: int = 0
    last_reviewed_at: datetime | None = None
    text: str = ""
    translation: str | None = None

    def __post_init__(self) -> None:
        validate_level(self.level)


@dataclass(frozen=True)
class ReviewOutcome:
    """Result of applying one answer to a level."""

    new_level: int
    next_review_at: datetime
    interval_days: int


@dataclass(frozen=True)
class SessionResult:
    """
    A single answer given during a study session.

    Attributes:
        item_id: The reviewed item.
        correct: Whether the answer was right.
        user_rating: Self-assessment, 1=difficult, 2=medium, 3=easy.
        timestamp: When the answer was given.
        response_time: Seconds the learner took to answer, if measured.
    """

    item_id: str
    correct: bool
    user_rating: int
    timestamp: datetime
    response_time: float | None = None


@dataclass(frozen=True)
class SessionSummary:
    """Aggregate of one study session, kept in the rolling session log."""

    date: datetime
    words_reviewed: int
    correct_answers: int
    average_response_time: float
    difficulty_distribution: dict[str, int]
    session_duration: float  # seconds


@dataclass
class LevelDistribution:
    beginner: int = 0  # levels 1-3
    intermediate: int = 0  # levels 4-6
    advanced: int = 0  # levels 7-8
    mastered: int = 0  # levels 9-10


@dataclass
class LearningStats:
    """Aggregate learning statistics over a set of items."""

    total_words: int = 0
    average_level: float = 0.0
    distribution: LevelDistribution = field(default_factory=LevelDistribution)
    retention_rate: float = 0.0
    streak_days: int = 0
    reviews_today: int = 0


@dataclass(frozen=True)
class StudySuggestion:
    recommended: list[ReviewableItem]
    total_due: int
    message: str


@dataclass(frozen=True)
class Recommendation:
    """A suggested next action for the learner."""

    type: str  # overdue, weak_areas, new_words, maintain_streak
    priority: str  # high, medium, low
    message: str
    action: str
    item_ids: list[str] = field(default_factory=list)
