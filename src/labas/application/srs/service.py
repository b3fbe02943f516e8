"""
Study Service — Application layer orchestrator.

Coordinates the vocabulary repository, the scheduler and the statistics calculator.
"""

import logging
from datetime import datetime

from labas.domain.constants import DEFAULT_SESSION_SIZE
from labas.domain.srs.models import (
    LearningStats,
    Recommendation,
    ReviewableItem,
    ReviewOutcome,
    SessionResult,
    SessionSummary,
    StudySuggestion,
)
from labas.domain.srs.ports import VocabularyRepository

from .metrics import StatsCalculator
from .scheduler import SrsScheduler, utcnow
from .session_log import SessionLog

logger = logging.getLogger(__name__)


class StudyService:
    """
    Application service for reviewing vocabulary.

    Follows Dependency Inversion: depends on the VocabularyRepository
    abstraction, not a concrete store.
    """

    def __init__(
        self,
        repository: VocabularyRepository,
        scheduler: SrsScheduler | None = None,
        calculator: StatsCalculator | None = None,
        session_log: SessionLog | None = None,
    ):
        self._repo = repository
        self._scheduler = scheduler or SrsScheduler()
        self._calc = calculator or StatsCalculator()
        self._log = session_log or SessionLog()

    def review(
        self,
        item_id: str,
        correct: bool,
        user_rating: int | None = None,
        now: datetime | None = None,
    ) -> ReviewOutcome:
        """
        Record one answer for an item and persist its new schedule.

        Raises:
            ItemNotFound: If the item does not exist.
            InvalidLevel: If the stored level is corrupt.
        """
        item = self._repo.get(item_id)
        outcome = self._scheduler.apply_review(item, correct, user_rating, now)
        self._repo.update(item)
        logger.debug(
            f"[review] {item_id} correct={correct} -> level {outcome.new_level}, "
            f"next in {outcome.interval_days}d"
        )
        return outcome

    def due_batch(
        self, target_size: int = DEFAULT_SESSION_SIZE, now: datetime | None = None
    ) -> list[ReviewableItem]:
        return self._scheduler.select_due_batch(self._repo.list_items(), now, target_size)

    def suggest_session(
        self, target_size: int = DEFAULT_SESSION_SIZE, now: datetime | None = None
    ) -> StudySuggestion:
        return self._scheduler.suggest_session(self._repo.list_items(), now, target_size)

    def stats(self, now: datetime | None = None) -> LearningStats:
        return self._calc.compute_stats(self._repo.list_items(), now)

    def recommendations(self, now: datetime | None = None) -> list[Recommendation]:
        return self._calc.recommendations(self._repo.list_items(), now)

    def finish_session(
        self, results: list[SessionResult], now: datetime | None = None
    ) -> SessionSummary:
        summary = self._log.record(results, now or utcnow())
        logger.info(
            f"Session finished: {summary.correct_answers}/{len(results)} correct "
            f"over {summary.words_reviewed} words"
        )
        return summary
