"""Rolling log of study-session summaries."""

import json
import logging
from datetime import datetime
from pathlib import Path

from labas.domain.constants import SESSION_LOG_LIMIT
from labas.domain.srs.models import SessionResult, SessionSummary

from .scheduler import utcnow

logger = logging.getLogger(__name__)


def summarize_session(
    results: list[SessionResult], now: datetime | None = None
) -> SessionSummary:
    """Build the summary of one session from its answers."""
    timed = [r.response_time or 0.0 for r in results]
    duration = 0.0
    if results:
        duration = (results[-1].timestamp - results[0].timestamp).total_seconds()

    return SessionSummary(
        date=now or utcnow(),
        words_reviewed=len({r.item_id for r in results}),
        correct_answers=sum(1 for r in results if r.correct),
        average_response_time=sum(timed) / len(timed) if timed else 0.0,
        difficulty_distribution={
            "difficult": sum(1 for r in results if r.user_rating == 1),
            "medium": sum(1 for r in results if r.user_rating == 2),
            "easy": sum(1 for r in results if r.user_rating == 3),
        },
        session_duration=duration,
    )


class SessionLog:
    """
    Keeps the last ``limit`` session summaries, oldest first.

    When ``path`` is given the log is loaded from and saved to that JSON file.
    """

    def __init__(self, path: Path | None = None, limit: int = SESSION_LOG_LIMIT):
        self.path = path
        self.limit = limit
        self._sessions: list[SessionSummary] = self._load() if path else []

    @property
    def sessions(self) -> list[SessionSummary]:
        return list(self._sessions)

    def record(
        self, results: list[SessionResult], now: datetime | None = None
    ) -> SessionSummary:
        summary = summarize_session(results, now)
        self._sessions.append(summary)
        if len(self._sessions) > self.limit:
            del self._sessions[: len(self._sessions) - self.limit]
        if self.path:
            self._save()
        return summary

    def _load(self) -> list[SessionSummary]:
        if not self.path.exists():
            return []
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Could not load session log {self.path}, starting fresh: {e}")
            return []

        try:
            sessions = [
                SessionSummary(
                    date=datetime.fromisoformat(entry["date"]),
                    words_reviewed=entry["words_reviewed"],
                    correct_answers=entry["correct_answers"],
                    average_response_time=entry["average_response_time"],
                    difficulty_distribution=entry["difficulty_distribution"],
                    session_duration=entry["session_duration"],
                )
                for entry in raw
            ]
        except (KeyError, TypeError, ValueError) as e:
            logger.warning(f"Unexpected session log format in {self.path}, starting fresh: {e!r}")
            return []
        return sessions[-self.limit :]

    def _save(self) -> None:
        data = [
            {
                "date": s.date.isoformat(),
                "words_reviewed": s.words_reviewed,
                "correct_answers": s.correct_answers,
                "average_response_time": s.average_response_time,
                "difficulty_distribution": s.difficulty_distribution,
                "session_duration": s.session_duration,
            }
            for s in self._sessions
        ]
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data, indent=2), encoding="utf-8")
