# Application SRS Package
from .metrics import StatsCalculator, retention_rate
from .scheduler import SrsScheduler
from .service import StudyService
from .session_log import SessionLog, summarize_session

__all__ = [
    "SrsScheduler",
    "StatsCalculator",
    "StudyService",
    "SessionLog",
    "retention_rate",
    "summarize_session",
]
