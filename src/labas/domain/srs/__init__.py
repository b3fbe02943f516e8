# Domain SRS Package
from .models import (
    LearningStats,
    LevelDistribution,
    Recommendation,
    ReviewableItem,
    ReviewOutcome,
    SessionResult,
    SessionSummary,
    StudySuggestion,
    validate_level,
)
from .ports import VocabularyRepository

__all__ = [
    "ReviewableItem",
    "ReviewOutcome",
    "SessionResult",
    "SessionSummary",
    "LevelDistribution",
    "LearningStats",
    "StudySuggestion",
    "Recommendation",
    "VocabularyRepository",
    "validate_level",
]
