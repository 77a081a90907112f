"""Domain entities for the reading tracker."""

from .achievement import (
    Achievement,
    AchievementDefinition,
    AchievementProgress,
    PredicateKind,
)
from .book import Book
from .mood import MoodEntry, MoodKind, MoodTag
from .reading_session import ReadingSession, minutes_between, round_half_up
from .settings import DEFAULT_PRIVACY_URL, AppSettings

__all__ = [
    # Library entities
    "Book",
    # Session entities
    "ReadingSession",
    "minutes_between",
    "round_half_up",
    # Mood entities
    "MoodEntry",
    "MoodKind",
    "MoodTag",
    # Achievement entities
    "Achievement",
    "AchievementDefinition",
    "AchievementProgress",
    "PredicateKind",
    # Settings
    "AppSettings",
    "DEFAULT_PRIVACY_URL",
]
