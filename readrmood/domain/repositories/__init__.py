"""Repositories owning the reading tracker's collections."""

from .achievements_repository import AchievementsRepository
from .moods_repository import MoodsRepository
from .reading_repository import ReadingRepository
from .sessions_repository import SessionsRepository
from .settings_repository import SettingsRepository

__all__ = [
    "AchievementsRepository",
    "MoodsRepository",
    "ReadingRepository",
    "SessionsRepository",
    "SettingsRepository",
]
