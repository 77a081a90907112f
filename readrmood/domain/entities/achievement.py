"""Achievement entities for the reading tracker."""

import uuid
from datetime import datetime
from enum import Enum
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from .base import Record


class PredicateKind(str, Enum):
    """The quantity an achievement threshold is compared against."""

    SESSIONS_LOGGED = "sessions_logged"
    TOTAL_MINUTES = "total_minutes"
    TOTAL_PAGES = "total_pages"
    STREAK_DAYS = "streak_days"
    DISTINCT_MOODS = "distinct_moods"
    MOODS_LOGGED = "moods_logged"
    BOOKS_ADDED = "books_added"
    BOOKS_COMPLETED = "books_completed"
    NIGHT_SESSIONS = "night_sessions"
    WEEKEND_SESSIONS = "weekend_sessions"


class AchievementDefinition(BaseModel):
    """Static catalog entry describing how an achievement is earned."""

    model_config = ConfigDict(frozen=True)

    code: str = Field(min_length=1)
    title: str
    description: str
    icon: str
    points: int = Field(ge=0)
    predicate: PredicateKind
    threshold: int = Field(ge=1)

    def is_satisfied_by(self, value: int) -> bool:
        return value >= self.threshold

    def to_achievement(self) -> "Achievement":
        """Locked achievement record seeded from this definition."""
        return Achievement(code=self.code, title=self.title, description=self.description)


class Achievement(Record):
    """Persisted unlock state of one catalog entry."""

    id: UUID = Field(default_factory=uuid.uuid4)
    code: str
    title: str
    description: str = ""
    is_unlocked: bool = False
    unlocked_at: Optional[datetime] = None

    def unlocked(self, at: datetime) -> "Achievement":
        return self.with_changes(is_unlocked=True, unlocked_at=at)


class AchievementProgress(BaseModel):
    """How far the user is from earning an achievement."""

    definition: AchievementDefinition
    current_value: int
    target_value: int
    percentage: float
    is_complete: bool
