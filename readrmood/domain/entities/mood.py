"""Mood entities for the reading tracker."""

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Optional
from uuid import UUID

from pydantic import Field, field_validator

from .base import Record


class MoodKind(str, Enum):
    """The fixed set of moods a user can log."""

    CALM = "calm"
    FOCUSED = "focused"
    SLEEPY = "sleepy"
    EXCITED = "excited"
    NEUTRAL = "neutral"

    @property
    def label(self) -> str:
        return self.value.capitalize()

    @property
    def emoji(self) -> str:
        return _EMOJI[self]


_EMOJI = {
    MoodKind.CALM: "\U0001F60A",
    MoodKind.FOCUSED: "\U0001F9E0",
    MoodKind.SLEEPY: "\U0001F634",
    MoodKind.EXCITED: "\U0001F929",
    MoodKind.NEUTRAL: "\U0001F642",
}


class MoodTag(str, Enum):
    """Tags attached to mood profiles."""

    DEEP_FOCUS = "deep_focus"
    RELAXED = "relaxed"
    SLEEPY = "sleepy"
    ENERGIZED = "energized"
    NEUTRAL = "neutral"
    REFLECTIVE = "reflective"
    EVENING = "evening"
    MORNING = "morning"


class MoodEntry(Record):
    """A mood logged after reading or on its own."""

    id: UUID = Field(default_factory=uuid.uuid4)
    date: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    mood: MoodKind = MoodKind.NEUTRAL
    note: Optional[str] = None

    @field_validator("note")
    @classmethod
    def _blank_note_is_none(cls, value: Optional[str]) -> Optional[str]:
        if value is None or not value.strip():
            return None
        return value
