"""Fixed energy/valence profiles for each mood and the aggregates built on them."""

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, NamedTuple

from ..entities.mood import MoodEntry, MoodKind, MoodTag


@dataclass(frozen=True)
class MoodProfile:
    """Taxonomy data for one mood kind; values are in ``[0, 1]``."""

    kind: MoodKind
    energy: float
    valence: float
    tags: tuple[MoodTag, ...]

    @property
    def weight(self) -> float:
        """Contribution of one occurrence to the dominant-mood score."""
        return 0.6 * self.valence + 0.4 * self.energy


class PaceHint(str, Enum):
    LIGHT = "light"
    SLOW = "slow"
    STEADY = "steady"
    DYNAMIC = "dynamic"


@dataclass(frozen=True)
class ReadingWindow:
    """Suggested reading block for a mood."""

    target_minutes: int
    break_after_minutes: int
    pace_hint: PaceHint


class MoodMetrics(NamedTuple):
    energy: float
    valence: float


PROFILES: dict[MoodKind, MoodProfile] = {
    MoodKind.CALM: MoodProfile(
        MoodKind.CALM, 0.35, 0.80, (MoodTag.RELAXED, MoodTag.REFLECTIVE, MoodTag.EVENING)
    ),
    MoodKind.FOCUSED: MoodProfile(
        MoodKind.FOCUSED, 0.65, 0.85, (MoodTag.DEEP_FOCUS, MoodTag.MORNING, MoodTag.REFLECTIVE)
    ),
    MoodKind.SLEEPY: MoodProfile(MoodKind.SLEEPY, 0.15, 0.55, (MoodTag.SLEEPY, MoodTag.EVENING)),
    MoodKind.EXCITED: MoodProfile(MoodKind.EXCITED, 0.85, 0.95, (MoodTag.ENERGIZED, MoodTag.MORNING)),
    MoodKind.NEUTRAL: MoodProfile(MoodKind.NEUTRAL, 0.50, 0.60, (MoodTag.NEUTRAL,)),
}

_WINDOWS: dict[MoodKind, ReadingWindow] = {
    MoodKind.CALM: ReadingWindow(20, 0, PaceHint.SLOW),
    MoodKind.FOCUSED: ReadingWindow(30, 0, PaceHint.STEADY),
    MoodKind.SLEEPY: ReadingWindow(10, 0, PaceHint.LIGHT),
    MoodKind.EXCITED: ReadingWindow(25, 0, PaceHint.DYNAMIC),
    MoodKind.NEUTRAL: ReadingWindow(15, 0, PaceHint.STEADY),
}

_PAGES_DELTA: dict[MoodKind, int] = {
    MoodKind.CALM: 8,
    MoodKind.FOCUSED: 12,
    MoodKind.SLEEPY: 4,
    MoodKind.EXCITED: 10,
    MoodKind.NEUTRAL: 6,
}

EMPTY_MOOD_METRICS = MoodMetrics(energy=0.5, valence=0.6)


def profile_for(kind: MoodKind) -> MoodProfile:
    return PROFILES[MoodKind(kind)]


def tags_for(kind: MoodKind) -> tuple[MoodTag, ...]:
    return profile_for(kind).tags


def suggested_session_minutes(kind: MoodKind) -> int:
    return _WINDOWS[MoodKind(kind)].target_minutes


def suggested_pages_delta(kind: MoodKind) -> int:
    return _PAGES_DELTA[MoodKind(kind)]


def suggest_reading_window(kind: MoodKind) -> ReadingWindow:
    return _WINDOWS[MoodKind(kind)]


def dominant_mood_kind(moods: Iterable[MoodEntry]) -> MoodKind:
    """Mood with the largest accumulated weight.

    Ties go to the kind that reached the maximum first, where kinds are
    ordered by their first occurrence in ``moods``. Empty input is neutral.
    """
    scores: dict[MoodKind, float] = {}
    for entry in moods:
        scores[entry.mood] = scores.get(entry.mood, 0.0) + profile_for(entry.mood).weight

    dominant = MoodKind.NEUTRAL
    best = None
    for kind, score in scores.items():
        if best is None or score > best:
            dominant, best = kind, score
    return dominant


def aggregate_mood_metrics(moods: Iterable[MoodEntry]) -> MoodMetrics:
    """Mean energy and valence over all entries; ``(0.5, 0.6)`` when empty."""
    energy = 0.0
    valence = 0.0
    count = 0
    for entry in moods:
        profile = profile_for(entry.mood)
        energy += profile.energy
        valence += profile.valence
        count += 1
    if count == 0:
        return EMPTY_MOOD_METRICS
    return MoodMetrics(energy=energy / count, valence=valence / count)
