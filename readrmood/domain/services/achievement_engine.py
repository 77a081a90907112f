"""Achievement engine deriving unlocks from the full reading history."""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable, Optional, Sequence

from ..entities.achievement import (
    Achievement,
    AchievementDefinition,
    AchievementProgress,
    PredicateKind,
)
from ..entities.book import Book
from ..entities.mood import MoodEntry
from ..entities.reading_session import ReadingSession
from . import achievement_catalog, metrics

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class EvaluationResult:
    """Outcome of one evaluation pass."""

    updated: list[Achievement] = field(default_factory=list)
    newly_unlocked: list[Achievement] = field(default_factory=list)


class AchievementEngine:
    """
    Stateless rule engine over snapshots of books, sessions and moods.

    Each pass evaluates every locked catalog entry against the snapshot.
    Unlocked records are never re-evaluated, so feeding ``updated`` back in
    yields no new unlocks. The engine has no side effects; persisting and
    announcing results is the caller's job.
    """

    def __init__(
        self,
        clock: Optional[Clock] = None,
        catalog: Optional[Sequence[AchievementDefinition]] = None,
        night_start_hour: int = 23,
        night_end_hour: int = 5,
    ):
        self._clock = clock or utc_now
        self._catalog = tuple(catalog) if catalog is not None else achievement_catalog.definitions()
        self.night_start_hour = night_start_hour
        self.night_end_hour = night_end_hour

    @property
    def catalog(self) -> tuple[AchievementDefinition, ...]:
        return self._catalog

    def measure(
        self,
        books: Sequence[Book],
        sessions: Sequence[ReadingSession],
        moods: Sequence[MoodEntry],
    ) -> dict[PredicateKind, int]:
        """Current value of every predicate category for a snapshot."""
        return {
            PredicateKind.SESSIONS_LOGGED: len(sessions),
            PredicateKind.TOTAL_MINUTES: metrics.total_minutes(sessions),
            PredicateKind.TOTAL_PAGES: metrics.total_pages(sessions),
            PredicateKind.STREAK_DAYS: metrics.longest_streak_days(sessions),
            PredicateKind.DISTINCT_MOODS: len({m.mood for m in moods}),
            PredicateKind.MOODS_LOGGED: len(moods),
            PredicateKind.BOOKS_ADDED: len(books),
            PredicateKind.BOOKS_COMPLETED: metrics.completed_books(books),
            PredicateKind.NIGHT_SESSIONS: metrics.count_night_sessions(
                sessions, self.night_start_hour, self.night_end_hour
            ),
            PredicateKind.WEEKEND_SESSIONS: metrics.count_weekend_sessions(sessions),
        }

    def evaluate_all(
        self,
        books: Sequence[Book],
        sessions: Sequence[ReadingSession],
        moods: Sequence[MoodEntry],
        current: Sequence[Achievement],
    ) -> EvaluationResult:
        """Evaluate every locked catalog entry against the snapshot.

        Args:
            books: All books in the library.
            sessions: All reading sessions.
            moods: All mood entries.
            current: The achievement records as currently persisted.

        Returns:
            EvaluationResult: ``updated`` holds one record per catalog entry
            in catalog order, followed by records with unknown codes in their
            original order; ``newly_unlocked`` holds the records unlocked in
            this pass.
        """
        by_code: dict[str, Achievement] = {}
        for record in current:
            by_code.setdefault(record.code, record)

        values: Optional[dict[PredicateKind, int]] = None
        now: Optional[datetime] = None
        result = EvaluationResult()

        for definition in self._catalog:
            record = by_code.get(definition.code) or definition.to_achievement()
            if not record.is_unlocked:
                if values is None:
                    values = self.measure(books, sessions, moods)
                if definition.is_satisfied_by(values[definition.predicate]):
                    if now is None:
                        now = self._clock()
                    record = record.unlocked(now)
                    result.newly_unlocked.append(record)
                    logger.info(f"Achievement unlocked: {definition.code}")
            result.updated.append(record)

        known = {d.code for d in self._catalog}
        seen: set[str] = set()
        for record in current:
            if record.code not in known and record.code not in seen:
                seen.add(record.code)
                result.updated.append(record)

        return result

    def progress(
        self,
        books: Sequence[Book],
        sessions: Sequence[ReadingSession],
        moods: Sequence[MoodEntry],
    ) -> list[AchievementProgress]:
        """Progress toward every catalog entry, in catalog order."""
        values = self.measure(books, sessions, moods)
        items = []
        for definition in self._catalog:
            value = values[definition.predicate]
            items.append(
                AchievementProgress(
                    definition=definition,
                    current_value=value,
                    target_value=definition.threshold,
                    percentage=min(100.0, 100.0 * value / definition.threshold),
                    is_complete=definition.is_satisfied_by(value),
                )
            )
        return items
