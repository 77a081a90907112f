"""Repository owning achievement unlock state."""

import logging
from datetime import datetime, timezone
from typing import Optional, Sequence

from ..entities.achievement import Achievement
from ..entities.book import Book
from ..entities.mood import MoodEntry
from ..entities.reading_session import ReadingSession
from ..interfaces.persistence_store import PersistenceStore
from ..services import achievement_catalog
from ..services.achievement_engine import AchievementEngine

logger = logging.getLogger(__name__)


class AchievementsRepository:
    """
    Holds the persisted achievement records and runs evaluation passes.

    On first run the records are seeded from the catalog. Afterwards they
    change only through ``evaluate``, ``unlock`` or ``reset_all``.
    """

    def __init__(self, store: PersistenceStore, engine: Optional[AchievementEngine] = None):
        self._store = store
        self._engine = engine or AchievementEngine()
        self.newly_unlocked: list[Achievement] = []

        loaded = store.load_achievements()
        if loaded:
            self._achievements = list(loaded)
        else:
            self._achievements = achievement_catalog.initial_state()
            self._store.save_achievements(list(self._achievements))
            logger.info("Seeded achievements from catalog")

    @property
    def achievements(self) -> list[Achievement]:
        return list(self._achievements)

    @property
    def engine(self) -> AchievementEngine:
        return self._engine

    def evaluate(
        self,
        books: Sequence[Book],
        sessions: Sequence[ReadingSession],
        moods: Sequence[MoodEntry],
    ) -> list[Achievement]:
        """Run one evaluation pass and persist the result if anything changed.

        Returns:
            list[Achievement]: The achievements unlocked by this pass.
        """
        result = self._engine.evaluate_all(
            list(books), list(sessions), list(moods), self._achievements
        )
        if result.updated != self._achievements:
            self._achievements = result.updated
            self._store.save_achievements(list(self._achievements))
        if result.newly_unlocked:
            self.newly_unlocked = result.newly_unlocked
        return result.newly_unlocked

    def unlock(self, code: str) -> Optional[Achievement]:
        """Unlock an achievement by code regardless of its predicate."""
        for i, item in enumerate(self._achievements):
            if item.code != code:
                continue
            if not item.is_unlocked:
                item = item.unlocked(datetime.now(timezone.utc))
                self._achievements[i] = item
                self._store.save_achievements(list(self._achievements))
                logger.info(f"Achievement unlocked manually: {code}")
            return item
        logger.warning(f"Achievement with code {code} not found")
        return None

    def reset_all(self) -> None:
        self._achievements = achievement_catalog.initial_state()
        self.newly_unlocked = []
        self._store.save_achievements(list(self._achievements))
        logger.info("Achievements reset")

    @property
    def unlocked_count(self) -> int:
        return sum(1 for a in self._achievements if a.is_unlocked)

    @property
    def total_count(self) -> int:
        return len(self._achievements)

    @property
    def total_points(self) -> int:
        return sum(
            achievement_catalog.points_for(a.code) for a in self._achievements if a.is_unlocked
        )

    def recently_unlocked(self, limit: int = 20) -> list[Achievement]:
        unlocked = [a for a in self._achievements if a.is_unlocked and a.unlocked_at is not None]
        unlocked.sort(key=lambda a: a.unlocked_at, reverse=True)
        return unlocked[:limit]
