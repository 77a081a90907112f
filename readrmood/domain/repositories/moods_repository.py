"""Repository owning the append-only mood log."""

import logging
from datetime import datetime, timezone
from typing import Callable, Optional

from ..entities.mood import MoodEntry, MoodKind
from ..interfaces.persistence_store import PersistenceStore

logger = logging.getLogger(__name__)


class MoodsRepository:
    """Mood entries in the order they were logged. Entries are never edited."""

    def __init__(
        self,
        store: PersistenceStore,
        on_change: Optional[Callable[[], None]] = None,
    ):
        self._store = store
        self._on_change = on_change
        self._moods: list[MoodEntry] = list(store.load_moods())
        logger.info(f"MoodsRepository loaded {len(self._moods)} moods")

    @property
    def moods(self) -> list[MoodEntry]:
        return list(self._moods)

    def add_mood(
        self,
        kind: MoodKind,
        note: Optional[str] = None,
        date: Optional[datetime] = None,
    ) -> MoodEntry:
        entry = MoodEntry(
            date=date or datetime.now(timezone.utc),
            mood=MoodKind(kind),
            note=note,
        )
        self._moods.append(entry)
        self._commit()
        return entry

    def clear_all(self) -> None:
        self._moods.clear()
        self._commit()

    def _commit(self) -> None:
        self._store.save_moods(list(self._moods))
        if self._on_change is not None:
            self._on_change()
