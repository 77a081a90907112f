"""Local in-memory implementation of Persistence Store."""

from typing import Dict, Optional

from ..domain.entities.achievement import Achievement
from ..domain.entities.book import Book
from ..domain.entities.mood import MoodEntry
from ..domain.entities.reading_session import ReadingSession
from ..domain.entities.settings import AppSettings
from ..domain.interfaces.persistence_store import PersistenceStore


class InMemoryPersistenceStore(PersistenceStore):
    """Local in-memory implementation of the Persistence Store.

    Stores collections in a dictionary for testing and dry runs.
    """

    def __init__(self):
        """Initialize the store with empty collections."""
        self._collections: Dict[str, list] = {}
        self._settings: Optional[AppSettings] = None
        self.last_error: Optional[Exception] = None
        self.save_counts: Dict[str, int] = {}

    def load_books(self) -> list[Book]:
        return self._get("books")

    def save_books(self, books: list[Book]) -> None:
        self._put("books", books)

    def load_sessions(self) -> list[ReadingSession]:
        return self._get("sessions")

    def save_sessions(self, sessions: list[ReadingSession]) -> None:
        self._put("sessions", sessions)

    def load_moods(self) -> list[MoodEntry]:
        return self._get("moods")

    def save_moods(self, moods: list[MoodEntry]) -> None:
        self._put("moods", moods)

    def load_achievements(self) -> list[Achievement]:
        return self._get("achievements")

    def save_achievements(self, achievements: list[Achievement]) -> None:
        self._put("achievements", achievements)

    def load_settings(self) -> AppSettings:
        return self._settings or AppSettings()

    def save_settings(self, settings: AppSettings) -> None:
        self._settings = settings
        self.save_counts["settings"] = self.save_counts.get("settings", 0) + 1

    def clear(self) -> None:
        """Clear all collections."""
        self._collections.clear()
        self._settings = None
        self.save_counts.clear()

    def _get(self, name: str) -> list:
        return list(self._collections.get(name, []))

    def _put(self, name: str, items: list) -> None:
        self._collections[name] = list(items)
        self.save_counts[name] = self.save_counts.get(name, 0) + 1
