"""Persistence Store interface."""

from typing import Optional, Protocol, runtime_checkable

from ..entities.achievement import Achievement
from ..entities.book import Book
from ..entities.mood import MoodEntry
from ..entities.reading_session import ReadingSession
from ..entities.settings import AppSettings


@runtime_checkable
class PersistenceStore(Protocol):
    """Protocol defining the interface for persistence stores.

    A store holds five independent collections. Implementations never
    raise on I/O failure: loads fall back to an empty list (or default
    settings) and the failure is kept in ``last_error``.
    """

    last_error: Optional[Exception]

    def load_books(self) -> list[Book]:
        ...

    def save_books(self, books: list[Book]) -> None:
        ...

    def load_sessions(self) -> list[ReadingSession]:
        ...

    def save_sessions(self, sessions: list[ReadingSession]) -> None:
        ...

    def load_moods(self) -> list[MoodEntry]:
        ...

    def save_moods(self, moods: list[MoodEntry]) -> None:
        ...

    def load_achievements(self) -> list[Achievement]:
        """Load achievement records.

        Returns:
            list[Achievement]: Stored records, empty on first run.
        """
        ...

    def save_achievements(self, achievements: list[Achievement]) -> None:
        ...

    def load_settings(self) -> AppSettings:
        """Load settings.

        Returns:
            AppSettings: Stored settings, or defaults when none are stored.
        """
        ...

    def save_settings(self, settings: AppSettings) -> None:
        ...
