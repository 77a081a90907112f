"""Book entities for the reading tracker."""

import uuid
from datetime import datetime, timezone
from uuid import UUID

from pydantic import Field

from .base import Record


def _now() -> datetime:
    return datetime.now(timezone.utc)


class Book(Record):
    """A book in the user's library.

    The reading repository keeps ``current_page`` within ``[0, total_pages]``;
    the entity itself accepts whatever it is given so that damaged data can
    still be loaded and repaired.
    """

    id: UUID = Field(default_factory=uuid.uuid4)
    title: str
    author: str = ""
    total_pages: int = 0
    current_page: int = 0
    added_at: datetime = Field(default_factory=_now)

    @property
    def progress(self) -> float:
        """Fraction of the book read, 0 when the page count is unknown."""
        if self.total_pages <= 0:
            return 0.0
        return self.current_page / self.total_pages

    @property
    def is_completed(self) -> bool:
        return self.total_pages > 0 and self.current_page >= self.total_pages

    @property
    def is_in_progress(self) -> bool:
        return self.total_pages > 0 and 0 < self.current_page < self.total_pages

    @property
    def is_not_started(self) -> bool:
        return self.current_page == 0
