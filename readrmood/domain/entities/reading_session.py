"""Reading session entities for the reading tracker."""

import math
import uuid
from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import Field

from .base import Record


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero."""
    if value < 0:
        return -int(math.floor(-value + 0.5))
    return int(math.floor(value + 0.5))


def minutes_between(start: datetime, end: datetime) -> int:
    """Whole minutes between two timestamps, never negative."""
    return max(0, round_half_up((end - start).total_seconds() / 60.0))


class ReadingSession(Record):
    """A single block of reading time.

    ``book_id`` is optional: unassigned sessions are valid, and a session
    keeps pointing at a book after that book has been removed.
    """

    id: UUID = Field(default_factory=uuid.uuid4)
    book_id: Optional[UUID] = None
    start: datetime
    end: datetime
    minutes: int = 0
    pages: int = 0

    @classmethod
    def reconciled(
        cls,
        book_id: Optional[UUID],
        start: datetime,
        end: datetime,
        minutes: int,
        pages: int,
        id: Optional[UUID] = None,
    ) -> "ReadingSession":
        """Build a session that satisfies the stored-session invariants.

        ``end`` is clamped to ``start``, pages to zero, and minutes become
        ``max(minutes, minutes_between(start, end))``; a typed minute count
        is never reduced by the time span.
        """
        if end < start:
            end = start
        final_minutes = max(minutes_between(start, end), minutes)
        data = dict(
            book_id=book_id,
            start=start,
            end=end,
            minutes=max(0, final_minutes),
            pages=max(0, pages),
        )
        if id is not None:
            data["id"] = id
        return cls(**data)
