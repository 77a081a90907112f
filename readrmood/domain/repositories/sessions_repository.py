"""Repository owning the reading session collection."""

import logging
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Callable, Optional
from uuid import UUID

from ..entities.reading_session import ReadingSession
from ..interfaces.persistence_store import PersistenceStore
from ..services import metrics

logger = logging.getLogger(__name__)

_UNSET = object()


def reconcile(session: ReadingSession) -> ReadingSession:
    """Re-apply the stored-session invariants to an existing record."""
    return ReadingSession.reconciled(
        book_id=session.book_id,
        start=session.start,
        end=session.end,
        minutes=session.minutes,
        pages=session.pages,
        id=session.id,
    )


class DateRange(str, Enum):
    TODAY = "today"
    LAST_7 = "last7"
    LAST_30 = "last30"
    ALL = "all"

    def bounds(self, today: date) -> Optional[tuple[datetime, datetime]]:
        """Inclusive local bounds on session start, None for all time.

        The upper bound is the start of tomorrow.
        """
        if self == DateRange.ALL:
            return None
        days_back = {DateRange.TODAY: 0, DateRange.LAST_7: 6, DateRange.LAST_30: 29}[self]
        start_of_today = datetime.combine(today, datetime.min.time())
        return start_of_today - timedelta(days=days_back), start_of_today + timedelta(days=1)


class SessionSort(str, Enum):
    NEWEST_FIRST = "newestFirst"
    OLDEST_FIRST = "oldestFirst"
    LONGEST_FIRST = "longestFirst"
    PAGES_FIRST = "pagesFirst"


class SessionsRepository:
    """
    Owns the reading sessions, newest first.

    Sessions are reconciled on every write: ``end`` never precedes
    ``start``, pages are non-negative and minutes are the larger of the
    typed value and the time span.
    """

    def __init__(
        self,
        store: PersistenceStore,
        on_change: Optional[Callable[[], None]] = None,
        night_start_hour: int = 23,
        night_end_hour: int = 5,
    ):
        self._store = store
        self._on_change = on_change
        self.night_start_hour = night_start_hour
        self.night_end_hour = night_end_hour
        self._sessions: list[ReadingSession] = self._normalize(store.load_sessions())
        logger.info(f"SessionsRepository loaded {len(self._sessions)} sessions")

    @property
    def sessions(self) -> list[ReadingSession]:
        return list(self._sessions)

    def find(self, session_id: UUID) -> Optional[ReadingSession]:
        return next((s for s in self._sessions if s.id == session_id), None)

    def add_session(
        self,
        book_id: Optional[UUID],
        start: datetime,
        end: datetime,
        minutes: int,
        pages: int,
    ) -> ReadingSession:
        session = ReadingSession.reconciled(book_id, start, end, minutes, pages)
        self._sessions.append(session)
        self._sort()
        self._commit()
        return session

    def add(self, session: ReadingSession) -> ReadingSession:
        """Store an already-built session (e.g. one emitted by the timer)."""
        return self.add_session(
            session.book_id, session.start, session.end, session.minutes, session.pages
        )

    def update_session(
        self,
        session_id: UUID,
        book_id=_UNSET,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        minutes: Optional[int] = None,
        pages: Optional[int] = None,
    ) -> Optional[ReadingSession]:
        """Replace fields of a stored session and reconcile it again.

        ``book_id`` may be passed as None to unassign the session.
        """
        index = self._index(session_id)
        if index is None:
            return None
        changes = {}
        if book_id is not _UNSET:
            changes["book_id"] = book_id
        if start is not None:
            changes["start"] = start
        if end is not None:
            changes["end"] = end
        if minutes is not None:
            changes["minutes"] = minutes
        if pages is not None:
            changes["pages"] = pages
        session = reconcile(self._sessions[index].with_changes(**changes))
        self._sessions[index] = session
        self._sort()
        self._commit()
        return session

    def remove_session(self, session_id: UUID) -> None:
        index = self._index(session_id)
        if index is None:
            return
        del self._sessions[index]
        self._commit()

    def clear_all(self) -> None:
        self._sessions.clear()
        self._commit()

    def sessions_on(self, day: date) -> list[ReadingSession]:
        return metrics.sessions_on_day(self._sessions, day)

    def sessions_in_range(self, lower: datetime, upper: datetime) -> list[ReadingSession]:
        """Sessions starting within ``[lower, upper]``."""
        return [s for s in self._sessions if lower <= s.start <= upper]

    def query(
        self,
        today: date,
        date_range: DateRange = DateRange.LAST_30,
        book_id: Optional[UUID] = None,
        sort: SessionSort = SessionSort.NEWEST_FIRST,
    ) -> list[ReadingSession]:
        """Sessions in ``date_range`` around ``today``, optionally for one book.

        Longest and pages-first orders break ties by the later start.
        """
        items = list(self._sessions)
        bounds = DateRange(date_range).bounds(today)
        if bounds is not None:
            lower, upper = bounds
            items = [s for s in items if lower <= metrics.local_wall_time(s.start) <= upper]
        if book_id is not None:
            items = [s for s in items if s.book_id == book_id]

        sort = SessionSort(sort)
        if sort == SessionSort.NEWEST_FIRST:
            items.sort(key=lambda s: s.start, reverse=True)
        elif sort == SessionSort.OLDEST_FIRST:
            items.sort(key=lambda s: s.start)
        elif sort == SessionSort.LONGEST_FIRST:
            items.sort(key=lambda s: (s.minutes, s.start), reverse=True)
        else:
            items.sort(key=lambda s: (s.pages, s.start), reverse=True)
        return items

    def stats(self, items: list[ReadingSession]) -> metrics.SessionsStats:
        """Totals over ``items``; the streak always covers every stored session."""
        return metrics.SessionsStats(
            count=len(items),
            minutes=metrics.total_minutes(items),
            pages=metrics.total_pages(items),
            longest_streak_days=self.longest_streak_days,
        )

    def total_minutes(self, book_id: Optional[UUID] = None) -> int:
        return metrics.total_minutes(self._sessions, book_id)

    def total_pages(self, book_id: Optional[UUID] = None) -> int:
        return metrics.total_pages(self._sessions, book_id)

    @property
    def longest_streak_days(self) -> int:
        return metrics.longest_streak_days(self._sessions)

    def count_weekend_sessions(self) -> int:
        return metrics.count_weekend_sessions(self._sessions)

    def count_night_sessions(self) -> int:
        return metrics.count_night_sessions(
            self._sessions, self.night_start_hour, self.night_end_hour
        )

    def _normalize(self, loaded: list[ReadingSession]) -> list[ReadingSession]:
        seen: set[UUID] = set()
        cleaned = []
        for session in loaded:
            if session.id in seen:
                continue
            seen.add(session.id)
            cleaned.append(reconcile(session))
        cleaned.sort(key=lambda s: s.start, reverse=True)
        return cleaned

    def _index(self, session_id: UUID) -> Optional[int]:
        for i, session in enumerate(self._sessions):
            if session.id == session_id:
                return i
        logger.warning(f"Session with id {session_id} not found")
        return None

    def _sort(self) -> None:
        self._sessions.sort(key=lambda s: s.start, reverse=True)

    def _commit(self) -> None:
        self._store.save_sessions(list(self._sessions))
        if self._on_change is not None:
            self._on_change()
