"""Pure metric functions over snapshots of books, sessions and moods.

Every function here is stateless. Sums clamp negative ``minutes`` and
``pages`` to zero because stored data is only repaired on a best-effort basis.
"""

from collections import defaultdict
from datetime import date, datetime, timedelta
from typing import Iterable, NamedTuple, Optional, Sequence
from uuid import UUID

from ..entities.book import Book
from ..entities.reading_session import ReadingSession
from .mood_taxonomy import aggregate_mood_metrics, dominant_mood_kind

__all__ = [
    "WindowTotals",
    "BookTotals",
    "local_day",
    "total_minutes",
    "total_pages",
    "longest_streak_days",
    "current_streak_days",
    "sum_in_window",
    "last_n_days",
    "sessions_on_day",
    "count_weekend_sessions",
    "count_night_sessions",
    "completed_books",
    "in_progress_books",
    "not_started_books",
    "per_book_totals",
    "DaySection",
    "SessionsStats",
    "group_by_day",
    "day_title",
    "local_wall_time",
    "dominant_mood_kind",
    "aggregate_mood_metrics",
]


class WindowTotals(NamedTuple):
    minutes: int
    pages: int
    count: int


class BookTotals(NamedTuple):
    minutes: int
    pages: int


def local_day(moment: datetime) -> date:
    """Calendar day of ``moment`` in the local timezone.

    Naive datetimes are taken to be local already.
    """
    if moment.tzinfo is not None:
        moment = moment.astimezone()
    return moment.date()


def local_wall_time(moment: datetime) -> datetime:
    """Naive local wall-clock time of ``moment``."""
    if moment.tzinfo is not None:
        return moment.astimezone().replace(tzinfo=None)
    return moment


def _for_book(sessions: Iterable[ReadingSession], book_id: Optional[UUID]):
    if book_id is None:
        return sessions
    return (s for s in sessions if s.book_id == book_id)


def total_minutes(sessions: Iterable[ReadingSession], book_id: Optional[UUID] = None) -> int:
    return sum(max(0, s.minutes) for s in _for_book(sessions, book_id))


def total_pages(sessions: Iterable[ReadingSession], book_id: Optional[UUID] = None) -> int:
    return sum(max(0, s.pages) for s in _for_book(sessions, book_id))


def _reading_days(sessions: Iterable[ReadingSession]) -> list[date]:
    return sorted({local_day(s.start) for s in sessions})


def longest_streak_days(sessions: Iterable[ReadingSession]) -> int:
    """Longest run of consecutive calendar days with at least one session."""
    longest = 0
    current = 0
    previous: Optional[date] = None
    for day in _reading_days(sessions):
        if previous is not None and day - previous == timedelta(days=1):
            current += 1
        else:
            current = 1
        longest = max(longest, current)
        previous = day
    return longest


def current_streak_days(sessions: Iterable[ReadingSession], today: date) -> int:
    """Run of consecutive reading days ending today or yesterday."""
    days = set(_reading_days(sessions))
    cursor = today if today in days else today - timedelta(days=1)
    streak = 0
    while cursor in days:
        streak += 1
        cursor -= timedelta(days=1)
    return streak


def sum_in_window(
    sessions: Iterable[ReadingSession], from_day: date, to_day_exclusive: date
) -> WindowTotals:
    """Totals for sessions whose start day falls in ``[from_day, to_day_exclusive)``."""
    minutes = pages = count = 0
    for s in sessions:
        if from_day <= local_day(s.start) < to_day_exclusive:
            minutes += max(0, s.minutes)
            pages += max(0, s.pages)
            count += 1
    return WindowTotals(minutes, pages, count)


def last_n_days(n: int, today: date) -> tuple[date, date]:
    """Half-open day range covering the ``n`` days that end with ``today``."""
    n = max(1, n)
    return today - timedelta(days=n - 1), today + timedelta(days=1)


def sessions_on_day(sessions: Iterable[ReadingSession], day: date) -> list[ReadingSession]:
    return [s for s in sessions if local_day(s.start) == day]


def count_weekend_sessions(sessions: Iterable[ReadingSession]) -> int:
    return sum(1 for s in sessions if local_day(s.start).weekday() >= 5)


def is_night_hour(hour: int, start_hour: int = 23, end_hour: int = 5) -> bool:
    # The window wraps past midnight when it starts later than it ends.
    if start_hour <= end_hour:
        return start_hour <= hour < end_hour
    return hour >= start_hour or hour < end_hour


def count_night_sessions(
    sessions: Iterable[ReadingSession], start_hour: int = 23, end_hour: int = 5
) -> int:
    return sum(
        1 for s in sessions if is_night_hour(local_wall_time(s.start).hour, start_hour, end_hour)
    )


def completed_books(books: Iterable[Book]) -> int:
    return sum(1 for b in books if b.is_completed)


def in_progress_books(books: Iterable[Book]) -> int:
    return sum(1 for b in books if b.is_in_progress)


def not_started_books(books: Iterable[Book]) -> int:
    return sum(1 for b in books if b.is_not_started)


def per_book_totals(sessions: Sequence[ReadingSession]) -> dict[UUID, BookTotals]:
    """Minutes and pages per book; unassigned sessions are skipped."""
    minutes: dict[UUID, int] = defaultdict(int)
    pages: dict[UUID, int] = defaultdict(int)
    for s in sessions:
        if s.book_id is None:
            continue
        minutes[s.book_id] += max(0, s.minutes)
        pages[s.book_id] += max(0, s.pages)
    return {book_id: BookTotals(minutes[book_id], pages[book_id]) for book_id in minutes}


class DaySection(NamedTuple):
    """Sessions that started on one local day, newest first."""

    day: date
    sessions: list[ReadingSession]
    minutes: int
    pages: int


class SessionsStats(NamedTuple):
    count: int
    minutes: int
    pages: int
    longest_streak_days: int


def group_by_day(sessions: Iterable[ReadingSession]) -> list[DaySection]:
    """Group sessions by local start day, newest day first."""
    grouped: dict[date, list[ReadingSession]] = defaultdict(list)
    for s in sessions:
        grouped[local_day(s.start)].append(s)
    sections = []
    for day in sorted(grouped, reverse=True):
        items = sorted(grouped[day], key=lambda s: s.start, reverse=True)
        sections.append(
            DaySection(
                day=day,
                sessions=items,
                minutes=total_minutes(items),
                pages=total_pages(items),
            )
        )
    return sections


def day_title(day: date, today: date) -> str:
    if day == today:
        return "Today"
    if day == today - timedelta(days=1):
        return "Yesterday"
    return day.strftime("%b %d, %Y")
