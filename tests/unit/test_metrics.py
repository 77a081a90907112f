"""Unit tests for the metric functions."""

import uuid
from datetime import date, datetime, timedelta

from readrmood.domain.entities import Book, ReadingSession
from readrmood.domain.services import metrics


def session_at(start: datetime, minutes: int = 10, pages: int = 5, book_id=None) -> ReadingSession:
    return ReadingSession(
        book_id=book_id,
        start=start,
        end=start + timedelta(minutes=max(0, minutes)),
        minutes=minutes,
        pages=pages,
    )


def on_days(*days: int) -> list[ReadingSession]:
    """Sessions at 20:00 on the given days of January 2026."""
    return [session_at(datetime(2026, 1, d, 20, 0)) for d in days]


class TestTotals:
    """Tests for minute and page totals."""

    def test_totals(self):
        sessions = [session_at(datetime(2026, 1, 5, 9), 10, 4), session_at(datetime(2026, 1, 6, 9), 20, 6)]
        assert metrics.total_minutes(sessions) == 30
        assert metrics.total_pages(sessions) == 10

    def test_negative_fields_are_clamped(self):
        start = datetime(2026, 1, 5, 9)
        corrupt = ReadingSession(start=start, end=start, minutes=-15, pages=-4)
        good = session_at(start, 10, 3)
        assert metrics.total_minutes([corrupt, good]) == 10
        assert metrics.total_pages([corrupt, good]) == 3

    def test_totals_filtered_by_book(self):
        book_id = uuid.uuid4()
        sessions = [
            session_at(datetime(2026, 1, 5, 9), 10, 4, book_id),
            session_at(datetime(2026, 1, 6, 9), 20, 6),
        ]
        assert metrics.total_minutes(sessions, book_id) == 10
        assert metrics.total_pages(sessions, book_id) == 4

    def test_per_book_totals_skip_unassigned(self):
        book_id = uuid.uuid4()
        sessions = [
            session_at(datetime(2026, 1, 5, 9), 10, 4, book_id),
            session_at(datetime(2026, 1, 6, 9), 15, 2, book_id),
            session_at(datetime(2026, 1, 6, 9), 20, 6),
        ]
        totals = metrics.per_book_totals(sessions)
        assert list(totals) == [book_id]
        assert totals[book_id] == (25, 6)


class TestStreaks:
    """Tests for streak computation."""

    def test_empty_is_zero(self):
        assert metrics.longest_streak_days([]) == 0

    def test_single_day(self):
        assert metrics.longest_streak_days(on_days(5)) == 1

    def test_multiple_sessions_same_day_count_once(self):
        sessions = on_days(5) + [session_at(datetime(2026, 1, 5, 8, 0))]
        assert metrics.longest_streak_days(sessions) == 1

    def test_longest_run_is_found(self):
        assert metrics.longest_streak_days(on_days(1, 2, 3, 5, 6, 7, 8, 10)) == 4

    def test_run_across_month_boundary(self):
        sessions = [
            session_at(datetime(2026, 1, 30, 9)),
            session_at(datetime(2026, 1, 31, 9)),
            session_at(datetime(2026, 2, 1, 9)),
        ]
        assert metrics.longest_streak_days(sessions) == 3

    def test_order_does_not_matter(self):
        assert metrics.longest_streak_days(on_days(3, 1, 2)) == 3

    def test_union_never_decreases_streak(self):
        """Adding sessions on more days never shortens the longest streak."""
        groups = [on_days(1, 2), on_days(4, 5, 6), on_days(3), on_days(10, 12)]
        combined = []
        previous = 0
        for group in groups:
            combined += group
            current = metrics.longest_streak_days(combined)
            assert current >= previous
            assert current >= metrics.longest_streak_days(group)
            previous = current
        assert previous == 6

    def test_current_streak(self):
        sessions = on_days(8, 9, 10, 12, 13)
        assert metrics.current_streak_days(sessions, date(2026, 1, 13)) == 2
        assert metrics.current_streak_days(sessions, date(2026, 1, 14)) == 2
        assert metrics.current_streak_days(sessions, date(2026, 1, 15)) == 0
        assert metrics.current_streak_days(sessions, date(2026, 1, 11)) == 3


class TestWindows:
    """Tests for day-windowed aggregates."""

    def test_sum_in_window_is_half_open(self):
        sessions = [
            session_at(datetime(2026, 1, 4, 23, 59), 10, 1),
            session_at(datetime(2026, 1, 5, 0, 0), 20, 2),
            session_at(datetime(2026, 1, 6, 12, 0), 30, 3),
            session_at(datetime(2026, 1, 7, 0, 0), 40, 4),
        ]
        totals = metrics.sum_in_window(sessions, date(2026, 1, 5), date(2026, 1, 7))
        assert totals == metrics.WindowTotals(minutes=50, pages=5, count=2)

    def test_sum_in_window_empty(self):
        assert metrics.sum_in_window([], date(2026, 1, 5), date(2026, 1, 7)) == (0, 0, 0)

    def test_last_n_days(self):
        assert metrics.last_n_days(7, date(2026, 1, 13)) == (date(2026, 1, 7), date(2026, 1, 14))

    def test_sessions_on_day(self):
        sessions = on_days(5, 6)
        assert metrics.sessions_on_day(sessions, date(2026, 1, 6)) == [sessions[1]]


class TestHabitCounts:
    """Tests for weekend and night counters."""

    def test_weekend_sessions(self):
        # 2026-01-10 is a Saturday, 2026-01-11 a Sunday.
        assert metrics.count_weekend_sessions(on_days(9, 10, 11, 12)) == 2

    def test_night_sessions_wrap_midnight(self):
        sessions = [
            session_at(datetime(2026, 1, 5, 23, 30)),
            session_at(datetime(2026, 1, 6, 2, 0)),
            session_at(datetime(2026, 1, 6, 5, 0)),
            session_at(datetime(2026, 1, 6, 22, 59)),
        ]
        assert metrics.count_night_sessions(sessions) == 2

    def test_night_window_without_wrap(self):
        assert metrics.is_night_hour(1, start_hour=0, end_hour=4)
        assert not metrics.is_night_hour(4, start_hour=0, end_hour=4)


class TestBookCounts:
    """Tests for library counters."""

    def test_counts(self):
        books = [
            Book(title="Done", total_pages=100, current_page=100),
            Book(title="Reading", total_pages=100, current_page=30),
            Book(title="New", total_pages=100),
            Book(title="No pages"),
        ]
        assert metrics.completed_books(books) == 1
        assert metrics.in_progress_books(books) == 1
        assert metrics.not_started_books(books) == 2


class TestDayGrouping:
    """Tests for grouping sessions into day sections."""

    def test_days_and_items_newest_first(self):
        morning = session_at(datetime(2026, 1, 13, 8, 0), minutes=10, pages=2)
        evening = session_at(datetime(2026, 1, 13, 21, 0), minutes=20, pages=-4)
        earlier = session_at(datetime(2026, 1, 11, 12, 0), minutes=5, pages=1)

        sections = metrics.group_by_day([earlier, morning, evening])

        assert [s.day for s in sections] == [date(2026, 1, 13), date(2026, 1, 11)]
        assert sections[0].sessions == [evening, morning]
        assert (sections[0].minutes, sections[0].pages) == (30, 2)
        assert (sections[1].minutes, sections[1].pages) == (5, 1)

    def test_empty(self):
        assert metrics.group_by_day([]) == []

    def test_day_titles(self):
        today = date(2026, 1, 13)
        assert metrics.day_title(today, today) == "Today"
        assert metrics.day_title(date(2026, 1, 12), today) == "Yesterday"
        assert metrics.day_title(date(2026, 1, 2), today) == "Jan 02, 2026"

    def test_local_wall_time_keeps_naive(self):
        moment = datetime(2026, 1, 13, 23, 30)
        assert metrics.local_wall_time(moment) == moment
