"""Reading tracker facade wiring repositories, engine, timer and trigger."""

import asyncio
import logging
from datetime import date, datetime, timedelta, timezone
from typing import Callable, Optional
from uuid import UUID

from pydantic import BaseModel

from ..domain.entities.achievement import Achievement
from ..domain.entities.mood import MoodEntry, MoodKind
from ..domain.entities.reading_session import ReadingSession
from ..domain.interfaces.persistence_store import PersistenceStore
from ..domain.repositories import (
    AchievementsRepository,
    MoodsRepository,
    ReadingRepository,
    SessionsRepository,
    SettingsRepository,
)
from ..domain.repositories.sessions_repository import DateRange, SessionSort
from ..domain.services import metrics, mood_taxonomy
from ..domain.services.achievement_engine import AchievementEngine
from ..domain.services.coalescing import CoalescingTrigger
from ..domain.services.session_timer import SessionTimer
from .config import Settings

logger = logging.getLogger(__name__)

UNASSIGNED = "Unassigned"
MAX_QUICK_LOG_MINUTES = 240
MAX_QUICK_LOG_PAGES = 2000


class DaySummary(BaseModel):
    minutes: int
    pages: int
    sessions: int


class MoodboardSummary(BaseModel):
    """Mood and activity overview for the last seven days."""

    dominant: MoodKind
    avg_energy: float
    avg_valence: float
    longest_streak_days: int
    minutes_7d: int
    pages_7d: int
    sessions_7d: int


class TopBook(BaseModel):
    id: UUID
    title: str
    minutes: int
    pages: int
    progress: float


class ReadingTracker:
    """
    Application facade over the reading data.

    Repositories report every mutation to a coalescing trigger; when the
    window closes, one evaluation pass runs over the latest snapshot of
    books, sessions and moods. Outside an asyncio loop the evaluation waits
    for ``flush()``.
    """

    def __init__(
        self,
        store: PersistenceStore,
        settings: Optional[Settings] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.settings = settings or Settings()
        self.store = store
        self._clock = clock or (lambda: datetime.now(timezone.utc))

        self.trigger = CoalescingTrigger(self.evaluate_now, window=self.settings.evaluation_window)
        self.engine = AchievementEngine(
            clock=self._clock,
            night_start_hour=self.settings.night_start_hour,
            night_end_hour=self.settings.night_end_hour,
        )

        self.reading = ReadingRepository(store, on_change=self.trigger.trigger)
        self.sessions = SessionsRepository(
            store,
            on_change=self.trigger.trigger,
            night_start_hour=self.settings.night_start_hour,
            night_end_hour=self.settings.night_end_hour,
        )
        self.moods = MoodsRepository(store, on_change=self.trigger.trigger)
        self.achievements = AchievementsRepository(store, engine=self.engine)
        self.app_settings = SettingsRepository(store)
        self.timer = SessionTimer(clock=self._clock, on_finish=self.sessions.add)
        self.tick_interval = 1.0
        self._ticker: Optional[asyncio.Task] = None

        logger.info("ReadingTracker initialized")

    # Evaluation

    def evaluate_now(self) -> list[Achievement]:
        """Evaluate achievements against the current snapshot."""
        unlocked = self.achievements.evaluate(
            self.reading.books, self.sessions.sessions, self.moods.moods
        )
        for achievement in unlocked:
            logger.info(f"New achievement: {achievement.title}")
        return unlocked

    def flush(self) -> list[Achievement]:
        """Run a pending evaluation now and return what it unlocked."""
        if self.trigger.flush():
            return list(self.trigger.last_result or [])
        return []

    # Logging reading

    def quick_log(
        self,
        book_id: Optional[UUID],
        minutes: int,
        pages: int,
        mood: MoodKind = MoodKind.NEUTRAL,
        note: Optional[str] = None,
    ) -> ReadingSession:
        """Log a session that starts now and lasts ``minutes``."""
        minutes = max(1, min(MAX_QUICK_LOG_MINUTES, minutes))
        pages = max(0, min(MAX_QUICK_LOG_PAGES, pages))
        start = self._clock()
        session = self.sessions.add_session(
            book_id=book_id,
            start=start,
            end=start + timedelta(minutes=minutes),
            minutes=minutes,
            pages=pages,
        )
        self._after_reading(session, mood, note)
        return session

    def log_mood(self, kind: MoodKind, note: Optional[str] = None) -> MoodEntry:
        return self.moods.add_mood(kind, note=note, date=self._clock())

    def start_timer(self, book_id: Optional[UUID] = None, pages_per_minute: float = 0) -> None:
        self.timer.start(book_id=book_id, pages_per_minute=pages_per_minute)
        self._ensure_ticker()

    def pause_timer(self) -> None:
        self.timer.pause()

    def resume_timer(self) -> None:
        self.timer.resume()
        self._ensure_ticker()

    def handle_suspend(self) -> None:
        self.timer.handle_suspend()

    def handle_activate(self) -> None:
        self.timer.handle_activate()
        self._ensure_ticker()

    @property
    def ticker_running(self) -> bool:
        return self._ticker is not None and not self._ticker.done()

    def _ensure_ticker(self) -> None:
        """Run the display ticker on the current loop while the timer runs."""
        if not self.timer.is_running or self.ticker_running:
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            return
        self._ticker = loop.create_task(self.timer.run_ticker(self.tick_interval))

    def stop_timer(
        self,
        override_pages: Optional[int] = None,
        mood: MoodKind = MoodKind.NEUTRAL,
        note: Optional[str] = None,
    ) -> Optional[ReadingSession]:
        session = self.timer.stop(override_pages=override_pages)
        if session is not None:
            self._after_reading(session, mood, note)
        return session

    def _after_reading(self, session: ReadingSession, mood: MoodKind, note: Optional[str]) -> None:
        if session.book_id is not None and session.pages > 0:
            self.reading.add_progress(session.book_id, session.pages)
        self.moods.add_mood(mood, note=note, date=self._clock())

    def erase_all_data(self) -> None:
        self.reading.clear_all()
        self.sessions.clear_all()
        self.moods.clear_all()
        # Nothing can unlock from an empty snapshot.
        self.trigger.cancel()
        self.achievements.reset_all()
        logger.info("All local data erased")

    # Queries

    def book_title(self, book_id: Optional[UUID]) -> str:
        book = self.reading.find(book_id)
        return book.title if book else UNASSIGNED

    def today(self) -> date:
        return metrics.local_day(self._clock())

    def today_summary(self) -> DaySummary:
        today = self.today()
        totals = metrics.sum_in_window(self.sessions.sessions, today, today + timedelta(days=1))
        return DaySummary(minutes=totals.minutes, pages=totals.pages, sessions=totals.count)

    def moodboard_summary(self) -> MoodboardSummary:
        moods = self.moods.moods
        sessions = self.sessions.sessions
        aggregate = mood_taxonomy.aggregate_mood_metrics(moods)
        window = metrics.sum_in_window(sessions, *metrics.last_n_days(7, self.today()))
        return MoodboardSummary(
            dominant=mood_taxonomy.dominant_mood_kind(moods),
            avg_energy=aggregate.energy,
            avg_valence=aggregate.valence,
            longest_streak_days=metrics.longest_streak_days(sessions),
            minutes_7d=window.minutes,
            pages_7d=window.pages,
            sessions_7d=window.count,
        )

    def top_books(self, limit: Optional[int] = None) -> list[TopBook]:
        """Books with the most reading time, then pages. Removed books are skipped."""
        limit = self.settings.top_books_limit if limit is None else limit
        items = []
        for book_id, totals in metrics.per_book_totals(self.sessions.sessions).items():
            book = self.reading.find(book_id)
            if book is None:
                continue
            items.append(
                TopBook(
                    id=book_id,
                    title=book.title,
                    minutes=totals.minutes,
                    pages=totals.pages,
                    progress=book.progress,
                )
            )
        items.sort(key=lambda b: (b.minutes, b.pages), reverse=True)
        return items[:limit]

    def recent_sessions(self, limit: Optional[int] = None) -> list[ReadingSession]:
        limit = self.settings.recent_sessions_limit if limit is None else limit
        return self.sessions.sessions[:limit]

    def session_sections(
        self,
        date_range: DateRange = DateRange.LAST_30,
        book_id: Optional[UUID] = None,
        sort: SessionSort = SessionSort.NEWEST_FIRST,
    ) -> tuple[list[metrics.DaySection], metrics.SessionsStats]:
        """Filtered sessions grouped by local day, with totals over the filter."""
        items = self.sessions.query(self.today(), date_range=date_range, book_id=book_id, sort=sort)
        return metrics.group_by_day(items), self.sessions.stats(items)

    def suggestion(self) -> mood_taxonomy.ReadingWindow:
        return mood_taxonomy.suggest_reading_window(
            mood_taxonomy.dominant_mood_kind(self.moods.moods)
        )
