"""Session timer state machine."""

import asyncio
import logging
from datetime import datetime, timezone
from enum import Enum
from typing import Callable, Optional
from uuid import UUID

from ..entities.reading_session import ReadingSession, round_half_up

logger = logging.getLogger(__name__)


class TimerState(str, Enum):
    """Timer state enum."""
    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def format_clock(seconds: int) -> str:
    """``MM:SS``, or ``HH:MM:SS`` once an hour has passed."""
    s = max(0, seconds)
    hours, rest = divmod(s, 3600)
    minutes, secs = divmod(rest, 60)
    if hours > 0:
        return f"{hours:02d}:{minutes:02d}:{secs:02d}"
    return f"{minutes:02d}:{secs:02d}"


class SessionTimer:
    """
    Tracks one timed reading session.

    Elapsed time is accumulated from wall-clock start/resume timestamps
    taken from the injected clock. ``elapsed_seconds`` is refreshed by
    ``tick()`` for display only; the minute count produced by ``stop()``
    is always recomputed from the timestamps, so missed ticks while the
    app is suspended lose nothing.

    Transitions that are not valid from the current state are ignored.
    """

    def __init__(
        self,
        clock: Optional[Callable[[], datetime]] = None,
        on_finish: Optional[Callable[[ReadingSession], ReadingSession]] = None,
    ):
        self._clock = clock or _utc_now
        self._on_finish = on_finish

        self.state: TimerState = TimerState.IDLE
        self.elapsed_seconds: int = 0
        self.book_id: Optional[UUID] = None
        self.started_at: Optional[datetime] = None
        self.pages_per_minute: float = 0.0

        self._last_resume_at: Optional[datetime] = None
        self._accumulated: float = 0.0

    @property
    def formatted_clock(self) -> str:
        return format_clock(self.elapsed_seconds)

    @property
    def is_running(self) -> bool:
        return self.state == TimerState.RUNNING

    def accumulated_seconds(self) -> float:
        """Reading time so far, including the open interval if running."""
        total = self._accumulated
        if self.state == TimerState.RUNNING and self._last_resume_at is not None:
            total += max(0.0, (self._clock() - self._last_resume_at).total_seconds())
        return total

    def start(self, book_id: Optional[UUID] = None, pages_per_minute: float = 0) -> None:
        if self.state != TimerState.IDLE:
            logger.debug(f"Ignoring start while {self.state.value}")
            return
        self.book_id = book_id
        self.pages_per_minute = max(0.0, float(pages_per_minute))
        self.started_at = self._clock()
        self._accumulated = 0.0
        self._last_resume_at = self.started_at
        self.elapsed_seconds = 0
        self.state = TimerState.RUNNING
        logger.info(f"Timer started for book {book_id}")

    def pause(self) -> None:
        if self.state != TimerState.RUNNING:
            logger.debug(f"Ignoring pause while {self.state.value}")
            return
        self._fold_open_interval()
        self.elapsed_seconds = round_half_up(self._accumulated)
        self.state = TimerState.PAUSED

    def resume(self) -> None:
        if self.state != TimerState.PAUSED:
            logger.debug(f"Ignoring resume while {self.state.value}")
            return
        self._last_resume_at = self._clock()
        self.state = TimerState.RUNNING

    def stop(self, override_pages: Optional[int] = None) -> Optional[ReadingSession]:
        """Finish the session and return to idle.

        Args:
            override_pages: Pages read, when the user typed them in. Otherwise
                pages are estimated from the pages-per-minute rate.

        Returns:
            The finalized session (as returned by ``on_finish`` when set),
            or None when the timer was idle.
        """
        if self.state == TimerState.IDLE:
            logger.debug("Ignoring stop while idle")
            return None

        end = self._clock()
        if self.state == TimerState.RUNNING and self._last_resume_at is not None:
            self._accumulated += max(0.0, (end - self._last_resume_at).total_seconds())
        start = self.started_at or end

        minutes = max(0, round_half_up(self._accumulated / 60.0))
        if override_pages is not None:
            pages = max(0, override_pages)
        elif self.pages_per_minute > 0:
            pages = max(0, round_half_up(minutes * self.pages_per_minute))
        else:
            pages = 0

        session = ReadingSession(
            book_id=self.book_id,
            start=start,
            end=max(end, start),
            minutes=minutes,
            pages=pages,
        )
        logger.info(f"Timer stopped after {minutes} min, {pages} pages")
        self.reset_state()

        if self._on_finish is not None:
            return self._on_finish(session)
        return session

    def handle_suspend(self) -> None:
        """The app is going to the background: pause a running session."""
        if self.state == TimerState.RUNNING:
            self.pause()

    def handle_activate(self) -> None:
        """The app is back in the foreground: resume a paused session."""
        if self.state == TimerState.PAUSED and self.started_at is not None:
            self.resume()

    def reset_state(self) -> None:
        self.state = TimerState.IDLE
        self.elapsed_seconds = 0
        self.book_id = None
        self.started_at = None
        self.pages_per_minute = 0.0
        self._last_resume_at = None
        self._accumulated = 0.0

    def tick(self) -> int:
        """Refresh the displayed elapsed seconds."""
        if self.state == TimerState.RUNNING:
            self.elapsed_seconds = max(0, round_half_up(self.accumulated_seconds()))
        return self.elapsed_seconds

    async def run_ticker(self, interval: float = 1.0) -> None:
        """Tick every ``interval`` seconds until the timer leaves running.

        Returns on pause or stop; a new ticker is needed after resume.
        """
        while self.is_running:
            self.tick()
            await asyncio.sleep(interval)

    def _fold_open_interval(self) -> None:
        if self._last_resume_at is not None:
            now = self._clock()
            self._accumulated += max(0.0, (now - self._last_resume_at).total_seconds())
        self._last_resume_at = None
