"""
End-to-end test for the reading tracker user journey.

This test covers the complete user flow on a real data directory:
1. Legacy data is migrated on first launch
2. Books are added and read with the timer and quick log
3. Moods are logged and achievements unlock through coalesced evaluation
4. Data survives a restart
5. Sessions are exported to CSV
6. All data is erased
"""

import asyncio
import csv
import json
import logging
import uuid
from datetime import datetime, timedelta

import pytest

from readrmood.application.config import Settings
from readrmood.application.tracker import ReadingTracker
from readrmood.domain.entities import MoodKind
from readrmood.infrastructure.csv_export import export_sessions_csv
from readrmood.infrastructure.json_persistence_store import JsonFilePersistenceStore
from readrmood.infrastructure.migrations import LATEST_VERSION, LEGACY_FILE, SchemaMigrator

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

LEGACY_BOOK_ID = "12345678-1234-5678-1234-567812345678"


class SteppingClock:
    """Clock advanced explicitly by the test."""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now


def open_tracker(data_dir, clock):
    store = JsonFilePersistenceStore(data_dir)
    SchemaMigrator(store, data_dir).run()
    settings = Settings(_env_file=None, data_dir=data_dir, evaluation_window_ms=20)
    return store, ReadingTracker(store, settings=settings, clock=clock)


@pytest.mark.asyncio
async def test_complete_user_journey(tmp_path):
    """Test the complete user journey from first launch to erasing data."""
    data_dir = tmp_path / "data"
    data_dir.mkdir()
    clock = SteppingClock(datetime(2026, 1, 9, 21, 0))

    # Step 1: first launch migrates a legacy single-file blob
    logger.info("Step 1: Migrating legacy data")
    legacy = {
        "books": [
            {"id": LEGACY_BOOK_ID, "title": "Dune", "author": "Frank Herbert",
             "totalPages": 100, "currentPage": 40},
            {"id": str(uuid.uuid4()), "title": "dune", "author": "frank herbert"},
        ],
        "settings": {"isDarkModeEnabled": False, "privacyUrl": "nope"},
    }
    (data_dir / LEGACY_FILE).write_text(json.dumps(legacy))
    store, tracker = open_tracker(data_dir, clock)

    assert SchemaMigrator(store, data_dir).current_version() == LATEST_VERSION
    assert [b.title for b in tracker.reading.books] == ["Dune"]
    assert tracker.app_settings.settings.is_dark_mode_enabled is True
    book_id = uuid.UUID(LEGACY_BOOK_ID)

    # Step 2: a burst of edits evaluates once
    logger.info("Step 2: Adding a book and logging a mood")
    emma = tracker.reading.add_book("Emma", author="Jane Austen", total_pages=50)
    tracker.log_mood(MoodKind.FOCUSED)
    await asyncio.sleep(0.1)
    assert tracker.trigger.fire_count == 1
    codes = {a.code for a in tracker.achievements.achievements if a.is_unlocked}
    assert codes == {"first_book", "first_mood"}

    # Step 3: read with the timer over three evenings, one late at night
    logger.info("Step 3: Reading with the timer")
    for day in range(3):
        clock.now = datetime(2026, 1, 9 + day, 21, 0)
        tracker.start_timer(book_id, pages_per_minute=0.5)
        clock.now += timedelta(minutes=40)
        tracker.stop_timer(mood=MoodKind.CALM)
    clock.now = datetime(2026, 1, 11, 23, 30)
    tracker.quick_log(emma.id, 30, 50, mood=MoodKind.SLEEPY)
    await asyncio.sleep(0.1)

    unlocked = {a.code for a in tracker.achievements.achievements if a.is_unlocked}
    assert {"first_session", "minutes_60", "streak_3", "night_owl", "book_completed",
            "moods_distinct_3", "weekend_reader"} <= unlocked
    assert tracker.reading.find(book_id).current_page == 100
    assert tracker.reading.find(emma.id).is_completed

    # Step 4: everything survives a restart
    logger.info("Step 4: Restarting")
    store.close()
    store, tracker = open_tracker(data_dir, clock)
    assert len(tracker.sessions.sessions) == 4
    assert tracker.sessions.total_minutes() == 150
    assert tracker.achievements.unlocked_count == len(unlocked)
    assert tracker.evaluate_now() == []
    board = tracker.moodboard_summary()
    assert board.dominant == MoodKind.CALM
    assert board.longest_streak_days == 3

    # Step 5: export sessions
    logger.info("Step 5: Exporting CSV")
    path = export_sessions_csv(tracker.sessions.sessions, tracker.reading.books, tmp_path / "export")
    rows = list(csv.reader(path.read_text(encoding="utf-8").splitlines()))
    assert len(rows) == 5
    assert {row[2] for row in rows[1:]} == {"Dune", "Emma"}

    # Step 6: erase all data
    logger.info("Step 6: Erasing data")
    tracker.erase_all_data()
    store.close()
    store, tracker = open_tracker(data_dir, clock)
    assert tracker.reading.books == []
    assert tracker.sessions.sessions == []
    assert tracker.moods.moods == []
    assert tracker.achievements.unlocked_count == 0
    store.close()
    assert store.last_error is None
