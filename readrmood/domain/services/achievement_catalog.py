"""Static catalog of achievements.

The catalog is the single source of truth for unlock thresholds. Order
matters: seeded achievement records and engine output follow it.
"""

from typing import Optional

from ..entities.achievement import Achievement, AchievementDefinition, PredicateKind


def _define(code, title, description, icon, points, predicate, threshold):
    return AchievementDefinition(
        code=code,
        title=title,
        description=description,
        icon=icon,
        points=points,
        predicate=predicate,
        threshold=threshold,
    )


DEFINITIONS: tuple[AchievementDefinition, ...] = (
    # Sessions
    _define("first_session", "First Chapter", "Log your first reading session",
            "book.fill", 10, PredicateKind.SESSIONS_LOGGED, 1),
    _define("sessions_10", "Habit Forming", "Log 10 reading sessions",
            "repeat", 20, PredicateKind.SESSIONS_LOGGED, 10),
    _define("sessions_50", "Regular Reader", "Log 50 reading sessions",
            "books.vertical.fill", 50, PredicateKind.SESSIONS_LOGGED, 50),
    # Time
    _define("minutes_60", "First Hour", "Read for 60 minutes in total",
            "clock", 10, PredicateKind.TOTAL_MINUTES, 60),
    _define("minutes_600", "Ten Hours", "Read for 10 hours in total",
            "clock.fill", 30, PredicateKind.TOTAL_MINUTES, 600),
    _define("minutes_3000", "Deep Diver", "Read for 50 hours in total",
            "hourglass", 75, PredicateKind.TOTAL_MINUTES, 3000),
    # Pages
    _define("pages_100", "Page Turner", "Read 100 pages",
            "doc.text", 15, PredicateKind.TOTAL_PAGES, 100),
    _define("pages_1000", "Bookworm", "Read 1,000 pages",
            "doc.text.fill", 50, PredicateKind.TOTAL_PAGES, 1000),
    # Streaks
    _define("streak_3", "Warming Up", "Read on 3 consecutive days",
            "flame", 15, PredicateKind.STREAK_DAYS, 3),
    _define("streak_7", "Week Streak", "Read on 7 consecutive days",
            "flame.fill", 30, PredicateKind.STREAK_DAYS, 7),
    _define("streak_30", "Unstoppable", "Read on 30 consecutive days",
            "bolt.fill", 100, PredicateKind.STREAK_DAYS, 30),
    # Library
    _define("first_book", "Shelf Starter", "Add your first book",
            "book.closed", 5, PredicateKind.BOOKS_ADDED, 1),
    _define("library_10", "Collector", "Add 10 books to your library",
            "square.stack.3d.up", 20, PredicateKind.BOOKS_ADDED, 10),
    _define("book_completed", "The End", "Finish a book",
            "checkmark.seal", 25, PredicateKind.BOOKS_COMPLETED, 1),
    _define("books_completed_5", "Finisher", "Finish 5 books",
            "checkmark.seal.fill", 60, PredicateKind.BOOKS_COMPLETED, 5),
    # Moods
    _define("first_mood", "Feelings Noted", "Log your first mood",
            "face.smiling", 5, PredicateKind.MOODS_LOGGED, 1),
    _define("moods_distinct_3", "Mood Explorer", "Log 3 different moods",
            "sparkles", 15, PredicateKind.DISTINCT_MOODS, 3),
    _define("moods_all", "Full Spectrum", "Log every kind of mood",
            "paintpalette", 30, PredicateKind.DISTINCT_MOODS, 5),
    # Habits
    _define("night_owl", "Night Owl", "Start a session between 23:00 and 05:00",
            "moon.stars", 15, PredicateKind.NIGHT_SESSIONS, 1),
    _define("weekend_reader", "Weekend Reader", "Log 3 sessions on weekends",
            "sun.max", 15, PredicateKind.WEEKEND_SESSIONS, 3),
)

_BY_CODE: dict[str, AchievementDefinition] = {d.code: d for d in DEFINITIONS}

if len(_BY_CODE) != len(DEFINITIONS):
    raise RuntimeError("Achievement codes must be unique")


def definitions() -> tuple[AchievementDefinition, ...]:
    return DEFINITIONS


def definition_for(code: str) -> Optional[AchievementDefinition]:
    return _BY_CODE.get(code)


def points_for(code: str) -> int:
    definition = _BY_CODE.get(code)
    return definition.points if definition else 0


def initial_state() -> list[Achievement]:
    """One locked achievement per catalog entry, in catalog order."""
    return [d.to_achievement() for d in DEFINITIONS]
