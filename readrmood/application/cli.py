"""Command line interface for the reading tracker."""

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence
from uuid import UUID

from ..domain.entities.mood import MoodKind
from ..domain.repositories.reading_repository import BookFilter, BookSort
from ..domain.repositories.sessions_repository import DateRange, SessionSort
from ..domain.services import metrics, mood_taxonomy
from ..infrastructure.csv_export import export_sessions_csv
from ..infrastructure.json_persistence_store import JsonFilePersistenceStore
from ..infrastructure.migrations import SchemaMigrator
from .config import Settings, settings as default_settings
from .tracker import ReadingTracker

logger = logging.getLogger(__name__)


def build_parser(version: str = "") -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="readrmood", description="Track reading habits")
    if version:
        parser.add_argument("--version", action="version", version=f"%(prog)s {version}")
    parser.add_argument("--data-dir", type=Path, help="Directory holding the JSON data files")
    sub = parser.add_subparsers(dest="command", required=True)

    add_book = sub.add_parser("add-book", help="Add a book to the library")
    add_book.add_argument("title")
    add_book.add_argument("--author", default="")
    add_book.add_argument("--pages", type=int, default=0, help="Total pages")

    books = sub.add_parser("books", help="List books")
    books.add_argument("--search", default="", help="Match title or author")
    books.add_argument("--filter", choices=[f.value for f in BookFilter], default=BookFilter.ALL.value)
    books.add_argument("--sort", choices=[s.value for s in BookSort], default=BookSort.RECENT.value)

    sessions = sub.add_parser("sessions", help="List sessions grouped by day")
    sessions.add_argument("--range", choices=[r.value for r in DateRange], default=DateRange.LAST_30.value)
    sessions.add_argument("--book", type=UUID, help="Only sessions of this book")
    sessions.add_argument(
        "--sort", choices=[s.value for s in SessionSort], default=SessionSort.NEWEST_FIRST.value
    )

    log = sub.add_parser("log", help="Quick-log a reading session")
    log.add_argument("--book", type=UUID, help="Book id")
    log.add_argument("--minutes", type=int, default=15)
    log.add_argument("--pages", type=int, default=5)
    log.add_argument("--mood", choices=[k.value for k in MoodKind], default=MoodKind.NEUTRAL.value)
    log.add_argument("--note")

    mood = sub.add_parser("mood", help="Log a mood without a session")
    mood.add_argument("kind", choices=[k.value for k in MoodKind])
    mood.add_argument("--note")

    sub.add_parser("summary", help="Show today and moodboard summaries")
    sub.add_parser("achievements", help="List achievements")

    export = sub.add_parser("export-csv", help="Export sessions to CSV")
    export.add_argument("directory", type=Path, nargs="?", default=Path("."))

    erase = sub.add_parser("erase", help="Erase all local data")
    erase.add_argument("--yes", action="store_true", help="Confirm erasing")
    return parser


def _print_unlocked(tracker: ReadingTracker) -> None:
    for achievement in tracker.flush():
        print(f"Achievement unlocked: {achievement.title} - {achievement.description}")


def _print_sessions(args: argparse.Namespace, tracker: ReadingTracker) -> None:
    sections, stats = tracker.session_sections(
        DateRange(args.range), book_id=args.book, sort=SessionSort(args.sort)
    )
    today = tracker.today()
    for section in sections:
        print(f"{metrics.day_title(section.day, today)}: {section.minutes} min, {section.pages} pages")
        for session in section.sessions:
            print(f"  {session.id}  {tracker.book_title(session.book_id)}  {session.minutes} min, {session.pages} pages")
    print(
        f"{stats.count} sessions, {stats.minutes} min, {stats.pages} pages, "
        f"longest streak {stats.longest_streak_days} days"
    )


def run(args: argparse.Namespace, tracker: ReadingTracker) -> int:
    if args.command == "add-book":
        book = tracker.reading.add_book(args.title, author=args.author, total_pages=args.pages)
        print(f"{book.id}  {book.title}")
        _print_unlocked(tracker)
    elif args.command == "books":
        for book in tracker.reading.search(args.search, BookFilter(args.filter), BookSort(args.sort)):
            print(f"{book.id}  {book.title} / {book.author}  {book.current_page}/{book.total_pages}")
    elif args.command == "sessions":
        _print_sessions(args, tracker)
    elif args.command == "log":
        session = tracker.quick_log(
            args.book, args.minutes, args.pages, mood=MoodKind(args.mood), note=args.note
        )
        print(f"Logged {session.minutes} min, {session.pages} pages for {tracker.book_title(session.book_id)}")
        _print_unlocked(tracker)
    elif args.command == "mood":
        tracker.log_mood(MoodKind(args.kind), note=args.note)
        _print_unlocked(tracker)
    elif args.command == "summary":
        today = tracker.today_summary()
        board = tracker.moodboard_summary()
        print(f"Today: {today.minutes} min, {today.pages} pages, {today.sessions} sessions")
        print(f"Last 7 days: {board.minutes_7d} min, {board.pages_7d} pages, {board.sessions_7d} sessions")
        print(f"Longest streak: {board.longest_streak_days} days")
        print(f"Dominant mood: {board.dominant.emoji} {board.dominant.label}")
        window = tracker.suggestion()
        tags = ", ".join(t.value for t in mood_taxonomy.tags_for(board.dominant))
        print(f"Suggested: {window.target_minutes} min, {window.pace_hint.value} pace ({tags})")
        for book in tracker.top_books():
            print(f"  {book.title}: {book.minutes} min, {book.pages} pages, {book.progress:.0%}")
    elif args.command == "achievements":
        repo = tracker.achievements
        for item in repo.achievements:
            mark = "x" if item.is_unlocked else " "
            print(f"[{mark}] {item.title} - {item.description}")
        print(f"{repo.unlocked_count}/{repo.total_count} unlocked, {repo.total_points} points")
    elif args.command == "export-csv":
        path = export_sessions_csv(tracker.sessions.sessions, tracker.reading.books, args.directory)
        print(path)
    elif args.command == "erase":
        if not args.yes:
            print("Refusing to erase without --yes", file=sys.stderr)
            return 2
        tracker.erase_all_data()
        print("All local data erased")
    return 0


def main(argv: Optional[Sequence[str]] = None, config: Optional[Settings] = None) -> int:
    config = config or default_settings
    level = logging.DEBUG if config.debug else getattr(logging, config.log_level.upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    args = build_parser(version=config.app_version).parse_args(argv)
    data_dir = (args.data_dir or config.data_dir).expanduser()

    store = JsonFilePersistenceStore(data_dir, background=config.background_writes)
    try:
        SchemaMigrator(store, data_dir).run()
        tracker = ReadingTracker(store, settings=config)
        code = run(args, tracker)
    finally:
        store.close()

    if store.last_error is not None:
        print(f"Storage error: {store.last_error}", file=sys.stderr)
        return 1
    return code


if __name__ == "__main__":
    sys.exit(main())
