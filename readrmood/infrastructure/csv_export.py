"""CSV export of reading sessions."""

import csv
import io
import logging
import time
from datetime import datetime
from pathlib import Path
from typing import Iterable, Optional, Union
from uuid import UUID

from ..domain.entities.book import Book
from ..domain.entities.reading_session import ReadingSession

logger = logging.getLogger(__name__)

UNASSIGNED = "Unassigned"
HEADER = ["id", "bookId", "bookTitle", "startISO8601", "endISO8601", "minutes", "pages"]


def iso8601(moment: datetime) -> str:
    """ISO-8601 with millisecond precision, e.g. ``2026-01-13T10:00:00.000+00:00``."""
    return moment.isoformat(timespec="milliseconds")


def book_title(book_id: Optional[UUID], books_by_id: dict[UUID, Book]) -> str:
    if book_id is None or book_id not in books_by_id:
        return UNASSIGNED
    return books_by_id[book_id].title


def build_sessions_csv(sessions: Iterable[ReadingSession], books: Iterable[Book]) -> str:
    """Render one CSV row per session after a header row.

    Commas in book titles become spaces and negative minutes or pages are
    written as zero.
    """
    books_by_id = {b.id: b for b in books}
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(HEADER)
    for s in sessions:
        writer.writerow(
            [
                str(s.id),
                str(s.book_id) if s.book_id else "",
                book_title(s.book_id, books_by_id).replace(",", " "),
                iso8601(s.start),
                iso8601(s.end),
                max(0, s.minutes),
                max(0, s.pages),
            ]
        )
    return buffer.getvalue()


def export_sessions_csv(
    sessions: Iterable[ReadingSession],
    books: Iterable[Book],
    directory: Union[str, Path],
) -> Path:
    """Write ``sessions-<unix-seconds>.csv`` into ``directory`` and return its path.

    Raises:
        OSError: If the file cannot be written.
    """
    directory = Path(directory).expanduser()
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / f"sessions-{int(time.time())}.csv"
    path.write_text(build_sessions_csv(sessions, books), encoding="utf-8")
    logger.info(f"Exported sessions to {path}")
    return path
