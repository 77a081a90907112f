"""Repository owning the book collection."""

import logging
import re
import unicodedata
from enum import Enum
from typing import Callable, Optional
from uuid import UUID

from ..entities.book import Book
from ..interfaces.persistence_store import PersistenceStore
from ..services import metrics

logger = logging.getLogger(__name__)


def normalize_text(value: str) -> str:
    """Case- and accent-insensitive form with collapsed whitespace."""
    decomposed = unicodedata.normalize("NFKD", value)
    stripped = "".join(c for c in decomposed if not unicodedata.combining(c))
    return re.sub(r"\s+", " ", stripped.casefold()).strip()


def book_key(book: Book) -> str:
    return normalize_text(book.title) + "::" + normalize_text(book.author)


def clamp_book(book: Book) -> Book:
    """Repair page counts so that ``0 <= current_page <= total_pages``."""
    total = max(0, book.total_pages)
    current = max(0, min(book.current_page, total))
    if total == book.total_pages and current == book.current_page:
        return book
    return book.with_changes(total_pages=total, current_page=current)


def dedupe_books(books: list[Book]) -> list[Book]:
    """Keep the first book per normalized title+author, with pages repaired."""
    seen: set[str] = set()
    unique = []
    for book in books:
        key = book_key(book)
        if key in seen:
            continue
        seen.add(key)
        unique.append(clamp_book(book))
    return unique


class BookFilter(str, Enum):
    ALL = "all"
    NOT_STARTED = "notStarted"
    IN_PROGRESS = "inProgress"
    COMPLETED = "completed"


class BookSort(str, Enum):
    RECENT = "recent"
    TITLE = "title"
    AUTHOR = "author"
    PROGRESS = "progress"


_FILTERS: dict[BookFilter, Callable[[Book], bool]] = {
    BookFilter.ALL: lambda b: True,
    BookFilter.NOT_STARTED: lambda b: b.is_not_started,
    BookFilter.IN_PROGRESS: lambda b: b.is_in_progress,
    BookFilter.COMPLETED: lambda b: b.is_completed,
}


class ReadingRepository:
    """
    Owns the user's books.

    Every mutating method changes the in-memory list, saves it through the
    injected store, and then calls ``on_change``. Unknown ids are ignored.
    """

    def __init__(
        self,
        store: PersistenceStore,
        on_change: Optional[Callable[[], None]] = None,
    ):
        self._store = store
        self._on_change = on_change
        self._books: list[Book] = dedupe_books(store.load_books())
        self._sort()
        logger.info(f"ReadingRepository loaded {len(self._books)} books")

    @property
    def books(self) -> list[Book]:
        return list(self._books)

    def find(self, book_id: Optional[UUID]) -> Optional[Book]:
        if book_id is None:
            return None
        return next((b for b in self._books if b.id == book_id), None)

    def add_book(self, title: str, author: str = "", total_pages: int = 0, current_page: int = 0) -> Book:
        book = clamp_book(
            Book(
                title=title.strip(),
                author=author.strip(),
                total_pages=total_pages,
                current_page=current_page,
            )
        )
        self._books.append(book)
        self._sort()
        self._commit()
        return book

    def update_book(
        self,
        book_id: UUID,
        title: Optional[str] = None,
        author: Optional[str] = None,
        total_pages: Optional[int] = None,
        current_page: Optional[int] = None,
    ) -> Optional[Book]:
        index = self._index(book_id)
        if index is None:
            return None
        changes = {}
        if title is not None:
            changes["title"] = title.strip()
        if author is not None:
            changes["author"] = author.strip()
        if total_pages is not None:
            changes["total_pages"] = total_pages
        if current_page is not None:
            changes["current_page"] = current_page
        book = clamp_book(self._books[index].with_changes(**changes))
        self._books[index] = book
        self._sort()
        self._commit()
        return book

    def remove_book(self, book_id: UUID) -> None:
        """Remove a book. Sessions pointing at it are left alone."""
        index = self._index(book_id)
        if index is None:
            return
        del self._books[index]
        self._commit()

    def clear_all(self) -> None:
        self._books.clear()
        self._commit()

    def set_current_page(self, book_id: UUID, page: int) -> Optional[Book]:
        index = self._index(book_id)
        if index is None:
            return None
        book = clamp_book(self._books[index].with_changes(current_page=page))
        self._books[index] = book
        self._commit()
        return book

    def add_progress(self, book_id: UUID, pages: int) -> Optional[Book]:
        """Move the current page by ``pages``, clamped to the book's bounds."""
        if pages == 0:
            return self.find(book_id)
        index = self._index(book_id)
        if index is None:
            return None
        book = self._books[index]
        book = clamp_book(book.with_changes(current_page=book.current_page + pages))
        self._books[index] = book
        self._commit()
        return book

    def reorder(self, source: list[int], destination: int) -> None:
        """Move the books at ``source`` indexes so they land before ``destination``."""
        indexes = {i for i in source if 0 <= i < len(self._books)}
        moving = [self._books[i] for i in sorted(indexes)]
        offset = sum(1 for i in indexes if i < destination)
        remaining = [b for i, b in enumerate(self._books) if i not in indexes]
        insert_at = max(0, min(destination - offset, len(remaining)))
        self._books = remaining[:insert_at] + moving + remaining[insert_at:]
        self._commit()

    def search(
        self,
        query: str = "",
        status: BookFilter = BookFilter.ALL,
        sort: BookSort = BookSort.RECENT,
    ) -> list[Book]:
        """Books whose title or author contains ``query``, filtered and sorted.

        Matching ignores case, accents and runs of whitespace.
        """
        needle = normalize_text(query)
        result = [
            b
            for b in self._books
            if not needle or needle in normalize_text(b.title) or needle in normalize_text(b.author)
        ]
        result = [b for b in result if _FILTERS[BookFilter(status)](b)]

        sort = BookSort(sort)
        if sort == BookSort.RECENT:
            result.sort(key=lambda b: b.added_at, reverse=True)
        elif sort == BookSort.TITLE:
            result.sort(key=lambda b: b.title.casefold())
        elif sort == BookSort.AUTHOR:
            result.sort(key=lambda b: b.author.casefold())
        else:
            result.sort(key=lambda b: b.progress, reverse=True)
        return result

    @property
    def total_books(self) -> int:
        return len(self._books)

    @property
    def completed_books(self) -> int:
        return metrics.completed_books(self._books)

    @property
    def in_progress_books(self) -> int:
        return metrics.in_progress_books(self._books)

    @property
    def not_started_books(self) -> int:
        return metrics.not_started_books(self._books)

    def _index(self, book_id: UUID) -> Optional[int]:
        for i, book in enumerate(self._books):
            if book.id == book_id:
                return i
        logger.warning(f"Book with id {book_id} not found")
        return None

    def _sort(self) -> None:
        # Newest first, then title and author case-insensitively.
        self._books.sort(key=lambda b: (b.title.casefold(), b.author.casefold()))
        self._books.sort(key=lambda b: b.added_at, reverse=True)

    def _commit(self) -> None:
        self._store.save_books(list(self._books))
        if self._on_change is not None:
            self._on_change()
