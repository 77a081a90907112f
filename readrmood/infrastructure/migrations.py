"""Schema-version migration ladder for the JSON data directory."""

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError
from pydantic.alias_generators import to_camel

from ..domain.entities.achievement import Achievement
from ..domain.entities.book import Book
from ..domain.entities.mood import MoodEntry
from ..domain.entities.reading_session import ReadingSession
from ..domain.entities.settings import DEFAULT_PRIVACY_URL, AppSettings, is_valid_url
from ..domain.interfaces.persistence_store import PersistenceStore
from ..domain.repositories.reading_repository import dedupe_books
from .json_persistence_store import write_json_atomic

logger = logging.getLogger(__name__)

LATEST_VERSION = 5
META_FILE = "meta.json"
LEGACY_FILE = "legacy.json"


class SchemaMeta(BaseModel):
    """Contents of ``meta.json``."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    schema_version: int = Field(ge=1)
    migrated_at: datetime


class SchemaMigrator:
    """
    Brings a data directory up to ``LATEST_VERSION``.

    Each step runs once; the version is written to ``meta.json`` after each
    step so an interrupted run resumes where it stopped. A missing or
    unreadable ``meta.json`` means version 1.
    """

    def __init__(self, store: PersistenceStore, base_dir: Union[str, Path]):
        self._store = store
        self.base_dir = Path(base_dir).expanduser()
        self._steps: dict[int, Callable[[], None]] = {
            2: self._migrate_1_to_2,
            3: self._migrate_2_to_3,
            4: self._migrate_3_to_4,
            5: self._migrate_4_to_5,
        }

    @property
    def meta_path(self) -> Path:
        return self.base_dir / META_FILE

    def current_version(self) -> int:
        if not self.meta_path.exists():
            return 1
        try:
            return SchemaMeta.model_validate_json(self.meta_path.read_bytes()).schema_version
        except (OSError, ValidationError) as e:
            logger.warning(f"Unreadable {META_FILE}, assuming version 1: {e}")
            return 1

    def run(self) -> int:
        """Apply every pending step. Returns the resulting version."""
        version = self.current_version()
        if version >= LATEST_VERSION:
            return version
        for target in range(version + 1, LATEST_VERSION + 1):
            self._steps[target]()
            self._write_version(target)
            logger.info(f"Migrated data schema to version {target}")
            version = target
        return version

    def _write_version(self, version: int) -> None:
        meta = SchemaMeta(schema_version=version, migrated_at=datetime.now(timezone.utc))
        try:
            self.base_dir.mkdir(parents=True, exist_ok=True)
            write_json_atomic(self.meta_path, meta.model_dump(mode="json", by_alias=True))
        except OSError as e:
            logger.exception(f"Could not write {META_FILE}: {e}")
            self._store.last_error = e

    def _migrate_1_to_2(self) -> None:
        """Split the legacy single-file blob into per-collection files."""
        legacy = self.base_dir / LEGACY_FILE
        if not legacy.exists():
            return
        try:
            blob = json.loads(legacy.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.exception(f"Could not read {LEGACY_FILE}: {e}")
            self._store.last_error = e
            return

        self._store.save_books(_decode(blob, "books", list[Book], []))
        self._store.save_sessions(_decode(blob, "sessions", list[ReadingSession], []))
        self._store.save_moods(_decode(blob, "moods", list[MoodEntry], []))
        self._store.save_achievements(_decode(blob, "achievements", list[Achievement], []))
        self._store.save_settings(_decode(blob, "settings", AppSettings, AppSettings()))
        legacy.unlink()

    def _migrate_2_to_3(self) -> None:
        """Clamp session spans and counts; minutes follow the max policy."""
        sessions = self._store.load_sessions()
        repaired = [
            ReadingSession.reconciled(
                book_id=s.book_id,
                start=s.start,
                end=s.end,
                minutes=max(0, s.minutes),
                pages=s.pages,
                id=s.id,
            )
            for s in sessions
        ]
        if repaired != sessions:
            self._store.save_sessions(repaired)

    def _migrate_3_to_4(self) -> None:
        """Deduplicate books by normalized title and author, repair page counts."""
        books = self._store.load_books()
        filtered = dedupe_books(books)
        if filtered != books:
            self._store.save_books(filtered)

    def _migrate_4_to_5(self) -> None:
        """Default a blank or scheme-less privacy URL and turn dark mode on."""
        settings = self._store.load_settings()
        url = settings.privacy_url if is_valid_url(settings.privacy_url) else DEFAULT_PRIVACY_URL
        self._store.save_settings(
            settings.with_changes(privacy_url=url, is_dark_mode_enabled=True)
        )


def _decode(blob: dict, key: str, annotation, default):
    if key not in blob:
        return default
    try:
        return TypeAdapter(annotation).validate_python(blob[key])
    except ValidationError as e:
        logger.warning(f"Dropping malformed legacy {key}: {e}")
        return default
