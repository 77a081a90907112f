"""JSON file implementation of Persistence Store."""

import json
import logging
import os
import tempfile
from concurrent.futures import Future, ThreadPoolExecutor
from enum import Enum
from pathlib import Path
from typing import Any, Optional, Union

from pydantic import TypeAdapter

from ..domain.entities.achievement import Achievement
from ..domain.entities.book import Book
from ..domain.entities.mood import MoodEntry
from ..domain.entities.reading_session import ReadingSession
from ..domain.entities.settings import AppSettings
from ..domain.interfaces.persistence_store import PersistenceStore

logger = logging.getLogger(__name__)


class StoreFile(str, Enum):
    """File names of the persisted collections."""
    BOOKS = "books.json"
    SESSIONS = "sessions.json"
    MOODS = "moods.json"
    ACHIEVEMENTS = "achievements.json"
    SETTINGS = "settings.json"


_ADAPTERS: dict[StoreFile, TypeAdapter] = {
    StoreFile.BOOKS: TypeAdapter(list[Book]),
    StoreFile.SESSIONS: TypeAdapter(list[ReadingSession]),
    StoreFile.MOODS: TypeAdapter(list[MoodEntry]),
    StoreFile.ACHIEVEMENTS: TypeAdapter(list[Achievement]),
    StoreFile.SETTINGS: TypeAdapter(AppSettings),
}


def write_json_atomic(path: Path, payload: Any) -> None:
    """Write pretty-printed JSON with sorted keys via a temp file and rename."""
    text = json.dumps(payload, indent=2, sort_keys=True, ensure_ascii=False)
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            handle.write(text)
        os.replace(tmp_name, path)
    except BaseException:
        if os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise


class JsonFilePersistenceStore(PersistenceStore):
    """File-backed store keeping each collection in its own JSON file.

    Records are written with camelCase keys and ISO-8601 timestamps.
    Failures never propagate: they are logged and kept in ``last_error``.
    With ``background=True`` writes go to a single worker thread and are
    fire-and-forget; ``close()`` waits for queued writes.
    """

    def __init__(self, base_dir: Union[str, Path], background: bool = False):
        """Initialize the store and create ``base_dir`` if needed.

        Args:
            base_dir: Directory holding the JSON files.
            background: Offload writes to a worker thread.
        """
        self.base_dir = Path(base_dir).expanduser()
        self.last_error: Optional[Exception] = None
        self._executor: Optional[ThreadPoolExecutor] = (
            ThreadPoolExecutor(max_workers=1, thread_name_prefix="readrmood-store")
            if background
            else None
        )
        try:
            self.base_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            self._record_error(e, f"creating {self.base_dir}")

    def path_for(self, file: StoreFile) -> Path:
        return self.base_dir / file.value

    def load_books(self) -> list[Book]:
        return self._load(StoreFile.BOOKS) or []

    def save_books(self, books: list[Book]) -> None:
        self._save(StoreFile.BOOKS, books)

    def load_sessions(self) -> list[ReadingSession]:
        return self._load(StoreFile.SESSIONS) or []

    def save_sessions(self, sessions: list[ReadingSession]) -> None:
        self._save(StoreFile.SESSIONS, sessions)

    def load_moods(self) -> list[MoodEntry]:
        return self._load(StoreFile.MOODS) or []

    def save_moods(self, moods: list[MoodEntry]) -> None:
        self._save(StoreFile.MOODS, moods)

    def load_achievements(self) -> list[Achievement]:
        return self._load(StoreFile.ACHIEVEMENTS) or []

    def save_achievements(self, achievements: list[Achievement]) -> None:
        self._save(StoreFile.ACHIEVEMENTS, achievements)

    def load_settings(self) -> AppSettings:
        return self._load(StoreFile.SETTINGS) or AppSettings()

    def save_settings(self, settings: AppSettings) -> None:
        self._save(StoreFile.SETTINGS, settings)

    def close(self) -> None:
        """Wait for queued background writes and stop the worker."""
        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None

    def _load(self, file: StoreFile):
        path = self.path_for(file)
        if not path.exists():
            return None
        try:
            return _ADAPTERS[file].validate_json(path.read_bytes())
        except Exception as e:
            self._record_error(e, f"loading {path}")
            return None

    def _save(self, file: StoreFile, value) -> None:
        # Serialize on the caller's thread so the worker never sees later mutations.
        payload = _ADAPTERS[file].dump_python(value, mode="json", by_alias=True)
        path = self.path_for(file)
        if self._executor is None:
            self._write(path, payload)
            return
        future: Future = self._executor.submit(self._write, path, payload)
        logger.debug(f"Queued write of {path.name} ({future})")

    def _write(self, path: Path, payload: Any) -> None:
        try:
            write_json_atomic(path, payload)
        except Exception as e:
            self._record_error(e, f"writing {path}")

    def _record_error(self, error: Exception, action: str) -> None:
        logger.exception(f"Persistence error while {action}: {error}")
        self.last_error = error
