"""Infrastructure layer components."""

from .csv_export import build_sessions_csv, export_sessions_csv
from .json_persistence_store import JsonFilePersistenceStore, StoreFile
from .memory_persistence_store import InMemoryPersistenceStore
from .migrations import LATEST_VERSION, SchemaMigrator

__all__ = [
    "InMemoryPersistenceStore",
    "JsonFilePersistenceStore",
    "LATEST_VERSION",
    "SchemaMigrator",
    "StoreFile",
    "build_sessions_csv",
    "export_sessions_csv",
]
