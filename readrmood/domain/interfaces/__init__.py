"""Domain interfaces for the reading tracker."""

from .persistence_store import PersistenceStore

__all__ = ["PersistenceStore"]
