"""Validation history — bounded run log persisted across restarts."""

from bimcheck.history.backends import JsonFileStore, MemoryStore, PersistentStore, SqliteStore
from bimcheck.history.models import DashboardState, TimelineEntry, ValidationRun
from bimcheck.history.store import HistoryStore

__all__ = [
    "DashboardState",
    "HistoryStore",
    "JsonFileStore",
    "MemoryStore",
    "PersistentStore",
    "SqliteStore",
    "TimelineEntry",
    "ValidationRun",
]
