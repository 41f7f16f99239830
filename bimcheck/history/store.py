"""HistoryStore — bounded, persisted log of validation runs.

The store owns the :class:`DashboardState`.  All mutations go through
:meth:`HistoryStore.append` and :meth:`HistoryStore.clear`, which are
serialised by a lock and write the full state through to the backing
:class:`PersistentStore`.  The persisted state is read on first use, so
a store that was never explicitly loaded still appends to existing history.
"""

from __future__ import annotations

import logging
import threading
from typing import Any

from pydantic import ValidationError

from bimcheck.config import RECENT_RUNS_LIMIT, TIMELINE_LIMIT
from bimcheck.errors import PersistenceFailure, RunWarning, WarningKind
from bimcheck.history.backends import MemoryStore, PersistentStore
from bimcheck.history.models import DashboardState, TimelineEntry, ValidationRun

logger = logging.getLogger(__name__)


class HistoryStore:
    """Single-writer owner of the dashboard state.

    Parameters
    ----------
    backend:
        Where the state is persisted.  Defaults to an in-memory store.
    recent_limit:
        Maximum number of runs kept in ``recent_runs``.
    timeline_limit:
        Maximum number of entries kept in ``timeline``.
    """

    def __init__(
        self,
        backend: PersistentStore | None = None,
        *,
        recent_limit: int = RECENT_RUNS_LIMIT,
        timeline_limit: int = TIMELINE_LIMIT,
    ) -> None:
        self.backend = backend if backend is not None else MemoryStore()
        self.recent_limit = recent_limit
        self.timeline_limit = timeline_limit
        self.last_warning: RunWarning | None = None
        self._lock = threading.Lock()
        self._state = DashboardState()
        self._loaded = False

    @property
    def state(self) -> DashboardState:
        """A copy of the current state, read from the backend on first access."""
        with self._lock:
            self._ensure_loaded()
            return self._state.model_copy(deep=True)

    def load(self) -> DashboardState:
        """Read the persisted state, falling back to an empty one.

        Never raises for missing, unreadable or invalid payloads; the
        condition is recorded in :attr:`last_warning` instead.
        """
        with self._lock:
            self._load_locked()
            return self._state.model_copy(deep=True)

    def append(self, run: ValidationRun) -> DashboardState:
        """Prepend *run* and its timeline entry, evicting the oldest entries.

        The new state is persisted before it becomes current.  If the write
        fails, :class:`PersistenceFailure` is raised and the previous state
        is kept.
        """
        with self._lock:
            self._ensure_loaded()
            new_state = self._bounded(
                [run, *self._state.recent_runs],
                [TimelineEntry.from_run(run), *self._state.timeline],
            )
            self._write(new_state)
            self._state = new_state
            logger.info("Recorded run %s (%s)", run.id, run.status.value)
            return self._state.model_copy(deep=True)

    def clear(self) -> DashboardState:
        """Drop all history.  Raises :class:`PersistenceFailure` on write errors."""
        with self._lock:
            new_state = DashboardState()
            self._write(new_state)
            self._state = new_state
            self._loaded = True
            logger.info("Validation history cleared")
            return self._state.model_copy(deep=True)

    def _bounded(self, runs: list[ValidationRun], timeline: list[TimelineEntry]) -> DashboardState:
        return DashboardState(
            recent_runs=runs[: self.recent_limit],
            timeline=timeline[: self.timeline_limit],
        )

    def _write(self, state: DashboardState) -> None:
        payload: dict[str, Any] = state.model_dump(mode="json")
        self.backend.save(payload)

    def _ensure_loaded(self) -> None:
        # Writing before the first read would replace the persisted history.
        if not self._loaded:
            self._load_locked()

    def _load_locked(self) -> None:
        self.last_warning = None
        self._loaded = True
        try:
            payload = self.backend.load()
        except PersistenceFailure as exc:
            logger.warning("History unreadable, starting empty: %s", exc)
            self._state = DashboardState()
            self.last_warning = RunWarning(kind=WarningKind.HISTORY_UNREADABLE, message=str(exc))
            return

        if payload is None:
            logger.debug("No persisted history, starting empty")
            self._state = DashboardState()
            self.last_warning = RunWarning(
                kind=WarningKind.HISTORY_MISSING, message="No persisted history found",
            )
            return

        try:
            state = DashboardState.model_validate(payload)
        except ValidationError as exc:
            logger.warning("History failed schema validation, starting empty: %s", exc)
            self._state = DashboardState()
            self.last_warning = RunWarning(kind=WarningKind.HISTORY_INVALID, message=str(exc))
            return

        self._state = self._bounded(state.recent_runs, state.timeline)
