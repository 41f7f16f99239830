"""Persistent stores for the dashboard state.

Each backend holds a single keyed JSON record and replaces it atomically:
readers see either the previous payload or the new one, never a mix.

* :class:`MemoryStore` — process-local, for tests and ephemeral engines.
* :class:`JsonFileStore` — one JSON file, written via temp file + rename.
* :class:`SqliteStore` — one row in a key/value table, replaced in a single
  transaction.  Uses stdlib sqlite3 only.
"""

from __future__ import annotations

import abc
import json
import logging
import sqlite3
import tempfile
from pathlib import Path
from typing import Any

from bimcheck.config import STATE_KEY
from bimcheck.errors import PersistenceFailure

logger = logging.getLogger(__name__)


class PersistentStore(abc.ABC):
    """Load, save and clear one JSON-serialisable payload."""

    @abc.abstractmethod
    def load(self) -> dict[str, Any] | None:
        """Return the stored payload, or ``None`` if nothing is stored.

        Raises :class:`PersistenceFailure` if the payload cannot be read or
        decoded.
        """

    @abc.abstractmethod
    def save(self, payload: dict[str, Any]) -> None:
        """Replace the stored payload.  Raises :class:`PersistenceFailure`."""

    @abc.abstractmethod
    def clear(self) -> None:
        """Remove the stored payload.  Raises :class:`PersistenceFailure`."""


def _decode(raw: str, source: str) -> dict[str, Any]:
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise PersistenceFailure(f"Unparseable history payload in {source}: {exc}") from exc
    if not isinstance(data, dict):
        raise PersistenceFailure(f"History payload in {source} is not an object")
    return data


class MemoryStore(PersistentStore):
    """Keeps the payload as serialised JSON so round-trips match disk stores."""

    def __init__(self, raw: str | None = None) -> None:
        self._raw = raw

    def load(self) -> dict[str, Any] | None:
        if self._raw is None:
            return None
        return _decode(self._raw, "memory")

    def save(self, payload: dict[str, Any]) -> None:
        self._raw = json.dumps(payload)

    def clear(self) -> None:
        self._raw = None


class JsonFileStore(PersistentStore):
    """Dashboard state in a single JSON file.

    Parameters
    ----------
    path:
        File to read and replace.  Parent directories are created on save.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def load(self) -> dict[str, Any] | None:
        if not self.path.is_file():
            return None
        try:
            raw = self.path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise PersistenceFailure(f"Cannot read {self.path}: {exc}") from exc
        data = _decode(raw, str(self.path))
        # Files are keyed so one file can carry other records later.
        if STATE_KEY in data:
            state = data[STATE_KEY]
            if not isinstance(state, dict):
                raise PersistenceFailure(f"Record '{STATE_KEY}' in {self.path} is not an object")
            return state
        return data

    def save(self, payload: dict[str, Any]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            # Atomic write: temp file + rename
            fd, tmp = tempfile.mkstemp(
                dir=self.path.parent, prefix=".history_", suffix=".json"
            )
        except OSError as exc:
            raise PersistenceFailure(f"Cannot write {self.path}: {exc}") from exc
        try:
            with open(fd, "w", encoding="utf-8") as fh:
                json.dump({STATE_KEY: payload}, fh, indent=2)
            Path(tmp).replace(self.path)
        except OSError as exc:
            Path(tmp).unlink(missing_ok=True)
            raise PersistenceFailure(f"Cannot write {self.path}: {exc}") from exc
        except BaseException:
            Path(tmp).unlink(missing_ok=True)
            raise

    def clear(self) -> None:
        try:
            self.path.unlink(missing_ok=True)
        except OSError as exc:
            raise PersistenceFailure(f"Cannot remove {self.path}: {exc}") from exc


_SCHEMA = """\
CREATE TABLE IF NOT EXISTS state (
    key         TEXT PRIMARY KEY,
    payload     TEXT NOT NULL,
    updated_at  TEXT NOT NULL DEFAULT (datetime('now'))
);
"""


class SqliteStore(PersistentStore):
    """Dashboard state as one row of an SQLite key/value table.

    Parameters
    ----------
    db_path:
        Path to the SQLite file.  Use ``':memory:'`` for tests.
    key:
        Row key of the record.
    """

    def __init__(self, db_path: str | Path = ":memory:", key: str = STATE_KEY) -> None:
        self._db_path = str(db_path)
        self.key = key
        try:
            if self._db_path != ":memory:":
                Path(self._db_path).parent.mkdir(parents=True, exist_ok=True)
            self._conn = sqlite3.connect(self._db_path, check_same_thread=False)
            self._conn.executescript(_SCHEMA)
            self._conn.commit()
        except (OSError, sqlite3.Error) as exc:
            raise PersistenceFailure(f"Cannot open history database {self._db_path}: {exc}") from exc

    def load(self) -> dict[str, Any] | None:
        try:
            row = self._conn.execute(
                "SELECT payload FROM state WHERE key = ?", (self.key,)
            ).fetchone()
        except sqlite3.Error as exc:
            raise PersistenceFailure(f"Cannot read history database: {exc}") from exc
        if row is None:
            return None
        return _decode(row[0], self._db_path)

    def save(self, payload: dict[str, Any]) -> None:
        try:
            with self._conn:
                self._conn.execute(
                    "INSERT OR REPLACE INTO state (key, payload, updated_at) "
                    "VALUES (?, ?, datetime('now'))",
                    (self.key, json.dumps(payload)),
                )
        except sqlite3.Error as exc:
            raise PersistenceFailure(f"Cannot write history database: {exc}") from exc

    def clear(self) -> None:
        try:
            with self._conn:
                self._conn.execute("DELETE FROM state WHERE key = ?", (self.key,))
        except sqlite3.Error as exc:
            raise PersistenceFailure(f"Cannot clear history database: {exc}") from exc

    def close(self) -> None:
        self._conn.close()
