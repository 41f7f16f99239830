"""Error taxonomy and structured run warnings.

Only conditions that make a run meaningless (or the engine unusable) are
raised.  Recoverable conditions are reported as :class:`RunWarning` values
attached to the report or the history store.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict


class BIMCheckError(Exception):
    """Base class for all engine errors."""


class SourceFailure(BIMCheckError):
    """The element source could not supply an element sequence."""


class PersistenceFailure(BIMCheckError):
    """Durable history state could not be read or written."""


class ConfigurationError(BIMCheckError):
    """The engine was configured with an invalid rule set or settings."""


class RunInProgressError(BIMCheckError):
    """A validation run was requested while another one is running."""


class WarningKind(str, Enum):
    """Kinds of recoverable conditions surfaced to the caller."""

    HISTORY_MISSING = "history_missing"
    HISTORY_UNREADABLE = "history_unreadable"
    HISTORY_INVALID = "history_invalid"
    HISTORY_WRITE_FAILED = "history_write_failed"
    MALFORMED_ELEMENT = "malformed_element"


class RunWarning(BaseModel):
    """A recoverable condition reported alongside a result."""

    model_config = ConfigDict(frozen=True)

    kind: WarningKind
    message: str = ""
