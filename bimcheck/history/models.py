"""History records — validation runs, timeline entries and dashboard state."""

from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field

from bimcheck.analytics.aggregator import ValidationSummary
from bimcheck.models.status import RunStatus


class ValidationRun(BaseModel):
    """One completed run as recorded in history.  Immutable once appended."""

    model_config = ConfigDict(frozen=True)

    id: str
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    label: str = ""
    status: RunStatus = RunStatus.SUCCESS
    summary: ValidationSummary = Field(default_factory=ValidationSummary)
    elapsed_ms: float = 0.0


class TimelineEntry(BaseModel):
    """Compact run descriptor shown on the history timeline."""

    model_config = ConfigDict(frozen=True)

    run_id: str
    timestamp: datetime
    label: str = ""
    description: str = ""

    @classmethod
    def from_run(cls, run: ValidationRun) -> TimelineEntry:
        return cls(
            run_id=run.id,
            timestamp=run.timestamp,
            label=run.label,
            description=(
                f"{run.summary.total_elements} elements validated, "
                f"{run.summary.total_issues} issues found"
            ),
        )


class DashboardState(BaseModel):
    """Bounded run history, newest first.

    Owned by :class:`~bimcheck.history.store.HistoryStore`; consumers get
    copies and never mutate it.
    """

    recent_runs: list[ValidationRun] = Field(default_factory=list)
    timeline: list[TimelineEntry] = Field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.recent_runs and not self.timeline
