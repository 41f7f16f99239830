"""ReportBuilder — compose the run report and record it in history."""

from __future__ import annotations

import logging
import time
import uuid
from collections.abc import Sequence
from datetime import datetime, timezone

from bimcheck.analytics.aggregator import aggregate
from bimcheck.errors import PersistenceFailure, RunWarning, WarningKind
from bimcheck.history.models import ValidationRun
from bimcheck.history.store import HistoryStore
from bimcheck.models.element import Element
from bimcheck.models.status import RunStatus
from bimcheck.report.report import ValidationReport
from bimcheck.validation.rules.base import Issue

logger = logging.getLogger(__name__)


def _new_run_id() -> str:
    return uuid.uuid4().hex[:16].upper()


class ReportBuilder:
    """Build :class:`ValidationReport` values.

    The builder is the only component that appends to the history store.

    Parameters
    ----------
    history:
        Store to record completed runs in.  ``None`` disables history.
    """

    def __init__(self, history: HistoryStore | None = None) -> None:
        self.history = history

    def build(
        self,
        elements: Sequence[Element],
        issues: Sequence[Issue],
        started_at: float,
        label: str = "",
        warnings: Sequence[RunWarning] | None = None,
    ) -> ValidationReport:
        """Aggregate a completed run, record it, and return its report.

        Parameters
        ----------
        started_at:
            ``time.time()`` value taken when the run started.
        warnings:
            Recoverable conditions already collected during the run.

        A history write failure does not fail the run; it is added to the
        report's warnings.
        """
        summary = aggregate(elements, issues)
        status = RunStatus.SUCCESS if not issues else RunStatus.WARNING
        elapsed_ms = max((time.time() - started_at) * 1000, 0.0)
        generated_at = datetime.now(timezone.utc)
        run_id = _new_run_id()
        run_warnings = list(warnings or [])

        if self.history is not None:
            run = ValidationRun(
                id=run_id,
                timestamp=generated_at,
                label=label,
                status=status,
                summary=summary,
                elapsed_ms=elapsed_ms,
            )
            try:
                self.history.append(run)
            except PersistenceFailure as exc:
                logger.error("Run %s not recorded in history: %s", run_id, exc)
                run_warnings.append(RunWarning(kind=WarningKind.HISTORY_WRITE_FAILED, message=str(exc)))

        return ValidationReport(
            run_id=run_id,
            label=label,
            status=status,
            summary=summary,
            issues=list(issues),
            elapsed_ms=elapsed_ms,
            generated_at=generated_at,
            warnings=run_warnings,
        )

    def build_failure(self, started_at: float, error: str, label: str = "") -> ValidationReport:
        """Report for a run whose element source failed.  Not recorded."""
        return ValidationReport(
            run_id=_new_run_id(),
            label=label,
            status=RunStatus.ERROR,
            summary=None,
            issues=[],
            elapsed_ms=max((time.time() - started_at) * 1000, 0.0),
            error=error,
        )
