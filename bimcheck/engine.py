"""ValidationEngine — main entry point for running a validation.

Usage::

    from bimcheck import ValidationEngine, HistoryStore, JsonFileStore
    from bimcheck.sources import JsonElementSource

    history = HistoryStore(JsonFileStore(".bimcheck/history.json"))
    history.load()
    engine = ValidationEngine(history=history)
    report = engine.run(JsonElementSource("model.json"), label="Residential Project")
"""

from __future__ import annotations

import logging
import threading
import time

from bimcheck.config import Settings
from bimcheck.errors import RunInProgressError, SourceFailure
from bimcheck.history.store import HistoryStore
from bimcheck.models.status import RunState
from bimcheck.report.builder import ReportBuilder
from bimcheck.report.report import ValidationReport
from bimcheck.sources import ElementSource
from bimcheck.validation.evaluator import RuleEvaluator
from bimcheck.validation.rules.base import Rule

logger = logging.getLogger(__name__)


class ValidationEngine:
    """Run element sources through evaluation, aggregation and reporting.

    Only one run may be in progress at a time; concurrent requests are
    rejected with :class:`RunInProgressError`.

    Parameters
    ----------
    history:
        History store that completed runs are appended to.
    rules:
        Rule set override.  Invalid rule sets raise
        :class:`~bimcheck.errors.ConfigurationError` here, before any run.
    """

    def __init__(
        self,
        history: HistoryStore | None = None,
        rules: list[Rule] | None = None,
    ) -> None:
        self.history = history
        self.evaluator = RuleEvaluator(rules)
        self.builder = ReportBuilder(history)
        self._run_lock = threading.Lock()
        self._state = RunState.IDLE

    @classmethod
    def from_settings(cls, settings: Settings) -> ValidationEngine:
        """Create an engine with the configured history backend, loaded."""
        history = HistoryStore(settings.build_store())
        history.load()
        if history.last_warning is not None:
            logger.info("History: %s", history.last_warning.message)
        return cls(history=history)

    @property
    def state(self) -> RunState:
        """State of the current or most recent run."""
        return self._state

    def run(self, source: ElementSource, label: str = "") -> ValidationReport:
        """Validate the elements supplied by *source*.

        Returns an ``error`` report if the source fails; element-level rule
        failures only ever yield ``success`` or ``warning``.
        """
        if not self._run_lock.acquire(blocking=False):
            raise RunInProgressError("A validation run is already in progress")
        try:
            self._state = RunState.IDLE
            started_at = time.time()
            try:
                elements = source.elements()
            except SourceFailure as exc:
                logger.error("Element source failed for run '%s': %s", label, exc)
                self._state = RunState.FAILED
                return self.builder.build_failure(started_at, str(exc), label=label)
            except Exception as exc:
                logger.exception("Element source crashed for run '%s'", label)
                self._state = RunState.FAILED
                return self.builder.build_failure(
                    started_at, f"{type(exc).__name__}: {exc}", label=label,
                )

            self._state = RunState.RUNNING
            logger.info("Validating %d elements for run '%s'", len(elements), label)
            issues = self.evaluator.evaluate(elements)
            report = self.builder.build(
                elements,
                issues,
                started_at,
                label=label,
                warnings=self.evaluator.warnings,
            )
            self._state = RunState.COMPLETED
            logger.info(
                "Run '%s' completed: %s, %d issues, %d%% conformity",
                label,
                report.status.value,
                len(report.issues),
                report.summary.conformity_rate if report.summary else 0,
            )
            return report
        except Exception:
            self._state = RunState.FAILED
            raise
        finally:
            self._run_lock.release()
