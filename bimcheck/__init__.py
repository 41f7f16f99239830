"""BIMCheck — building-model element validation and metrics aggregation."""

__version__ = "1.0.0"

from bimcheck.analytics.aggregator import ValidationSummary, aggregate
from bimcheck.analytics.kpi import KPICalculator
from bimcheck.config import Settings, configure_logging, load_settings
from bimcheck.engine import ValidationEngine
from bimcheck.errors import (
    BIMCheckError,
    ConfigurationError,
    PersistenceFailure,
    RunInProgressError,
    RunWarning,
    SourceFailure,
    WarningKind,
)
from bimcheck.history.backends import JsonFileStore, MemoryStore, PersistentStore, SqliteStore
from bimcheck.history.models import DashboardState, TimelineEntry, ValidationRun
from bimcheck.history.store import HistoryStore
from bimcheck.models.element import Element, ElementCategory
from bimcheck.models.status import RunState, RunStatus
from bimcheck.report.builder import ReportBuilder
from bimcheck.report.exporter import ReportExporter
from bimcheck.report.report import ValidationReport
from bimcheck.sources import ElementSource, JsonElementSource, StaticElementSource
from bimcheck.validation.evaluator import RuleEvaluator
from bimcheck.validation.rules.base import Issue, Rule, RuleCategory, Severity

__all__ = [
    "__version__",
    # Engine
    "ValidationEngine",
    "RuleEvaluator",
    "ReportBuilder",
    "ReportExporter",
    # Models
    "DashboardState",
    "Element",
    "ElementCategory",
    "Issue",
    "Rule",
    "RuleCategory",
    "RunState",
    "RunStatus",
    "Severity",
    "TimelineEntry",
    "ValidationReport",
    "ValidationRun",
    "ValidationSummary",
    "aggregate",
    "KPICalculator",
    # History
    "HistoryStore",
    "JsonFileStore",
    "MemoryStore",
    "PersistentStore",
    "SqliteStore",
    # Sources
    "ElementSource",
    "JsonElementSource",
    "StaticElementSource",
    # Config and errors
    "Settings",
    "configure_logging",
    "load_settings",
    "BIMCheckError",
    "ConfigurationError",
    "PersistenceFailure",
    "RunInProgressError",
    "RunWarning",
    "SourceFailure",
    "WarningKind",
]
