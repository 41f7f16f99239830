"""Run reports — building, presentation and export."""

from bimcheck.report.builder import ReportBuilder
from bimcheck.report.exporter import ReportExporter
from bimcheck.report.report import ValidationReport

__all__ = ["ReportBuilder", "ReportExporter", "ValidationReport"]
