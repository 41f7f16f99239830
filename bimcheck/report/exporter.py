"""ReportExporter — tabular CSV/JSON/Markdown export of a validation report."""

from __future__ import annotations

import csv
import io
import json
import logging
from pathlib import Path
from typing import Any

from bimcheck.models.status import status_label
from bimcheck.report.report import ValidationReport
from bimcheck.validation.rules.base import problem_title, rule_category_label, severity_label

logger = logging.getLogger(__name__)

ISSUE_COLUMNS = [
    "Element ID",
    "Element Name",
    "Problem Type",
    "Title",
    "Description",
    "Severity",
    "Details",
]


class ReportExporter:
    """Derive export rows from a report and write them out."""

    def summary_rows(self, report: ValidationReport) -> list[tuple[str, Any]]:
        """Key/value summary block."""
        summary = report.summary
        rows: list[tuple[str, Any]] = [
            ("Report Date", report.generated_at.strftime("%Y-%m-%d %H:%M UTC")),
            ("Run", report.label or report.run_id),
            ("Total Elements", summary.total_elements if summary else 0),
            ("Issues Found", len(report.issues)),
            ("Conformity Rate", f"{summary.conformity_rate}%" if summary else ""),
            ("Processing Time (s)", report.processing_time),
            ("Status", status_label(report.status)),
        ]
        for category, count in report.problems_by_category().items():
            rows.append((f"{category} Issues", count))
        return rows

    def issue_rows(self, report: ValidationReport) -> list[dict[str, str]]:
        """One row per issue, keyed by :data:`ISSUE_COLUMNS`."""
        return [
            {
                "Element ID": issue.element_id,
                "Element Name": issue.element_name,
                "Problem Type": rule_category_label(issue.rule_category),
                "Title": problem_title(issue.rule_category),
                "Description": issue.description,
                "Severity": severity_label(issue.severity),
                "Details": issue.recommendation,
            }
            for issue in report.issues
        ]

    def export_csv(self, report: ValidationReport, path: str | Path) -> Path:
        """Write the summary block followed by the issue table to CSV."""
        p = Path(path)
        buf = io.StringIO()
        writer = csv.writer(buf)
        writer.writerow(["BIMCheck Validation Report"])
        for key, value in self.summary_rows(report):
            writer.writerow([key, value])
        writer.writerow([])

        dict_writer = csv.DictWriter(buf, fieldnames=ISSUE_COLUMNS)
        dict_writer.writeheader()
        for row in self.issue_rows(report):
            dict_writer.writerow(row)

        p.write_text(buf.getvalue(), encoding="utf-8")
        logger.info("Exported report %s to %s", report.run_id, p)
        return p

    def export_json(self, report: ValidationReport) -> str:
        """Export summary and issue rows as structured JSON."""
        return json.dumps(
            {
                "summary": {k: v for k, v in self.summary_rows(report)},
                "issues": self.issue_rows(report),
            },
            indent=2,
            default=str,
        )

    def export_markdown(self, report: ValidationReport) -> str:
        """Export the issue table as Markdown."""
        lines = ["# BIMCheck Validation Report", "", "| Field | Value |", "|-------|-------|"]
        for key, value in self.summary_rows(report):
            lines.append(f"| {key} | {value} |")
        lines.append("")

        rows = self.issue_rows(report)
        if rows:
            lines.append("| " + " | ".join(ISSUE_COLUMNS) + " |")
            lines.append("|" + "|".join("---" for _ in ISSUE_COLUMNS) + "|")
            for row in rows:
                cells = [str(row[c]).replace("|", "\\|") for c in ISSUE_COLUMNS]
                lines.append("| " + " | ".join(cells) + " |")
            lines.append("")
        return "\n".join(lines)
