"""ValidationReport model and presentation/Markdown rendering."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, Field

from bimcheck.analytics.aggregator import ValidationSummary
from bimcheck.config import UNCLASSIFIED
from bimcheck.errors import RunWarning
from bimcheck.models.element import ElementCategory, category_label
from bimcheck.models.status import RunStatus, status_icon
from bimcheck.validation.rules.base import Issue, RuleCategory, rule_category_label, severity_label


class ValidationReport(BaseModel):
    """The single result of one run, handed to presentation and export."""

    run_id: str = ""
    label: str = ""
    status: RunStatus = RunStatus.SUCCESS
    summary: ValidationSummary | None = None
    """``None`` only for ``error`` runs."""

    issues: list[Issue] = Field(default_factory=list)
    elapsed_ms: float = 0.0
    generated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    warnings: list[RunWarning] = Field(default_factory=list)
    error: str = ""

    @property
    def processing_time(self) -> float:
        """Elapsed time in seconds, one decimal."""
        return round(self.elapsed_ms / 1000.0, 1)

    def problems_by_category(self) -> dict[str, int]:
        """Issue counts keyed by display label."""
        if self.summary is None:
            return {}
        return {
            rule_category_label(RuleCategory(key)): count
            for key, count in self.summary.issues_by_category.items()
        }

    def elements_by_category(self) -> dict[str, int]:
        """Element counts keyed by display label."""
        if self.summary is None:
            return {}
        labelled: dict[str, int] = {}
        for key, count in self.summary.elements_by_category.items():
            if key == UNCLASSIFIED:
                labelled["Unclassified"] = count
            else:
                labelled[category_label(ElementCategory(key))] = count
        return labelled

    def to_dict(self) -> dict[str, Any]:
        """Presentation view with the dashboard's field names."""
        summary = self.summary
        most_common = summary.most_common_issue_category if summary else None
        data: dict[str, Any] = {
            "runId": self.run_id,
            "label": self.label,
            "status": self.status.value,
            "statusIcon": status_icon(self.status),
            "generatedAt": self.generated_at.isoformat(),
            "processingTime": self.processing_time,
            "elapsedMs": self.elapsed_ms,
            "issues": [i.to_dict() for i in self.issues],
            "warnings": [w.model_dump(mode="json") for w in self.warnings],
        }
        if summary is not None:
            data.update({
                "totalElements": summary.total_elements,
                "totalIssues": summary.total_issues,
                "totalProblems": summary.total_issues,
                "conformityRate": summary.conformity_rate,
                "problemsByCategory": self.problems_by_category(),
                "elementsByCategory": self.elements_by_category(),
                "mostCommonIssue": rule_category_label(most_common) if most_common else None,
            })
        if self.error:
            data["error"] = self.error
        return data

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=2, default=str)

    def to_markdown(self) -> str:
        """Render the report as a Markdown document."""
        lines: list[str] = []

        lines.append(f"# Validation Report — {self.label or 'Unnamed run'}")
        lines.append("")
        lines.append(f"**Status:** {self.status.value.upper()}")
        lines.append(f"**Generated:** {self.generated_at.strftime('%Y-%m-%d %H:%M UTC')}")
        lines.append(f"**Processing time:** {self.processing_time}s")
        lines.append("")

        if self.summary is None:
            lines.append(f"Run failed: {self.error or 'element source unavailable'}")
            lines.append("")
            return "\n".join(lines)

        s = self.summary
        lines.append(
            f"**Summary:** {s.total_elements} elements, {s.total_issues} issues, "
            f"{s.conformity_rate}% conformity"
        )
        lines.append("")

        lines.append("## Issues by Category")
        lines.append("")
        lines.append("| Category | Issues |")
        lines.append("|----------|--------|")
        for label, count in self.problems_by_category().items():
            lines.append(f"| {label} | {count} |")
        lines.append("")

        if self.issues:
            lines.append("## Issues")
            lines.append("")
            lines.append("| Severity | Element | Category | Description | Recommendation |")
            lines.append("|----------|---------|----------|-------------|----------------|")
            for issue in self.issues:
                desc = issue.description.replace("|", "\\|")
                rec = issue.recommendation.replace("|", "\\|")
                element = (issue.element_name or issue.element_id).replace("|", "\\|")
                lines.append(
                    f"| {severity_label(issue.severity)} | {element} | "
                    f"{rule_category_label(issue.rule_category)} | {desc} | {rec} |"
                )
            lines.append("")
        else:
            lines.append("No issues found. All elements pass validation.")
            lines.append("")

        if self.warnings:
            lines.append("## Warnings")
            lines.append("")
            for warning in self.warnings:
                lines.append(f"- {warning.kind.value}: {warning.message}")
            lines.append("")

        return "\n".join(lines)
