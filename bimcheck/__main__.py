"""Command-line entry point: ``python -m bimcheck``.

    python -m bimcheck validate model.json --label "Residential Project" --csv report.csv
    python -m bimcheck history
    python -m bimcheck clear-history
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from bimcheck.analytics.kpi import KPICalculator
from bimcheck.config import configure_logging, load_settings
from bimcheck.engine import ValidationEngine
from bimcheck.errors import BIMCheckError
from bimcheck.models.status import RunStatus
from bimcheck.report.exporter import ReportExporter
from bimcheck.sources import JsonElementSource


def _validate(args: argparse.Namespace, engine: ValidationEngine, max_bytes: int) -> int:
    source = JsonElementSource(args.path, max_bytes=max_bytes)
    report = engine.run(source, label=args.label or Path(args.path).name)

    if args.csv:
        ReportExporter().export_csv(report, args.csv)
    if args.markdown:
        print(report.to_markdown())
    else:
        print(report.to_json())

    if report.status == RunStatus.ERROR:
        return 2
    return 1 if report.status == RunStatus.WARNING and args.strict else 0


def _history(engine: ValidationEngine) -> int:
    state = engine.history.state
    print(json.dumps(
        {
            "kpis": KPICalculator(state).all_kpis(),
            "dashboard": state.model_dump(mode="json"),
        },
        indent=2,
    ))
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="bimcheck",
        description="Validate building-model elements and track validation history.",
    )
    parser.add_argument(
        "--project",
        default=".",
        help="Project root holding .bimcheck/ configuration and history.",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    validate = sub.add_parser("validate", help="Validate a JSON element file.")
    validate.add_argument("path", help="Path to the element .json file.")
    validate.add_argument("--label", default="", help="Run label shown in history.")
    validate.add_argument("--csv", type=Path, help="Also export the report as CSV.")
    validate.add_argument("--markdown", action="store_true", help="Print Markdown instead of JSON.")
    validate.add_argument(
        "--strict",
        action="store_true",
        help="Exit with status 1 when issues are found.",
    )

    sub.add_parser("history", help="Show recent runs and KPIs.")
    sub.add_parser("clear-history", help="Delete all validation history.")

    args = parser.parse_args(argv)

    try:
        settings = load_settings(args.project)
        configure_logging(settings.log_level)
        engine = ValidationEngine.from_settings(settings)

        if args.command == "validate":
            return _validate(args, engine, settings.max_source_bytes)
        if args.command == "history":
            return _history(engine)
        engine.history.clear()
        print("Validation history cleared")
        return 0
    except BIMCheckError as exc:
        print(f"bimcheck: {exc}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
