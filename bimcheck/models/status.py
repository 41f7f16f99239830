"""Run status and state enumerations."""

from __future__ import annotations

from enum import Enum


class RunStatus(str, Enum):
    """Outcome of a validation run."""

    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


class RunState(str, Enum):
    """Lifecycle of a single run: Idle -> Running -> Completed | Failed."""

    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


def status_icon(status: RunStatus) -> str:
    """Icon name the dashboard shows for a run status."""
    if status is RunStatus.SUCCESS:
        return "fa-check-circle"
    if status is RunStatus.WARNING:
        return "fa-exclamation-triangle"
    return "fa-times-circle"


def status_label(status: RunStatus) -> str:
    """Export label for a run status."""
    if status is RunStatus.SUCCESS:
        return "Approved"
    if status is RunStatus.WARNING:
        return "Issues Found"
    return "Failed"
