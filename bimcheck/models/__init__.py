"""Domain models shared across the engine."""

from bimcheck.models.element import Element, ElementCategory, category_label
from bimcheck.models.status import RunState, RunStatus, status_icon, status_label

__all__ = [
    "Element",
    "ElementCategory",
    "RunState",
    "RunStatus",
    "category_label",
    "status_icon",
    "status_label",
]
