"""Element — one normalized building-model item supplied for a validation run.

Elements are produced by an element source and are never mutated by the
engine.  An element whose ``properties`` is ``None`` is malformed: it fails
every rule but does not abort the run.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict


class ElementCategory(str, Enum):
    """Closed set of element categories."""

    WALL = "Wall"
    DOOR = "Door"
    WINDOW = "Window"
    FLOOR = "Floor"
    CEILING = "Ceiling"
    STRUCTURE = "Structure"

    @classmethod
    def parse(cls, value: object) -> ElementCategory | None:
        """Case-insensitive lookup; unknown or empty values give ``None``."""
        if isinstance(value, cls):
            return value
        if not isinstance(value, str) or not value.strip():
            return None
        key = value.strip().lower()
        for member in cls:
            if member.value.lower() == key or _PLURALS[member].lower() == key:
                return member
        return None


_PLURALS: dict[ElementCategory, str] = {
    ElementCategory.WALL: "Walls",
    ElementCategory.DOOR: "Doors",
    ElementCategory.WINDOW: "Windows",
    ElementCategory.FLOOR: "Floors",
    ElementCategory.CEILING: "Ceiling",
    ElementCategory.STRUCTURE: "Structure",
}


def category_label(category: ElementCategory) -> str:
    """Display label used by the dashboard for an element category."""
    return _PLURALS[category]


class Element(BaseModel):
    """A single structural or architectural item with a property bag."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str = ""
    category: ElementCategory | None = None
    properties: dict[str, str] | None = None

    @property
    def is_malformed(self) -> bool:
        return self.properties is None

    def get_property(self, key: str) -> str | None:
        """Return a stripped property value, or ``None`` if absent or blank."""
        if self.properties is None:
            return None
        value = self.properties.get(key)
        if value is None:
            return None
        value = value.strip()
        return value or None
