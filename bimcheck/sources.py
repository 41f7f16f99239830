"""Element sources — supply the element sequence for one validation run.

The engine does not care how elements were produced.  Sources raise
:class:`SourceFailure` when no element sequence is available at all;
individual malformed records are passed through as malformed elements.
"""

from __future__ import annotations

import abc
import json
import logging
from collections.abc import Iterable
from pathlib import Path
from typing import Any

from bimcheck.config import MAX_SOURCE_BYTES
from bimcheck.errors import SourceFailure
from bimcheck.models.element import Element, ElementCategory

logger = logging.getLogger(__name__)


class ElementSource(abc.ABC):
    """Supplies a finite, ordered element sequence."""

    @abc.abstractmethod
    def elements(self) -> list[Element]:
        """Return the elements for one run.  Raises :class:`SourceFailure`."""


class StaticElementSource(ElementSource):
    """Elements already held in memory."""

    def __init__(self, elements: Iterable[Element]) -> None:
        self._elements = list(elements)

    def elements(self) -> list[Element]:
        return list(self._elements)


def element_from_record(record: Any, index: int) -> Element:
    """Coerce one raw record into an :class:`Element`.

    Missing ids become ``element_<index>``, unknown categories become
    unclassified, and a record without a ``properties`` mapping becomes a
    malformed element.
    """
    if not isinstance(record, dict):
        logger.warning("Record %d is not an object; treating as malformed", index)
        return Element(id=f"element_{index}")

    raw_id = record.get("id", record.get("global_id"))
    element_id = str(raw_id) if raw_id not in (None, "") else f"element_{index}"

    raw_category = record.get("category")
    category = ElementCategory.parse(raw_category)
    if raw_category not in (None, "") and category is None:
        logger.debug("Element %s has unknown category %r", element_id, raw_category)

    raw_props = record.get("properties")
    properties: dict[str, str] | None
    if isinstance(raw_props, dict):
        properties = {
            str(k): _property_text(v) for k, v in raw_props.items() if v is not None
        }
    else:
        properties = None

    name = record.get("name")
    return Element(
        id=element_id,
        name=str(name) if name is not None else "",
        category=category,
        properties=properties,
    )


def _property_text(value: Any) -> str:
    # {"value": "Concrete"} wrappers come from property-set exports
    if isinstance(value, dict) and "value" in value:
        value = value["value"]
        if value is None:
            return ""
    return str(value)


class JsonElementSource(ElementSource):
    """Elements read from a JSON file.

    The file holds either a list of element records or an object with an
    ``"elements"`` list.

    Parameters
    ----------
    path:
        Path to the ``.json`` file.
    max_bytes:
        Upstream size ceiling; larger files are rejected.
    """

    def __init__(self, path: str | Path, max_bytes: int = MAX_SOURCE_BYTES) -> None:
        self.path = Path(path)
        self.max_bytes = max_bytes

    def elements(self) -> list[Element]:
        if self.path.suffix.lower() != ".json":
            raise SourceFailure(f"Unsupported element file '{self.path.name}'; expected .json")
        if not self.path.is_file():
            raise SourceFailure(f"Element file not found: {self.path}")

        try:
            size = self.path.stat().st_size
        except OSError as exc:
            raise SourceFailure(f"Cannot stat {self.path}: {exc}") from exc
        if size > self.max_bytes:
            raise SourceFailure(
                f"Element file {self.path.name} is {size} bytes; limit is {self.max_bytes}"
            )

        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise SourceFailure(f"Cannot parse {self.path}: {exc}") from exc

        if isinstance(data, dict):
            data = data.get("elements")
        if not isinstance(data, list):
            raise SourceFailure(f"{self.path} does not contain an element list")

        elements = [element_from_record(record, i + 1) for i, record in enumerate(data)]
        logger.info("Loaded %d elements from %s", len(elements), self.path)
        return elements
