"""
Structured data extractor for JSON-LD.

Listing pages embed schema.org markup describing the home for search
engines. Residential objects in that markup feed address, price, beds,
baths and sqft as a fallback for the DOM strategies.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Iterator

from lxml.html import HtmlElement

from househunt.core.normalize.parsing import clean_text, parse_baths, parse_int
from .base import Strategy, element_text, select_all

logger = logging.getLogger(__name__)


# Schema.org types describing a home
RESIDENCE_SCHEMA_TYPES = frozenset({
    "SingleFamilyResidence",
    "Apartment",
})

# canonical field -> (path into the JSON-LD object, converter)
SCHEMA_FIELD_MAPPING = {
    "price": (("offers", "price"), parse_int),
    "address": (("address", "streetAddress"), clean_text),
    "beds": (("numberOfBedrooms",), parse_int),
    "baths": (("numberOfBathroomsTotal",), parse_baths),
    "sqft": (("floorSize", "value"), parse_int),
}


class JsonLdStrategy(Strategy):
    """Pull residence facts from ``application/ld+json`` script blocks.

    Blocks that fail to parse are skipped. When several residence objects
    are present the first one to supply a field wins.
    """

    @property
    def name(self) -> str:
        return "jsonld"

    def extract(self, document: HtmlElement, url: str | None = None) -> dict[str, Any]:
        values: dict[str, Any] = {}

        for item in self.iter_residences(document):
            for field_name, (path, convert) in SCHEMA_FIELD_MAPPING.items():
                if field_name in values:
                    continue
                raw = _get_nested(item, path)
                if raw is None or raw == "":
                    continue
                try:
                    value = convert(raw)
                except (ValueError, TypeError, OverflowError):
                    logger.debug("Skipping unusable JSON-LD value for %s: %r", field_name, raw)
                    continue
                if value is not None:
                    values[field_name] = value

        return values

    def iter_residences(self, document: HtmlElement) -> Iterator[dict[str, Any]]:
        """Yield JSON-LD objects whose @type is a residence type."""
        for script in select_all(document, 'script[type="application/ld+json"]'):
            text = element_text(script).strip()
            if not text:
                continue

            try:
                data = json.loads(text)
            except json.JSONDecodeError:
                logger.debug("Skipping unparsable JSON-LD block")
                continue

            for item in _iter_items(data):
                if _is_residence(item):
                    yield item


def _iter_items(data: Any) -> Iterator[dict[str, Any]]:
    """Flatten top-level objects, arrays and @graph containers."""
    if isinstance(data, list):
        items = data
    elif isinstance(data, dict) and isinstance(data.get("@graph"), list):
        items = data["@graph"]
    else:
        items = [data]

    for item in items:
        if isinstance(item, dict):
            yield item


def _is_residence(item: dict[str, Any]) -> bool:
    schema_type = item.get("@type", "")
    if isinstance(schema_type, list):
        return any(isinstance(t, str) and t in RESIDENCE_SCHEMA_TYPES for t in schema_type)
    return isinstance(schema_type, str) and schema_type in RESIDENCE_SCHEMA_TYPES


def _get_nested(data: dict[str, Any], path: tuple[str, ...]) -> Any:
    """Get a nested value by key path; lists resolve to their first item."""
    current: Any = data

    for part in path:
        if isinstance(current, list):
            current = current[0] if current else None
        if isinstance(current, dict) and part in current:
            current = current[part]
        else:
            return None

    if isinstance(current, (dict, list)):
        return None
    return current
