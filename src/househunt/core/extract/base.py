"""
Extraction base classes and data structures.

Defines the listing record produced by every extraction mode and the
interface shared by all field strategies.
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, field, fields, replace
from datetime import datetime, timezone
from typing import Any, Callable

from cssselect import SelectorError
from lxml.html import HtmlElement


# Fields an extraction pass may fill, in display order
RECORD_FIELDS = (
    "address",
    "price",
    "beds",
    "baths",
    "sqft",
    "price_per_sqft",
    "tax_assessed_value",
    "annual_tax_amount",
    "price_range",
    "date_on_market",
    "listing_agreement",
    "listing_terms",
    "lot_size",
    "total_spaces",
    "garage_spaces",
    "home_type",
    "year_built",
)

# Text mode has no DOM, so only these can be found
TEXT_MODE_FIELDS = ("address", "price", "beds", "baths", "sqft")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.capitalize() for part in rest)


@dataclass(frozen=True)
class ListingRecord:
    """Normalized output of one extraction pass over one listing page.

    Every field except the provenance URL and capture time is optional;
    a record carrying only ``source_url`` is valid output.
    """

    source_url: str
    address: str | None = None
    price: int | None = None
    beds: int | None = None
    baths: float | None = None
    sqft: int | None = None
    price_per_sqft: int | None = None
    tax_assessed_value: int | None = None
    annual_tax_amount: int | None = None
    price_range: str | None = None
    date_on_market: str | None = None
    listing_agreement: str | None = None
    listing_terms: str | None = None
    lot_size: str | None = None
    total_spaces: int | None = None
    garage_spaces: int | None = None
    home_type: str | None = None
    year_built: int | None = None
    extracted_at: datetime = field(default_factory=_utcnow)

    # field name -> strategy that filled it
    sources: dict[str, str] = field(default_factory=dict, compare=False, hash=False)

    @property
    def filled_fields(self) -> list[str]:
        """Names of the record fields that hold a value."""
        return [name for name in RECORD_FIELDS if getattr(self, name) is not None]

    @property
    def is_empty(self) -> bool:
        """Check if nothing beyond the source URL was found."""
        return not self.filled_fields

    def merged_with(self, fallback: ListingRecord) -> ListingRecord:
        """Return a new record filling this record's gaps from ``fallback``.

        Values already present here always win.
        """
        updates: dict[str, Any] = {}
        sources = dict(self.sources)
        for name in RECORD_FIELDS:
            if getattr(self, name) is None and getattr(fallback, name) is not None:
                updates[name] = getattr(fallback, name)
                if name in fallback.sources:
                    sources[name] = fallback.sources[name]
        return replace(self, sources=sources, **updates)

    def to_dict(self, camel_case: bool = False) -> dict[str, Any]:
        """Serialize the record to plain JSON-friendly values."""
        data: dict[str, Any] = {}
        for f in fields(self):
            if f.name == "sources":
                continue
            value = getattr(self, f.name)
            if isinstance(value, datetime):
                value = value.isoformat()
            data[_camel(f.name) if camel_case else f.name] = value
        return data


# =============================================================================
# Rule Types
# =============================================================================


@dataclass(frozen=True)
class SelectorRule:
    """One step of a selector cascade.

    The first element matching ``selector`` is read; when ``pattern`` is
    set its first group must match the element text.
    """

    selector: str
    pattern: re.Pattern[str] | None = None


@dataclass(frozen=True)
class PatternRule:
    """A regex whose first group feeds ``convert`` to produce a field value."""

    field: str
    pattern: re.Pattern[str]
    convert: Callable[[str], Any]

    def apply(self, text: str) -> Any:
        match = self.pattern.search(text)
        if not match:
            return None
        return self.convert(match.group(1))


# =============================================================================
# Strategy Interface
# =============================================================================


class Strategy(ABC):
    """Abstract base class for field strategies.

    A strategy proposes values for one or more fields; the extractor keeps
    the first non-null proposal per field across its ordered strategies.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Strategy identifier."""
        pass

    @abstractmethod
    def extract(self, document: Any, url: str | None = None) -> dict[str, Any]:
        """Propose field values from a document.

        Args:
            document: Parsed DOM, HTML text or URL depending on the mode
            url: Source URL for context

        Returns:
            Mapping of field name to candidate value (None values ignored)
        """
        pass


# =============================================================================
# DOM Helpers
# =============================================================================


def select_all(element: HtmlElement, selector: str) -> list[HtmlElement]:
    """Run a CSS selector, treating an invalid selector as no match."""
    try:
        return list(element.cssselect(selector))
    except SelectorError:
        return []


def select_first(element: HtmlElement, selector: str) -> HtmlElement | None:
    """querySelector equivalent: first match or None."""
    matches = select_all(element, selector)
    return matches[0] if matches else None


def child_divs(element: HtmlElement) -> list[HtmlElement]:
    """Direct ``div`` children of an element."""
    return [child for child in element.iterchildren() if child.tag == "div"]


def element_text(element: HtmlElement | None) -> str:
    """Full text content of an element (textContent equivalent)."""
    if element is None:
        return ""
    return element.text_content() or ""
