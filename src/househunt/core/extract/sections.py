"""
Labeled-section parsing for the listing's category groups.

Each category group pairs a heading ("Financial & listing details",
"Property", "Construction") with a body of ``Label: value`` lines. The
heading picks the rule set; the rules then run over the body text.

Free-text financial values are cut with label-to-next-label spans so one
label's value never swallows the labels that follow it.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any, Sequence

from lxml.html import HtmlElement

from househunt.core.normalize.parsing import clean_text, normalize_whitespace, parse_int, parse_year
from .base import PatternRule, Strategy, child_divs, element_text, select_all

logger = logging.getLogger(__name__)


CATEGORY_GROUP_SELECTOR = '[data-testid="category-group"]'

# Elements that start a new line of section text
BLOCK_TAGS = frozenset({
    "br", "dd", "div", "dl", "dt", "h1", "h2", "h3", "h4", "h5", "h6",
    "li", "ol", "p", "section", "table", "td", "th", "tr", "ul",
})

_WHITESPACE = re.compile(r"\s+")


@dataclass(frozen=True)
class LabelSpan:
    """Value of ``label`` up to the first of ``next_labels`` (or end of text)."""

    field: str
    label: str
    next_labels: tuple[str, ...] = ()

    @property
    def pattern(self) -> re.Pattern[str]:
        boundaries = [f"{re.escape(label)}:" for label in self.next_labels]
        boundaries.append("$")
        return re.compile(
            rf"{re.escape(self.label)}:\s*([\s\S]*?)(?={'|'.join(boundaries)})",
            re.IGNORECASE,
        )

    def apply(self, text: str) -> str | None:
        match = self.pattern.search(text)
        if not match:
            return None
        return normalize_whitespace(match.group(1)) or None


def label_spans(field_labels: Sequence[tuple[str, str]]) -> tuple[LabelSpan, ...]:
    """Build a cascade where each label stops at any label after it."""
    labels = [label for _, label in field_labels]
    return tuple(
        LabelSpan(field_name, label, tuple(labels[index + 1:]))
        for index, (field_name, label) in enumerate(field_labels)
    )


FINANCIAL_RULES: tuple[PatternRule | LabelSpan, ...] = (
    PatternRule(
        "price_per_sqft",
        re.compile(r"Price per square foot:\s*\$?([\d,]+)/sqft", re.IGNORECASE),
        parse_int,
    ),
    PatternRule(
        "tax_assessed_value",
        re.compile(r"Tax assessed value:\s*\$?([\d,]+)", re.IGNORECASE),
        parse_int,
    ),
    PatternRule(
        "annual_tax_amount",
        re.compile(r"Annual tax amount:\s*\$?([\d,]+)", re.IGNORECASE),
        parse_int,
    ),
    *label_spans((
        ("price_range", "Price range"),
        ("date_on_market", "Date on market"),
        ("listing_agreement", "Listing agreement"),
        ("listing_terms", "Listing terms"),
    )),
)

PROPERTY_RULES: tuple[PatternRule | LabelSpan, ...] = (
    # Lot size stays free text: either an area or an acreage
    PatternRule("lot_size", re.compile(r"Size:\s*([^\n]+)", re.IGNORECASE), clean_text),
    PatternRule("total_spaces", re.compile(r"Total spaces:\s*(\d+)", re.IGNORECASE), parse_int),
    PatternRule("garage_spaces", re.compile(r"[Gg]arage spaces:\s*(\d+)", re.IGNORECASE), parse_int),
)

CONSTRUCTION_RULES: tuple[PatternRule | LabelSpan, ...] = (
    PatternRule("home_type", re.compile(r"Home type:\s*([^\n]+)", re.IGNORECASE), clean_text),
    PatternRule("year_built", re.compile(r"Year built:\s*(\d+)", re.IGNORECASE), parse_year),
)

# heading substring -> rules, checked in order
CATEGORIES: tuple[tuple[str, tuple[PatternRule | LabelSpan, ...]], ...] = (
    ("Financial", FINANCIAL_RULES),
    ("Property", PROPERTY_RULES),
    ("Construction", CONSTRUCTION_RULES),
)


def classify_heading(heading: str) -> tuple[PatternRule | LabelSpan, ...]:
    """Rules for a category heading, or an empty tuple when unrecognized."""
    for marker, rules in CATEGORIES:
        if marker in heading:
            return rules
    return ()


def apply_rules(text: str, rules: Sequence[PatternRule | LabelSpan]) -> dict[str, Any]:
    """Run each rule over a section body, keeping the values found."""
    values: dict[str, Any] = {}
    for rule in rules:
        value = rule.apply(text)
        if value is not None:
            values[rule.field] = value
    return values


def section_text(element: HtmlElement) -> str:
    """Body text with one line per block element.

    Inline markup (``<b>``, ``<span>``) stays on its line, so
    ``Size: <b>2,500</b> sqft`` reads as ``Size: 2,500 sqft``.
    """
    chunks: list[str] = []
    _collect_text(element, chunks)
    lines = (normalize_whitespace(line) for line in "".join(chunks).splitlines())
    return "\n".join(line for line in lines if line)


def _collect_text(element: HtmlElement, chunks: list[str]) -> None:
    # Comments and processing instructions have a non-string tag
    if not isinstance(element.tag, str):
        return

    block = element.tag in BLOCK_TAGS
    if block:
        chunks.append("\n")
    if element.text:
        chunks.append(_WHITESPACE.sub(" ", element.text))
    for child in element:
        _collect_text(child, chunks)
        if child.tail:
            chunks.append(_WHITESPACE.sub(" ", child.tail))
    if block:
        chunks.append("\n")


class CategoryGroupStrategy(Strategy):
    """Parse financial, property and construction details."""

    def __init__(self, group_selector: str = CATEGORY_GROUP_SELECTOR) -> None:
        self.group_selector = group_selector

    @property
    def name(self) -> str:
        return "category_groups"

    def extract(self, document: HtmlElement, url: str | None = None) -> dict[str, Any]:
        values: dict[str, Any] = {}

        for group in select_all(document, self.group_selector):
            parts = child_divs(group)
            if len(parts) < 2:
                continue

            heading = element_text(parts[0])
            rules = classify_heading(heading)
            if not rules:
                continue

            logger.debug("Parsing category group %r", normalize_whitespace(heading))
            for field_name, value in apply_rules(section_text(parts[1]), rules).items():
                values.setdefault(field_name, value)

        return values
