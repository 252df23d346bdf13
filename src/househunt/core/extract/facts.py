"""
Bed/bath/sqft decomposition of the structured facts container.

The container bundles its facts as repeated groups of a value span and a
unit-label span ("3" + "bd"). Groups that do not split that way are
matched as whole text instead ("3 bd").
"""

from __future__ import annotations

import logging
import re
from typing import Any

from lxml.html import HtmlElement

from househunt.core.normalize.parsing import parse_baths, parse_int
from .base import PatternRule, Strategy, child_divs, element_text, select_all, select_first
from .selectors import FACTS_CONTAINER

logger = logging.getLogger(__name__)


# label substring -> field, checked in order
LABEL_FIELDS = (
    ("bed", "beds"),
    ("bath", "baths"),
    ("sqft", "sqft"),
)

VALUE_CONVERTERS = {
    "beds": parse_int,
    "baths": parse_baths,
    "sqft": parse_int,
}

# Whole-text fallback for groups without a value/label pair
GROUP_TEXT_RULES = (
    PatternRule("beds", re.compile(r"(\d+)\s*(?:bd|bed)", re.IGNORECASE), parse_int),
    PatternRule("baths", re.compile(r"([\d.]+)\s*(?:ba|bath)", re.IGNORECASE), parse_baths),
    PatternRule("sqft", re.compile(r"([\d,]+)\s*sqft", re.IGNORECASE), parse_int),
)


class FactsGroupStrategy(Strategy):
    """Read beds, baths and sqft from the facts container's child groups."""

    def __init__(self, container_selector: str = FACTS_CONTAINER) -> None:
        self.container_selector = container_selector

    @property
    def name(self) -> str:
        return "facts_groups"

    def extract(self, document: HtmlElement, url: str | None = None) -> dict[str, Any]:
        container = select_first(document, self.container_selector)
        if container is None:
            return {}

        values: dict[str, Any] = {}
        groups = child_divs(container)
        logger.debug("Facts container has %d groups", len(groups))

        for group in groups:
            field_name, value = self.read_group(group)
            if field_name and value is not None:
                values.setdefault(field_name, value)

        return values

    def read_group(self, group: HtmlElement) -> tuple[str | None, Any]:
        """Classify one group as (field, value), or (None, None)."""
        spans = select_all(group, "span")

        if len(spans) >= 2:
            value_text = element_text(spans[0]).strip()
            label = element_text(spans[1]).strip().lower()
            for needle, field_name in LABEL_FIELDS:
                if needle in label:
                    return field_name, VALUE_CONVERTERS[field_name](value_text)
            return None, None

        return self.read_group_text(element_text(group).strip())

    def read_group_text(self, text: str) -> tuple[str | None, Any]:
        """Match a group's full text; the first pattern that hits decides."""
        for rule in GROUP_TEXT_RULES:
            if rule.pattern.search(text):
                return rule.field, rule.apply(text)
        return None, None
