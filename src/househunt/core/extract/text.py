"""
Regex extraction over raw HTML text.

Used when a page was fetched server-side and no DOM is available. Only
address, price, beds, baths and sqft can be recovered this way.
"""

from __future__ import annotations

import re
from typing import Any

from househunt.core.normalize.parsing import clean_html_text, parse_baths, parse_int
from .base import PatternRule, Strategy


def _address(text: str) -> str | None:
    return clean_html_text(text) or None


# Ordered per field; the first pattern that matches wins
TEXT_RULES: tuple[PatternRule, ...] = (
    # price
    PatternRule("price", re.compile(r'"price":\s*"?\$?([\d,]+)"?'), parse_int),
    PatternRule("price", re.compile(r'class="[^"]*price[^"]*"[^>]*>\$?([\d,]+)'), parse_int),
    PatternRule("price", re.compile(r'"price":"?\$?([\d,]+)"?'), parse_int),
    # address
    PatternRule("address", re.compile(r'"streetAddress":"([^"]+)"'), _address),
    PatternRule("address", re.compile(r'"address":"([^"]+)"'), _address),
    PatternRule("address", re.compile(r'property="og:street-address"\s+content="([^"]+)"'), _address),
    # beds
    PatternRule("beds", re.compile(r'"bedrooms?":(\d+)', re.IGNORECASE), parse_int),
    PatternRule("beds", re.compile(r"(\d+)\s*bd", re.IGNORECASE), parse_int),
    PatternRule("beds", re.compile(r'"beds?":(\d+)', re.IGNORECASE), parse_int),
    # baths
    PatternRule("baths", re.compile(r'"bathrooms?":(\d+\.?\d*)', re.IGNORECASE), parse_baths),
    PatternRule("baths", re.compile(r"(\d+\.?\d*)\s*ba", re.IGNORECASE), parse_baths),
    PatternRule("baths", re.compile(r'"baths?":(\d+\.?\d*)', re.IGNORECASE), parse_baths),
    # sqft
    PatternRule("sqft", re.compile(r'"livingArea":(\d+)'), parse_int),
    PatternRule("sqft", re.compile(r"(\d{3,})\s*sqft", re.IGNORECASE), parse_int),
    PatternRule("sqft", re.compile(r'"floorSize[^"]*":(\d+)'), parse_int),
)


class HtmlTextStrategy(Strategy):
    """Scan raw HTML for JSON keys, meta tags and unit suffixes."""

    def __init__(self, rules: tuple[PatternRule, ...] = TEXT_RULES) -> None:
        self.rules = rules

    @property
    def name(self) -> str:
        return "html_text"

    def extract(self, document: str, url: str | None = None) -> dict[str, Any]:
        values: dict[str, Any] = {}
        if not document:
            return values

        for rule in self.rules:
            if rule.field in values:
                continue
            value = rule.apply(document)
            if value is not None:
                values[rule.field] = value

        return values
