"""
Selector cascade strategies.

Each field owns an ordered list of selector rules; the first element whose
text converts to a non-null value wins. The same machinery drives the
direct cascades (address, price) and the loose class-substring fallbacks
(beds, baths, sqft).
"""

from __future__ import annotations

import logging
import re
from typing import Any, Callable, Mapping, Sequence

from lxml.html import HtmlElement

from househunt.core.config.models import ExtractionConfig, FieldExtractionRule
from househunt.core.normalize.parsing import normalize_whitespace, parse_baths, parse_int
from .base import SelectorRule, Strategy, element_text, select_first

logger = logging.getLogger(__name__)


FACTS_CONTAINER = '[data-testid="bed-bath-sqft-facts"]'


def _address(text: str) -> str | None:
    return normalize_whitespace(text) or None


CONVERTERS: dict[str, Callable[[str], Any]] = {
    "address": _address,
    "price": parse_int,
    "beds": parse_int,
    "baths": parse_baths,
    "sqft": parse_int,
}


DIRECT_RULES: dict[str, tuple[SelectorRule, ...]] = {
    "address": (
        SelectorRule('h1[class*="Text-c11n"]'),
        SelectorRule('h1[data-testid="property-address"]'),
        SelectorRule("h1.summary-address"),
        SelectorRule(f"{FACTS_CONTAINER} h1"),
    ),
    "price": (
        SelectorRule('[data-testid="price"]'),
        SelectorRule('span[class*="Text-c11n"][data-testid="price"]'),
        SelectorRule(".summary-container .price"),
        SelectorRule('[class*="price-text"]'),
    ),
}

LOOSE_RULES: dict[str, tuple[SelectorRule, ...]] = {
    "beds": (
        SelectorRule(FACTS_CONTAINER, re.compile(r"(\d+)\s*bd", re.IGNORECASE)),
        SelectorRule('[class*="bed"]', re.compile(r"(\d+)\s*bed", re.IGNORECASE)),
    ),
    "baths": (
        SelectorRule(FACTS_CONTAINER, re.compile(r"(\d+(?:\.\d+)?)\s*ba(?:th)?s?", re.IGNORECASE)),
        SelectorRule('[class*="bath"]', re.compile(r"(\d+(?:\.\d+)?)\s*bath", re.IGNORECASE)),
    ),
    "sqft": (
        SelectorRule(FACTS_CONTAINER, re.compile(r"(\d[\d,]*)\s*sqft", re.IGNORECASE)),
        SelectorRule('[class*="square"]', re.compile(r"(\d[\d,]*)\s*sqft", re.IGNORECASE)),
    ),
}


class SelectorStrategy(Strategy):
    """Resolve fields through prioritized selector cascades."""

    def __init__(
        self,
        name: str,
        rules: Mapping[str, Sequence[SelectorRule]],
        converters: Mapping[str, Callable[[str], Any]] | None = None,
    ) -> None:
        """Initialize the selector strategy.

        Args:
            name: Strategy identifier
            rules: Field name -> ordered selector rules
            converters: Field name -> text converter (default: CONVERTERS)
        """
        self._name = name
        self.rules = dict(rules)
        self.converters = dict(converters or CONVERTERS)

    @property
    def name(self) -> str:
        return self._name

    def extract(self, document: HtmlElement, url: str | None = None) -> dict[str, Any]:
        values: dict[str, Any] = {}
        for field_name, cascade in self.rules.items():
            try:
                value = self.resolve(document, field_name, cascade)
            except Exception:
                logger.debug("Selector cascade for %s failed", field_name, exc_info=True)
                continue
            if value is not None:
                values[field_name] = value
        return values

    def resolve(
        self,
        document: HtmlElement,
        field_name: str,
        cascade: Sequence[SelectorRule],
    ) -> Any:
        """Walk one cascade; the first element yielding a value wins."""
        convert = self.converters.get(field_name, normalize_whitespace)

        for rule in cascade:
            element = select_first(document, rule.selector)
            if element is None:
                continue

            text = element_text(element).strip()
            if not text:
                continue

            if rule.pattern is not None:
                match = rule.pattern.search(text)
                if not match:
                    continue
                text = match.group(1)

            value = convert(text)
            if value is not None:
                return value

        return None


# =============================================================================
# Config Overrides
# =============================================================================


def _rules_from_config(
    rule: FieldExtractionRule,
    default: Sequence[SelectorRule],
) -> tuple[SelectorRule, ...]:
    pattern = re.compile(rule.regex, re.IGNORECASE) if rule.regex else None
    fallback = default[0].pattern if default else None
    return tuple(SelectorRule(selector, pattern or fallback) for selector in rule.selectors)


def build_direct_strategy(config: ExtractionConfig | None = None) -> SelectorStrategy:
    """Direct cascades for address and price, with config overrides applied."""
    rules = dict(DIRECT_RULES)
    if config:
        for field_name, rule in config.direct.items():
            rules[field_name] = _rules_from_config(rule, ())
    return SelectorStrategy("direct_selectors", rules)


def build_loose_strategy(config: ExtractionConfig | None = None) -> SelectorStrategy:
    """Loose class-substring cascades for beds, baths and sqft."""
    rules = dict(LOOSE_RULES)
    if config:
        for field_name, rule in config.loose.items():
            rules[field_name] = _rules_from_config(rule, LOOSE_RULES[field_name])
    return SelectorStrategy("loose_selectors", rules)
