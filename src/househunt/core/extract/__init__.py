"""Listing-field extraction strategies and pipeline."""

from .base import (
    RECORD_FIELDS,
    TEXT_MODE_FIELDS,
    ListingRecord,
    PatternRule,
    SelectorRule,
    Strategy,
)
from .facts import FactsGroupStrategy
from .pipeline import ListingExtractor, default_dom_strategies, default_text_strategies, parse_document
from .sections import CategoryGroupStrategy, LabelSpan
from .selectors import SelectorStrategy, build_direct_strategy, build_loose_strategy
from .structured import JsonLdStrategy
from .text import HtmlTextStrategy
from .url import UrlSlugStrategy, address_from_url

__all__ = [
    "RECORD_FIELDS",
    "TEXT_MODE_FIELDS",
    "ListingRecord",
    "PatternRule",
    "SelectorRule",
    "Strategy",
    "SelectorStrategy",
    "build_direct_strategy",
    "build_loose_strategy",
    "FactsGroupStrategy",
    "JsonLdStrategy",
    "CategoryGroupStrategy",
    "LabelSpan",
    "HtmlTextStrategy",
    "UrlSlugStrategy",
    "address_from_url",
    "ListingExtractor",
    "default_dom_strategies",
    "default_text_strategies",
    "parse_document",
]
