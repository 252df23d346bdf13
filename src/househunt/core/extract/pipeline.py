"""
Listing extraction pipeline.

Runs an ordered list of field strategies over a document and keeps the
first value proposed for each field. Three entry points share the
machinery:

- ``extract``: parsed DOM (rendered page or saved HTML)
- ``extract_text``: raw HTML text, regex only
- ``extract_url``: listing URL only
"""

from __future__ import annotations

from typing import Any, Sequence

from lxml import etree
from lxml import html as lxml_html
from lxml.html import HtmlElement

from househunt.core.config.models import ExtractionConfig
from househunt.core.logging import get_contextual_logger
from .base import RECORD_FIELDS, TEXT_MODE_FIELDS, ListingRecord, Strategy
from .facts import FactsGroupStrategy
from .sections import CategoryGroupStrategy
from .selectors import build_direct_strategy, build_loose_strategy
from .structured import JsonLdStrategy
from .text import HtmlTextStrategy
from .url import UrlSlugStrategy


def default_dom_strategies(config: ExtractionConfig | None = None) -> list[Strategy]:
    """DOM-mode strategies in priority order."""
    return [
        build_direct_strategy(config),
        FactsGroupStrategy(),
        JsonLdStrategy(),
        build_loose_strategy(config),
        CategoryGroupStrategy(),
        UrlSlugStrategy(),
    ]


def default_text_strategies() -> list[Strategy]:
    """Text-mode strategies in priority order."""
    return [
        HtmlTextStrategy(),
        UrlSlugStrategy(),
    ]


def parse_document(html: str | bytes) -> HtmlElement | None:
    """Parse HTML into a DOM, returning None for empty or unparsable input."""
    if not html or not html.strip():
        return None
    try:
        return lxml_html.fromstring(html)
    except (etree.ParserError, ValueError):
        return None


class ListingExtractor:
    """Best-effort listing extraction that never raises.

    A failing strategy leaves its fields empty and the remaining
    strategies still run. Fields are never overwritten once set.
    """

    def __init__(
        self,
        dom_strategies: Sequence[Strategy] | None = None,
        text_strategies: Sequence[Strategy] | None = None,
        config: ExtractionConfig | None = None,
    ) -> None:
        """Initialize the extractor.

        Args:
            dom_strategies: Ordered strategies for DOM mode (default chain if None)
            text_strategies: Ordered strategies for text mode (default chain if None)
            config: Selector overrides applied to the default DOM chain
        """
        self.dom_strategies = list(dom_strategies or default_dom_strategies(config))
        self.text_strategies = list(text_strategies or default_text_strategies())

    def extract(self, document: HtmlElement | None, url: str = "") -> ListingRecord:
        """Extract a listing record from a parsed DOM.

        Args:
            document: Parsed page (None behaves like an empty page)
            url: Page URL, kept as provenance and used for the slug fallback

        Returns:
            ListingRecord, possibly with every field empty
        """
        return self._run(self.dom_strategies, document, url, RECORD_FIELDS)

    def extract_text(self, html: str | None, url: str = "") -> ListingRecord:
        """Extract the reduced field set from raw HTML text."""
        return self._run(self.text_strategies, html or "", url, TEXT_MODE_FIELDS)

    def extract_url(self, url: str) -> ListingRecord:
        """Extract what the URL alone reveals (the address slug)."""
        return self._run([UrlSlugStrategy()], None, url, ("address",))

    def _run(
        self,
        strategies: Sequence[Strategy],
        document: Any,
        url: str,
        allowed: Sequence[str],
    ) -> ListingRecord:
        url = url or ""
        log = get_contextual_logger("extract", url=url or None)
        values: dict[str, Any] = {}
        sources: dict[str, str] = {}

        try:
            for strategy in strategies:
                if all(name in values for name in allowed):
                    break
                if document is None and not isinstance(strategy, UrlSlugStrategy):
                    continue

                try:
                    proposed = strategy.extract(document, url)
                except Exception:
                    log.debug(
                        "Strategy %s failed",
                        strategy.name,
                        exc_info=True,
                        extra={"strategy": strategy.name},
                    )
                    continue

                for field_name, value in proposed.items():
                    if field_name not in allowed or value is None or field_name in values:
                        continue
                    values[field_name] = value
                    sources[field_name] = strategy.name
        except Exception:
            # Document-level failure: keep whatever was collected
            log.debug("Extraction aborted", exc_info=True)

        log.debug("Extracted %d fields", len(values))
        return ListingRecord(source_url=url, sources=sources, **values)
