"""
Listing capture workflows.

Coordinates the two ways a listing enters the tracker:

- capture: a rendered or saved page is parsed into a DOM and extracted
- auto-fill: only a URL is known; the slug gives an address and a
  best-effort server-side fetch fills in what text mode can find
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence

from househunt.core.backends.base import Backend, BackendError, RequestSpec, validate_listing_url
from househunt.core.extract import ListingExtractor, ListingRecord, parse_document

logger = logging.getLogger(__name__)


MANUAL_FILL_MESSAGE = "Could not extract data. Please fill manually."
FETCH_FAILED_MESSAGE = "Unable to fetch listing details. Please fill manually."


@dataclass
class AutofillResult:
    """Outcome of an auto-fill attempt."""

    record: ListingRecord
    fetched: bool = False
    error: str | None = None

    @property
    def ok(self) -> bool:
        """Usable when at least an address was recovered."""
        return self.record.address is not None

    @property
    def message(self) -> str | None:
        """User-facing hint when the form needs manual input."""
        if not self.ok:
            return MANUAL_FILL_MESSAGE
        if not self.fetched:
            return FETCH_FAILED_MESSAGE
        return None


def capture_page(
    html: str | bytes,
    url: str,
    extractor: ListingExtractor | None = None,
) -> ListingRecord:
    """Extract a listing from a full page in DOM mode.

    Pages that cannot be parsed still yield the URL-only record.
    """
    extractor = extractor or ListingExtractor()
    document = parse_document(html)

    if document is None:
        logger.warning("Page for %s could not be parsed; using URL only", url)
        return extractor.extract_url(url)

    return extractor.extract(document, url)


async def autofill(
    url: str,
    backend: Backend,
    extractor: ListingExtractor | None = None,
    *,
    allowed_hosts: Sequence[str] = ("zillow.com",),
    timeout: float = 30.0,
) -> AutofillResult:
    """Fill a listing from its URL.

    Slug data is always available; fetched data wins wherever both
    provide a field. Fetch failures are reported on the result, never
    raised.

    Args:
        url: Listing URL
        backend: Fetcher used for the remote text-mode pass
        extractor: Extractor (default chains if None)
        allowed_hosts: Hosts the backend may fetch
        timeout: Request timeout in seconds

    Returns:
        AutofillResult with the merged record
    """
    extractor = extractor or ListingExtractor()
    url_record = extractor.extract_url(url)

    try:
        validate_listing_url(url, allowed_hosts)
        result = await backend.fetch(RequestSpec(url=url, timeout=timeout))
    except BackendError as e:
        logger.info("Could not fetch %s, using URL data only: %s", url, e)
        return AutofillResult(record=url_record, fetched=False, error=str(e))

    parsed = extractor.extract_text(result.html, url)
    logger.debug("Fetched %s (%d bytes, %d fields)", url, result.content_length, len(parsed.filled_fields))

    return AutofillResult(record=parsed.merged_with(url_record), fetched=True)
