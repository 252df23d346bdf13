"""
Backend base classes and data structures.

Defines the interface contract for listing page fetchers.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Sequence
from urllib.parse import urlparse


@dataclass
class RequestSpec:
    """Specification for an HTTP request."""

    url: str
    headers: dict[str, str] = field(default_factory=dict)
    params: dict[str, str] = field(default_factory=dict)
    timeout: float = 30.0
    follow_redirects: bool = True


@dataclass
class FetchResult:
    """Result of a fetch operation."""

    url: str
    final_url: str  # After redirects
    status_code: int
    html: str
    headers: dict[str, str]

    # Timing
    elapsed_ms: float
    fetched_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    retry_count: int = 0

    @property
    def ok(self) -> bool:
        """Check if request was successful (2xx status)."""
        return 200 <= self.status_code < 300

    @property
    def content_length(self) -> int:
        """Get content length in bytes."""
        return len(self.html.encode("utf-8"))


class Backend(ABC):
    """Abstract base class for listing page fetchers."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Backend identifier."""
        pass

    @abstractmethod
    async def fetch(self, request: RequestSpec) -> FetchResult:
        """Fetch a URL and return the response.

        Args:
            request: Request specification

        Returns:
            FetchResult with response data

        Raises:
            BackendError: On unrecoverable fetch failure
        """
        pass

    async def close(self) -> None:
        """Clean up backend resources."""
        pass

    async def __aenter__(self) -> "Backend":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()


class BackendError(Exception):
    """Base exception for backend errors."""

    def __init__(
        self,
        message: str,
        url: str | None = None,
        status_code: int | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message)
        self.url = url
        self.status_code = status_code
        self.cause = cause


class FetchError(BackendError):
    """Error during fetch operation."""
    pass


class RateLimitError(BackendError):
    """Rate limit hit (429 or similar)."""

    def __init__(
        self,
        message: str,
        url: str | None = None,
        retry_after: float | None = None,
    ):
        super().__init__(message, url, status_code=429)
        self.retry_after = retry_after


class BlockedError(BackendError):
    """Request blocked by anti-bot measures."""
    pass


class InvalidListingUrl(BackendError):
    """URL is not a fetchable listing URL."""
    pass


def validate_listing_url(url: str, allowed_hosts: Sequence[str] = ("zillow.com",)) -> str:
    """Check that a URL points at an allowed listing site.

    Args:
        url: Listing URL
        allowed_hosts: Hosts accepted along with their subdomains

    Returns:
        The URL, unchanged

    Raises:
        InvalidListingUrl: If the URL is not http(s) or the host is not allowed
    """
    parsed = urlparse(url or "")
    host = (parsed.hostname or "").lower()

    if parsed.scheme not in ("http", "https") or not host:
        raise InvalidListingUrl(f"Not a listing URL: {url!r}", url=url)

    for allowed in allowed_hosts:
        allowed = allowed.lower()
        if host == allowed or host.endswith("." + allowed):
            return url

    raise InvalidListingUrl(
        f"Unsupported listing host {host!r} (expected {', '.join(allowed_hosts)})",
        url=url,
    )
