"""Backends for fetching listing pages."""

from .base import (
    Backend,
    BackendError,
    BlockedError,
    FetchError,
    FetchResult,
    InvalidListingUrl,
    RateLimitError,
    RequestSpec,
    validate_listing_url,
)
from .http_backend import HttpBackend

__all__ = [
    # Base classes
    "Backend",
    "RequestSpec",
    "FetchResult",
    # Errors
    "BackendError",
    "FetchError",
    "RateLimitError",
    "BlockedError",
    "InvalidListingUrl",
    "validate_listing_url",
    # HTTP backend
    "HttpBackend",
]
