"""
HTTP Backend implementation using httpx.

Fetches listing pages server-side with:
- Browser-like default headers
- Automatic retry with exponential backoff
- Rate limit and block detection
"""

from __future__ import annotations

from datetime import datetime, timezone

import httpx
from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from .base import (
    Backend,
    BlockedError,
    FetchError,
    FetchResult,
    RateLimitError,
    RequestSpec,
)


DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)

# Status codes that indicate blocking
BLOCKED_STATUS_CODES = {403, 406, 418, 451}

BLOCKED_INDICATORS = (
    "captcha",
    "challenge-platform",
    "please verify you are human",
    "press & hold",
    "unusual traffic",
)

# Pages above this size are real content even if they mention a captcha
BLOCK_PAGE_MAX_SIZE = 50000


class HttpBackend(Backend):
    """HTTP backend using httpx for async requests."""

    def __init__(
        self,
        timeout: float = 30.0,
        max_retries: int = 3,
        user_agent: str | None = None,
        default_headers: dict[str, str] | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize HTTP backend.

        Args:
            timeout: Default request timeout in seconds
            max_retries: Maximum attempts on transport errors and 429s
            user_agent: Custom user agent (default: desktop Chrome)
            default_headers: Extra headers for all requests
            transport: Custom httpx transport (tests)
        """
        self.timeout = timeout
        self.max_retries = max_retries
        self.user_agent = user_agent or DEFAULT_USER_AGENT
        self.transport = transport

        self.default_headers = {
            "User-Agent": self.user_agent,
            "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8",
            "Accept-Language": "en-US,en;q=0.5",
            "Accept-Encoding": "gzip, deflate",
            "Connection": "keep-alive",
            "Upgrade-Insecure-Requests": "1",
            **(default_headers or {}),
        }

        self._client: httpx.AsyncClient | None = None

    @property
    def name(self) -> str:
        return "http"

    async def _ensure_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.timeout),
                follow_redirects=True,
                headers=self.default_headers,
                transport=self.transport,
            )
        return self._client

    def _check_rate_limit(self, response: httpx.Response) -> None:
        """Check for rate limiting."""
        if response.status_code == 429:
            retry_after = response.headers.get("Retry-After")
            retry_seconds = None

            if retry_after:
                try:
                    retry_seconds = float(retry_after)
                except ValueError:
                    pass

            raise RateLimitError(
                "Rate limit exceeded",
                url=str(response.url),
                retry_after=retry_seconds,
            )

    def _check_blocked(self, response: httpx.Response, html: str) -> None:
        """Check if response indicates blocking."""
        if response.status_code in BLOCKED_STATUS_CODES:
            raise BlockedError(
                f"Request blocked with status {response.status_code}",
                url=str(response.url),
                status_code=response.status_code,
            )

        if len(html) >= BLOCK_PAGE_MAX_SIZE:
            return

        html_lower = html.lower()
        for indicator in BLOCKED_INDICATORS:
            if indicator in html_lower:
                raise BlockedError(
                    f"Possible anti-bot block detected: '{indicator}' in response",
                    url=str(response.url),
                    status_code=response.status_code,
                )

    async def fetch(self, request: RequestSpec) -> FetchResult:
        """Fetch a URL with automatic retry.

        Args:
            request: Request specification

        Returns:
            FetchResult with response data

        Raises:
            FetchError: Transport failure or non-2xx response
            RateLimitError: Still rate limited after all attempts
            BlockedError: Anti-bot response
        """
        client = await self._ensure_client()
        headers = {**self.default_headers, **request.headers}
        retry_count = 0

        try:
            async for attempt in AsyncRetrying(
                stop=stop_after_attempt(self.max_retries),
                wait=wait_exponential(multiplier=1, min=1, max=30),
                retry=retry_if_exception_type((httpx.TransportError, RateLimitError)),
                reraise=True,
            ):
                with attempt:
                    retry_count = attempt.retry_state.attempt_number - 1
                    start_time = datetime.now(timezone.utc)

                    response = await client.get(
                        request.url,
                        headers=headers,
                        params=request.params or None,
                        timeout=request.timeout,
                        follow_redirects=request.follow_redirects,
                    )

                    elapsed_ms = (datetime.now(timezone.utc) - start_time).total_seconds() * 1000

                    self._check_rate_limit(response)

                    html = response.text
                    self._check_blocked(response, html)

                    if not response.is_success:
                        raise FetchError(
                            f"HTTP error! status: {response.status_code}",
                            url=request.url,
                            status_code=response.status_code,
                        )

                    return FetchResult(
                        url=request.url,
                        final_url=str(response.url),
                        status_code=response.status_code,
                        html=html,
                        headers=dict(response.headers),
                        elapsed_ms=elapsed_ms,
                        retry_count=retry_count,
                    )

        except (BlockedError, RateLimitError, FetchError):
            raise
        except httpx.TransportError as e:
            raise FetchError(
                f"Transport error after {retry_count + 1} attempts: {e}",
                url=request.url,
                cause=e,
            ) from e
        except httpx.HTTPError as e:
            raise FetchError(
                f"Fetch failed: {e}",
                url=request.url,
                cause=e,
            ) from e

        # Unreachable: AsyncRetrying either returns or reraises
        raise FetchError("Fetch failed", url=request.url)

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None
