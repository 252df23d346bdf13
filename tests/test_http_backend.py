"""Tests for the httpx fetch backend."""

from __future__ import annotations

import httpx
import pytest

from househunt.core.backends import (
    BlockedError,
    FetchError,
    HttpBackend,
    InvalidListingUrl,
    RateLimitError,
    RequestSpec,
    validate_listing_url,
)

from .builders import LISTING_URL


def backend_for(handler) -> HttpBackend:
    return HttpBackend(max_retries=1, transport=httpx.MockTransport(handler))


async def test_fetch_success():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["user_agent"] = request.headers["User-Agent"]
        return httpx.Response(200, text="<html>listing</html>")

    async with backend_for(handler) as backend:
        result = await backend.fetch(RequestSpec(url=LISTING_URL))

    assert result.ok
    assert result.html == "<html>listing</html>"
    assert result.status_code == 200
    assert result.retry_count == 0
    assert "Mozilla" in seen["user_agent"]


async def test_custom_user_agent():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["user_agent"] = request.headers["User-Agent"]
        return httpx.Response(200, text="ok")

    backend = HttpBackend(max_retries=1, user_agent="househunt-test", transport=httpx.MockTransport(handler))
    try:
        await backend.fetch(RequestSpec(url=LISTING_URL))
    finally:
        await backend.close()

    assert seen["user_agent"] == "househunt-test"


async def test_http_error_status():
    async with backend_for(lambda request: httpx.Response(500, text="oops")) as backend:
        with pytest.raises(FetchError, match="HTTP error! status: 500") as exc_info:
            await backend.fetch(RequestSpec(url=LISTING_URL))

    assert exc_info.value.status_code == 500


async def test_blocked_status():
    async with backend_for(lambda request: httpx.Response(403, text="denied")) as backend:
        with pytest.raises(BlockedError):
            await backend.fetch(RequestSpec(url=LISTING_URL))


async def test_captcha_page():
    html = "<html><body>Please verify you are human</body></html>"
    async with backend_for(lambda request: httpx.Response(200, text=html)) as backend:
        with pytest.raises(BlockedError):
            await backend.fetch(RequestSpec(url=LISTING_URL))


async def test_rate_limited():
    response = httpx.Response(429, headers={"Retry-After": "12"}, text="slow down")
    async with backend_for(lambda request: response) as backend:
        with pytest.raises(RateLimitError) as exc_info:
            await backend.fetch(RequestSpec(url=LISTING_URL))

    assert exc_info.value.retry_after == 12.0


async def test_transport_error_is_wrapped():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    async with backend_for(handler) as backend:
        with pytest.raises(FetchError) as exc_info:
            await backend.fetch(RequestSpec(url=LISTING_URL))

    assert isinstance(exc_info.value.cause, httpx.ConnectError)


class TestValidateListingUrl:
    def test_allowed_hosts(self):
        assert validate_listing_url(LISTING_URL) == LISTING_URL
        assert validate_listing_url("https://zillow.com/homedetails/x/1_zpid/")

    @pytest.mark.parametrize(
        "url",
        [
            "https://example.com/homedetails/x/1_zpid/",
            "https://notzillow.com/homedetails/x/1_zpid/",
            "ftp://www.zillow.com/x",
            "not a url",
            "",
        ],
    )
    def test_rejected(self, url):
        with pytest.raises(InvalidListingUrl):
            validate_listing_url(url)

    def test_custom_hosts(self):
        url = "https://www.redfin.com/CA/home/1"
        assert validate_listing_url(url, ["redfin.com"]) == url
