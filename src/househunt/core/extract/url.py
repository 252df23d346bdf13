"""
Address recovery from listing URL structure.

Listing URLs of the form ``.../homedetails/<slug>/<id>_zpid/`` carry the
address in the slug. This is the least trusted source of any field.
"""

from __future__ import annotations

import re
from typing import Any

from .base import Strategy


HOMEDETAILS_SEGMENT = "/homedetails/"

_LISTING_ID = re.compile(r"\d+_zpid.*")


def address_from_url(url: str | None) -> str | None:
    """Turn the homedetails slug into a readable address.

    https://www.zillow.com/homedetails/123-Main-St-San-Francisco-CA-94102/12345678_zpid/
    -> "123 Main St San Francisco CA 94102"
    """
    if not url or HOMEDETAILS_SEGMENT not in url:
        return None

    slug = url.split(HOMEDETAILS_SEGMENT, 1)[1].split("/")[0]
    slug = slug.split("?")[0].split("#")[0]
    address = _LISTING_ID.sub("", slug.replace("-", " ")).strip()
    return " ".join(address.split()) or None


class UrlSlugStrategy(Strategy):
    """Seed the address from the listing URL slug."""

    @property
    def name(self) -> str:
        return "url_slug"

    def extract(self, document: Any, url: str | None = None) -> dict[str, Any]:
        address = address_from_url(url)
        return {"address": address} if address else {}
