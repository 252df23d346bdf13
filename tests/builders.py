"""HTML builders for listing page fixtures."""

from __future__ import annotations

import json


LISTING_URL = "https://www.zillow.com/homedetails/123-Main-St-San-Francisco-CA-94102/12345678_zpid/"


def facts_container(*groups: str) -> str:
    """Bed/bath/sqft container holding the given group markup."""
    return '<div data-testid="bed-bath-sqft-facts">' + "".join(groups) + "</div>"


def fact_group(value: str, label: str) -> str:
    return f"<div><span>{value}</span><span>{label}</span></div>"


def category_group(heading: str, *lines: str) -> str:
    """Category group with a heading block and a list of body lines."""
    items = "".join(f"<li><span>{line}</span></li>" for line in lines)
    return (
        '<div data-testid="category-group">'
        f"<div><h3>{heading}</h3></div>"
        f"<div><ul>{items}</ul></div>"
        "</div>"
    )


def jsonld_script(data: object) -> str:
    payload = data if isinstance(data, str) else json.dumps(data)
    return f'<script type="application/ld+json">{payload}</script>'


def page(*parts: str) -> str:
    return "<html><head><title>Listing</title></head><body>" + "".join(parts) + "</body></html>"
