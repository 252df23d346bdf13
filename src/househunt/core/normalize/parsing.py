"""
Parsing utilities for normalizing extracted listing values.

Numeric cleanup is intentionally permissive: integer fields keep only
their digits, so thousands separators and currency symbols disappear,
and so does any stray letter glued to the number.
"""

from __future__ import annotations

import math
import re
from typing import Any


_NON_DIGIT = re.compile(r"[^0-9]")
_DECIMAL = re.compile(r"\d+(?:\.\d+)?")
_YEAR = re.compile(r"^\d{4}$")


# =============================================================================
# Numeric Parsing
# =============================================================================


def parse_int(value: str | int | float | None) -> int | None:
    """Parse an integer field by stripping every non-digit character.

    "$1,158/sqft" -> 1158, "2,500" -> 2500, "abc" -> None.

    Args:
        value: Raw text (or number) to clean

    Returns:
        Integer value, or None when no digits remain
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, int):
        return value

    if isinstance(value, float):
        # JSON numbers: 999000.0 must not become 9990000
        if not math.isfinite(value):
            return None
        return int(value)

    digits = _NON_DIGIT.sub("", str(value))
    if not digits:
        return None
    return int(digits)


def parse_baths(value: str | int | float | None) -> float | None:
    """Parse a bathroom count, keeping half baths ("2.5" -> 2.5)."""
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, (int, float)):
        return float(value) if math.isfinite(value) else None

    match = _DECIMAL.search(str(value))
    if not match:
        return None
    return float(match.group(0))


def parse_year(value: str | int | None) -> int | None:
    """Parse a year built, accepting only a bare 4-digit token.

    "1925" -> 1925, "19255" -> None, "192" -> None.
    """
    if value is None or isinstance(value, bool):
        return None

    text = str(value).strip()
    if not _YEAR.match(text):
        return None
    return int(text)


# =============================================================================
# Text Utilities
# =============================================================================


def normalize_whitespace(text: str | None) -> str:
    """Normalize whitespace in text."""
    if text is None:
        return ""
    return " ".join(text.split())


def clean_text(value: Any) -> str | None:
    """Trim a free-text value, returning None when nothing is left."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def clean_html_text(text: str | None) -> str:
    """Clean text extracted from HTML."""
    if text is None:
        return ""

    # Remove common HTML artifacts
    text = re.sub(r"&nbsp;?", " ", text)
    text = re.sub(r"&amp;?", "&", text)
    text = re.sub(r"&quot;?", '"', text)
    text = re.sub(r"&#39;?", "'", text)

    return normalize_whitespace(text)
