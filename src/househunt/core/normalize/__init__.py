"""Normalization of extracted listing values."""

from .parsing import (
    clean_html_text,
    clean_text,
    normalize_whitespace,
    parse_baths,
    parse_int,
    parse_year,
)

__all__ = [
    "clean_html_text",
    "clean_text",
    "normalize_whitespace",
    "parse_baths",
    "parse_int",
    "parse_year",
]
