"""CLI command modules."""

from . import listings

__all__ = [
    "listings",
]
