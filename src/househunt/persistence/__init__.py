"""Database persistence layer."""

from .db import dispose_engine, get_engine, get_session, init_db
from .models import Base, Listing
from .repo import ListingRepository

__all__ = [
    "dispose_engine",
    "get_engine",
    "get_session",
    "init_db",
    "Base",
    "Listing",
    "ListingRepository",
]
