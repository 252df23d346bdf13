"""
Repository pattern for database operations.

Provides clean abstractions for CRUD operations on listings, including
merging freshly extracted records into stored rows without touching the
user's annotations.
"""

from __future__ import annotations

from typing import Any, Sequence

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from househunt.core.config.models import Sentiment
from househunt.core.extract.base import RECORD_FIELDS, ListingRecord
from .models import Listing


# Columns a user may edit by hand
EDITABLE_FIELDS = (*RECORD_FIELDS, "lat", "lng")


class ListingRepository:
    """Repository for Listing CRUD operations."""

    def __init__(self, session: Session):
        self.session = session

    def get_by_id(self, listing_id: int) -> Listing | None:
        """Get listing by ID."""
        return self.session.get(Listing, listing_id)

    def get_by_url(self, source_url: str) -> Listing | None:
        """Get listing by its source URL."""
        stmt = select(Listing).where(Listing.source_url == source_url)
        return self.session.execute(stmt).scalar_one_or_none()

    def list_listings(self, visited_only: bool = False) -> Sequence[Listing]:
        """Get all listings, oldest first."""
        stmt = select(Listing)
        if visited_only:
            stmt = stmt.where(Listing.visited == True)  # noqa: E712
        stmt = stmt.order_by(Listing.created_at, Listing.id)
        return self.session.execute(stmt).scalars().all()

    def create_from_record(self, record: ListingRecord) -> Listing:
        """Create a listing from an extracted record.

        Annotations start empty: not visited, no sentiment, no notes.
        """
        listing = Listing(
            source_url=record.source_url,
            extracted_at=record.extracted_at,
            visited=False,
            likes=[],
            dislikes=[],
            deal_breakers=[],
        )
        for name in RECORD_FIELDS:
            setattr(listing, name, getattr(record, name))

        self.session.add(listing)
        self.session.flush()
        return listing

    def update_from_record(self, listing: Listing, record: ListingRecord) -> list[str]:
        """Overwrite extracted fields with a newer record's non-null values.

        Returns:
            Names of the fields whose value changed
        """
        changed: list[str] = []
        for name in RECORD_FIELDS:
            value = getattr(record, name)
            if value is not None and getattr(listing, name) != value:
                setattr(listing, name, value)
                changed.append(name)

        listing.extracted_at = record.extracted_at
        self.session.flush()
        return changed

    def upsert_record(self, record: ListingRecord) -> tuple[Listing, bool]:
        """Create or refresh the listing for a record's URL.

        Returns:
            Tuple of (listing, created) where created is True if new
        """
        existing = self.get_by_url(record.source_url)
        if existing:
            self.update_from_record(existing, record)
            return existing, False
        return self.create_from_record(record), True

    def update_fields(self, listing_id: int, **values: Any) -> Listing | None:
        """Set listing fields by hand; a None value clears the field.

        Raises:
            ValueError: If a name is not an editable field
        """
        unknown = set(values) - set(EDITABLE_FIELDS)
        if unknown:
            raise ValueError(f"Not editable: {', '.join(sorted(unknown))}")

        listing = self.get_by_id(listing_id)
        if listing is None:
            return None

        for name, value in values.items():
            setattr(listing, name, value)

        self.session.flush()
        return listing

    def toggle_visited(self, listing_id: int) -> Listing | None:
        """Flip a listing's visited flag."""
        listing = self.get_by_id(listing_id)
        if listing:
            listing.visited = not listing.visited
            self.session.flush()
        return listing

    def annotate(
        self,
        listing_id: int,
        *,
        likes: Sequence[str] = (),
        dislikes: Sequence[str] = (),
        deal_breakers: Sequence[str] = (),
        remove_likes: Sequence[str] = (),
        remove_dislikes: Sequence[str] = (),
        remove_deal_breakers: Sequence[str] = (),
        sentiment: Sentiment | None = None,
        notes: str | None = None,
    ) -> Listing | None:
        """Add or remove annotations and optionally set sentiment or notes.

        Blank and duplicate entries are ignored. Removals run after
        additions.
        """
        listing = self.get_by_id(listing_id)
        if listing is None:
            return None

        # JSON columns are reassigned so the change is tracked
        listing.likes = _append_unique(listing.likes, likes)
        listing.dislikes = _append_unique(listing.dislikes, dislikes)
        listing.deal_breakers = _append_unique(listing.deal_breakers, deal_breakers)
        listing.likes = _remove(listing.likes, remove_likes)
        listing.dislikes = _remove(listing.dislikes, remove_dislikes)
        listing.deal_breakers = _remove(listing.deal_breakers, remove_deal_breakers)

        if sentiment is not None:
            listing.sentiment = Sentiment(sentiment).value
        if notes is not None:
            listing.notes = notes.strip() or None

        self.session.flush()
        return listing

    def delete(self, listing_id: int) -> bool:
        """Delete a listing by ID."""
        listing = self.get_by_id(listing_id)
        if listing:
            self.session.delete(listing)
            self.session.flush()
            return True
        return False

    def count(self, visited_only: bool = False) -> int:
        """Count listings."""
        stmt = select(func.count(Listing.id))
        if visited_only:
            stmt = stmt.where(Listing.visited == True)  # noqa: E712
        return self.session.execute(stmt).scalar_one()


def _append_unique(current: Sequence[str] | None, items: Sequence[str]) -> list[str]:
    result = list(current or [])
    for item in items:
        item = item.strip()
        if item and item not in result:
            result.append(item)
    return result


def _remove(current: Sequence[str] | None, items: Sequence[str]) -> list[str]:
    drop = {item.strip() for item in items}
    return [item for item in current or [] if item not in drop]
