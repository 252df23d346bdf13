"""
SQLAlchemy ORM models for HouseHunt.

A listing row carries the extracted record fields plus the user's own
annotations (visit status, sentiment, likes, dislikes, deal-breakers).
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from sqlalchemy import (
    JSON,
    Boolean,
    DateTime,
    Float,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# =============================================================================
# Base Class
# =============================================================================


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    type_annotation_map = {
        dict[str, Any]: JSON,
        list[str]: JSON,
    }


# =============================================================================
# Mixins
# =============================================================================


class TimestampMixin:
    """Mixin providing created_at and updated_at columns."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=_utcnow,
        nullable=False,
    )
    updated_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        default=None,
        onupdate=_utcnow,
        nullable=True,
    )


# =============================================================================
# Listing Model
# =============================================================================


class Listing(Base, TimestampMixin):
    """A tracked home listing."""

    __tablename__ = "listings"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    source_url: Mapped[str] = mapped_column(String(1000), unique=True, nullable=False, index=True)

    # Extracted fields
    address: Mapped[str | None] = mapped_column(String(500), nullable=True)
    price: Mapped[int | None] = mapped_column(Integer, nullable=True)
    beds: Mapped[int | None] = mapped_column(Integer, nullable=True)
    baths: Mapped[float | None] = mapped_column(Float, nullable=True)
    sqft: Mapped[int | None] = mapped_column(Integer, nullable=True)
    price_per_sqft: Mapped[int | None] = mapped_column(Integer, nullable=True)
    tax_assessed_value: Mapped[int | None] = mapped_column(Integer, nullable=True)
    annual_tax_amount: Mapped[int | None] = mapped_column(Integer, nullable=True)
    price_range: Mapped[str | None] = mapped_column(String(200), nullable=True)
    date_on_market: Mapped[str | None] = mapped_column(String(100), nullable=True)
    listing_agreement: Mapped[str | None] = mapped_column(String(200), nullable=True)
    listing_terms: Mapped[str | None] = mapped_column(Text, nullable=True)
    lot_size: Mapped[str | None] = mapped_column(String(100), nullable=True)
    total_spaces: Mapped[int | None] = mapped_column(Integer, nullable=True)
    garage_spaces: Mapped[int | None] = mapped_column(Integer, nullable=True)
    home_type: Mapped[str | None] = mapped_column(String(100), nullable=True)
    year_built: Mapped[int | None] = mapped_column(Integer, nullable=True)
    extracted_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    # Location (filled by a geocoder outside this package)
    lat: Mapped[float | None] = mapped_column(Float, nullable=True)
    lng: Mapped[float | None] = mapped_column(Float, nullable=True)

    # Annotations
    visited: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False, index=True)
    sentiment: Mapped[str | None] = mapped_column(String(20), nullable=True)
    likes: Mapped[list[str]] = mapped_column(JSON, default=list, nullable=False)
    dislikes: Mapped[list[str]] = mapped_column(JSON, default=list, nullable=False)
    deal_breakers: Mapped[list[str]] = mapped_column(JSON, default=list, nullable=False)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    @property
    def display_name(self) -> str:
        return self.address or self.source_url

    def __repr__(self) -> str:
        return f"<Listing(id={self.id}, address='{self.address}')>"
