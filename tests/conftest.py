"""Shared fixtures for HouseHunt tests."""

from __future__ import annotations

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from househunt.core.extract import ListingExtractor
from househunt.persistence.db import dispose_engine
from househunt.persistence.models import Base

from .builders import category_group, fact_group, facts_container, page


@pytest.fixture
def extractor() -> ListingExtractor:
    return ListingExtractor()


@pytest.fixture
def full_page() -> str:
    """A listing page exercising every DOM strategy."""
    return page(
        '<h1 class="Text-c11n-8-100-2__sc-aiai24-0">123 Main St,\n   San Francisco, CA 94102</h1>',
        '<span data-testid="price">$1,250,000</span>',
        facts_container(
            fact_group("3", "beds"),
            fact_group("2.5", "baths"),
            fact_group("1,850", "sqft"),
        ),
        category_group(
            "Financial &amp; listing details",
            "Price per square foot: $1,158/sqft",
            "Tax assessed value: $1,234,567",
            "Annual tax amount: $14,812",
            "Price range: $2M - $2M",
            "Date on market: 5/29/2025",
            "Listing agreement: Exclusive Right To Sell",
            "Listing terms: Cash, Conventional",
        ),
        category_group(
            "Property",
            "Parking features: Garage",
            "Total spaces: 3",
            "Garage spaces: 2",
            "Size: 0.25 Acres",
        ),
        category_group(
            "Construction",
            "Home type: SingleFamily",
            "Year built: 1925",
        ),
    )


@pytest.fixture
def db_session():
    """Session bound to a fresh in-memory database."""
    engine = create_engine("sqlite://")
    Base.metadata.create_all(engine)
    factory = sessionmaker(bind=engine, expire_on_commit=False)
    session = factory()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture
def workspace(tmp_path, monkeypatch):
    """Run from an empty directory with a fresh database engine."""
    monkeypatch.chdir(tmp_path)
    dispose_engine()
    yield tmp_path
    dispose_engine()
