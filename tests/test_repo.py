"""Tests for the listing repository."""

from __future__ import annotations

import pytest

from househunt.core.config.models import Sentiment
from househunt.core.extract import ListingRecord
from househunt.persistence.repo import ListingRepository

from .builders import LISTING_URL


def make_record(**values) -> ListingRecord:
    return ListingRecord(source_url=values.pop("source_url", LISTING_URL), **values)


def test_create_defaults_annotations(db_session):
    repo = ListingRepository(db_session)
    listing = repo.create_from_record(make_record(address="123 Main St", price=500000, baths=2.5))

    assert listing.id is not None
    assert listing.visited is False
    assert listing.sentiment is None
    assert listing.likes == []
    assert listing.dislikes == []
    assert listing.deal_breakers == []
    assert listing.notes is None
    assert listing.lat is None and listing.lng is None
    assert listing.baths == 2.5
    assert listing.display_name == "123 Main St"


def test_upsert_refreshes_without_losing_values(db_session):
    repo = ListingRepository(db_session)
    first, created = repo.upsert_record(make_record(address="123 Main St", price=500000, beds=3))
    repo.annotate(first.id, likes=["yard"])

    second, created_again = repo.upsert_record(make_record(price=480000))

    assert created and not created_again
    assert second.id == first.id
    assert second.price == 480000
    assert second.beds == 3
    assert second.likes == ["yard"]
    assert repo.count() == 1


def test_update_reports_changed_fields(db_session):
    repo = ListingRepository(db_session)
    listing = repo.create_from_record(make_record(price=1, beds=2))

    changed = repo.update_from_record(listing, make_record(price=2, beds=2, sqft=900))

    assert changed == ["price", "sqft"]


def test_toggle_visited_and_filter(db_session):
    repo = ListingRepository(db_session)
    a = repo.create_from_record(make_record(source_url="https://www.zillow.com/a"))
    repo.create_from_record(make_record(source_url="https://www.zillow.com/b"))

    assert repo.toggle_visited(a.id).visited is True
    assert [item.id for item in repo.list_listings(visited_only=True)] == [a.id]
    assert repo.count(visited_only=True) == 1
    assert len(repo.list_listings()) == 2

    assert repo.toggle_visited(a.id).visited is False
    assert repo.toggle_visited(9999) is None


def test_annotate(db_session):
    repo = ListingRepository(db_session)
    listing = repo.create_from_record(make_record())

    repo.annotate(listing.id, likes=["light", " light ", ""], dislikes=["noise"], sentiment=Sentiment.LIKE)
    repo.annotate(listing.id, likes=["yard"], deal_breakers=["no parking"], notes="  call agent  ")

    listing = repo.get_by_id(listing.id)
    assert listing.likes == ["light", "yard"]
    assert listing.dislikes == ["noise"]
    assert listing.deal_breakers == ["no parking"]
    assert listing.sentiment == "like"
    assert listing.notes == "call agent"


def test_annotate_removes_entries(db_session):
    repo = ListingRepository(db_session)
    listing = repo.create_from_record(make_record())
    repo.annotate(listing.id, likes=["light", "yard"], dislikes=["noise"], deal_breakers=["no parking"])

    repo.annotate(
        listing.id,
        remove_likes=[" yard "],
        remove_dislikes=["noise", "not there"],
        remove_deal_breakers=["no parking"],
    )

    listing = repo.get_by_id(listing.id)
    assert listing.likes == ["light"]
    assert listing.dislikes == []
    assert listing.deal_breakers == []


def test_update_fields(db_session):
    repo = ListingRepository(db_session)
    listing = repo.create_from_record(make_record(address="123 Main St", price=500000, lot_size="0.25 Acres"))

    updated = repo.update_fields(listing.id, price=475000, beds=3, lot_size=None)

    assert updated.price == 475000
    assert updated.beds == 3
    assert updated.lot_size is None
    assert updated.address == "123 Main St"
    assert repo.update_fields(9999, price=1) is None


def test_update_fields_rejects_unknown_names(db_session):
    repo = ListingRepository(db_session)
    listing = repo.create_from_record(make_record())

    with pytest.raises(ValueError, match="visited"):
        repo.update_fields(listing.id, visited=True)


def test_annotate_missing(db_session):
    assert ListingRepository(db_session).annotate(42, likes=["x"]) is None


def test_delete(db_session):
    repo = ListingRepository(db_session)
    listing = repo.create_from_record(make_record())

    assert repo.delete(listing.id) is True
    assert repo.get_by_url(LISTING_URL) is None
    assert repo.delete(listing.id) is False
