"""Tests for the extraction pipeline."""

from __future__ import annotations

from typing import Any

from househunt.core.extract import (
    RECORD_FIELDS,
    ListingExtractor,
    ListingRecord,
    Strategy,
    UrlSlugStrategy,
    parse_document,
)

from .builders import LISTING_URL, category_group, facts_container, fact_group, jsonld_script, page


class ExplodingStrategy(Strategy):
    @property
    def name(self) -> str:
        return "exploding"

    def extract(self, document: Any, url: str | None = None) -> dict[str, Any]:
        raise RuntimeError("boom")


class FixedStrategy(Strategy):
    def __init__(self, name: str, values: dict[str, Any]):
        self._name = name
        self.values = values

    @property
    def name(self) -> str:
        return self._name

    def extract(self, document: Any, url: str | None = None) -> dict[str, Any]:
        return dict(self.values)


class TestDomMode:
    def test_full_page(self, extractor, full_page):
        record = extractor.extract(parse_document(full_page), LISTING_URL)

        assert record.source_url == LISTING_URL
        assert record.address == "123 Main St, San Francisco, CA 94102"
        assert record.price == 1250000
        assert (record.beds, record.baths, record.sqft) == (3, 2.5, 1850)
        assert record.price_per_sqft == 1158
        assert record.year_built == 1925
        assert record.lot_size == "0.25 Acres"
        assert record.sources["address"] == "direct_selectors"
        assert record.sources["beds"] == "facts_groups"
        assert record.sources["year_built"] == "category_groups"

    def test_structured_data_never_overrides_dom(self, extractor):
        html = page(
            '<span data-testid="price">$1,000,000</span>',
            facts_container(fact_group("3", "beds")),
            jsonld_script({
                "@type": "SingleFamilyResidence",
                "offers": {"price": 999000},
                "numberOfBedrooms": 5,
                "numberOfBathroomsTotal": 2,
            }),
        )
        record = extractor.extract(parse_document(html), LISTING_URL)

        assert record.price == 1000000
        assert record.sources["price"] == "direct_selectors"
        assert record.beds == 3
        # Fields the DOM lacks still come from structured data
        assert record.baths == 2.0
        assert record.sources["baths"] == "jsonld"

    def test_structured_data_beats_loose_selectors(self, extractor):
        html = page(
            '<span class="bed-count">9 beds</span>',
            jsonld_script({"@type": "SingleFamilyResidence", "numberOfBedrooms": 4}),
        )
        record = extractor.extract(parse_document(html))
        assert record.beds == 4

    def test_url_slug_is_last_resort(self, extractor):
        record = extractor.extract(parse_document(page("<p>Sold</p>")), LISTING_URL)
        assert record.address == "123 Main St San Francisco CA 94102"
        assert record.sources == {"address": "url_slug"}

    def test_single_span_group(self, extractor):
        html = page(facts_container("<div><span>3 bd</span></div>"))
        assert extractor.extract(parse_document(html)).beds == 3

    def test_financial_label_boundary(self, extractor):
        html = page(category_group(
            "Financial &amp; listing details",
            "Price range: $2M - $2M Date on market: 5/29/2025 Listing agreement: Excl Right",
        ))
        record = extractor.extract(parse_document(html))
        assert record.price_range == "$2M - $2M"
        assert record.listing_agreement == "Excl Right"


class TestTotality:
    def test_unparsable_input(self, extractor):
        assert parse_document("") is None
        assert parse_document("   ") is None

        record = extractor.extract(None, LISTING_URL)
        assert record.source_url == LISTING_URL
        assert record.filled_fields == ["address"]

    def test_empty_everything(self, extractor):
        record = extractor.extract(None)
        assert record.source_url == ""
        assert record.is_empty

    def test_failing_strategy_is_isolated(self):
        extractor = ListingExtractor(dom_strategies=[
            ExplodingStrategy(),
            FixedStrategy("fixed", {"price": 10}),
        ])
        record = extractor.extract(parse_document(page("<p>x</p>")))
        assert record.price == 10

    def test_first_value_wins(self):
        extractor = ListingExtractor(dom_strategies=[
            FixedStrategy("first", {"beds": 2, "baths": None}),
            FixedStrategy("second", {"beds": 5, "baths": 1.5}),
        ])
        record = extractor.extract(parse_document(page("<p>x</p>")))
        assert record.beds == 2
        assert record.baths == 1.5
        assert record.sources == {"beds": "first", "baths": "second"}

    def test_unknown_fields_dropped(self):
        extractor = ListingExtractor(dom_strategies=[FixedStrategy("odd", {"pool": True, "beds": 1})])
        record = extractor.extract(parse_document(page("<p>x</p>")))
        assert record.beds == 1
        assert "pool" not in record.to_dict()


class TestTextMode:
    def test_reduced_schema(self, extractor, full_page):
        html = full_page + '{"price":"$1,250,000","bedrooms":3}'
        record = extractor.extract_text(html, LISTING_URL)

        assert record.price == 1250000
        for name in RECORD_FIELDS:
            if name not in ("address", "price", "beds", "baths", "sqft"):
                assert getattr(record, name) is None, name

    def test_slug_fills_missing_address(self, extractor):
        record = extractor.extract_text('{"price":"$400,000"}', LISTING_URL)
        assert record.address == "123 Main St San Francisco CA 94102"
        assert record.sources["address"] == "url_slug"

    def test_none_html(self, extractor):
        assert extractor.extract_text(None).is_empty


class TestListingRecord:
    def test_merged_with_keeps_own_values(self):
        fetched = ListingRecord(source_url="u", address="12 Oak Ave", price=5, sources={"address": "html_text"})
        slug = ListingRecord(source_url="u", address="12 Oak Ave Town", beds=3, sources={"address": "url_slug", "beds": "x"})

        merged = fetched.merged_with(slug)
        assert merged.address == "12 Oak Ave"
        assert merged.price == 5
        assert merged.beds == 3
        assert merged.sources == {"address": "html_text", "beds": "x"}
        assert fetched.beds is None

    def test_to_dict_camel_case(self):
        record = ListingRecord(source_url="u", price_per_sqft=10)
        data = record.to_dict(camel_case=True)
        assert data["sourceUrl"] == "u"
        assert data["pricePerSqft"] == 10
        assert isinstance(data["extractedAt"], str)
        assert "sources" not in data

    def test_extract_url(self, extractor):
        record = extractor.extract_url(LISTING_URL)
        assert record.filled_fields == ["address"]

    def test_default_text_chain_contains_slug(self, extractor):
        assert any(isinstance(s, UrlSlugStrategy) for s in extractor.text_strategies)
