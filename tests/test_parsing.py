"""Tests for value normalization helpers."""

from __future__ import annotations

import pytest

from househunt.core.normalize import (
    clean_html_text,
    clean_text,
    normalize_whitespace,
    parse_baths,
    parse_int,
    parse_year,
)


class TestParseInt:
    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("$1,158/sqft", 1158),
            ("2,500", 2500),
            ("$1,250,000", 1250000),
            ("3", 3),
            (7, 7),
        ],
    )
    def test_strips_non_digits(self, raw, expected):
        assert parse_int(raw) == expected

    def test_float_truncates_before_stripping(self):
        assert parse_int(999000.0) == 999000

    @pytest.mark.parametrize("raw", [None, "", "abc", True])
    def test_no_digits_is_none(self, raw):
        assert parse_int(raw) is None

    @pytest.mark.parametrize("raw", [float("inf"), float("-inf"), float("nan")])
    def test_non_finite_float_is_none(self, raw):
        assert parse_int(raw) is None

    def test_glued_suffix_is_kept_permissive(self):
        # Stray letters are dropped, not rejected
        assert parse_int("450k2") == 4502


class TestParseBaths:
    def test_half_baths_survive(self):
        assert parse_baths("2.5") == 2.5

    def test_first_number_wins(self):
        assert parse_baths("3 ba, 1 half") == 3.0

    def test_numbers_pass_through(self):
        assert parse_baths(2) == 2.0

    def test_no_number(self):
        assert parse_baths("baths") is None

    def test_non_finite_is_none(self):
        assert parse_baths(float("nan")) is None
        assert parse_baths(float("inf")) is None


class TestParseYear:
    def test_four_digits(self):
        assert parse_year("1925") == 1925

    @pytest.mark.parametrize("raw", ["19255", "192", "19x5", "", None])
    def test_rejects_anything_else(self, raw):
        assert parse_year(raw) is None


class TestTextHelpers:
    def test_normalize_whitespace(self):
        assert normalize_whitespace("  123  Main\n St ") == "123 Main St"
        assert normalize_whitespace(None) == ""

    def test_clean_text(self):
        assert clean_text("  0.25 Acres ") == "0.25 Acres"
        assert clean_text("   ") is None

    def test_clean_html_text(self):
        assert clean_html_text("12&nbsp;Oak&amp;Elm") == "12 Oak&Elm"
        assert clean_html_text("O&#39;Hara &quot;Ct&quot;") == "O'Hara \"Ct\""
