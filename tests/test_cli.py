"""Tests for the command line interface."""

from __future__ import annotations

import json

import pytest
from typer.testing import CliRunner

from househunt import __version__
from househunt.cli.main import app

from .builders import LISTING_URL

runner = CliRunner()


@pytest.fixture
def saved_page(workspace, full_page):
    path = workspace / "listing.html"
    path.write_text(full_page, encoding="utf-8")
    return path


def test_version():
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_init_creates_config_and_database(workspace):
    result = runner.invoke(app, ["init"])

    assert result.exit_code == 0, result.output
    assert (workspace / "configs" / "app.yaml").exists()
    assert (workspace / "data" / "househunt.db").exists()


def test_extract_json(saved_page):
    result = runner.invoke(app, ["extract", str(saved_page), "--url", LISTING_URL, "--format", "json"])

    assert result.exit_code == 0, result.output
    assert '"price": 1250000' in result.output
    assert '"yearBuilt": 1925' in result.output


def test_extract_text_mode_json(saved_page):
    result = runner.invoke(app, ["extract", str(saved_page), "--text-mode", "--format", "json"])

    assert result.exit_code == 0, result.output
    assert '"yearBuilt": null' in result.output


def test_fetch_rejects_unsupported_host(workspace):
    result = runner.invoke(app, ["fetch", "https://example.com/listing/1"])
    assert result.exit_code == 1


def test_listing_lifecycle(saved_page, workspace):
    result = runner.invoke(app, ["listings", "add", LISTING_URL, "--html", str(saved_page)])
    assert result.exit_code == 0, result.output
    assert "Added listing #1" in result.output

    result = runner.invoke(app, ["listings", "add", LISTING_URL, "--html", str(saved_page)])
    assert "Updated listing #1" in result.output

    result = runner.invoke(app, ["listings", "visit", "1"])
    assert result.exit_code == 0, result.output

    result = runner.invoke(
        app,
        ["listings", "annotate", "1", "--like", "porch", "--like", "light", "--sentiment", "love"],
    )
    assert result.exit_code == 0, result.output

    result = runner.invoke(app, ["listings", "show", "1"])
    assert result.exit_code == 0, result.output

    export_path = workspace / "out" / "listings.json"
    result = runner.invoke(app, ["listings", "export", str(export_path)])
    assert result.exit_code == 0, result.output

    rows = json.loads(export_path.read_text(encoding="utf-8"))
    assert len(rows) == 1
    assert rows[0]["price"] == 1250000
    assert rows[0]["visited"] is True
    assert rows[0]["sentiment"] == "love"
    assert rows[0]["likes"] == ["porch", "light"]

    result = runner.invoke(app, ["listings", "delete", "1", "--yes"])
    assert result.exit_code == 0, result.output

    result = runner.invoke(app, ["listings", "show", "1"])
    assert result.exit_code == 1


def test_export_csv(saved_page, workspace):
    runner.invoke(app, ["listings", "add", LISTING_URL, "--html", str(saved_page)])
    runner.invoke(app, ["listings", "annotate", "1", "--dislike", "road", "--dislike", "hoa"])

    export_path = workspace / "listings.csv"
    result = runner.invoke(app, ["listings", "export", str(export_path)])

    assert result.exit_code == 0, result.output
    content = export_path.read_text(encoding="utf-8")
    assert content.splitlines()[0].startswith("id,source_url,address,price")
    assert "road; hoa" in content


def test_unknown_sentiment(workspace):
    result = runner.invoke(app, ["listings", "annotate", "1", "--sentiment", "meh"])
    assert result.exit_code == 1


def test_export_unsupported_format(workspace):
    result = runner.invoke(app, ["listings", "export", str(workspace / "out.xml")])
    assert result.exit_code == 1


def test_list_empty(workspace):
    result = runner.invoke(app, ["listings", "list"])
    assert result.exit_code == 0, result.output
    assert "No listings found" in result.output


def test_edit_and_remove_annotations(saved_page, workspace):
    runner.invoke(app, ["listings", "add", LISTING_URL, "--html", str(saved_page)])
    runner.invoke(app, ["listings", "annotate", "1", "--like", "porch", "--like", "light", "--dislike", "road"])

    result = runner.invoke(
        app,
        ["listings", "edit", "1", "--price", "1199000", "--baths", "3", "--clear", "lot-size"],
    )
    assert result.exit_code == 0, result.output

    result = runner.invoke(app, ["listings", "annotate", "1", "--remove-like", "porch", "--remove-dislike", "road"])
    assert result.exit_code == 0, result.output

    export_path = workspace / "listings.json"
    runner.invoke(app, ["listings", "export", str(export_path)])
    row = json.loads(export_path.read_text(encoding="utf-8"))[0]
    assert row["price"] == 1199000
    assert row["baths"] == 3.0
    assert row["lot_size"] is None
    assert row["beds"] == 3
    assert row["likes"] == ["light"]
    assert row["dislikes"] == []


def test_edit_validation(workspace):
    result = runner.invoke(app, ["listings", "edit", "1"])
    assert result.exit_code == 1

    result = runner.invoke(app, ["listings", "edit", "1", "--clear", "visited"])
    assert result.exit_code == 1

    result = runner.invoke(app, ["listings", "edit", "7", "--price", "1"])
    assert result.exit_code == 1
