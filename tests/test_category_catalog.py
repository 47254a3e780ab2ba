"""Tests for the rating category catalog."""
import json
from pathlib import Path

from animerate.constants import DEFAULT_RATING_CATEGORIES
from animerate.infrastructure.categories.json_category_catalog import (
    JsonCategoryCatalog,
    default_categories,
)


def test_loads_categories_from_file(tmp_path):
    path = tmp_path / "categories.json"
    path.write_text(json.dumps({"categories": [
        {"id": "story", "name": "Story", "description": "Plot"},
        {"id": "music", "name": "Music"},
    ]}))

    categories = JsonCategoryCatalog(str(path)).load()

    assert [c.id for c in categories] == ["story", "music"]
    assert categories[0].description == "Plot"
    assert categories[1].description == ""


def test_file_is_reread_on_each_load(tmp_path):
    path = tmp_path / "categories.json"
    path.write_text(json.dumps({"categories": [{"id": "a", "name": "A"}]}))
    catalog = JsonCategoryCatalog(str(path))
    catalog.load()

    path.write_text(json.dumps({"categories": [{"id": "b", "name": "B"}]}))

    assert [c.id for c in catalog.load()] == ["b"]


def test_missing_file_falls_back_to_defaults(tmp_path):
    categories = JsonCategoryCatalog(str(tmp_path / "nope.json")).load()
    assert [c.id for c in categories] == [c["id"] for c in DEFAULT_RATING_CATEGORIES]


def test_malformed_file_falls_back_to_defaults(tmp_path):
    path = tmp_path / "categories.json"
    for content in ["{oops", json.dumps([1, 2]), json.dumps({"categories": [{"name": "No id"}]})]:
        path.write_text(content)
        assert JsonCategoryCatalog(str(path)).load() == default_categories()


def test_shipped_catalog_matches_defaults():
    catalog = JsonCategoryCatalog(str(Path(__file__).parent.parent / "data" / "rating-categories.json"))
    assert catalog.load() == default_categories()
