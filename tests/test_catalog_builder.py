"""Catalog builder and sheet processor tests."""

from __future__ import annotations

from typing import Any, Iterator

import pytest

from kuba.categories import CATEGORY_KEYS
from kuba.services import catalog_builder
from kuba.services.catalog_builder import (
    CatalogBuilder,
    build_catalog,
    empty_catalog,
    process_sheet,
)
from kuba.services.workbook import InMemoryWorkbookSource, WorkbookError


def test_missing_source_returns_empty_fallback() -> None:
    catalog = CatalogBuilder(InMemoryWorkbookSource()).build()

    assert catalog.status == "empty_fallback"
    assert catalog.total_items == 0
    assert list(catalog.categories) == list(CATEGORY_KEYS)
    assert all(items == [] for items in catalog.categories.values())


def test_unparseable_source_returns_empty_fallback() -> None:
    source = InMemoryWorkbookSource(error=WorkbookError("not a workbook"))

    catalog = CatalogBuilder(source).build()

    assert catalog.status == "empty_fallback"
    assert catalog.total_items == 0


def test_unexpected_source_error_returns_empty_fallback() -> None:
    class BrokenSource:
        def exists(self) -> bool:
            raise PermissionError("denied")

        def load(self) -> dict[str, list[dict[str, Any]]]:  # pragma: no cover
            return {}

    catalog = CatalogBuilder(BrokenSource()).build()

    assert catalog.status == "empty_fallback"


def test_build_counts_items_across_categories() -> None:
    source = InMemoryWorkbookSource(
        {
            "movies": [
                {"名称": "Foo", "标签": "推荐,动作"},
                {"名称": "", "标签": ""},
                {"链接": "https://no-title.example"},
                {"标题": "Bar"},
            ],
            "games": [{"title": "Baz"}],
            "unrelated": [{"名称": "Ignored"}],
        }
    )

    catalog = CatalogBuilder(source).build()

    assert catalog.status == "success"
    assert catalog.titles_for("movies") == ["Foo", "Bar"]
    assert catalog.titles_for("games") == ["Baz"]
    assert catalog.items_for("anime") == []
    assert catalog.total_items == 3
    assert "unrelated" not in catalog.categories


def test_missing_sheet_yields_empty_category() -> None:
    assert process_sheet(None, "study") == []


def test_row_error_is_contained_within_sheet(monkeypatch: pytest.MonkeyPatch) -> None:
    real_normalize = catalog_builder.normalize_row

    def flaky(row: dict[str, Any], index: int, category: str):
        if index == 1:
            raise RuntimeError("row exploded")
        return real_normalize(row, index, category)

    monkeypatch.setattr(catalog_builder, "normalize_row", flaky)

    items = process_sheet(
        [{"名称": "A"}, {"名称": "B"}, {"名称": "C"}], "movies"
    )

    assert [item.title for item in items] == ["A", "C"]


def test_sheet_error_is_contained_within_category() -> None:
    def exploding_rows() -> Iterator[dict[str, Any]]:
        yield {"名称": "Partial"}
        raise RuntimeError("sheet exploded")

    catalog = build_catalog(
        {"movies": exploding_rows(), "anime": [{"名称": "Kept"}]}  # type: ignore[dict-item]
    )

    assert catalog.status == "success"
    assert catalog.items_for("movies") == []
    assert catalog.titles_for("anime") == ["Kept"]
    assert catalog.total_items == 1


def test_titles_are_never_empty_or_placeholders() -> None:
    rows = [{"名称": "  "}, {"名称": "项目_other_2"}, {"名称": "Real"}, {"标签": "x"}]

    catalog = build_catalog({"other": rows})

    titles = catalog.titles_for("other")
    assert titles == ["Real"]
    assert all(title and not title.startswith("项目_other_") for title in titles)


def test_empty_catalog_payload_shape() -> None:
    payload = empty_catalog().to_payload()

    for key in CATEGORY_KEYS:
        assert payload[key] == []
    metadata = payload["_metadata"]
    assert metadata["status"] == "empty_fallback"
    assert metadata["totalItems"] == 0
    assert metadata["message"] == "使用空数据回退"
    assert "generatedAt" in metadata
