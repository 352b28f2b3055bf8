from kuba.models import CatalogItem, HighlightTag
from kuba.services.search import filter_items, item_category, search_catalog


def test_search_matches_titles_and_tags_case_insensitively(sample_catalog) -> None:
    hits = search_catalog(sample_catalog, "  推荐 ")

    assert [(hit.category, hit.item.title) for hit in hits] == [
        ("anime", "斗罗大陆 第二季")
    ]

    catalog_hits = search_catalog(sample_catalog, "EXAMPLE")
    assert catalog_hits == []


def test_search_spans_categories_in_order(sample_catalog) -> None:
    hits = search_catalog(sample_catalog, "大陆")
    assert [hit.category for hit in hits] == ["anime"]

    hits = search_catalog(sample_catalog, "2")
    assert [hit.item.title for hit in hits] == ["流浪地球2"]


def test_blank_query_has_no_global_results(sample_catalog) -> None:
    assert search_catalog(sample_catalog, "   ") == []


def test_filter_items_keeps_everything_for_blank_query() -> None:
    items = [
        CatalogItem(title="Alpha", tags=[HighlightTag(text="Hot精选")]),
        CatalogItem(title="Beta", tags=["cold"]),
    ]

    assert filter_items(items, "") == items
    assert [item.title for item in filter_items(items, "hot")] == ["Alpha"]
    assert [item.title for item in filter_items(items, "bet")] == ["Beta"]


def test_item_category_defaults_to_other(sample_catalog) -> None:
    assert item_category(sample_catalog, CatalogItem(title="灵笼")) == "anime"
    assert item_category(sample_catalog, CatalogItem(title="Unknown")) == "other"
