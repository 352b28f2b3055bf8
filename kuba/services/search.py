"""Catalog search used by the global search box and hot-term links."""

from __future__ import annotations

from typing import Sequence

from ..models import Catalog, CatalogItem, SearchHit
from ..utils import contains_ignore_case


def matches(item: CatalogItem, query: str) -> bool:
    """Case-insensitive containment in the title or any tag text."""

    if contains_ignore_case(item.title, query):
        return True
    return any(contains_ignore_case(text, query) for text in item.tag_texts())


def filter_items(items: Sequence[CatalogItem], query: str) -> list[CatalogItem]:
    """Filter a single category's items; a blank query keeps everything."""

    needle = (query or "").strip()
    if not needle:
        return list(items)
    return [item for item in items if matches(item, needle)]


def search_catalog(catalog: Catalog, query: str) -> list[SearchHit]:
    """Search every category in order, tagging hits with their category."""

    needle = (query or "").strip()
    if not needle:
        return []
    return [
        SearchHit(category=category, item=item)
        for category, items in catalog.categories.items()
        for item in items
        if matches(item, needle)
    ]


def item_category(catalog: Catalog, item: CatalogItem, default: str = "other") -> str:
    """Return the first category holding an item with the same title."""

    for category, items in catalog.categories.items():
        if any(candidate.title == item.title for candidate in items):
            return category
    return default
