"""Build normalized catalogs from workbook sources."""

from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping, Sequence

from ..categories import CATEGORY_KEYS
from ..models import Catalog, CatalogItem
from .normalizer import normalize_row
from .workbook import Sheets, WorkbookError, WorkbookSource

logger = logging.getLogger(__name__)

EMPTY_FALLBACK_MESSAGE = "使用空数据回退"


def empty_catalog(
    message: str = EMPTY_FALLBACK_MESSAGE,
    *,
    categories: Sequence[str] = CATEGORY_KEYS,
) -> Catalog:
    """Return the deterministic fallback catalog with every category empty."""

    return Catalog.assemble(
        {key: [] for key in categories},
        status="empty_fallback",
        message=message,
    )


def process_sheet(
    rows: Iterable[Mapping[str, Any]] | None, category: str
) -> list[CatalogItem]:
    """Normalize a sheet's rows, dropping any row that cannot be used."""

    if rows is None:
        logger.info("Sheet %s is missing", category)
        return []

    items: list[CatalogItem] = []
    for index, row in enumerate(rows):
        try:
            item = normalize_row(row, index, category)
        except Exception as exc:
            logger.warning(
                "Dropping row %s of %s after unexpected error: %s",
                index + 1,
                category,
                exc,
            )
            continue
        if item is not None:
            items.append(item)

    logger.info("Found %s valid items in %s", len(items), category)
    return items


def build_catalog(
    sheets: Sheets, categories: Sequence[str] = CATEGORY_KEYS
) -> Catalog:
    """Process every category sheet into a successful catalog."""

    result: dict[str, list[CatalogItem]] = {}
    for category in categories:
        logger.info("Processing category %s", category)
        try:
            result[category] = process_sheet(sheets.get(category), category)
        except Exception:
            logger.exception("Failed to process sheet %s", category)
            result[category] = []
    return Catalog.assemble(result, status="success")


class CatalogBuilder:
    """Produce a catalog from a workbook source without ever raising."""

    def __init__(
        self,
        source: WorkbookSource,
        categories: Sequence[str] = CATEGORY_KEYS,
    ) -> None:
        self._source = source
        self._categories = tuple(categories)

    def build(self) -> Catalog:
        try:
            if not self._source.exists():
                logger.warning("Workbook source does not exist, returning empty data")
                return empty_catalog(categories=self._categories)

            try:
                sheets = self._source.load()
            except WorkbookError as exc:
                logger.error("Failed to read workbook: %s", exc)
                return empty_catalog(categories=self._categories)

            catalog = build_catalog(sheets, self._categories)
            logger.info("Catalog built with %s items", catalog.total_items)
            return catalog
        except Exception:
            logger.exception("Unexpected error while building catalog")
            return empty_catalog(categories=self._categories)
