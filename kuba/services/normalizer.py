"""Normalization of raw workbook rows into catalog items."""

from __future__ import annotations

import logging
import re
from typing import Any, Mapping

from ..models import HIGHLIGHT_KEYWORDS, CatalogItem, HighlightTag, Tag
from ..utils import contains_ignore_case, first_present, is_blank

logger = logging.getLogger(__name__)

TITLE_ALIASES: tuple[str, ...] = ("名称", "标题", "title", "Title", "项目名")
URL_ALIASES: tuple[str, ...] = ("链接", "网址", "url", "URL", "address")
IMAGE_ALIASES: tuple[str, ...] = ("图片", "image", "Image")
TAG_ALIASES: tuple[str, ...] = ("标签", "tags", "Tags", "分类", "categories")

DEFAULT_URL = "#"

TAG_SEPARATOR_RE = re.compile(r"[,，、;；\s]+")


def placeholder_title(category: str, index: int) -> str:
    """Return the synthetic title a row without a name would receive."""

    return f"项目_{category}_{index + 1}"


def is_empty_row(row: object) -> bool:
    """Return ``True`` when every cell in the row is missing or blank."""

    if not isinstance(row, Mapping):
        return True
    return all(is_blank(value) for value in row.values())


def is_highlighted(text: str) -> bool:
    return any(contains_ignore_case(text, keyword) for keyword in HIGHLIGHT_KEYWORDS)


def build_tag(text: str) -> Tag:
    """Wrap ``text`` as a highlighted tag when it carries a highlight keyword."""

    if is_highlighted(text):
        return HighlightTag(text=text, highlight=True)
    return text


def extract_tags(row: Mapping[str, Any]) -> list[Tag]:
    """Split the row's tag column into plain and highlighted tags."""

    try:
        raw = first_present(row, TAG_ALIASES)
        if not raw:
            return []
        fragments = (part.strip() for part in TAG_SEPARATOR_RE.split(raw))
        return [build_tag(fragment) for fragment in fragments if fragment]
    except Exception as exc:
        logger.warning("Failed to process tags: %s", exc)
        return []


def normalize_row(
    row: Mapping[str, Any], index: int, category: str
) -> CatalogItem | None:
    """Convert one raw row into a catalog item, or ``None`` to drop it.

    Rows without a usable title are dropped rather than kept under a
    placeholder name. Any unexpected failure also results in a drop.
    """

    try:
        if is_empty_row(row):
            logger.debug("Skipping row %s of %s (empty row)", index + 1, category)
            return None

        placeholder = placeholder_title(category, index)
        title = first_present(row, TITLE_ALIASES, placeholder)
        if not title or title == placeholder:
            logger.debug("Skipping row %s of %s (no title)", index + 1, category)
            return None

        return CatalogItem(
            title=title,
            url=first_present(row, URL_ALIASES, DEFAULT_URL),
            image=first_present(row, IMAGE_ALIASES, ""),
            tags=extract_tags(row),
        )
    except Exception as exc:
        logger.warning(
            "Error while processing row %s of %s: %s", index + 1, category, exc
        )
        return None
