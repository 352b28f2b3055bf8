"""Pydantic models describing catalog, engagement and ticker payloads."""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Any, Iterable, Literal, Mapping, Union

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
)

from .categories import CATEGORY_KEYS

CatalogStatus = Literal["success", "empty_fallback", "error"]

HIGHLIGHT_KEYWORDS: tuple[str, ...] = (
    "推荐",
    "热门",
    "最新",
    "精选",
    "必看",
    "必备",
    "精品",
    "重点",
)


class HighlightTag(BaseModel):
    """A tag rendered with emphasis because it carries a highlight keyword."""

    model_config = ConfigDict(frozen=True)

    text: str
    highlight: bool = True


Tag = Union[str, HighlightTag]


def tag_text(tag: Tag) -> str:
    """Return the display text of a plain or highlighted tag."""

    return tag if isinstance(tag, str) else tag.text


class CatalogItem(BaseModel):
    """Represents a single resource entry parsed from the workbook."""

    title: str = Field(min_length=1)
    url: str = "#"
    image: str = ""
    tags: list[Tag] = Field(default_factory=list)

    @field_validator("title", "url", "image", mode="before")
    @classmethod
    def _strip_text(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip()
        return value

    def tag_texts(self) -> list[str]:
        return [tag_text(tag) for tag in self.tags]

    def to_payload(self) -> dict[str, object]:
        return self.model_dump(mode="json")


class CatalogMetadata(BaseModel):
    """Build information attached to every catalog response."""

    model_config = ConfigDict(populate_by_name=True)

    generated_at: datetime = Field(alias="generatedAt")
    status: CatalogStatus
    total_items: int = Field(default=0, ge=0, alias="totalItems")
    message: str | None = None


class Catalog(BaseModel):
    """Items grouped by category plus build metadata.

    A catalog is rebuilt on every ingestion and swapped in as a whole; the
    instance itself is never edited after construction.
    """

    model_config = ConfigDict(frozen=True)

    categories: dict[str, list[CatalogItem]]
    metadata: CatalogMetadata

    @field_validator("categories", mode="after")
    @classmethod
    def _ensure_all_categories(
        cls, value: dict[str, list[CatalogItem]]
    ) -> dict[str, list[CatalogItem]]:
        ordered = {key: list(value.get(key, [])) for key in CATEGORY_KEYS}
        for key, items in value.items():
            ordered.setdefault(key, list(items))
        return ordered

    @classmethod
    def assemble(
        cls,
        categories: Mapping[str, Iterable[CatalogItem]],
        *,
        status: CatalogStatus,
        message: str | None = None,
        generated_at: datetime | None = None,
    ) -> "Catalog":
        """Create a catalog and derive its item total from ``categories``."""

        materialised = {key: list(items) for key, items in categories.items()}
        total = sum(len(items) for items in materialised.values())
        metadata = CatalogMetadata(
            generated_at=generated_at or datetime.now(timezone.utc),
            status=status,
            total_items=total,
            message=message,
        )
        return cls(categories=materialised, metadata=metadata)

    @classmethod
    def from_payload(
        cls, data: Mapping[str, Any], *, status: CatalogStatus = "success"
    ) -> "Catalog":
        """Parse a wire payload leniently, skipping malformed entries."""

        categories: dict[str, list[CatalogItem]] = {}
        for key in CATEGORY_KEYS:
            raw_items = data.get(key)
            if not isinstance(raw_items, list):
                categories[key] = []
                continue
            items: list[CatalogItem] = []
            for entry in raw_items:
                if not isinstance(entry, dict):
                    continue
                try:
                    items.append(CatalogItem.model_validate(entry))
                except ValidationError:
                    continue
            categories[key] = items

        raw_metadata = data.get("_metadata")
        generated_at: datetime | None = None
        message: str | None = None
        if isinstance(raw_metadata, dict):
            try:
                parsed = CatalogMetadata.model_validate(raw_metadata)
            except ValidationError:
                parsed = None
            if parsed is not None:
                status = parsed.status
                generated_at = parsed.generated_at
                message = parsed.message
        return cls.assemble(
            categories, status=status, message=message, generated_at=generated_at
        )

    @property
    def status(self) -> CatalogStatus:
        return self.metadata.status

    @property
    def total_items(self) -> int:
        return self.metadata.total_items

    def items_for(self, category: str) -> list[CatalogItem]:
        return self.categories.get(category, [])

    def titles_for(self, category: str) -> list[str]:
        return [item.title for item in self.items_for(category)]

    def all_titles(self) -> list[str]:
        return [item.title for items in self.categories.values() for item in items]

    def to_payload(self) -> dict[str, object]:
        """Return the response body served to catalog consumers."""

        payload: dict[str, object] = {
            key: [item.to_payload() for item in items]
            for key, items in self.categories.items()
        }
        payload["_metadata"] = self.metadata.model_dump(
            mode="json", by_alias=True, exclude_none=True
        )
        return payload


def _parse_reset_date(value: object) -> object:
    if isinstance(value, datetime):
        return value.date()
    if not isinstance(value, str):
        return value
    text = value.strip()
    # Legacy slots stored the browser-style ``Mon Oct 19 2026`` format.
    try:
        return datetime.strptime(text, "%a %b %d %Y").date()
    except ValueError:
        return text


class EngagementHistory(BaseModel):
    """Daily click counters keyed by term."""

    model_config = ConfigDict(populate_by_name=True)

    last_reset_date: date = Field(
        validation_alias=AliasChoices("lastResetDate", "lastUpdate", "last_reset_date"),
        serialization_alias="lastResetDate",
    )
    click: dict[str, int] = Field(default_factory=dict)

    @field_validator("last_reset_date", mode="before")
    @classmethod
    def _coerce_reset_date(cls, value: object) -> object:
        return _parse_reset_date(value)

    @field_validator("click", mode="after")
    @classmethod
    def _reject_negative_counts(cls, value: dict[str, int]) -> dict[str, int]:
        if any(count < 0 for count in value.values()):
            raise ValueError("Click counts must be non-negative")
        return value

    @classmethod
    def fresh(cls, today: date) -> "EngagementHistory":
        return cls(last_reset_date=today, click={})

    def is_stale(self, today: date) -> bool:
        return self.last_reset_date != today

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True)

    def to_payload(self) -> dict[str, object]:
        return self.model_dump(mode="json", by_alias=True)


class LaneEntry(BaseModel):
    """A single ticker term and the category whose ranking produced it."""

    model_config = ConfigDict(frozen=True)

    term: str
    category: str


class Lane(BaseModel):
    """One scrolling ticker track and its animation timing."""

    index: int = Field(ge=0)
    delay: str
    duration: str
    entries: list[LaneEntry] = Field(default_factory=list)

    def terms(self) -> list[str]:
        return [entry.term for entry in self.entries]


class SearchHit(BaseModel):
    """A catalog item matched by a search query."""

    category: str
    item: CatalogItem
