"""Category-scoped hot-term ranking from click history and curated terms."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Sequence

from ..categories import CATEGORIES, CategoryDefinition
from ..models import Catalog, EngagementHistory
from .engagement import EngagementStore

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 5
DEFAULT_TITLE_BONUS = 5


@dataclass(slots=True)
class RankedTerm:
    """A candidate term with its transient score."""

    term: str
    score: int


class HotTermRanker:
    """Blend click counts, curated seeds and title affinity into hot terms.

    Candidates are the clicked terms relevant to a category (they occur in
    one of its titles or in its curated list) followed by every curated
    term. Each scores its click count plus ``title_bonus`` when it occurs
    inside a title of the category. Equal scores keep candidate order.
    """

    def __init__(
        self,
        store: EngagementStore,
        catalog_provider: Callable[[], Catalog],
        *,
        categories: Sequence[CategoryDefinition] = CATEGORIES,
        limit: int = DEFAULT_LIMIT,
        title_bonus: int = DEFAULT_TITLE_BONUS,
    ) -> None:
        self._store = store
        self._catalog_provider = catalog_provider
        self._categories = {definition.key: definition for definition in categories}
        self._limit = limit
        self._title_bonus = title_bonus

    @property
    def category_keys(self) -> tuple[str, ...]:
        return tuple(self._categories)

    async def rank_category(self, category: str) -> list[str]:
        """Return up to ``limit`` hot terms for ``category``."""

        ranked = await self.score_category(category)
        return [entry.term for entry in ranked]

    async def rank_all(self) -> dict[str, list[str]]:
        """Rank every known category in definition order."""

        history = await self._read_history()
        return {key: self._rank(key, history) for key in self._categories}

    async def score_category(self, category: str) -> list[RankedTerm]:
        if category not in self._categories:
            return []
        history = await self._read_history()
        return self._score(category, history)

    def _rank(self, category: str, history: EngagementHistory) -> list[str]:
        return [entry.term for entry in self._score(category, history)]

    def _score(self, category: str, history: EngagementHistory) -> list[RankedTerm]:
        definition = self._categories[category]
        curated = definition.curated_terms
        titles = self._catalog_provider().titles_for(category)

        def in_titles(term: str) -> bool:
            return any(term in title for title in titles)

        candidates: dict[str, None] = {}
        for term in history.click:
            if in_titles(term) or term in curated:
                candidates[term] = None
        for term in curated:
            candidates[term] = None

        scored = [
            RankedTerm(
                term=term,
                score=history.click.get(term, 0)
                + (self._title_bonus if in_titles(term) else 0),
            )
            for term in candidates
        ]
        # ``sorted`` is stable, so ties keep candidate insertion order.
        scored = sorted(scored, key=lambda entry: entry.score, reverse=True)
        return scored[: self._limit]

    async def _read_history(self) -> EngagementHistory:
        try:
            return await self._store.read_history()
        except Exception:
            logger.exception("Failed to read engagement history, ranking without it")
            return EngagementHistory.fresh(self._store.today())
