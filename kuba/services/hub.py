"""High level orchestration of catalog ingestion, ranking and the ticker."""

from __future__ import annotations

import logging
import random
from typing import Sequence

from ..categories import CATEGORIES, CategoryDefinition, get_category
from ..config import Settings
from ..models import Catalog, EngagementHistory, Lane, SearchHit
from .catalog_builder import CatalogBuilder, empty_catalog
from .engagement import EngagementStore, sample_click_history
from .ranker import HotTermRanker
from .search import search_catalog
from .ticker import ShuffleStrategy, TickerDistributor
from .workbook import WorkbookSource

logger = logging.getLogger(__name__)


class HubService:
    """Own the current catalog and the engagement-driven views built on it."""

    def __init__(
        self,
        settings: Settings,
        source: WorkbookSource,
        engagement: EngagementStore,
        *,
        categories: Sequence[CategoryDefinition] = CATEGORIES,
        shuffle: ShuffleStrategy | None = None,
    ) -> None:
        self._settings = settings
        self._categories = tuple(categories)
        self._builder = CatalogBuilder(
            source, [definition.key for definition in self._categories]
        )
        self._engagement = engagement
        self._catalog: Catalog = empty_catalog(
            categories=[definition.key for definition in self._categories]
        )
        self._ranker = HotTermRanker(
            engagement,
            lambda: self._catalog,
            categories=self._categories,
            limit=settings.hot_term_limit,
            title_bonus=settings.title_match_bonus,
        )
        self._ticker = TickerDistributor(
            lane_count=settings.ticker_lane_count,
            min_words_per_lane=settings.ticker_min_words_per_lane,
            shuffle=shuffle,
        )

    @property
    def catalog(self) -> Catalog:
        return self._catalog

    def refresh_catalog(self) -> Catalog:
        """Rebuild the catalog from the workbook and swap it in."""

        self._catalog = self._builder.build()
        return self._catalog

    def is_known_category(self, category: str) -> bool:
        definition = get_category(category)
        return definition is not None and definition in self._categories

    async def rank_category(self, category: str) -> list[str]:
        return await self._ranker.rank_category(category)

    async def rank_all(self) -> dict[str, list[str]]:
        return await self._ranker.rank_all()

    async def ticker(self) -> list[Lane]:
        """Recompute the ticker lanes from the current rankings."""

        return self._ticker.distribute(await self._ranker.rank_all())

    async def record_interaction(self, term: str) -> EngagementHistory:
        """Count one click on ``term``; persistence failures are logged only."""

        try:
            return await self._engagement.record_click(term)
        except Exception:
            logger.exception("Failed to record interaction for %s", term)
            return EngagementHistory.fresh(self._engagement.today())

    def search(self, query: str) -> list[SearchHit]:
        return search_catalog(self._catalog, query)

    async def seed_demo_engagement(self, rng: random.Random | None = None) -> bool:
        """Populate click history from catalog titles if none is stored yet."""

        history = sample_click_history(
            self._catalog, rng or random.Random(), self._engagement.today()
        )
        seeded = await self._engagement.seed_if_absent(history)
        if seeded:
            logger.info("Seeded demo engagement for %s terms", len(history.click))
        return seeded
