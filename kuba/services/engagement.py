"""Persistent daily click counters used to rank hot terms."""

from __future__ import annotations

import asyncio
import logging
import random
from datetime import date
from typing import Callable, Protocol

from pydantic import ValidationError
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from ..db_models import DurableSlot
from ..models import Catalog, EngagementHistory

logger = logging.getLogger(__name__)

DEFAULT_STORAGE_KEY = "userInteractionHistory_v3"


class KeyValueStore(Protocol):
    """Named durable slots holding whole serialized values."""

    async def get(self, key: str) -> str | None:
        ...

    async def set(self, key: str, value: str) -> None:
        ...


class InMemoryKeyValueStore:
    """Process-local slot storage."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self.values: dict[str, str] = dict(initial or {})

    async def get(self, key: str) -> str | None:
        return self.values.get(key)

    async def set(self, key: str, value: str) -> None:
        self.values[key] = value


class SqlKeyValueStore:
    """Slot storage backed by the ``durable_slots`` table."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def get(self, key: str) -> str | None:
        async with self._session_factory() as session:
            result = await session.execute(
                select(DurableSlot.value).where(DurableSlot.key == key)
            )
            return result.scalar_one_or_none()

    async def set(self, key: str, value: str) -> None:
        async with self._session_factory() as session:
            slot = await session.get(DurableSlot, key)
            if slot is None:
                session.add(DurableSlot(key=key, value=value))
            else:
                slot.value = value
            await session.commit()


class EngagementStore:
    """Click counters that reset lazily whenever the calendar day changes."""

    def __init__(
        self,
        kv: KeyValueStore,
        *,
        key: str = DEFAULT_STORAGE_KEY,
        today: Callable[[], date] = date.today,
    ) -> None:
        self._kv = kv
        self._key = key
        self._today = today
        self._lock = asyncio.Lock()

    def today(self) -> date:
        return self._today()

    async def read_history(self) -> EngagementHistory:
        """Return the current history, persisting a reset if one was due."""

        async with self._lock:
            history, dirty = await self._load_current()
            if dirty:
                await self._save(history)
            return history

    async def record_click(self, term: str) -> EngagementHistory:
        """Increment the click counter for ``term`` and persist the result."""

        normalized = (term or "").strip()
        async with self._lock:
            history, dirty = await self._load_current()
            if not normalized:
                if dirty:
                    await self._save(history)
                return history
            history.click[normalized] = history.click.get(normalized, 0) + 1
            await self._save(history)
            return history

    async def seed_if_absent(self, history: EngagementHistory) -> bool:
        """Store ``history`` only when no value has been persisted yet."""

        async with self._lock:
            if await self._kv.get(self._key) is not None:
                return False
            await self._save(history)
            return True

    async def _load_current(self) -> tuple[EngagementHistory, bool]:
        today = self._today()
        raw = await self._kv.get(self._key)
        if raw is None:
            return EngagementHistory.fresh(today), True

        try:
            history = EngagementHistory.model_validate_json(raw)
        except (ValidationError, ValueError) as exc:
            logger.warning("Stored engagement history is corrupt, resetting: %s", exc)
            return EngagementHistory.fresh(today), True

        if history.is_stale(today):
            logger.info(
                "Resetting engagement history from %s to %s",
                history.last_reset_date,
                today,
            )
            return EngagementHistory.fresh(today), True
        return history, False

    async def _save(self, history: EngagementHistory) -> None:
        await self._kv.set(self._key, history.to_json())


def sample_click_history(
    catalog: Catalog,
    rng: random.Random,
    today: date,
    *,
    per_category: int = 5,
) -> EngagementHistory:
    """Return demo click counts drawn from random catalog titles."""

    all_titles = catalog.all_titles()
    click: dict[str, int] = {}
    for category in catalog.categories:
        count = min(per_category, len(catalog.items_for(category)))
        if not count:
            continue
        pool = list(all_titles)
        rng.shuffle(pool)
        for title in pool[:count]:
            click[title] = rng.randint(5, 14)
    return EngagementHistory(last_reset_date=today, click=click)

