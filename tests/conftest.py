"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import sys
from datetime import date
from pathlib import Path

import pytest

# Make the ``kuba`` package importable when running tests without an
# editable install.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


from kuba.models import Catalog, CatalogItem  # noqa: E402


class Clock:
    """Mutable calendar date used to drive daily resets in tests."""

    def __init__(self, current: date) -> None:
        self.current = current

    def __call__(self) -> date:
        return self.current


@pytest.fixture
def clock() -> Clock:
    return Clock(date(2024, 5, 1))


@pytest.fixture
def sample_catalog() -> Catalog:
    return Catalog.assemble(
        {
            "movies": [
                CatalogItem(title="流浪地球2", tags=["科幻"]),
                CatalogItem(title="满江红", url="https://example.com/mjh"),
            ],
            "anime": [
                CatalogItem(title="斗罗大陆 第二季", tags=["热门推荐"]),
                CatalogItem(title="灵笼"),
            ],
            "games": [CatalogItem(title="饥荒联机版")],
        },
        status="success",
    )
