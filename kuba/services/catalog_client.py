"""Client used by catalog consumers to fetch the normalized catalog."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any

import httpx

from ..config import Settings
from ..models import Catalog, CatalogItem

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 5.0
FALLBACK_NOTICE = "⚠️ 数据加载中，显示示例内容..."
_BACKGROUND_CLOSES: set[asyncio.Future[None]] = set()


def fallback_catalog() -> Catalog:
    """Return the minimal built-in catalog shown when fetching fails."""

    sample = CatalogItem(title="示例资源", url="#", image="", tags=["示例"])
    return Catalog.assemble(
        {"movies": [sample]},
        status="error",
        message="Catalog request failed; showing sample content",
    )


@dataclass(slots=True)
class CatalogFetchResult:
    """Outcome of a catalog fetch, including the notice to display on fallback."""

    catalog: Catalog
    fallback: bool = False
    notice: str | None = None


class CatalogClient:
    """Fetch ``/api/data`` with a hard deadline and a built-in fallback."""

    _DATA_PATH = "/api/data"

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        *,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        self._client = http_client
        self._timeout = timeout
        self._abandoned: set[asyncio.Future[Any]] = set()

    async def fetch(self) -> CatalogFetchResult:
        """Return the served catalog, or the fallback catalog on any failure."""

        request = asyncio.ensure_future(self._client.get(self._DATA_PATH))
        done, _ = await asyncio.wait({request}, timeout=self._timeout)
        if not done:
            # The request keeps running; its eventual result is ignored.
            self._abandon(request)
            logger.warning("Catalog request timed out after %.1fs", self._timeout)
            return self._fallback()

        try:
            response = request.result()
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as exc:
            logger.warning(
                "Catalog request returned status %s", exc.response.status_code
            )
            return self._fallback()
        except httpx.HTTPError as exc:
            logger.warning("Catalog request failed: %s", exc)
            return self._fallback()
        except ValueError as exc:
            logger.warning("Catalog response was not valid JSON: %s", exc)
            return self._fallback()
        except Exception:
            logger.exception("Unexpected error while fetching catalog")
            return self._fallback()

        if not isinstance(data, dict):
            logger.warning("Catalog response was not a JSON object")
            return self._fallback()

        catalog = Catalog.from_payload(data)
        logger.info("Catalog loaded with %s items", catalog.total_items)
        return CatalogFetchResult(catalog=catalog)

    async def aclose(self) -> None:
        """Close the HTTP client once every abandoned request has settled."""

        if not self._abandoned:
            await self._client.aclose()
            return
        closing = asyncio.ensure_future(self._close_after(set(self._abandoned)))
        _BACKGROUND_CLOSES.add(closing)
        closing.add_done_callback(_BACKGROUND_CLOSES.discard)

    async def _close_after(self, pending: set[asyncio.Future[Any]]) -> None:
        await asyncio.wait(pending)
        await self._client.aclose()

    def _abandon(self, request: asyncio.Future[Any]) -> None:
        self._abandoned.add(request)

        def _discard(future: asyncio.Future[Any]) -> None:
            self._abandoned.discard(future)
            if not future.cancelled() and future.exception() is not None:
                logger.debug("Abandoned catalog request failed: %s", future.exception())

        request.add_done_callback(_discard)

    @staticmethod
    def _fallback() -> CatalogFetchResult:
        logger.info("Using fallback catalog")
        return CatalogFetchResult(
            catalog=fallback_catalog(), fallback=True, notice=FALLBACK_NOTICE
        )


async def load_catalog(
    settings: Settings,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> CatalogFetchResult:
    """Fetch the catalog from the configured hub, defaulting to the local server.

    A request abandoned on timeout keeps running; the client is closed only
    after it settles.
    """

    base_url = (
        str(settings.catalog_api_url)
        if settings.catalog_api_url is not None
        else f"http://127.0.0.1:{settings.server_port}"
    )
    http_client = httpx.AsyncClient(
        base_url=base_url,
        timeout=httpx.Timeout(20.0, connect=10.0),
        transport=transport,
    )
    client = CatalogClient(http_client, timeout=settings.catalog_fetch_timeout)
    try:
        return await client.fetch()
    finally:
        await client.aclose()
