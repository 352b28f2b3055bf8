"""Entry point for the FastAPI-powered resource hub."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field, field_validator
from starlette.concurrency import run_in_threadpool

from .config import settings
from .database import Database
from .services.engagement import EngagementStore, SqlKeyValueStore
from .services.hub import HubService
from .services.workbook import ExcelWorkbookSource

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

app: FastAPI


class UTF8JSONResponse(JSONResponse):
    media_type = "application/json; charset=utf-8"


class InteractionRequest(BaseModel):
    """Body of a click event reported by the presentation layer."""

    term: str = Field(min_length=1, max_length=500)

    @field_validator("term", mode="before")
    @classmethod
    def _strip_term(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip()
        return value


def _json(payload: Any) -> UTF8JSONResponse:
    return UTF8JSONResponse(payload, headers={"Cache-Control": "no-cache"})


@asynccontextmanager
async def lifespan(fastapi_app: FastAPI):
    database = Database(settings.database_url)
    await database.create_all()

    engagement = EngagementStore(
        SqlKeyValueStore(database.session_factory),
        key=settings.engagement_storage_key,
    )
    hub_service = HubService(
        settings,
        ExcelWorkbookSource(settings.workbook_path),
        engagement,
    )
    await run_in_threadpool(hub_service.refresh_catalog)
    if settings.seed_demo_engagement:
        await hub_service.seed_demo_engagement()

    fastapi_app.state.hub_service = hub_service
    fastapi_app.state.database = database

    try:
        yield
    finally:  # pragma: no cover - teardown path exercised at runtime
        await database.dispose()


def create_app() -> FastAPI:
    fastapi_app = FastAPI(
        title=settings.app_name,
        description="Spreadsheet-backed resource catalog with hot-term rankings",
        version="1.0.0",
        lifespan=lifespan,
    )

    fastapi_app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    register_routes(fastapi_app)
    return fastapi_app


def get_hub_service(app: FastAPI) -> HubService:
    service = getattr(app.state, "hub_service", None)
    if not isinstance(service, HubService):
        raise RuntimeError("Hub service not initialised")
    return service


def register_routes(fastapi_app: FastAPI) -> None:
    @fastapi_app.get("/healthz")
    async def healthcheck() -> dict[str, str]:
        return {"status": "ok"}

    @fastapi_app.get("/api/data")
    async def catalog_data() -> UTF8JSONResponse:
        service = get_hub_service(fastapi_app)
        logger.info("Catalog request received")
        catalog = await run_in_threadpool(service.refresh_catalog)
        return _json(catalog.to_payload())

    @fastapi_app.post("/api/interactions")
    async def record_interaction(body: InteractionRequest) -> UTF8JSONResponse:
        service = get_hub_service(fastapi_app)
        history = await service.record_interaction(body.term)
        return _json(history.to_payload())

    @fastapi_app.get("/api/hot-terms")
    async def hot_terms() -> UTF8JSONResponse:
        service = get_hub_service(fastapi_app)
        return _json(await service.rank_all())

    @fastapi_app.get("/api/hot-terms/{category}")
    async def category_hot_terms(category: str) -> UTF8JSONResponse:
        service = get_hub_service(fastapi_app)
        if not service.is_known_category(category):
            raise HTTPException(status_code=404, detail=f"Unknown category: {category}")
        terms = await service.rank_category(category)
        return _json({"category": category, "terms": terms})

    @fastapi_app.get("/api/ticker")
    async def ticker() -> UTF8JSONResponse:
        service = get_hub_service(fastapi_app)
        lanes = await service.ticker()
        return _json({"lanes": [lane.model_dump(mode="json") for lane in lanes]})

    @fastapi_app.get("/api/search")
    async def search(q: str = "") -> UTF8JSONResponse:
        service = get_hub_service(fastapi_app)
        hits = service.search(q)
        return _json(
            {
                "query": q.strip(),
                "count": len(hits),
                "results": [hit.model_dump(mode="json") for hit in hits],
            }
        )


app = create_app()
