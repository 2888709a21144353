"""Event aggregation API."""

from __future__ import annotations

import json
import logging
from contextlib import asynccontextmanager
from typing import Callable, Mapping

from fastapi import FastAPI, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from api.database import EventStore
from api.ingest import IngestionService, sync_provider
from fetchers.base import BaseFetcher, check_registry, get_fetchers
from fetchers.config import Settings, configure_logging, get_settings
from fetchers.models import EventSource, FetchParams
from validation.events import validate_complete_event

logger = logging.getLogger(__name__)

FetcherFactory = Callable[[Settings], BaseFetcher]


def create_app(
    settings: Settings | None = None,
    fetchers: Mapping[EventSource, FetcherFactory] | None = None,
) -> FastAPI:
    """Build the API. *fetchers* overrides the adapter registry."""
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        configure_logging(settings.LOG_LEVEL)
        check_registry()
        store = EventStore(settings.DATABASE_PATH)
        await store.open()
        app.state.store = store
        app.state.ingestion = IngestionService(store)
        try:
            yield
        finally:
            await store.close()

    app = FastAPI(title="Events Aggregator", version="0.1.0", lifespan=lifespan)
    app.state.settings = settings
    app.state.fetchers = dict(fetchers) if fetchers is not None else get_fetchers()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    @app.api_route("/api/sync/{provider}", methods=["GET", "POST"])
    async def sync(
        provider: str,
        request: Request,
        user_id: str | None = Query(None, alias="userId"),
        city: str | None = None,
        keyword: str | None = None,
        access_token: str | None = Query(None, alias="accessToken"),
    ):
        """Fetch one provider's events and upsert them for the user."""
        if not user_id:
            return JSONResponse({"error": "Missing userId"}, status_code=400)

        try:
            factory = request.app.state.fetchers.get(EventSource(provider))
        except ValueError:
            factory = None
        if factory is None:
            return JSONResponse({"error": f"Unknown provider: {provider}"}, status_code=404)

        params = FetchParams(city=city, keyword=keyword, access_token=access_token)
        try:
            summary = await sync_provider(
                factory(settings), request.app.state.ingestion, user_id, params
            )
        except Exception:
            logger.exception("Sync failed for provider %s", provider)
            return JSONResponse({"error": "Failed to sync events"}, status_code=500)
        return summary.as_response()

    @app.post("/api/events/validate")
    async def validate_event(request: Request):
        """Validate one event payload and return its canonical form."""
        try:
            payload = await request.json()
        except json.JSONDecodeError:
            return JSONResponse({"error": "Invalid JSON body"}, status_code=400)

        result = validate_complete_event(payload)
        warnings = [w.as_dict() for w in result.warning_details]
        if not result.is_valid:
            return JSONResponse(
                {
                    "isValid": False,
                    "errors": [e.as_dict() for e in result.error_details],
                    "warnings": warnings,
                },
                status_code=422,
            )
        return {"isValid": True, "warnings": warnings, "data": result.data.to_wire()}

    @app.get("/api/events")
    async def list_events(
        request: Request,
        user_id: str | None = Query(None, alias="userId"),
        source: str | None = None,
        page: int = Query(1, ge=1),
        per_page: int = Query(20, ge=1, le=100),
    ):
        """List a user's stored events with pagination."""
        if not user_id:
            return JSONResponse({"error": "Missing userId"}, status_code=400)

        store: EventStore = request.app.state.store
        total = await store.count_events(user_id, source)
        events = await store.list_events(user_id, source, page=page, per_page=per_page)
        return {
            "events": events,
            "total": total,
            "page": page,
            "per_page": per_page,
            "pages": max(1, (total + per_page - 1) // per_page),
        }

    return app


app = create_app()
