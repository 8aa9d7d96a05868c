import asyncio
from contextlib import asynccontextmanager, suppress
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger

from ghs_games.api.routes.current_week import router as current_week_router
from ghs_games.api.routes.health import router as health_router
from ghs_games.cache.schedule_cache import EventsLoader, ScheduleCache, run_refresh_loop
from ghs_games.config.settings import settings
from ghs_games.service import get_current_week_events


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Starts the schedule refresh task when the cache is enabled."""
    cache: Optional[ScheduleCache] = app.state.cache
    refresh_task: Optional[asyncio.Task] = None
    if cache is not None:
        refresh_task = asyncio.create_task(
            run_refresh_loop(cache, settings.cache_refresh_seconds)
        )
    logger.info("GHS games API started")
    yield
    if refresh_task is not None:
        refresh_task.cancel()
        with suppress(asyncio.CancelledError):
            await refresh_task
    logger.info("GHS games API stopped")


def create_app(events_loader: Optional[EventsLoader] = None) -> FastAPI:
    """Create the FastAPI application.

    `events_loader` defaults to a live fetch per request, or to the
    schedule cache when a refresh interval is configured.
    """
    app = FastAPI(title="GHS Games API", lifespan=lifespan)

    cache: Optional[ScheduleCache] = None
    if events_loader is None:
        if settings.cache_enabled:
            cache = ScheduleCache(get_current_week_events)
            events_loader = cache.get_events
        else:
            events_loader = get_current_week_events
    app.state.cache = cache
    app.state.events_loader = events_loader

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=False,
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    app.include_router(health_router)
    app.include_router(current_week_router)
    return app
