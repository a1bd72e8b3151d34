"""FastAPI application entry point for the weather cache."""

import functools
import logging
import sys

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware

from config import Settings, settings
from errors import register_error_handlers
from services.config_watcher import ConfigHolder, ConfigWatcher
from services.evictor import TTLEvictor
from services.resolver import CacheResolver, Fetcher
from services.store import CoordinateStore
from services.weather import fetch_current_temperature

# Structured logging: JSON for production, human-readable for local
if settings.is_production:
    logging.basicConfig(
        level=logging.INFO,
        format='{"time":"%(asctime)s","level":"%(levelname)s","logger":"%(name)s","message":"%(message)s"}',
        stream=sys.stdout,
    )
else:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

logger = logging.getLogger(__name__)


def create_app(app_settings: Settings | None = None, fetcher: Fetcher | None = None) -> FastAPI:
    app_settings = app_settings or settings
    app = FastAPI(title="Weather Cache API", version="1.0.0")

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Security headers
    @app.middleware("http")
    async def add_security_headers(request: Request, call_next):
        response: Response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        if app_settings.is_production:
            response.headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"
        return response

    # Centralized error handlers
    register_error_handlers(app)

    from routes.admin import router as admin_router
    from routes.health import router as health_router
    from routes.weather import router as weather_router

    app.include_router(health_router)
    app.include_router(weather_router)
    app.include_router(admin_router)

    # Service graph: one store, one config snapshot, one evictor at a time
    store = CoordinateStore.from_url(app_settings.database_url)
    holder = ConfigHolder(app_settings.service_config())
    if fetcher is None:
        fetcher = functools.partial(fetch_current_temperature, base_url=app_settings.meteo_base_url)

    app.state.settings = app_settings
    app.state.store = store
    app.state.config = holder
    app.state.resolver = CacheResolver(store, holder, fetch=fetcher)
    app.state.watcher = ConfigWatcher(holder, lambda ttl: TTLEvictor(store, ttl))

    @app.on_event("startup")
    async def _startup() -> None:
        problems = app_settings.validate()
        if problems:
            logger.warning("Configuration problems: %s", "; ".join(problems))
        store.create_schema()
        app.state.watcher.start()

    @app.on_event("shutdown")
    async def _shutdown() -> None:
        app.state.watcher.stop()
        store.dispose()

    return app


app = create_app()
