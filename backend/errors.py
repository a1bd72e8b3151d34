"""Custom exceptions and centralized FastAPI error handlers."""

import enum
import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, PlainTextResponse

logger = logging.getLogger(__name__)


class WeatherCacheError(Exception):
    """Base exception with HTTP status code."""

    def __init__(self, message: str, status_code: int = 500):
        super().__init__(message)
        self.status_code = status_code


class ResolveError(WeatherCacheError):
    """A weather lookup could not produce a record."""


class StorageError(ResolveError):
    """The coordinate store is unavailable or rejected a query."""


class UpstreamErrorKind(str, enum.Enum):
    TIMEOUT = "timeout"
    TRANSPORT = "transport"
    DECODE = "decode"


class UpstreamError(ResolveError):
    def __init__(self, kind: UpstreamErrorKind, message: str):
        super().__init__(f"upstream {kind.value} error: {message}")
        self.kind = kind


class ConfigError(WeatherCacheError):
    def __init__(self, message: str, status_code: int = 400):
        super().__init__(message, status_code=status_code)


def register_error_handlers(app: FastAPI) -> None:
    """Register centralized exception handlers on the FastAPI app."""

    @app.exception_handler(WeatherCacheError)
    async def handle_weather_cache_error(_request: Request, exc: WeatherCacheError):
        logger.error("%s: %s", type(exc).__name__, exc)
        return PlainTextResponse(str(exc), status_code=exc.status_code)

    @app.exception_handler(ValueError)
    async def handle_value_error(_request: Request, exc: ValueError):
        return JSONResponse({"error": str(exc)}, status_code=400)

    @app.exception_handler(Exception)
    async def handle_unexpected(_request: Request, exc: Exception):
        logger.exception("Unhandled error: %s", exc)
        return PlainTextResponse("Internal server error", status_code=500)
