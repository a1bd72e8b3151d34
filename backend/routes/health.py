"""Liveness and readiness check routes."""

import logging

from fastapi import APIRouter, Request
from fastapi.responses import PlainTextResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/hello", response_class=PlainTextResponse)
async def hello() -> str:
    """Fixed greeting, no dependencies touched."""
    return "Hello, World!"


@router.get("/ready")
def ready(request: Request) -> dict:
    """Readiness check that verifies the coordinate store answers queries."""
    state = request.app.state
    result = {"status": "ok", "service": "weather-cache", "commit": state.settings.git_sha}
    try:
        result["records"] = state.store.count()
    except Exception as e:
        logger.exception("Store readiness check failed")
        result["status"] = "degraded"
        result["store_error"] = str(e)
    return result
