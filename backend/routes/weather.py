"""Weather lookup routes, served through the coordinate cache."""

import logging

from fastapi import APIRouter, Depends, Query, Request

from models import CacheQuery
from services.resolver import CacheResolver

logger = logging.getLogger(__name__)

router = APIRouter()


def get_resolver(request: Request) -> CacheResolver:
    return request.app.state.resolver


def _render(resolver: CacheResolver, query: CacheQuery) -> dict:
    record = resolver.resolve(query)
    return {
        "latitude": record.latitude,
        "longitude": record.longitude,
        "temperature": record.temperature,
    }


# Sync handlers: FastAPI runs these in its threadpool, so blocking store and
# upstream calls never stall the event loop.
@router.get("/weather")
def weather_by_query(
    latitude: float = Query(ge=-90, le=90),
    longitude: float = Query(ge=-180, le=180),
    resolver: CacheResolver = Depends(get_resolver),
) -> dict:
    """Current temperature for ?latitude=&longitude=."""
    return _render(resolver, CacheQuery(latitude=latitude, longitude=longitude))


@router.post("/weather")
def weather_by_body(
    query: CacheQuery,
    resolver: CacheResolver = Depends(get_resolver),
) -> dict:
    """Current temperature for a JSON {latitude, longitude} body."""
    return _render(resolver, query)
