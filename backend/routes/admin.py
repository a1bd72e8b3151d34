"""Runtime config routes: inspect and hot-reload timeout/TTL."""

import logging

from fastapi import APIRouter, Request
from pydantic import BaseModel

from models import ServiceConfig

logger = logging.getLogger(__name__)

router = APIRouter()


class ServiceConfigBody(BaseModel):
    timeout: int
    ttl: int


@router.get("/config")
def get_config(request: Request) -> dict:
    config = request.app.state.config.get()
    return {"timeout": config.request_timeout, "ttl": config.ttl}


@router.put("/config")
def put_config(body: ServiceConfigBody, request: Request) -> dict:
    """Replace the runtime config and respawn the TTL worker."""
    new_config = ServiceConfig(request_timeout=body.timeout, ttl=body.ttl)
    request.app.state.watcher.apply(new_config)
    return {"timeout": new_config.request_timeout, "ttl": new_config.ttl}
