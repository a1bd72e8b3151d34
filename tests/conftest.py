"""Shared fixtures: an in-memory store and a recording stand-in for OpenMeteo."""

import pytest

from errors import UpstreamError, UpstreamErrorKind
from models import ServiceConfig, WeatherRecord
from services.config_watcher import ConfigHolder
from services.store import CoordinateStore


class RecordingFetcher:
    """Stands in for fetch_current_temperature and remembers every call."""

    def __init__(self, temperature: float = 15.2, error: UpstreamError | None = None):
        self.temperature = temperature
        self.error = error
        self.calls: list[tuple[float, float, float]] = []

    def __call__(self, lat: float, lon: float, timeout: float) -> WeatherRecord:
        self.calls.append((lat, lon, timeout))
        if self.error is not None:
            raise self.error
        return WeatherRecord(latitude=lat, longitude=lon, temperature=self.temperature)


@pytest.fixture
def store():
    s = CoordinateStore.from_url("sqlite://")
    s.create_schema()
    yield s
    s.dispose()


@pytest.fixture
def holder():
    return ConfigHolder(ServiceConfig(request_timeout=3, ttl=60))


@pytest.fixture
def fetcher():
    return RecordingFetcher()


@pytest.fixture
def failing_fetcher():
    return RecordingFetcher(error=UpstreamError(UpstreamErrorKind.TRANSPORT, "connection refused"))
