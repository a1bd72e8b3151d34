"""Cache resolver: store lookup, upstream fetch on miss, best-effort write-back."""

import logging
import time
from typing import Callable

from errors import StorageError
from models import CacheQuery, WeatherRecord
from services.config_watcher import ConfigHolder
from services.store import DEFAULT_TOLERANCE, CoordinateStore
from services.weather import fetch_current_temperature

logger = logging.getLogger(__name__)

Fetcher = Callable[[float, float, float], WeatherRecord]


class CacheResolver:
    """Serve temperatures from the store, falling back to OpenMeteo.

    A hit is returned as stored: staleness is enforced only by the TTL
    evictor. Concurrent misses for the same place are not coalesced, so each
    may fetch and insert its own record.
    """

    def __init__(
        self,
        store: CoordinateStore,
        config: ConfigHolder,
        fetch: Fetcher = fetch_current_temperature,
        clock: Callable[[], float] = time.time,
        tolerance: float = DEFAULT_TOLERANCE,
    ):
        self.store = store
        self.config = config
        self.fetch = fetch
        self.clock = clock
        self.tolerance = tolerance

    def resolve(self, query: CacheQuery) -> WeatherRecord:
        cached = self.store.find_near(query.latitude, query.longitude, tolerance=self.tolerance)
        if cached:
            logger.debug("Cache hit for (%s, %s)", query.latitude, query.longitude)
            return cached[0]

        logger.debug("Cache miss for (%s, %s)", query.latitude, query.longitude)
        timeout = self.config.get().request_timeout
        fetched = self.fetch(query.latitude, query.longitude, timeout)

        record = WeatherRecord(
            latitude=query.latitude,
            longitude=query.longitude,
            temperature=fetched.temperature,
            created_at=int(self.clock()),
        )
        try:
            return self.store.insert(record)
        except StorageError as e:
            # The fetched value is still correct; only the cache write is lost.
            logger.warning("Could not cache weather for (%s, %s): %s", query.latitude, query.longitude, e)
            return record
