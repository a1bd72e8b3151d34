"""Runtime config propagation.

The shared ServiceConfig is an immutable snapshot swapped by reference, so
readers never observe half of an update. The TTL evictor is not live
reloadable: each config change tears it down and starts a fresh one.
"""

import logging
import threading
from typing import Callable

from errors import ConfigError
from models import ServiceConfig
from services.evictor import TTLEvictor

logger = logging.getLogger(__name__)

CANCEL_GRACE_SECONDS = 1.0


class ConfigHolder:
    """Process-wide current ServiceConfig. Last writer wins."""

    def __init__(self, config: ServiceConfig):
        self._config = config

    def get(self) -> ServiceConfig:
        return self._config

    def replace(self, config: ServiceConfig) -> ServiceConfig:
        old, self._config = self._config, config
        return old


class ConfigWatcher:
    def __init__(
        self,
        holder: ConfigHolder,
        evictor_factory: Callable[[int], TTLEvictor],
        grace: float = CANCEL_GRACE_SECONDS,
    ):
        self.holder = holder
        self.evictor_factory = evictor_factory
        self.grace = grace
        self.evictor: TTLEvictor | None = None
        self._lock = threading.Lock()

    def start(self) -> None:
        with self._lock:
            config = self.holder.get()
            logger.info("Starting with config: timeout=%ss ttl=%ss", config.request_timeout, config.ttl)
            self._spawn(config.ttl)

    def apply(self, new_config: ServiceConfig) -> None:
        """Swap in `new_config` and respawn the evictor with its TTL.

        The new evictor is always started. If the previous one did not stop
        within the grace period a ConfigError is raised afterwards, and two
        evictors may briefly run side by side.
        """
        with self._lock:
            old = self.holder.replace(new_config)
            logger.info(
                "Config changed: timeout %ss -> %ss, ttl %ss -> %ss",
                old.request_timeout, new_config.request_timeout, old.ttl, new_config.ttl,
            )
            stopped = self._stop_current()
            self._spawn(new_config.ttl)

        if not stopped:
            raise ConfigError(
                f"previous TTL worker did not stop within {self.grace}s",
                status_code=500,
            )

    def stop(self) -> bool:
        with self._lock:
            return self._stop_current()

    def _stop_current(self) -> bool:
        if self.evictor is None:
            return True
        stopped = self.evictor.stop(self.grace)
        if not stopped:
            logger.error("TTL worker did not stop within %ss", self.grace)
        self.evictor = None
        return stopped

    def _spawn(self, ttl: int) -> None:
        self.evictor = self.evictor_factory(ttl)
        self.evictor.start()
