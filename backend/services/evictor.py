"""Background TTL eviction worker.

Deletes expired records in small batches once per poll interval, so a
large backlog drains gradually instead of in one big transaction.
"""

import enum
import logging
import threading
import time
from typing import Callable

from errors import StorageError
from services.store import CoordinateStore

logger = logging.getLogger(__name__)

TTL_JOB_NAME = "ttl-worker"
POLL_INTERVAL_SECONDS = 1.0
BATCH_SIZE = 10


class EvictorState(str, enum.Enum):
    IDLE = "idle"
    RUNNING = "running"
    CANCELLED = "cancelled"


class TTLEvictor:
    def __init__(
        self,
        store: CoordinateStore,
        ttl: int,
        poll_interval: float = POLL_INTERVAL_SECONDS,
        batch_size: int = BATCH_SIZE,
        clock: Callable[[], float] = time.time,
    ):
        self.store = store
        self.ttl = ttl
        self.poll_interval = poll_interval
        self.batch_size = batch_size
        self.clock = clock
        self.state = EvictorState.IDLE
        self._cancelled = threading.Event()
        self._thread: threading.Thread | None = None

    def start(self) -> None:
        if self._thread is not None:
            raise RuntimeError("TTL evictor already started")
        self.state = EvictorState.RUNNING
        self._thread = threading.Thread(target=self._run, name=TTL_JOB_NAME, daemon=True)
        self._thread.start()
        logger.info("TTL worker started (ttl=%ss)", self.ttl)

    def stop(self, grace: float) -> bool:
        """Signal cancellation and wait up to `grace` seconds. True if the thread exited."""
        self._cancelled.set()
        if self._thread is None:
            self.state = EvictorState.CANCELLED
            return True
        self._thread.join(timeout=grace)
        return not self._thread.is_alive()

    @property
    def is_alive(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def tick(self) -> int:
        """Run a single eviction pass. Storage errors are logged, never raised."""
        cutoff = int(self.clock()) - self.ttl
        try:
            deleted = self.store.delete_expired(cutoff, self.batch_size)
        except StorageError as e:
            logger.error("Error while cleaning expired records: %s", e)
            return 0
        logger.info("Cleaned %d expired records", deleted)
        return deleted

    def _run(self) -> None:
        while not self._cancelled.wait(self.poll_interval):
            self.tick()
        self.state = EvictorState.CANCELLED
        logger.info("TTL worker stopped")
