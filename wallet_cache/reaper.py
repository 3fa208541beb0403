"""Background reaper that drops long-expired cache entries."""
import threading
from typing import Optional

import structlog

from .core import CacheStore

logger = structlog.get_logger()


class CacheReaper:
    """
    Periodically reaps a store from a daemon thread.

    Expired entries are never served, so the reaper is only needed to bound
    memory in long-running processes.
    """

    def __init__(self, store: CacheStore, interval: float = 300, grace: float = 2.0):
        """
        Args:
            store: Store to reap
            interval: Seconds between passes
            grace: Entries older than ``ttl * grace`` are dropped
        """
        if interval <= 0:
            raise ValueError("interval must be positive")
        self.store = store
        self.interval = interval
        self.grace = grace
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._lock = threading.Lock()

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def run_once(self) -> int:
        return self.store.reap(self.grace)

    def _run(self) -> None:
        while not self._stop.wait(self.interval):
            self.run_once()

    def start(self) -> "CacheReaper":
        with self._lock:
            if self.running:
                return self
            self._stop.clear()
            self._thread = threading.Thread(target=self._run, name="wallet-cache-reaper", daemon=True)
            self._thread.start()
        logger.info("Cache reaper started", interval=self.interval, grace=self.grace)
        return self

    def stop(self, timeout: Optional[float] = None) -> None:
        with self._lock:
            thread = self._thread
            self._thread = None
            self._stop.set()
        if thread is not None:
            thread.join(timeout)
            logger.info("Cache reaper stopped")

    def __enter__(self) -> "CacheReaper":
        return self.start()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()
