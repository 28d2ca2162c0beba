"""
Periodic eviction sweep.

EvictionScheduler runs ConversationStore.evict() on a daemon worker thread
at a fixed interval. evict() takes the store's write lock, so a sweep and a
concurrent create_message/create_chat are mutually exclusive.
"""

from __future__ import annotations

import logging
import threading

from fides_vera.config import RetentionPolicy
from fides_vera.conversations.models import EvictionReport
from fides_vera.conversations.store import ConversationStore

logger = logging.getLogger(__name__)


class EvictionScheduler:
    """
    Recurring eviction task.

    start() launches the worker; stop() signals it and joins. The first
    sweep happens one interval after start().
    """

    def __init__(self, store: ConversationStore, interval_seconds: float | None = None):
        self._store = store
        self.interval_seconds = (
            interval_seconds
            if interval_seconds is not None
            else store.policy.eviction_interval_seconds
        )
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None
        self.last_report: EvictionReport | None = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def run_once(self) -> EvictionReport:
        """Run one sweep immediately on the calling thread."""
        self.last_report = self._store.evict()
        return self.last_report

    def start(self) -> None:
        if self.running:
            return
        self._stop.clear()
        self._thread = threading.Thread(
            target=self._run,
            name="fides-vera-eviction",
            daemon=True,
        )
        self._thread.start()
        logger.info("Eviction sweep scheduled every %.0f seconds", self.interval_seconds)

    def stop(self, timeout: float | None = 5.0) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None

    def _run(self) -> None:
        while not self._stop.wait(self.interval_seconds):
            try:
                self.run_once()
            except Exception:
                # Keep the schedule alive; the next sweep retries.
                logger.exception("Eviction sweep failed")


__all__ = ["EvictionScheduler", "EvictionReport", "RetentionPolicy"]
