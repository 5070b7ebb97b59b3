"""Background timer that evicts expired datasets."""

from __future__ import annotations

import threading
from typing import Callable

from dataset_cache.core.logging import get_logger

logger = get_logger(__name__)


class ExpirySweeper:
    """Run ``sweep`` every ``interval`` seconds on a daemon thread until stopped."""

    def __init__(self, sweep: Callable[[], int], interval: float) -> None:
        if interval <= 0:
            raise ValueError("interval must be positive")
        self._sweep = sweep
        self.interval = interval
        self._stop = threading.Event()
        self._lock = threading.Lock()
        self._thread: threading.Thread | None = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        with self._lock:
            if self.running:
                return
            self._stop.clear()
            self._thread = threading.Thread(target=self._run, name="dataset-sweeper", daemon=True)
            self._thread.start()

    def stop(self, timeout: float = 5.0) -> None:
        with self._lock:
            thread = self._thread
            self._thread = None
            self._stop.set()
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout=timeout)

    def _run(self) -> None:
        while not self._stop.wait(self.interval):
            try:
                removed = self._sweep()
            except Exception:  # keep the timer alive; next tick retries
                logger.exception("Expiry sweep failed")
                continue
            if removed:
                logger.info("Evicted %s expired datasets", removed, extra={"ctx_evicted": removed})


__all__ = ["ExpirySweeper"]
