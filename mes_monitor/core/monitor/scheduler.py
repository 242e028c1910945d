from __future__ import annotations

import logging
import threading
import time
from typing import Callable, Optional

log = logging.getLogger(__name__)


class PeriodicScheduler:
    """
    Runs a callback at a fixed rate on one background thread.

    The first tick fires immediately. Ticks never overlap: a tick that
    overruns the period delays the following ones, which then run back to
    back until the schedule has caught up. If the schedule falls more than
    ``max_catch_up`` intervals behind (a long stall, or the host resumed from
    suspend) it is re-anchored to now instead of replaying every missed tick.
    """

    def __init__(
        self,
        interval_s: float,
        callback: Callable[[], None],
        name: str = "PeriodicScheduler",
        monotonic: Callable[[], float] = time.monotonic,
        max_catch_up: int = 5,
    ) -> None:
        if interval_s <= 0:
            raise ValueError("interval_s must be positive")
        self._interval = interval_s
        self._callback = callback
        self._name = name
        self._monotonic = monotonic
        self._max_catch_up = max_catch_up
        self._thread: Optional[threading.Thread] = None
        self._stop_evt = threading.Event()

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self.running:
            return
        self._stop_evt.clear()
        self._thread = threading.Thread(target=self._run, name=self._name, daemon=True)
        self._thread.start()

    def stop(self) -> None:
        self._stop_evt.set()

    def join(self, timeout: Optional[float] = None) -> bool:
        if self._thread is None:
            return True
        self._thread.join(timeout)
        return not self._thread.is_alive()

    def _run(self) -> None:
        next_tick = self._monotonic()
        while not self._stop_evt.is_set():
            now = self._monotonic()
            delay = next_tick - now
            if -delay > self._interval * self._max_catch_up:
                log.warning("Schedule %.1f s behind, skipping missed ticks", -delay)
                next_tick = now
                delay = 0.0
            if delay > 0 and self._stop_evt.wait(delay):
                break
            try:
                self._callback()
            except Exception:
                log.exception("Scheduled callback failed")
            next_tick += self._interval
