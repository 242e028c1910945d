"""
Polling watchdog: memory report of windowed apps plus restart of required
processes that stay absent past the debounce window.
"""

from __future__ import annotations

import logging
import threading
from typing import Callable, Optional

from mes_monitor.core.event_log import LogSink
from mes_monitor.shared.config import WatchdogConfig
from .capability import ProcessCapability
from .launcher import ProcessLauncher
from .liveness import LivenessTracker
from .memory_reporter import MemoryReporter
from .scheduler import PeriodicScheduler
from .snapshot import SnapshotProvider
from .types import MonitorContext, now_ms

log = logging.getLogger(__name__)


class ProcessMonitor:
    """Runs one poll cycle per configured interval, never two at once."""

    def __init__(
        self,
        config: WatchdogConfig,
        capability: ProcessCapability,
        sink: LogSink,
        clock: Callable[[], int] = now_ms,
    ) -> None:
        self._ctx = MonitorContext(config=config, sink=sink, clock=clock)
        self._snapshots = SnapshotProvider(capability)
        self._reporter = MemoryReporter(config.memory_threshold_mb, sink)
        self._launcher = ProcessLauncher(config.process_paths, capability, sink)
        self._tracker = LivenessTracker(self._ctx, self._snapshots.is_running, self._launcher)
        self._scheduler = PeriodicScheduler(
            config.check_interval_seconds, self.run_cycle, name="ProcessMonitor"
        )
        self._cycle_lock = threading.Lock()
        self._cycles_completed = 0
        self._error_cb: Optional[Callable[[str], None]] = None

    @property
    def tracker(self) -> LivenessTracker:
        return self._tracker

    @property
    def cycles_completed(self) -> int:
        return self._cycles_completed

    def on_error(self, cb: Callable[[str], None]) -> None:
        self._error_cb = cb

    def _emit_error(self, msg: str) -> None:
        if self._error_cb:
            self._error_cb(msg)

    def start(self) -> None:
        log.info(
            "Monitoring %d process(es) every %d ms",
            len(self._ctx.config.processes_to_monitor),
            self._ctx.config.check_interval_ms,
        )
        self._scheduler.start()

    def stop(self) -> None:
        self._scheduler.stop()

    def join(self, timeout: Optional[float] = None) -> bool:
        return self._scheduler.join(timeout)

    def run_cycle(self) -> None:
        # Blocking acquire: an overlapping tick queues behind the running one.
        with self._cycle_lock:
            try:
                records = self._snapshots.snapshot()
                self._reporter.report(records)
                self._tracker.evaluate_all()
            except Exception as e:
                log.exception("Monitor cycle error")
                self._ctx.sink.write("APP_EVENT", f"monitor error: {e}")
                self._emit_error(str(e))
            finally:
                self._cycles_completed += 1
