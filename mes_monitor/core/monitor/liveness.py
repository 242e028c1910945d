"""
Per-process down-time tracking and debounced restart.

State machine per configured name: UP -> DOWN_PENDING -> DOWN_READY

A name goes DOWN_PENDING the first cycle it is seen absent. Once it has been
absent for RESTART_DEBOUNCE_MS it is DOWN_READY and the next evaluation
launches it and clears the down-since mark, whether or not the launch
worked. If the process is still missing afterwards, the following cycle
starts a fresh absence episode.
"""

from __future__ import annotations

import logging
from typing import Callable, Dict, List, Optional

from .launcher import ProcessLauncher
from .types import RESTART_DEBOUNCE_MS, LivenessStatus, MonitorContext, Transition

log = logging.getLogger(__name__)


class LivenessTracker:
    def __init__(
        self,
        context: MonitorContext,
        is_running: Callable[[str], bool],
        launcher: ProcessLauncher,
    ) -> None:
        self._ctx = context
        self._is_running = is_running
        self._launcher = launcher

    @property
    def names(self) -> List[str]:
        return list(self._ctx.config.processes_to_monitor)

    def down_since(self, name: str) -> Optional[int]:
        return self._ctx.liveness.get(name)

    def state_of(self, name: str) -> LivenessStatus:
        since = self._ctx.liveness.get(name)
        if since is None:
            return "UP"
        if self._ctx.clock() - since >= RESTART_DEBOUNCE_MS:
            return "DOWN_READY"
        return "DOWN_PENDING"

    def evaluate(self, name: str) -> Transition:
        state = self._ctx.liveness
        sink = self._ctx.sink

        if self._is_running(name):
            if state.get(name) is None:
                return "NONE"
            state.clear(name)
            sink.write("APP_EVENT", f"process {name} recovered")
            return "RECOVERED"

        now = self._ctx.clock()
        since = state.get(name)
        if since is None:
            state.mark_down(name, now)
            sink.write("APP_EVENT", f"process {name} offline detected")
            return "OFFLINE"

        if now - since < RESTART_DEBOUNCE_MS:
            return "NONE"

        result = self._launcher.start(name)
        state.clear(name)
        log.info("Restart of %s after %d ms absent: %s", name, now - since, result.status)
        return "RESTARTED"

    def evaluate_all(self) -> Dict[str, Transition]:
        return {name: self.evaluate(name) for name in self.names}
