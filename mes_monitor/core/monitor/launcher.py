from __future__ import annotations

import logging
from typing import Mapping, Optional

from mes_monitor.core.event_log import LogSink
from .capability import ProcessCapability
from .types import LaunchResult

log = logging.getLogger(__name__)


class ProcessLauncher:
    """Starts configured processes by name. Never raises."""

    def __init__(self, paths: Mapping[str, str], capability: ProcessCapability, sink: LogSink) -> None:
        self._paths = dict(paths)
        self._cap = capability
        self._sink = sink

    def path_for(self, name: str) -> Optional[str]:
        return self._paths.get(name)

    def start(self, name: str) -> LaunchResult:
        path = self.path_for(name)
        if not path:
            self._sink.write("APP_EVENT", f"no launch path configured for {name}")
            return LaunchResult(name=name, status="NO_PATH")

        try:
            pid = self._cap.start(path)
        except Exception as e:
            log.warning("Launch of %s from %s failed: %s", name, path, e)
            self._sink.write("APP_EVENT", f"failed to start {name}: {e}")
            return LaunchResult(name=name, status="FAILED", detail=str(e))

        self._sink.write("APP_EVENT", f"started {name}")
        detail = f"pid {pid}" if pid is not None else "started via shell"
        return LaunchResult(name=name, status="STARTED", detail=detail)
