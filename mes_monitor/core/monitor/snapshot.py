from __future__ import annotations

import logging
from typing import List

from .capability import ProcessCapability
from .types import MonitorError, ProcessRecord, same_process_name

log = logging.getLogger(__name__)


class SnapshotProvider:
    """Reads the process table, tolerating processes that exit mid-read."""

    def __init__(self, capability: ProcessCapability) -> None:
        self._cap = capability

    def _records(self) -> List[ProcessRecord]:
        records: List[ProcessRecord] = []
        for pid in self._cap.list_pids():
            try:
                records.append(self._cap.query(pid))
            except MonitorError as e:
                log.debug("Skipping pid %s: %s", pid, e)
                continue
        return records

    def snapshot(self) -> List[ProcessRecord]:
        self._cap.refresh_windows()
        return self._records()

    def is_running(self, name: str) -> bool:
        return any(
            same_process_name(r.name, name) and not r.exited
            for r in self._records()
        )
