from __future__ import annotations

from typing import Iterable, List

from mes_monitor.core.event_log import LogSink
from .types import ProcessRecord

NAME_COLUMN_WIDTH = 20


def windowed(records: Iterable[ProcessRecord]) -> List[ProcessRecord]:
    return [r for r in records if r.is_windowed]


class MemoryReporter:
    """Logs memory of windowed processes and raises threshold alerts."""

    def __init__(self, threshold_mb: int, sink: LogSink) -> None:
        self._threshold_mb = threshold_mb
        self._sink = sink

    def report(self, records: Iterable[ProcessRecord]) -> int:
        reported = 0
        for record in windowed(records):
            try:
                memory_mb = record.memory_mb()
                self._sink.write(
                    "PROCESS_INFO",
                    f"process: {record.name.ljust(NAME_COLUMN_WIDTH)} memory: {memory_mb} MB",
                )
                if memory_mb > self._threshold_mb:
                    self._sink.write(
                        "MEMORY_ALERT",
                        f"memory over threshold: {record.name} ({memory_mb}MB)",
                    )
                reported += 1
            except Exception as e:
                self._sink.write("APP_EVENT", f"failed to record process info: {e}")
        return reported
