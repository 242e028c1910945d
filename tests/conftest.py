"""
Shared fixtures: an in-memory process table, a recording log sink and a
manually advanced clock. Nothing here touches the real OS.
"""

import threading
import time
from typing import Dict, List, Optional, Tuple

import pytest

from mes_monitor.core.monitor.capability import ProcessCapability
from mes_monitor.core.monitor.types import ProcessGoneError, ProcessRecord
from mes_monitor.shared.config import WatchdogConfig


MB = 1024 * 1024


class FakeClock:
    def __init__(self, start_ms: int = 1_700_000_000_000) -> None:
        self.now = start_ms

    def __call__(self) -> int:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += int(seconds * 1000)


class RecordingSink:
    def __init__(self) -> None:
        self.entries: List[Tuple[str, str]] = []

    def write(self, category, message) -> None:
        self.entries.append((category, message))

    def of(self, category: str) -> List[str]:
        return [m for c, m in self.entries if c == category]


class FakeCapability(ProcessCapability):
    def __init__(self) -> None:
        self.processes: Dict[int, ProcessRecord] = {}
        self.vanishing: set = set()
        self.started: List[str] = []
        self.start_error: Optional[Exception] = None
        self.spawn_on_start: bool = False
        self.start_pid: Optional[int] = 4242
        self.query_delay: float = 0.0
        self._next_pid = 1000
        self._lock = threading.Lock()
        self._active = 0
        self.max_active = 0

    def add(self, name: str, memory_bytes: Optional[int] = 50 * MB, title: Optional[str] = None,
            handle: int = 0, exited: bool = False) -> int:
        self._next_pid += 1
        self.processes[self._next_pid] = ProcessRecord(
            pid=self._next_pid,
            name=name,
            working_set_bytes=memory_bytes,
            window_title=title,
            window_handle=handle,
            exited=exited,
        )
        return self._next_pid

    def kill(self, name: str) -> None:
        for pid in [p for p, r in self.processes.items() if r.name == name]:
            del self.processes[pid]

    def list_pids(self) -> List[int]:
        return list(self.processes) + sorted(self.vanishing)

    def query(self, pid: int) -> ProcessRecord:
        with self._lock:
            self._active += 1
            self.max_active = max(self.max_active, self._active)
        try:
            if self.query_delay:
                time.sleep(self.query_delay)
            if pid in self.vanishing or pid not in self.processes:
                raise ProcessGoneError(f"pid {pid} exited")
            return self.processes[pid]
        finally:
            with self._lock:
                self._active -= 1

    def start(self, path: str) -> int:
        self.started.append(path)
        if self.start_error is not None:
            raise self.start_error
        if self.spawn_on_start:
            name = path.rsplit("/", 1)[-1]
            return self.add(name)
        return self.start_pid


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def capability() -> FakeCapability:
    return FakeCapability()


@pytest.fixture
def config(tmp_path) -> WatchdogConfig:
    return WatchdogConfig(
        processes_to_monitor=["mes", "scanner"],
        process_paths={"mes": "/opt/mes/mes", "scanner": "/opt/scan/scanner"},
        memory_threshold_mb=100,
        check_interval_ms=50,
        log_path=str(tmp_path / "logs"),
    )
