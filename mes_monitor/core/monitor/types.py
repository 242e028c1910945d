from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Callable, Dict, Literal, Optional

from mes_monitor.core.event_log import LogSink
from mes_monitor.shared.config import WatchdogConfig

BYTES_PER_MB = 1024 * 1024

# Continuous absence required before a restart is attempted.
RESTART_DEBOUNCE_MS = 60_000

LivenessStatus = Literal["UP", "DOWN_PENDING", "DOWN_READY"]
Transition = Literal["NONE", "OFFLINE", "RECOVERED", "RESTARTED"]
LaunchStatus = Literal["STARTED", "NO_PATH", "FAILED"]


class MonitorError(Exception):
    """Base class for monitor errors."""


class ProcessGoneError(MonitorError):
    """The process exited between enumeration and query."""


class ProcessQueryError(MonitorError):
    """A process attribute could not be read."""


def now_ms() -> int:
    return int(time.time() * 1000)


def same_process_name(a: str, b: str) -> bool:
    return a.lower() == b.lower()


@dataclass(frozen=True)
class ProcessRecord:
    pid: int
    name: str
    working_set_bytes: Optional[int]  # None if the OS refused the read
    window_title: Optional[str] = None
    window_handle: int = 0
    exited: bool = False

    @property
    def is_windowed(self) -> bool:
        return bool(self.window_title) and self.window_handle != 0

    def memory_mb(self) -> float:
        if self.working_set_bytes is None:
            raise ProcessQueryError(f"working set of {self.name} (pid {self.pid}) is unavailable")
        return round(self.working_set_bytes / BYTES_PER_MB, 2)


@dataclass(frozen=True)
class LaunchResult:
    name: str
    status: LaunchStatus
    detail: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status == "STARTED"


@dataclass
class LivenessState:
    """Down-since timestamps (ms) keyed by configured process name."""
    down_since_ms: Dict[str, Optional[int]] = field(default_factory=dict)

    def get(self, name: str) -> Optional[int]:
        return self.down_since_ms.get(name)

    def mark_down(self, name: str, at_ms: int) -> None:
        self.down_since_ms[name] = at_ms

    def clear(self, name: str) -> None:
        self.down_since_ms[name] = None


@dataclass
class MonitorContext:
    """Everything one monitor instance needs; no module level state."""
    config: WatchdogConfig
    sink: LogSink
    clock: Callable[[], int] = now_ms
    liveness: LivenessState = field(default_factory=LivenessState)
