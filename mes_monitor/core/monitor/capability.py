from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List, Optional

from .types import ProcessRecord


class ProcessCapability(ABC):
    """Interface to the OS process table and process launcher."""

    @abstractmethod
    def list_pids(self) -> List[int]:
        """Pids currently in the process table, in enumeration order."""
        ...

    @abstractmethod
    def query(self, pid: int) -> ProcessRecord:
        """Read one process. Raises ProcessGoneError if it no longer exists."""
        ...

    @abstractmethod
    def start(self, path: str) -> Optional[int]:
        """Launch a program with its own window; return its pid when known.

        Raises OSError when the OS rejects the launch.
        """
        ...

    def refresh_windows(self) -> None:
        """Re-read window ownership before a batch of queries."""
        return None
