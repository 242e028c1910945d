"""
Process table access via psutil, with main-window data from user32.

Working set comes from ``memory_info().rss`` which psutil maps to the
working set size on Windows. Process names drop a trailing ``.exe`` so that
configured names like ``notepad`` match ``notepad.exe``.
"""

from __future__ import annotations

import logging
import os
import subprocess
import sys
from typing import Dict, List, Optional, Tuple

import psutil

from .capability import ProcessCapability
from .types import ProcessGoneError, ProcessQueryError, ProcessRecord
from .windows import main_windows

log = logging.getLogger(__name__)

_EXITED_STATUSES = {psutil.STATUS_ZOMBIE, psutil.STATUS_DEAD}


def display_name(raw: str) -> str:
    if raw.lower().endswith(".exe"):
        return raw[:-4]
    return raw


class PsutilProcessCapability(ProcessCapability):
    def __init__(self) -> None:
        self._windows: Dict[int, Tuple[int, str]] = {}

    def refresh_windows(self) -> None:
        self._windows = main_windows()

    def list_pids(self) -> List[int]:
        return psutil.pids()

    def query(self, pid: int) -> ProcessRecord:
        try:
            proc = psutil.Process(pid)
            with proc.oneshot():
                name = display_name(proc.name())
                try:
                    exited = proc.status() in _EXITED_STATUSES
                except psutil.AccessDenied:
                    exited = False
                working_set: Optional[int]
                try:
                    working_set = proc.memory_info().rss
                except psutil.AccessDenied:
                    log.debug("Memory of pid %s not readable", pid)
                    working_set = None
        except psutil.NoSuchProcess as e:
            raise ProcessGoneError(f"pid {pid} exited") from e
        except psutil.AccessDenied as e:
            raise ProcessQueryError(f"access denied for pid {pid}") from e

        handle, title = self._windows.get(pid, (0, None))
        return ProcessRecord(
            pid=pid,
            name=name,
            working_set_bytes=working_set,
            window_title=title,
            window_handle=handle,
            exited=exited,
        )

    def start(self, path: str) -> Optional[int]:
        cwd = os.path.dirname(path) or None
        if sys.platform == "win32":
            # ShellExecute: handles .lnk shortcuts and file associations, gives
            # the child its own window, but reports no pid
            os.startfile(path, cwd=cwd)
            return None
        proc = subprocess.Popen([path], cwd=cwd, close_fds=True, start_new_session=True)
        return proc.pid
