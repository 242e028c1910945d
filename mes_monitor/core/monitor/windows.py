"""
Top-level window lookup through user32 (Windows only).

For every pid that owns a visible, unowned top-level window, the first such
window in z-order is treated as the process' main window, even when it has
no title (such a process is then not windowed). On hosts without
user32 the lookup is empty, which means no process is considered windowed.
"""

from __future__ import annotations

import ctypes
import logging
from ctypes import wintypes
from typing import Dict, Iterable, List, Tuple

log = logging.getLogger(__name__)

GW_OWNER = 4

try:
    user32 = ctypes.WinDLL("user32", use_last_error=True)
    user32.GetWindow.restype = wintypes.HWND
    user32.GetWindow.argtypes = [wintypes.HWND, wintypes.UINT]
    user32.GetWindowThreadProcessId.argtypes = [wintypes.HWND, ctypes.POINTER(wintypes.DWORD)]
    user32.GetWindowTextLengthW.argtypes = [wintypes.HWND]
    user32.GetWindowTextW.argtypes = [wintypes.HWND, wintypes.LPWSTR, ctypes.c_int]
    user32.IsWindowVisible.argtypes = [wintypes.HWND]
    _USER32_AVAILABLE = True
except (AttributeError, OSError):
    # ctypes.WinDLL only exists on Windows
    user32 = None
    _USER32_AVAILABLE = False


def windows_available() -> bool:
    return _USER32_AVAILABLE


def _window_title(hwnd: int) -> str:
    length = user32.GetWindowTextLengthW(hwnd)
    if length <= 0:
        return ""
    buf = ctypes.create_unicode_buffer(length + 1)
    user32.GetWindowTextW(hwnd, buf, length + 1)
    return buf.value


def select_main_windows(windows: Iterable[Tuple[int, int, bool, int, str]]) -> Dict[int, Tuple[int, str]]:
    """Pick each pid's main window from (hwnd, pid, visible, owner, title) in z-order.

    The first visible unowned window wins, titled or not.
    """
    found: Dict[int, Tuple[int, str]] = {}
    for hwnd, pid, visible, owner, title in windows:
        if not visible or owner or pid in found:
            continue
        found[pid] = (hwnd, title)
    return found


def main_windows() -> Dict[int, Tuple[int, str]]:
    """Map pid -> (window handle, window title) of each main window."""
    if not _USER32_AVAILABLE:
        return {}

    seen: List[Tuple[int, int, bool, int, str]] = []
    enum_proc_type = ctypes.WINFUNCTYPE(wintypes.BOOL, wintypes.HWND, wintypes.LPARAM)

    def _visit(hwnd, _lparam):
        try:
            pid = wintypes.DWORD()
            user32.GetWindowThreadProcessId(hwnd, ctypes.byref(pid))
            seen.append((
                int(hwnd),
                pid.value,
                bool(user32.IsWindowVisible(hwnd)),
                int(user32.GetWindow(hwnd, GW_OWNER) or 0),
                _window_title(hwnd),
            ))
        except Exception:
            log.debug("Window inspection failed for hwnd %s", hwnd, exc_info=True)
        return True

    if not user32.EnumWindows(enum_proc_type(_visit), 0):
        log.warning("EnumWindows failed (error %s)", ctypes.get_last_error())
    return select_main_windows(seen)
