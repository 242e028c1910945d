from __future__ import annotations

import logging
import os
from logging.handlers import RotatingFileHandler
from typing import Optional

from mes_monitor.shared.paths import log_path, ensure_app_dirs

LEVEL_ENV_VAR = "MES_MONITOR_LOG_LEVEL"


def _resolve_level(level: Optional[str]) -> int:
    name = (level or os.environ.get(LEVEL_ENV_VAR) or "INFO").upper()
    resolved = logging.getLevelName(name)
    return resolved if isinstance(resolved, int) else logging.INFO


def setup_logging(level: Optional[str] = None) -> None:
    """Diagnostic logging: console plus a rotating monitor.log in the app dir.

    Category logs (process info, memory alerts, app events) are separate and
    handled by ``EventLog``.
    """
    ensure_app_dirs()
    lvl = _resolve_level(level)
    root = logging.getLogger()
    root.setLevel(lvl)

    if root.handlers:
        return

    fmt = logging.Formatter("%(asctime)s %(levelname)s %(threadName)s %(name)s - %(message)s")

    ch = logging.StreamHandler()
    ch.setLevel(logging.WARNING)
    ch.setFormatter(fmt)
    root.addHandler(ch)

    fh = RotatingFileHandler(str(log_path()), maxBytes=2_000_000, backupCount=3, encoding="utf-8")
    fh.setLevel(lvl)
    fh.setFormatter(fmt)
    root.addHandler(fh)
