from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Optional

from mes_monitor.shared.config import WatchdogConfig
from mes_monitor.shared.paths import config_path

log = logging.getLogger(__name__)


class ConfigStore:
    def __init__(self, path: Optional[Path] = None) -> None:
        self._path = path or config_path()

    def load(self) -> WatchdogConfig:
        if not self._path.exists():
            cfg = WatchdogConfig()
            self.save(cfg)
            return cfg

        try:
            raw = self._path.read_text(encoding="utf-8")
            data: Any = json.loads(raw)
            return WatchdogConfig.model_validate(data)
        except Exception:
            # Keep the user's file untouched so it can be fixed by hand.
            log.exception("Invalid config at %s, using defaults", self._path)
            return WatchdogConfig()

    def save(self, cfg: WatchdogConfig) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(cfg.model_dump_json(indent=2), encoding="utf-8")

    def path(self) -> str:
        return str(self._path)
