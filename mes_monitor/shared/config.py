from __future__ import annotations

from typing import Any, Dict, List

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from mes_monitor.shared.paths import logs_dir


def _unique_names(parts: List[str]) -> List[str]:
    names: List[str] = []
    for part in parts:
        name = part.strip()
        if name and name not in names:
            names.append(name)
    return names


def parse_process_list(raw: str) -> List[str]:
    """Split a comma-separated process list, dropping blanks and duplicates."""
    return _unique_names(raw.split(","))


def parse_process_paths(raw: str) -> Dict[str, str]:
    """Parse ``name:path;name:path`` pairs.

    Each pair is split on its first colon only, so Windows paths such as
    ``C:\\Apps\\mes.exe`` stay intact. Pairs that do not yield a non-empty
    name and a non-empty path are skipped.
    """
    paths: Dict[str, str] = {}
    for pair in raw.split(";"):
        if not pair:
            continue
        parts = [p for p in pair.split(":", 1) if p]
        if len(parts) != 2:
            continue
        name, path = parts[0].strip(), parts[1].strip()
        if name and path:
            paths[name] = path
    return paths


class WatchdogConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    processes_to_monitor: List[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices("processes_to_monitor", "ProcessesToMonitor"),
    )
    process_paths: Dict[str, str] = Field(
        default_factory=dict,
        validation_alias=AliasChoices("process_paths", "ProcessPaths"),
    )
    memory_threshold_mb: int = Field(
        default=1024,
        ge=0,
        validation_alias=AliasChoices("memory_threshold_mb", "MemoryThresholdMB"),
    )
    check_interval_ms: int = Field(
        default=5000,
        gt=0,
        validation_alias=AliasChoices("check_interval_ms", "CheckIntervalMS"),
    )
    log_path: str = Field(
        default_factory=lambda: str(logs_dir() / "events"),
        validation_alias=AliasChoices("log_path", "LogPath"),
    )

    @field_validator("processes_to_monitor", mode="before")
    @classmethod
    def _split_processes(cls, value: Any) -> Any:
        if isinstance(value, str):
            return parse_process_list(value)
        if isinstance(value, list):
            return _unique_names([str(v) for v in value])
        return value

    @field_validator("process_paths", mode="before")
    @classmethod
    def _split_paths(cls, value: Any) -> Any:
        if isinstance(value, str):
            return parse_process_paths(value)
        if isinstance(value, dict):
            return {str(k).strip(): str(v).strip() for k, v in value.items() if str(k).strip() and str(v).strip()}
        return value

    @property
    def check_interval_seconds(self) -> float:
        return self.check_interval_ms / 1000.0
