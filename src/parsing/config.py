"""Configuration helpers for corpus scanning."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Sequence

import yaml

from . import utils

DEFAULT_SCAN_SUFFIXES = (".pdf", ".txt")
_DEFAULT_CONFIG_PATH = Path("config/analysis.yaml")


@dataclass(frozen=True, slots=True)
class ScanConfig:
    suffixes: tuple[str, ...] = DEFAULT_SCAN_SUFFIXES
    recursive: bool = False
    include: tuple[str, ...] = ()
    exclude: tuple[str, ...] = ()

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "ScanConfig":
        if not isinstance(payload, Mapping):
            raise ValueError("Scan config must be a mapping")
        return cls(
            suffixes=utils.normalize_suffixes(payload.get("suffixes"), default=DEFAULT_SCAN_SUFFIXES),
            recursive=bool(payload.get("recursive", False)),
            include=_normalize_patterns(payload.get("include")),
            exclude=_normalize_patterns(payload.get("exclude")),
        )


def load_scan_config(config_path: Path | None) -> ScanConfig:
    """Read the ``scan`` section of an analysis YAML file, or return defaults."""

    path = Path(config_path).expanduser() if config_path is not None else _DEFAULT_CONFIG_PATH
    if not path.exists():
        if config_path is not None:
            raise FileNotFoundError(f"Scan config '{path}' does not exist")
        return ScanConfig()
    data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    if not isinstance(data, Mapping):
        raise ValueError("Scan config must be a mapping")
    return ScanConfig.from_dict(data.get("scan") or {})


def _normalize_patterns(values: Any) -> tuple[str, ...]:
    if not values:
        return ()
    if isinstance(values, str):
        values = [values]
    patterns: Sequence[str] = [str(raw).strip() for raw in values]
    return tuple(dict.fromkeys(pattern for pattern in patterns if pattern))


__all__ = ["DEFAULT_SCAN_SUFFIXES", "ScanConfig", "load_scan_config"]
