from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

TAB_NAMES = ("projects", "quotes", "maintenance", "appliances", "vendors")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _get_int_env(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _to_int(value: Any, default: int, minimum: int) -> int:
    try:
        parsed = int(value)
    except (TypeError, ValueError):
        parsed = default
    return max(minimum, parsed)


def _to_bool(value: Any, default: bool) -> bool:
    if isinstance(value, bool):
        return value
    if value is None:
        return default
    text = str(value).strip().casefold()
    if text in {"1", "true", "yes", "on"}:
        return True
    if text in {"0", "false", "no", "off"}:
        return False
    return default


def _to_separator(value: Any, default: str) -> str:
    text = str(value) if value is not None else ""
    return text or default


def _to_tab_name(value: Any, default: str) -> str:
    text = str(value or "").strip().casefold()
    return text if text in TAB_NAMES else default


def _to_log_level(value: Any, default: str) -> str:
    text = str(value or "").strip().upper()
    return text if text in LOG_LEVELS else default


@dataclass(frozen=True)
class AppConfig:
    column_separator: str = " │ "
    collapsed_separator: str = " ⋯ "
    mag_mode: bool = False
    seed_demo_data: bool = True
    show_deleted: bool = False
    default_tab: str = "projects"
    grid_width: int = 120
    log_level: str = "INFO"
    log_file: str = ""
    config_source: str = "defaults/env"

    @classmethod
    def from_env(cls) -> "AppConfig":
        config = cls(
            mag_mode=_to_bool(os.getenv("HD_MAG_MODE"), False),
            seed_demo_data=_to_bool(os.getenv("HD_SEED_DEMO_DATA"), True),
            show_deleted=_to_bool(os.getenv("HD_SHOW_DELETED"), False),
            default_tab=_to_tab_name(os.getenv("HD_DEFAULT_TAB"), "projects"),
            grid_width=max(20, _get_int_env("HD_GRID_WIDTH", 120)),
            log_level=_to_log_level(os.getenv("HD_LOG_LEVEL"), "INFO"),
            log_file=os.getenv("HD_LOG_FILE", ""),
        )
        config_path = os.getenv("HD_CONFIG_PATH", "homedash.config.json")
        return config.merge_file(Path(config_path))

    def merge_file(self, path: Path) -> "AppConfig":
        if not path.exists():
            return self
        loaded = self._load_config_file(path)
        if not loaded:
            return self
        merged = dict(self.__dict__)
        for key in merged:
            if key in loaded:
                merged[key] = loaded[key]
        merged["column_separator"] = _to_separator(merged["column_separator"], self.column_separator)
        merged["collapsed_separator"] = _to_separator(merged["collapsed_separator"], self.collapsed_separator)
        merged["mag_mode"] = _to_bool(merged["mag_mode"], self.mag_mode)
        merged["seed_demo_data"] = _to_bool(merged["seed_demo_data"], self.seed_demo_data)
        merged["show_deleted"] = _to_bool(merged["show_deleted"], self.show_deleted)
        merged["default_tab"] = _to_tab_name(merged["default_tab"], self.default_tab)
        merged["grid_width"] = _to_int(merged["grid_width"], self.grid_width, 20)
        merged["log_level"] = _to_log_level(merged["log_level"], self.log_level)
        merged["log_file"] = str(merged["log_file"] or "")
        merged["config_source"] = str(path)
        return AppConfig(**merged)

    def _load_config_file(self, path: Path) -> dict[str, Any]:
        suffix = path.suffix.lower()
        text = path.read_text(encoding="utf-8")
        if suffix == ".json":
            try:
                parsed = json.loads(text)
            except json.JSONDecodeError:
                return {}
            return parsed if isinstance(parsed, dict) else {}
        if suffix in {".yml", ".yaml"}:
            try:
                parsed = yaml.safe_load(text)
            except yaml.YAMLError:
                return {}
            return parsed if isinstance(parsed, dict) else {}
        return {}
