"""Runtime configuration for ncc, read from ``config/config.toml``."""

from __future__ import annotations

import logging
import os
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

CONFIG_SECTION = "ncc"
DEFAULT_DATA_DIR = ".ncc"


def _resolve_env_value(value: Any) -> Any:
    if isinstance(value, str) and value.startswith("${") and value.endswith("}"):
        env_name = value[2:-1].strip()
        if env_name:
            return os.getenv(env_name, "")
    return value


def _to_bool(value: Any, default: bool) -> bool:
    value = _resolve_env_value(value)
    if value is None or value == "":
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        normalized = value.strip().lower()
        if normalized in {"1", "true", "yes", "on"}:
            return True
        if normalized in {"0", "false", "no", "off"}:
            return False
    return bool(value)


@dataclass(frozen=True)
class NccConfig:
    data_path: Path = Path(DEFAULT_DATA_DIR)
    timeout_seconds: float = 30.0
    max_attempts: int = 3
    backoff_seconds: float = 0.0
    user_agent: str = "ncc"
    prefer_static: bool = False

    @property
    def lock_path(self) -> Path:
        return self.data_path / "package.lck"

    @property
    def repositories_path(self) -> Path:
        return self.data_path / "repositories.yml"


def _load_config_section(root: Path) -> dict[str, Any]:
    config_path = root / "config" / "config.toml"
    if not config_path.exists():
        return {}
    try:
        payload = tomllib.loads(config_path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as exc:
        logger.warning("ignoring unreadable config %s: %s", config_path, exc)
        return {}
    section = payload.get(CONFIG_SECTION)
    return section if isinstance(section, dict) else {}


def load_config(root: Path | str | None = None) -> NccConfig:
    base = Path(root) if root is not None else Path.cwd()
    section = _load_config_section(base)
    data_path = _resolve_env_value(section.get("data_path"))
    resolved_data_path = Path(str(data_path)).expanduser() if data_path else base / DEFAULT_DATA_DIR
    if not resolved_data_path.is_absolute():
        resolved_data_path = base / resolved_data_path
    return NccConfig(
        data_path=resolved_data_path,
        timeout_seconds=float(_resolve_env_value(section.get("timeout_seconds", 30.0)) or 30.0),
        max_attempts=max(int(_resolve_env_value(section.get("max_attempts", 3)) or 3), 1),
        backoff_seconds=max(float(_resolve_env_value(section.get("backoff_seconds", 0.0)) or 0.0), 0.0),
        user_agent=str(_resolve_env_value(section.get("user_agent")) or "ncc"),
        prefer_static=_to_bool(section.get("prefer_static"), False),
    )
