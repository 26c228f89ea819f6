"""Simple JSON-backed configuration store."""
from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Dict, Optional

from core.settings import CONFIG_PATH, UI


THEME_MODES = ("light", "dark")


@dataclass
class AppConfig:
    """Lightweight configuration persisted to ``config.json``."""

    theme_mode: str = UI.theme_mode
    show_completed: bool = True


def _ensure_parent(path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)


def _load_raw(path: Path) -> Dict[str, Any]:
    if not path.exists():
        return {}
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError):
        return {}
    return data if isinstance(data, dict) else {}


def load_config(path: Optional[Path] = None) -> AppConfig:
    target = path or CONFIG_PATH
    data = _load_raw(target)
    theme_mode = data.get("theme_mode")
    if theme_mode not in THEME_MODES:
        theme_mode = UI.theme_mode
    return AppConfig(
        theme_mode=theme_mode,
        show_completed=bool(data.get("show_completed", True)),
    )


def save_config(config: AppConfig, path: Optional[Path] = None) -> None:
    target = path or CONFIG_PATH
    _ensure_parent(target)
    payload = json.dumps(asdict(config), ensure_ascii=False, indent=2, sort_keys=True)
    tmp = target.with_suffix(".tmp")
    try:
        tmp.write_text(payload, encoding="utf-8")
        tmp.replace(target)
    finally:
        if tmp.exists():
            try:
                tmp.unlink()
            except OSError:
                pass


def update_config(path: Optional[Path] = None, **changes: Any) -> AppConfig:
    target = path or CONFIG_PATH
    cfg = load_config(target)
    for key, value in changes.items():
        if hasattr(cfg, key):
            setattr(cfg, key, value)
    save_config(cfg, target)
    return cfg


def toggle_theme(path: Optional[Path] = None) -> AppConfig:
    current = load_config(path)
    next_mode = "dark" if current.theme_mode == "light" else "light"
    return update_config(path, theme_mode=next_mode)


__all__ = ["AppConfig", "THEME_MODES", "load_config", "save_config", "toggle_theme", "update_config"]
