"""Centralized application configuration."""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional
import os
import sys


def get_default_data_dir(
    app_name: str,
    *,
    platform: Optional[str] = None,
    env: Optional[Mapping[str, str]] = None,
    home: Optional[Path] = None,
) -> Path:
    """Return an OS-specific user data directory for ``app_name``."""

    platform_id = (platform or sys.platform).lower()
    environ = dict(env or os.environ)
    home_dir = Path(home or Path.home())
    sanitized = app_name.strip() or "app"
    sanitized = sanitized.replace("/", "-").replace("\\", "-")

    if platform_id.startswith("win"):
        base = Path(environ.get("APPDATA") or home_dir / "AppData" / "Roaming")
    elif platform_id == "darwin":
        base = Path(environ.get("APPDATA") or home_dir / "Library" / "Application Support")
    else:
        base = Path(environ.get("XDG_DATA_HOME") or home_dir / ".local" / "share")

    return (base.expanduser() / sanitized)


def resolve_backend(env: Optional[Mapping[str, str]] = None) -> str:
    """Pick the task table backend from ``PLANNER_STORE_BACKEND``."""

    environ = env if env is not None else os.environ
    value = (environ.get("PLANNER_STORE_BACKEND") or "sql").strip().lower()
    if value not in STORE_BACKENDS:
        return "sql"
    return value


APP_NAME = "EisenhowerPlanner"
STORE_BACKENDS = ("sql", "appdata", "json")


DATA_DIR = get_default_data_dir(APP_NAME)
STORAGE_DIR = DATA_DIR / "storage"
SECRETS_DIR = DATA_DIR / "secrets"
LOG_DIR = DATA_DIR / "logs"

for _dir in (DATA_DIR, STORAGE_DIR, SECRETS_DIR, LOG_DIR):
    _dir.mkdir(parents=True, exist_ok=True)


DB_PATH = DATA_DIR / "tasks.db"
DATABASE_URL = os.environ.get("PLANNER_DATABASE_URL") or f"sqlite:///{DB_PATH.as_posix()}"
TASKS_BLOB_PATH = STORAGE_DIR / "tasks.json"
CONFIG_PATH = DATA_DIR / "config.json"
LOG_PATH = LOG_DIR / "planner.log"
TOKEN_PATH = DATA_DIR / "token.json"
CLIENT_SECRET_PATH = SECRETS_DIR / "client_secret.json"


@dataclass(frozen=True)
class QuadrantPalette:
    urgent_important: str
    urgent_not_important: str
    not_urgent_important: str
    not_urgent_not_important: str


@dataclass(frozen=True)
class ThemeColors:
    surface_bg: str = "#EFF6FF"
    card: str = "#FFFFFF"
    text: str = "#1F2937"
    text_subtle: str = "#6B7280"
    accent: str = "#4F46E5"
    completed: str = "#22C55E"
    quadrants: QuadrantPalette = QuadrantPalette(
        urgent_important="#FEE2E2",
        urgent_not_important="#FEF3C7",
        not_urgent_important="#D1FAE5",
        not_urgent_not_important="#E0E7FF",
    )


DARK_THEME = ThemeColors(
    surface_bg="#111827",
    card="#1F2937",
    text="#F3F4F6",
    text_subtle="#9CA3AF",
    accent="#6366F1",
    completed="#4ADE80",
    quadrants=QuadrantPalette(
        urgent_important="#7F1D1D",
        urgent_not_important="#78350F",
        not_urgent_important="#064E3B",
        not_urgent_not_important="#1E3A8A",
    ),
)


@dataclass(frozen=True)
class MatrixUISettings:
    home_title: str = "Main Tasks"
    quadrant_min_height: int = 220
    title_max_length: int = 200
    confirm_delete: bool = True


@dataclass(frozen=True)
class UISettings:
    app_title: str = "Eisenhower Planner"
    theme_mode: str = "light"
    color_scheme_seed: str = "#4F46E5"
    window_min_width: int = 900
    window_min_height: int = 600
    light: ThemeColors = ThemeColors()
    dark: ThemeColors = DARK_THEME
    matrix: MatrixUISettings = MatrixUISettings()

    def palette(self, mode: Optional[str]) -> ThemeColors:
        return self.dark if (mode or "").lower() == "dark" else self.light


UI = UISettings()


@dataclass(frozen=True)
class StoreSettings:
    backend: str = field(default_factory=resolve_backend)
    database_url: str = DATABASE_URL
    blob_path: Path = TASKS_BLOB_PATH
    echo_sql: bool = False


STORE = StoreSettings()


@dataclass(frozen=True)
class GoogleSettings:
    scopes: tuple[str, ...] = ("https://www.googleapis.com/auth/drive.appdata",)
    tasks_filename: str = "planner-tasks.json"
    token_path: Path = TOKEN_PATH
    client_secret_path: Path = CLIENT_SECRET_PATH


GOOGLE = GoogleSettings()


@dataclass(frozen=True)
class LoggingSettings:
    path: Path = LOG_PATH
    level: str = os.environ.get("PLANNER_LOG_LEVEL", "INFO").upper()
    max_bytes: int = 1_000_000
    backup_count: int = 3


LOGGING = LoggingSettings()


__all__ = [
    "APP_NAME",
    "DATA_DIR",
    "STORAGE_DIR",
    "SECRETS_DIR",
    "LOG_DIR",
    "DB_PATH",
    "DATABASE_URL",
    "TASKS_BLOB_PATH",
    "CONFIG_PATH",
    "LOG_PATH",
    "TOKEN_PATH",
    "CLIENT_SECRET_PATH",
    "STORE_BACKENDS",
    "ThemeColors",
    "QuadrantPalette",
    "UI",
    "STORE",
    "GOOGLE",
    "LOGGING",
    "get_default_data_dir",
    "resolve_backend",
]
