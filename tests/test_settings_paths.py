from pathlib import Path
import sys

ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import json

from core import settings
from storage.config import AppConfig, load_config, save_config, toggle_theme, update_config


def test_linux_data_dir_with_xdg():
    env = {"XDG_DATA_HOME": "/tmp/xdg"}
    result = settings.get_default_data_dir(
        settings.APP_NAME,
        platform="linux",
        env=env,
        home=Path("/home/test"),
    )
    assert result == Path("/tmp/xdg") / settings.APP_NAME


def test_linux_data_dir_default_home():
    result = settings.get_default_data_dir(
        settings.APP_NAME,
        platform="linux",
        env={},
        home=Path("/home/test"),
    )
    assert result == Path("/home/test/.local/share") / settings.APP_NAME


def test_macos_data_dir():
    result = settings.get_default_data_dir(
        settings.APP_NAME,
        platform="darwin",
        env={},
        home=Path("/Users/test"),
    )
    expected = Path("/Users/test/Library/Application Support") / settings.APP_NAME
    assert result == expected


def test_windows_data_dir_appdata():
    env = {"APPDATA": "C:/Users/test/AppData/Roaming"}
    result = settings.get_default_data_dir(
        settings.APP_NAME,
        platform="win32",
        env=env,
        home=Path("C:/Users/test"),
    )
    expected = Path(env["APPDATA"]) / settings.APP_NAME
    assert result == expected


def test_runtime_paths_inside_data_dir():
    assert settings.DB_PATH.parent == settings.DATA_DIR
    assert settings.TOKEN_PATH.parent == settings.DATA_DIR
    assert settings.CONFIG_PATH.parent == settings.DATA_DIR
    assert settings.CLIENT_SECRET_PATH.parent == settings.SECRETS_DIR
    assert settings.TASKS_BLOB_PATH.parent == settings.STORAGE_DIR
    assert settings.LOG_PATH.parent == settings.LOG_DIR


def test_resolve_backend():
    assert settings.resolve_backend({}) == "sql"
    assert settings.resolve_backend({"PLANNER_STORE_BACKEND": " AppData "}) == "appdata"
    assert settings.resolve_backend({"PLANNER_STORE_BACKEND": "json"}) == "json"
    assert settings.resolve_backend({"PLANNER_STORE_BACKEND": "redis"}) == "sql"


def test_palette_follows_theme_mode():
    assert settings.UI.palette("dark") == settings.DARK_THEME
    assert settings.UI.palette("light") == settings.UI.light
    assert settings.UI.palette(None) == settings.UI.light


def test_config_defaults_when_missing(tmp_path):
    cfg = load_config(tmp_path / "config.json")
    assert cfg == AppConfig()


def test_config_round_trip_and_toggle(tmp_path):
    path = tmp_path / "nested" / "config.json"
    save_config(AppConfig(theme_mode="dark", show_completed=False), path)

    assert load_config(path) == AppConfig(theme_mode="dark", show_completed=False)
    assert toggle_theme(path).theme_mode == "light"
    assert load_config(path).theme_mode == "light"
    assert not path.with_suffix(".tmp").exists()


def test_config_ignores_garbage(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"theme_mode": "neon", "unknown": 1}), encoding="utf-8")
    assert load_config(path).theme_mode == settings.UI.theme_mode

    path.write_text("{not json", encoding="utf-8")
    assert load_config(path) == AppConfig()

    cfg = update_config(path, show_completed=False, nonsense=True)
    assert cfg.show_completed is False
    assert not hasattr(cfg, "nonsense")
