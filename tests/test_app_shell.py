import flet as ft
import pytest

from storage import config as config_module
from storage.config import load_config
from ui.app_shell import AppShell


class FakePage:
    """Just enough of ``ft.Page`` for the shell: attributes, update and overlays."""

    def __init__(self):
        self.controls = []
        self.opened = []
        self.updates = 0

    def update(self):
        self.updates += 1

    def open(self, control):
        self.opened.append(control)

    def close(self, control):
        self.opened.remove(control)

    def add(self, *controls):
        self.controls.extend(controls)


@pytest.fixture()
def config_path(tmp_path, monkeypatch):
    path = tmp_path / "config.json"
    monkeypatch.setattr(config_module, "CONFIG_PATH", path)
    return path


@pytest.fixture()
def shell(store, config_path):
    return AppShell(FakePage(), store)


def test_theme_switch_goes_through_saved_config(shell, config_path):
    assert shell.config.theme_mode == "light"

    shell.switch_theme()

    assert load_config(config_path).theme_mode == "dark"
    assert shell.page.theme_mode == ft.ThemeMode.DARK

    shell.switch_theme()
    assert load_config(config_path).theme_mode == "light"
    assert shell.page.theme_mode == ft.ThemeMode.LIGHT


def test_run_turns_store_errors_into_a_toast(shell, store, table):
    table.fail.add("update")
    task = store.current_tasks[0]

    assert shell.run(store.toggle_completion, task) is None

    assert task.completed is False
    snack = shell.page.opened[-1]
    assert isinstance(snack, ft.SnackBar)
    assert snack.content.value == "update failed"
