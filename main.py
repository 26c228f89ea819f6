# planner/main.py
import os, sys
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))
import flet as ft

from core.settings import STORE, UI
from services.backends import create_task_table
from services.errors import StoreError
from services.logs import ensure_logger
from services.task_store import TaskStore
from ui.app_shell import AppShell


def main(page: ft.Page):
    logger = ensure_logger("planner.main")
    page.title = UI.app_title
    page.appbar = ft.AppBar(title=ft.Text(UI.app_title), center_title=False)
    page.padding = 0
    page.window.min_width = UI.window_min_width
    page.window.min_height = UI.window_min_height

    try:
        table = create_task_table()
    except StoreError as exc:
        logger.error("Could not open the %s task storage: %s", STORE.backend, exc.message)
        page.add(ft.Container(ft.Text(exc.message, color=ft.Colors.RED_400), padding=20))
        return

    logger.info("Starting %s with the %s backend", UI.app_title, STORE.backend)
    shell = AppShell(page, TaskStore(table))
    shell.mount()


def run():
    view = ft.AppView.WEB_BROWSER if os.environ.get("PLANNER_WEB") else ft.AppView.FLET_APP
    ft.app(target=main, view=view)


if __name__ == "__main__":
    run()
