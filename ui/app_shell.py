# ui/app_shell.py
from __future__ import annotations

from typing import Any, Callable

import flet as ft

from core.settings import UI
from services.errors import StoreError
from services.logs import ensure_logger, read_log_tail
from services.task_store import TaskStore
from storage.config import load_config, toggle_theme, update_config

# страницы
from .pages.matrix import MatrixPage
from .pages.overview import OverviewPage
from .pages.settings import SettingsPage


class AppShell:
    def __init__(self, page: ft.Page, store: TaskStore):
        self.page = page
        self.store = store
        self.config = load_config()
        self.logger = ensure_logger("planner.ui")

        # базовые настройки окна
        self.page.title = UI.app_title
        self.page.horizontal_alignment = ft.CrossAxisAlignment.STRETCH
        self.page.vertical_alignment = ft.MainAxisAlignment.START
        self._apply_theme()

        # --- страницы ---
        self._matrix = MatrixPage(self)
        self._overview = OverviewPage(self)
        self._settings = SettingsPage(self)
        self._active = self._matrix

        self.store.subscribe("changed", self._on_store_changed)
        self.store.subscribe("tree_changed", self._on_tree_changed)
        self.store.subscribe("celebrate", self._on_celebrate)

        # контейнер контента
        self.content = ft.Container(expand=True)

        # левое меню
        self.nav = ft.NavigationRail(
            selected_index=0,
            label_type=ft.NavigationRailLabelType.ALL,
            min_width=90,
            min_extended_width=200,
            group_alignment=-0.9,
            on_change=self.on_nav_change,
            destinations=[
                ft.NavigationRailDestination(
                    icon=ft.Icons.GRID_VIEW,
                    selected_icon=ft.Icons.GRID_VIEW_ROUNDED,
                    label="Matrix",
                ),
                ft.NavigationRailDestination(
                    icon=ft.Icons.INSIGHTS_OUTLINED,
                    selected_icon=ft.Icons.INSIGHTS,
                    label="Overview",
                ),
                ft.NavigationRailDestination(
                    icon=ft.Icons.SETTINGS_OUTLINED,
                    selected_icon=ft.Icons.SETTINGS,
                    label="Settings",
                ),
            ],
        )

        # корневой лэйаут
        self.root = ft.Row(
            controls=[
                ft.Container(self.nav, width=88, bgcolor=self.theme.surface_bg),
                ft.VerticalDivider(width=1),
                self.content,
            ],
            expand=True,
            spacing=0,
        )

    # ---------- theme ----------
    @property
    def theme(self):
        return UI.palette(self.config.theme_mode)

    def _apply_theme(self):
        self.page.theme_mode = ft.ThemeMode.DARK if self.config.theme_mode == "dark" else ft.ThemeMode.LIGHT
        self.page.theme = ft.Theme(color_scheme_seed=UI.color_scheme_seed)
        self.page.bgcolor = self.theme.surface_bg

    def switch_theme(self):
        self.config = toggle_theme()
        self._apply_theme()
        self.root.controls[0].bgcolor = self.theme.surface_bg
        self._active.activate_from_menu()

    def set_show_completed(self, value: bool):
        self.config = update_config(show_completed=value)
        self._matrix.render()

    # ---------- утилиты ----------
    def toast(self, text: str, ok: bool = True):
        snack = ft.SnackBar(
            ft.Text(text),
            bgcolor=None if ok else ft.Colors.RED_400,
        )
        self.page.open(snack)

    def run(self, fn: Callable[..., Any], *args, **kwargs) -> Any:
        """Call a store operation from a UI handler and surface remote failures."""
        try:
            return fn(*args, **kwargs)
        except StoreError as exc:
            self.toast(exc.message, ok=False)
            return None

    def reload(self) -> bool:
        try:
            self.store.load()
        except StoreError as exc:
            self.toast(exc.message, ok=False)
            return False
        return True

    def read_log(self, lines: int = 100) -> str:
        return read_log_tail(lines)

    # ---------- store events ----------
    def _on_store_changed(self):
        if self._active is self._matrix:
            self._matrix.render()

    def _on_tree_changed(self, _forest):
        if self._active is self._overview:
            self._overview.render()

    def _on_celebrate(self, task):
        self.toast(f"🎉 Done: {task.title}")

    # ---------- монтаж ----------
    def mount(self):
        self.page.controls.clear()
        self.page.add(self.root)

        self.content.content = self._matrix.view
        self._matrix.loading.visible = True
        self.page.update()

        self.reload()
        self._matrix.activate_from_menu()

    # ---------- переключение вкладок ----------
    def on_nav_change(self, e: ft.ControlEvent):
        idx = int(e.control.selected_index)

        if idx == 0:
            self._active = self._matrix
        elif idx == 1:
            self._active = self._overview
        else:
            self._active = self._settings

        self.content.content = self._active.view
        self._active.activate_from_menu()
        self.page.update()
