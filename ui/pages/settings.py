# ui/pages/settings.py
import flet as ft

from core.settings import LOGGING, STORE


_BACKEND_LABELS = {
    "sql": "SQL database",
    "appdata": "Google Drive (appData)",
    "json": "Local JSON file",
}


class SettingsPage:
    def __init__(self, app):
        self.app = app

        self.dark_switch = ft.Switch(
            label="Dark theme",
            value=self.app.config.theme_mode == "dark",
            on_change=self.on_theme_change,
        )
        self.completed_switch = ft.Switch(
            label="Show completed tasks",
            value=self.app.config.show_completed,
            on_change=self.on_show_completed_change,
        )
        self.backend_info = ft.Text(
            f"Storage: {_BACKEND_LABELS.get(STORE.backend, STORE.backend)}",
        )
        self.log_info = ft.Text(f"Log file: {LOGGING.path}", size=12, color="#6B7280", selectable=True)
        self.reload_btn = ft.OutlinedButton(
            "Reload all tasks",
            icon=ft.Icons.SYNC,
            on_click=self.reload_tasks,
        )
        self.refresh_log_btn = ft.TextButton(
            "Refresh log",
            icon=ft.Icons.ARTICLE,
            on_click=self.refresh_log,
        )

        self.log_view = ft.Text("", selectable=True, size=12)

        content = ft.Column(
            controls=[
                ft.Text("Settings", size=24, weight=ft.FontWeight.BOLD),
                self.dark_switch,
                self.completed_switch,
                self.backend_info,
                self.reload_btn,
                ft.Column([
                    ft.Text("Log", size=18, weight=ft.FontWeight.W_600),
                    self.log_info,
                    ft.Container(
                        self.log_view,
                        height=220,
                        padding=10,
                        bgcolor=ft.Colors.with_opacity(0.06, ft.Colors.ON_SURFACE),
                    ),
                    self.refresh_log_btn,
                ], spacing=8),
            ],
            expand=True,
            spacing=16,
            scroll=ft.ScrollMode.AUTO,
        )

        self.view = ft.Container(content=content, expand=True, padding=20)

    def activate_from_menu(self):
        self.log_view.value = self.app.read_log()
        self.app.page.update()

    def on_theme_change(self, e: ft.ControlEvent):
        if (self.app.config.theme_mode == "dark") != bool(e.control.value):
            self.app.switch_theme()

    def on_show_completed_change(self, e: ft.ControlEvent):
        self.app.set_show_completed(bool(e.control.value))

    def reload_tasks(self, _):
        if self.app.reload():
            self.app.toast("Tasks reloaded")

    def refresh_log(self, _):
        self.log_view.value = self.app.read_log()
        self.app.page.update()
