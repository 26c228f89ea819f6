# planner/ui/pages/matrix.py
from __future__ import annotations

import flet as ft

from core.quadrants import (
    QUADRANTS,
    QUADRANT_META,
    quadrant_bgcolor,
    quadrant_color,
    quadrant_flags,
    quadrant_of,
    quadrant_options,
)
from core.settings import UI
from models.task import Task
from ui.dialogs import confirm, prompt_text, task_details_dialog


class MatrixPage:
    def __init__(self, app):
        self.app = app
        self.store = app.store

        # ---------- Quick add ----------
        self.title_tf = ft.TextField(
            label="New task",
            hint_text="What needs to be done?",
            expand=True,
            prefix=ft.Icon(ft.Icons.TASK_ALT),
            max_length=UI.matrix.title_max_length,
            on_submit=self.on_quick_add,
        )
        self.quadrant_dd = ft.Dropdown(
            label="Quadrant",
            width=300,
            value=QUADRANTS[0],
            options=[ft.dropdown.Option(key, label) for key, label in quadrant_options().items()],
        )
        self.add_btn = ft.FilledButton("Add", icon=ft.Icons.ADD, on_click=self.on_quick_add)

        self.back_btn = ft.IconButton(
            icon=ft.Icons.CHEVRON_LEFT,
            tooltip="Back",
            on_click=lambda e: self.store.navigate_back(),
        )
        self.home_btn = ft.IconButton(
            icon=ft.Icons.HOME_OUTLINED,
            tooltip="Home",
            on_click=lambda e: self.store.navigate_home(),
        )
        self.refresh_btn = ft.IconButton(
            icon=ft.Icons.REFRESH,
            tooltip="Reload",
            on_click=lambda e: self.app.run(self.store.refresh_current_level),
        )
        self.breadcrumbs = ft.Row(spacing=0, wrap=True, expand=True)
        self.loading = ft.ProgressRing(width=18, height=18, visible=False)

        self._quadrant_lists = {label: ft.Column(spacing=6, scroll=ft.ScrollMode.AUTO) for label in QUADRANTS}
        self._quadrant_cards = {label: self._quadrant_card(label) for label in QUADRANTS}

        grid = ft.Column(
            [
                ft.Row(
                    [self._quadrant_cards[QUADRANTS[0]], self._quadrant_cards[QUADRANTS[1]]],
                    expand=True,
                    vertical_alignment=ft.CrossAxisAlignment.STRETCH,
                ),
                ft.Row(
                    [self._quadrant_cards[QUADRANTS[2]], self._quadrant_cards[QUADRANTS[3]]],
                    expand=True,
                    vertical_alignment=ft.CrossAxisAlignment.STRETCH,
                ),
            ],
            expand=True,
            spacing=12,
        )

        self.view = ft.Container(
            content=ft.Column(
                [
                    ft.Row(
                        [self.back_btn, self.home_btn, self.breadcrumbs, self.loading, self.refresh_btn],
                        vertical_alignment=ft.CrossAxisAlignment.CENTER,
                    ),
                    ft.Row(
                        [self.title_tf, self.quadrant_dd, self.add_btn],
                        vertical_alignment=ft.CrossAxisAlignment.START,
                    ),
                    grid,
                ],
                spacing=12,
                expand=True,
            ),
            expand=True,
            padding=20,
        )

    def activate_from_menu(self):
        self.render()

    # ---------- Rendering ----------
    def render(self):
        level = self.store.current_level
        self.back_btn.disabled = len(self.store.hierarchy) <= 1
        self.loading.visible = self.store.loading
        self._render_breadcrumbs()

        theme = self.app.theme
        buckets = self.store.tasks_by_quadrant()
        for label in QUADRANTS:
            column = self._quadrant_lists[label]
            column.controls.clear()
            tasks = buckets[label]
            if not self.app.config.show_completed:
                tasks = [t for t in tasks if not t.completed]
            for task in tasks:
                column.controls.append(self._task_row(task))
            if not column.controls:
                column.controls.append(ft.Text("No tasks yet", size=12, color=theme.text_subtle))
            self._quadrant_cards[label].content.bgcolor = quadrant_bgcolor(label, theme)
        self.title_tf.label = f"New task in {level.title}"
        self.app.page.update()

    def _render_breadcrumbs(self):
        crumbs = self.store.breadcrumbs()
        controls: list[ft.Control] = []
        for index, title in crumbs:
            is_last = index == len(crumbs) - 1
            controls.append(
                ft.TextButton(
                    title,
                    disabled=is_last,
                    on_click=lambda e, i=index: self.store.navigate_to_breadcrumb(i),
                )
            )
            if not is_last:
                controls.append(ft.Icon(ft.Icons.CHEVRON_RIGHT, size=16))
        self.breadcrumbs.controls = controls

    def _quadrant_card(self, label: str) -> ft.Card:
        meta = QUADRANT_META[label]
        header = ft.Row(
            [
                ft.Row(
                    [
                        ft.Icon(getattr(ft.Icons, meta["icon"]), color=quadrant_color(label)),
                        ft.Text(label, size=16, weight=ft.FontWeight.W_600),
                    ],
                    spacing=8,
                ),
                ft.IconButton(
                    icon=ft.Icons.ADD_CIRCLE_OUTLINE,
                    tooltip="Add task",
                    on_click=lambda e, q=label: self._prompt_add(q),
                ),
            ],
            alignment=ft.MainAxisAlignment.SPACE_BETWEEN,
        )
        return ft.Card(
            expand=True,
            content=ft.Container(
                padding=12,
                content=ft.Column(
                    [header, ft.Container(content=self._quadrant_lists[label], expand=True)],
                    spacing=8,
                    expand=True,
                ),
            ),
        )

    def _task_row(self, task: Task) -> ft.Control:
        theme = self.app.theme
        stats = self.store.subtask_stats(task.id)

        title = ft.Text(
            task.title,
            size=14,
            max_lines=1,
            overflow=ft.TextOverflow.ELLIPSIS,
            tooltip=task.title,
            color=theme.text_subtle if task.completed else None,
            style=ft.TextStyle(
                decoration=ft.TextDecoration.LINE_THROUGH if task.completed else None
            ),
        )
        badges: list[ft.Control] = []
        if stats.total:
            badges.append(self._badge(f"{stats.completed}/{stats.total}", theme.accent))
        if (task.notes or "").strip():
            badges.append(ft.Icon(ft.Icons.STICKY_NOTE_2_OUTLINED, size=14, color=theme.text_subtle))

        move_menu = ft.PopupMenuButton(
            icon=ft.Icons.SWAP_HORIZ,
            tooltip="Move to quadrant",
            items=[
                ft.PopupMenuItem(
                    text=label,
                    on_click=lambda e, q=label, tid=task.id: self._move(tid, q),
                )
                for label in QUADRANTS
                if label != quadrant_of(task)
            ],
        )

        return ft.Container(
            content=ft.Row(
                [
                    ft.Checkbox(
                        value=bool(task.completed),
                        on_change=lambda e, t=task: self.app.run(self.store.toggle_completion, t),
                    ),
                    ft.Container(
                        content=ft.Row([title, *badges], spacing=6),
                        expand=True,
                        on_click=lambda e, t=task: self.open_details(t),
                    ),
                    ft.IconButton(
                        icon=ft.Icons.ACCOUNT_TREE_OUTLINED,
                        tooltip="Open matrix",
                        on_click=lambda e, t=task: self.app.run(self.store.navigate_into, t),
                    ),
                    ft.IconButton(
                        icon=ft.Icons.EDIT_OUTLINED,
                        tooltip="Rename",
                        on_click=lambda e, t=task: self._prompt_rename(t),
                    ),
                    move_menu,
                    ft.IconButton(
                        icon=ft.Icons.DELETE_OUTLINE,
                        tooltip="Delete",
                        on_click=lambda e, t=task: self._confirm_delete(t),
                    ),
                ],
                spacing=2,
                vertical_alignment=ft.CrossAxisAlignment.CENTER,
            ),
            padding=ft.padding.symmetric(horizontal=6, vertical=2),
            bgcolor=theme.card,
            border_radius=8,
        )

    def _badge(self, text: str, color: str) -> ft.Control:
        return ft.Container(
            content=ft.Text(text, size=11, weight=ft.FontWeight.W_600, color=color),
            bgcolor=ft.Colors.with_opacity(0.12, color),
            padding=ft.padding.symmetric(horizontal=6, vertical=2),
            border_radius=ft.border_radius.all(8),
        )

    # ---------- Actions ----------
    def on_quick_add(self, _):
        title = self.title_tf.value or ""
        if not title.strip():
            return
        created = self.app.run(self.store.add_task_to_quadrant, title, self.quadrant_dd.value)
        if created is not None:
            self.title_tf.value = ""
            self.app.page.update()

    def _prompt_add(self, quadrant: str):
        prompt_text(
            self.app.page,
            title=f"Add to {quadrant}",
            label="Task title",
            save_label="Add",
            on_save=lambda value: self.app.run(self.store.add_task_to_quadrant, value, quadrant),
        )

    def _prompt_rename(self, task: Task):
        prompt_text(
            self.app.page,
            title="Rename task",
            label="Title",
            value=task.title,
            on_save=lambda value: self.app.run(self.store.rename_task, task.id, value),
        )

    def _move(self, task_id: int, quadrant: str):
        urgent, important = quadrant_flags(quadrant)
        self.app.run(self.store.move_task, task_id, urgent, important)

    def _confirm_delete(self, task: Task):
        stats = self.store.subtask_stats(task.id)
        message = "This cannot be undone."
        if stats.total:
            message = f"{stats.total} subtask(s) will be deleted as well. This cannot be undone."
        if not UI.matrix.confirm_delete:
            self.app.run(self.store.delete_task_cascade, task.id)
            return
        confirm(
            self.app.page,
            title=f"Delete “{task.title}”?",
            message=message,
            on_confirm=lambda: self.app.run(self.store.delete_task_cascade, task.id),
        )

    # ---------- Details ----------
    def open_details(self, task: Task):
        self.store.open_details(task)
        task_details_dialog(
            self.app.page,
            task,
            on_toggle=lambda t: self.app.run(self.store.toggle_completion, t),
            on_edit_note=self.edit_note,
            on_close=self.store.close_details,
        )

    def edit_note(self, task: Task):
        prompt_text(
            self.app.page,
            title=f"Edit note: {task.title}",
            label="Note",
            value=task.notes or "",
            multiline=True,
            save_label="Save note",
            on_save=lambda value: self.app.run(self.store.edit_note, task.id, value),
        )
