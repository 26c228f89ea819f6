# planner/ui/pages/overview.py
from __future__ import annotations

from typing import List

import flet as ft

from core.quadrants import QUADRANTS, QUADRANT_META, quadrant_color, quadrant_of
from models.task import Task
from services import task_tree


class OverviewPage:
    """Whole-tree overview: analytics, search and an indented task outline."""

    def __init__(self, app):
        self.app = app
        self.store = app.store

        self.search_tf = ft.TextField(
            label="Search",
            hint_text="Search titles and notes across all levels",
            expand=True,
            prefix=ft.Icon(ft.Icons.SEARCH),
            on_submit=self._on_search,
            on_change=self._on_search,
        )
        self.reset_btn = ft.TextButton("Clear", icon=ft.Icons.CLEAR, on_click=self._on_reset)

        self.stats_row = ft.Row(spacing=12, wrap=True)
        self.result_info = ft.Text("", size=12, color="#6B7280")
        self.result_list = ft.ListView(expand=True, spacing=6)

        self.view = ft.Container(
            content=ft.Column(
                [
                    ft.Text("Overview", size=24, weight=ft.FontWeight.BOLD),
                    self.stats_row,
                    ft.Row([self.search_tf, self.reset_btn]),
                    self.result_info,
                    ft.Container(content=self.result_list, expand=True),
                ],
                spacing=16,
                expand=True,
            ),
            expand=True,
            padding=20,
        )

    def activate_from_menu(self):
        self.render()

    # ---------- Filters ----------
    def _on_search(self, _):
        self.render()

    def _on_reset(self, _):
        self.search_tf.value = ""
        self.render()

    # ---------- Rendering ----------
    def render(self):
        self._render_stats()
        query = (self.search_tf.value or "").strip()
        self.result_list.controls.clear()
        if query:
            matches = self.store.search(query)
            self.result_info.value = f"Found {len(matches)} task(s)" if matches else "Nothing found"
            for task in matches:
                self.result_list.controls.append(self._task_line(task, depth=0, path=self._path(task)))
        else:
            rows = list(task_tree.walk(self.store.all_tasks))
            self.result_info.value = f"{len(rows)} task(s) in total"
            for node, depth in rows:
                self.result_list.controls.append(self._task_line(node.task, depth=depth))
        self.app.page.update()

    def _render_stats(self):
        data = self.store.analytics()
        cards: List[ft.Control] = [
            self._stat_card("Total", str(data.total), self.app.theme.accent),
            self._stat_card("Completed", f"{data.completed} ({data.completion_rate:.0%})", "#22C55E"),
            self._stat_card("Depth", str(data.max_depth), "#6B7280"),
        ]
        for label in QUADRANTS:
            done = data.completed_per_quadrant[label]
            total = data.per_quadrant[label]
            cards.append(self._stat_card(QUADRANT_META[label]["short"], f"{done}/{total}", quadrant_color(label)))
        self.stats_row.controls = cards

    def _stat_card(self, title: str, value: str, color: str) -> ft.Control:
        return ft.Container(
            content=ft.Column(
                [
                    ft.Text(title, size=12, color="#6B7280"),
                    ft.Text(value, size=18, weight=ft.FontWeight.W_600, color=color),
                ],
                spacing=2,
                tight=True,
            ),
            padding=ft.padding.symmetric(horizontal=14, vertical=10),
            border_radius=10,
            bgcolor=ft.Colors.with_opacity(0.08, color),
        )

    def _path(self, task: Task) -> str:
        parents = {node.id: node for node, _ in task_tree.walk(self.store.all_tasks)}
        titles = []
        current = parents.get(task.parent_id)
        while current is not None:
            titles.append(current.task.title)
            current = parents.get(current.task.parent_id)
        return " › ".join(reversed(titles))

    def _task_line(self, task: Task, *, depth: int, path: str = "") -> ft.Control:
        label = quadrant_of(task)
        color = quadrant_color(label)
        title = ft.Text(
            task.title,
            size=14,
            weight=ft.FontWeight.W_600 if depth == 0 else None,
            style=ft.TextStyle(
                decoration=ft.TextDecoration.LINE_THROUGH if task.completed else None
            ),
        )
        subtitle_parts = [label]
        if path:
            subtitle_parts.insert(0, path)
        note = (task.notes or "").strip()
        if note:
            subtitle_parts.append(note.splitlines()[0][:80])
        return ft.Container(
            content=ft.Row(
                [
                    ft.Container(width=6, height=32, bgcolor=color, border_radius=3),
                    ft.Column(
                        [title, ft.Text(" · ".join(subtitle_parts), size=12, color="#6B7280")],
                        spacing=2,
                        expand=True,
                    ),
                    ft.Icon(
                        ft.Icons.CHECK_CIRCLE if task.completed else ft.Icons.RADIO_BUTTON_UNCHECKED,
                        color="#22C55E" if task.completed else "#9CA3AF",
                        size=18,
                    ),
                ],
                spacing=10,
            ),
            padding=ft.padding.only(left=12 + depth * 24, right=12, top=4, bottom=4),
        )
