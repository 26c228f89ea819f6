from __future__ import annotations

from typing import Callable, Optional

import flet as ft

from core.quadrants import quadrant_color, quadrant_of
from core.settings import UI
from datetime_utils import format_local
from models.task import Task


def open_alert_dialog(page: ft.Page, *, title: str, content: ft.Control, actions: list[ft.Control]):
    dlg = ft.AlertDialog(
        modal=True,
        title=ft.Text(title),
        content=content,
        actions=actions,
        actions_alignment=ft.MainAxisAlignment.END,
    )
    page.open(dlg)
    return dlg


def close_alert_dialog(page: ft.Page, dlg: ft.AlertDialog | None):
    if dlg is not None:
        page.close(dlg)


def prompt_text(
    page: ft.Page,
    *,
    title: str,
    label: str,
    value: str = "",
    on_save: Callable[[str], None],
    multiline: bool = False,
    save_label: str = "Save",
):
    """Ask for one line (or a block) of text; ``on_save`` gets the raw value."""
    field = ft.TextField(
        label=label,
        value=value,
        autofocus=True,
        multiline=multiline,
        min_lines=5 if multiline else 1,
        max_lines=10 if multiline else 1,
        max_length=None if multiline else UI.matrix.title_max_length,
    )
    dlg: ft.AlertDialog | None = None

    def _save(_):
        close_alert_dialog(page, dlg)
        on_save(field.value or "")

    if not multiline:
        field.on_submit = _save

    dlg = open_alert_dialog(
        page,
        title=title,
        content=ft.Container(width=460, content=field),
        actions=[
            ft.TextButton("Cancel", on_click=lambda e: close_alert_dialog(page, dlg)),
            ft.FilledButton(save_label, icon=ft.Icons.SAVE, on_click=_save),
        ],
    )
    return dlg


def confirm(page: ft.Page, *, title: str, message: str, on_confirm: Callable[[], None]):
    dlg: ft.AlertDialog | None = None

    def _ok(_):
        close_alert_dialog(page, dlg)
        on_confirm()

    dlg = open_alert_dialog(
        page,
        title=title,
        content=ft.Text(message),
        actions=[
            ft.TextButton("Cancel", on_click=lambda e: close_alert_dialog(page, dlg)),
            ft.FilledButton("Delete", icon=ft.Icons.DELETE_OUTLINE, on_click=_ok),
        ],
    )
    return dlg


def task_details_dialog(
    page: ft.Page,
    task: Task,
    *,
    on_toggle: Callable[[Task], None],
    on_edit_note: Callable[[Task], None],
    on_close: Optional[Callable[[], None]] = None,
):
    label = quadrant_of(task)
    color = quadrant_color(label)
    note = (task.notes or "").strip()
    dlg: ft.AlertDialog | None = None

    def _close(_=None):
        close_alert_dialog(page, dlg)
        if on_close is not None:
            on_close()

    def _toggle(_):
        close_alert_dialog(page, dlg)
        on_toggle(task)

    def _edit(_):
        close_alert_dialog(page, dlg)
        on_edit_note(task)

    flags = ft.Row(
        [
            ft.Row(
                [
                    ft.Icon(ft.Icons.SCHEDULE, color="#EF4444" if task.urgent else "#9CA3AF"),
                    ft.Text("Urgent" if task.urgent else "Not Urgent"),
                ],
                spacing=6,
            ),
            ft.Row(
                [
                    ft.Icon(ft.Icons.TRACK_CHANGES, color="#3B82F6" if task.important else "#9CA3AF"),
                    ft.Text("Important" if task.important else "Not Important"),
                ],
                spacing=6,
            ),
        ],
        alignment=ft.MainAxisAlignment.SPACE_BETWEEN,
    )
    status = ft.Row(
        [
            ft.Row(
                [
                    ft.Icon(
                        ft.Icons.CHECK_CIRCLE if task.completed else ft.Icons.RADIO_BUTTON_UNCHECKED,
                        color="#22C55E" if task.completed else "#9CA3AF",
                    ),
                    ft.Text("Completed" if task.completed else "Not Completed"),
                ],
                spacing=6,
            ),
            ft.Row(
                [
                    ft.Icon(ft.Icons.CALENDAR_MONTH),
                    ft.Text(f"Created: {format_local(task.created_at)}"),
                ],
                spacing=6,
            ),
        ],
        alignment=ft.MainAxisAlignment.SPACE_BETWEEN,
    )
    notes_block = ft.Container(
        content=ft.Text(note or "No notes added yet.", selectable=True),
        padding=10,
        height=140,
        border_radius=8,
        bgcolor=ft.Colors.with_opacity(0.06, ft.Colors.ON_SURFACE),
    )

    dlg = open_alert_dialog(
        page,
        title=task.title,
        content=ft.Container(
            width=480,
            content=ft.Column(
                [
                    ft.Container(
                        content=ft.Text(label, size=12, weight=ft.FontWeight.W_600, color=color),
                        padding=ft.padding.symmetric(horizontal=8, vertical=4),
                        border_radius=ft.border_radius.all(8),
                        bgcolor=ft.Colors.with_opacity(0.12, color),
                    ),
                    flags,
                    status,
                    ft.Text("Notes", weight=ft.FontWeight.W_600),
                    notes_block,
                ],
                spacing=12,
                tight=True,
            ),
        ),
        actions=[
            ft.TextButton(
                "Mark open" if task.completed else "Mark done",
                icon=ft.Icons.CHECK,
                on_click=_toggle,
            ),
            ft.TextButton("Edit note", icon=ft.Icons.EDIT_NOTE, on_click=_edit),
            ft.FilledButton("Close", on_click=_close),
        ],
    )
    return dlg
