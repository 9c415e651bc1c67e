from __future__ import annotations

from typing import Callable, Optional

import flet as ft

from core.settings import UI
from models.task import Task

_LEVEL_COLORS = {
    "success": UI.theme.running,
    "error": UI.theme.danger,
}


def show_message(page: ft.Page, message: str, level: str = "info") -> None:
    bar = ft.SnackBar(ft.Text(message), bgcolor=_LEVEL_COLORS.get(level))
    page.open(bar)


def confirm_dialog(
    page: ft.Page,
    message: str,
    on_result: Callable[[bool], None],
    *,
    title: str = "Please confirm",
) -> ft.AlertDialog:
    dlg: Optional[ft.AlertDialog] = None

    def _answer(value: bool):
        page.close(dlg)
        on_result(value)

    dlg = ft.AlertDialog(
        modal=True,
        title=ft.Text(title),
        content=ft.Text(message),
        actions=[
            ft.TextButton("Cancel", on_click=lambda e: _answer(False)),
            ft.FilledButton("OK", on_click=lambda e: _answer(True)),
        ],
        actions_alignment=ft.MainAxisAlignment.END,
    )
    page.open(dlg)
    return dlg


def task_form_dialog(
    page: ft.Page,
    on_save: Callable[[dict], bool],
    *,
    task: Optional[Task] = None,
) -> ft.AlertDialog:
    """New/edit task form. ``on_save`` returns True when the dialog may close."""

    title_tf = ft.TextField(label="Title", value=task.title if task else "", autofocus=True)
    description_tf = ft.TextField(
        label="Description",
        value=task.description if task else "",
        multiline=True,
        min_lines=2,
        max_lines=6,
    )
    ticket_tf = ft.TextField(label="Jira ticket", value=task.jira_ticket if task else "")
    tags_tf = ft.TextField(
        label="Tags",
        hint_text="comma separated",
        value=", ".join(task.tags) if task else "",
    )
    recurring_cb = ft.Checkbox(label="Recurring", value=task.is_recurring if task else False)

    dlg: Optional[ft.AlertDialog] = None

    def _save(_):
        values = {
            "title": title_tf.value or "",
            "description": description_tf.value or "",
            "jira_ticket": ticket_tf.value or "",
            "tags": tags_tf.value or "",
            "is_recurring": bool(recurring_cb.value),
        }
        if on_save(values):
            page.close(dlg)

    dlg = ft.AlertDialog(
        modal=True,
        title=ft.Text("Edit Task" if task else "New Task"),
        content=ft.Column(
            [title_tf, description_tf, ticket_tf, tags_tf, recurring_cb],
            tight=True,
            spacing=12,
            width=UI.window_min_width // 2,
        ),
        actions=[
            ft.TextButton("Cancel", on_click=lambda e: page.close(dlg)),
            ft.FilledButton("Save", on_click=_save),
        ],
        actions_alignment=ft.MainAxisAlignment.END,
    )
    page.open(dlg)
    return dlg
