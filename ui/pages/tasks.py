# ui/pages/tasks.py
from __future__ import annotations

from typing import List, Optional

import flet as ft

from core.settings import UI
from core.statuses import status_bgcolor, status_color
from services.errors import ValidationError

from ..dialogs import confirm_dialog, task_form_dialog
from ..view_model import ACTIONS, AppView, TaskDetail, TaskListItem, render

_ACTION_BUTTONS = {
    "start": ("Start", ft.Icons.PLAY_ARROW),
    "pause": ("Pause", ft.Icons.PAUSE),
    "complete": ("Complete", ft.Icons.CHECK),
    "reopen": ("Reopen", ft.Icons.REPLAY),
}


class TasksPage:
    def __init__(self, app):
        self.app = app
        self.svc = app.tasks
        self.selected_id: Optional[str] = None

        self.new_btn = ft.FilledButton("New Task", icon=ft.Icons.ADD, on_click=self.open_new_task)
        self.running_info = ft.Text("", size=12, color=UI.theme.text_subtle)
        self.task_list = ft.ListView(expand=True, spacing=6)

        # Timer label is kept so the tick loop can update it without a full rebuild.
        self.timer_text = ft.Text("00:00:00", size=32, weight=ft.FontWeight.BOLD)
        self.detail = ft.Column(expand=True, spacing=12, scroll=ft.ScrollMode.AUTO)
        self.comment_tf = ft.TextField(
            hint_text="Add a comment",
            expand=True,
            on_submit=self._add_comment,
        )

        sidebar = ft.Container(
            content=ft.Column(
                [
                    ft.Row(
                        [ft.Text("Tasks", size=24, weight=ft.FontWeight.BOLD), self.new_btn],
                        alignment=ft.MainAxisAlignment.SPACE_BETWEEN,
                    ),
                    self.running_info,
                    self.task_list,
                ],
                spacing=12,
                expand=True,
            ),
            width=340,
            padding=20,
        )

        self.view = ft.Row(
            [
                sidebar,
                ft.VerticalDivider(width=1),
                ft.Container(self.detail, expand=True, padding=20),
            ],
            expand=True,
            spacing=0,
        )

    # ---------- Data ----------
    def load(self):
        if self.selected_id and self.svc.get(self.selected_id) is None:
            self.selected_id = None
        model = render(self.svc.ctx, self.selected_id)
        self._render_list(model)
        self._render_detail(model.detail)
        try:
            self.app.page.update()
        except Exception:
            self.app.logger.exception("Tasks page update failed")

    def refresh_timer(self):
        """Called by the shell once a second while a task is running."""
        model = render(self.svc.ctx, self.selected_id)
        self._render_list(model)
        if model.detail is not None:
            self.timer_text.value = model.detail.timer_display
        self.app.page.update()

    # ---------- Rendering ----------
    def _render_list(self, model: AppView):
        if model.running_title:
            self.running_info.value = f"Running: {model.running_title}"
        else:
            self.running_info.value = "No timer running"

        self.task_list.controls.clear()
        for item in model.active:
            self.task_list.controls.append(self._list_tile(item))
        if model.recent:
            self.task_list.controls.append(
                ft.Text("Recently completed", size=14, weight=ft.FontWeight.W_600)
            )
            for item in model.recent:
                self.task_list.controls.append(self._list_tile(item))
        if not model.active and not model.recent:
            self.task_list.controls.append(
                ft.Text("No tasks yet", color=UI.theme.text_subtle)
            )

    def _list_tile(self, item: TaskListItem) -> ft.Control:
        subtitle = item.time_display
        if item.jira_ticket:
            subtitle = f"{item.jira_ticket} · {subtitle}"
        return ft.Container(
            content=ft.Row(
                [
                    ft.Icon(
                        ft.Icons.TIMER if item.is_running else ft.Icons.RADIO_BUTTON_UNCHECKED,
                        color=status_color(item.status),
                        size=18,
                    ),
                    ft.Column(
                        [
                            ft.Text(item.title, weight=ft.FontWeight.W_600, max_lines=1),
                            ft.Text(subtitle, size=12, color=UI.theme.text_subtle),
                        ],
                        spacing=2,
                        expand=True,
                    ),
                    self._status_badge(item.status, item.status_label),
                ],
                spacing=10,
            ),
            padding=10,
            border_radius=8,
            bgcolor=UI.theme.chip if item.is_selected else None,
            on_click=lambda e, task_id=item.id: self.select(task_id),
        )

    def _status_badge(self, status: str, label: str) -> ft.Control:
        return ft.Container(
            content=ft.Text(label, size=11, weight=ft.FontWeight.W_600, color=status_color(status)),
            bgcolor=status_bgcolor(status),
            padding=ft.padding.symmetric(horizontal=8, vertical=4),
            border_radius=ft.border_radius.all(8),
        )

    def _render_detail(self, detail: Optional[TaskDetail]):
        self.detail.controls.clear()
        if detail is None:
            self.detail.controls.append(
                ft.Text("Select a task to see its timer", color=UI.theme.text_subtle)
            )
            return

        self.timer_text.value = detail.timer_display

        meta: List[str] = [f"Created {detail.created}"]
        if detail.jira_ticket:
            meta.append(detail.jira_ticket)
        if detail.is_recurring:
            meta.append("Recurring")

        actions = [
            ft.FilledButton(
                _ACTION_BUTTONS[name][0],
                icon=_ACTION_BUTTONS[name][1],
                on_click=lambda e, n=name: self.app.request_status(detail.id, ACTIONS[n]),
            )
            for name in detail.actions
        ]
        actions.append(
            ft.IconButton(ft.Icons.EDIT, tooltip="Edit", on_click=lambda e: self.open_edit_task(detail.id))
        )
        if detail.can_sync:
            actions.append(
                ft.IconButton(
                    ft.Icons.SYNC,
                    tooltip="Sync with Jira",
                    on_click=lambda e: self.app.sync_task(detail.id),
                )
            )
        actions.append(
            ft.IconButton(
                ft.Icons.DELETE_OUTLINE,
                tooltip="Delete",
                icon_color=UI.theme.danger,
                on_click=lambda e: self._confirm_delete(detail.id, detail.title),
            )
        )

        controls: List[ft.Control] = [
            ft.Row(
                [
                    ft.Text(detail.title, size=22, weight=ft.FontWeight.BOLD, expand=True),
                    self._status_badge(detail.status, detail.status_label),
                ],
            ),
            ft.Text(" · ".join(meta), size=12, color=UI.theme.text_subtle),
            self.timer_text,
            ft.Row(actions, spacing=8, wrap=True),
        ]
        if detail.tags:
            controls.append(
                ft.Row(
                    [
                        ft.Container(
                            ft.Text(tag, size=11, color=UI.theme.chip_text),
                            bgcolor=UI.theme.chip,
                            padding=ft.padding.symmetric(horizontal=8, vertical=2),
                            border_radius=8,
                        )
                        for tag in detail.tags
                    ],
                    wrap=True,
                    spacing=6,
                )
            )
        if detail.description:
            controls.append(ft.Text(detail.description, selectable=True))

        controls.append(ft.Text("Recent sessions", size=16, weight=ft.FontWeight.W_600))
        if detail.sessions:
            for row in detail.sessions:
                controls.append(
                    ft.Text(
                        f"{row.date}  {row.started} – {row.ended}  ({row.duration})",
                        size=12,
                    )
                )
        else:
            controls.append(ft.Text("No sessions recorded", size=12, color=UI.theme.text_subtle))

        controls.append(ft.Text("Comments", size=16, weight=ft.FontWeight.W_600))
        for comment in detail.comments:
            controls.append(
                ft.Row(
                    [
                        ft.Column(
                            [
                                ft.Text(comment.text, selectable=True),
                                ft.Text(comment.created, size=11, color=UI.theme.text_subtle),
                            ],
                            spacing=2,
                            expand=True,
                        ),
                        ft.IconButton(
                            ft.Icons.CLOSE,
                            tooltip="Delete comment",
                            on_click=lambda e, cid=comment.id: self._delete_comment(detail.id, cid),
                        ),
                    ]
                )
            )
        self.comment_tf.value = ""
        controls.append(
            ft.Row(
                [self.comment_tf, ft.IconButton(ft.Icons.SEND, on_click=self._add_comment)],
            )
        )
        self.detail.controls.extend(controls)

    # ---------- Actions ----------
    def select(self, task_id: str):
        self.selected_id = task_id
        self.load()

    def open_new_task(self, _=None):
        self.svc.start_new_task_draft()
        self.load()

        def _save(values: dict) -> bool:
            try:
                task = self.svc.create_task(**values)
            except ValidationError as exc:
                self.app.notify(str(exc), "error")
                return False
            self.selected_id = task.id
            self.load()
            return True

        task_form_dialog(self.app.page, _save)

    def open_edit_task(self, task_id: str):
        task = self.svc.get(task_id)
        if task is None:
            return

        def _save(values: dict) -> bool:
            try:
                self.svc.update_task(task_id, **values)
            except ValidationError as exc:
                self.app.notify(str(exc), "error")
                return False
            self.load()
            return True

        task_form_dialog(self.app.page, _save, task=task)

    def _confirm_delete(self, task_id: str, title: str):
        def _done(confirmed: bool):
            if not confirmed:
                return
            self.svc.delete_task(task_id)
            self.selected_id = None
            self.load()
            self.app.refresh_ticker()

        confirm_dialog(self.app.page, f"Delete “{title}”?", _done, title="Delete task")

    def _add_comment(self, _=None):
        if not self.selected_id:
            return
        try:
            self.svc.add_comment(self.selected_id, self.comment_tf.value or "")
        except ValidationError as exc:
            self.app.notify(str(exc), "error")
            return
        self.load()

    def _delete_comment(self, task_id: str, comment_id: str):
        self.svc.delete_comment(task_id, comment_id)
        self.load()
