# ui/pages/report.py
from __future__ import annotations

from datetime import date
from typing import List

import flet as ft

from core.settings import UI
from services.errors import ValidationError
from services.report import default_range, generate_report

from ..view_model import ReportCard, ReportView, report_view


class ReportPage:
    def __init__(self, app):
        self.app = app
        self.svc = app.tasks

        start, end = default_range()
        self.start_tf = ft.TextField(label="Start date", value=start.isoformat(), width=150)
        self.end_tf = ft.TextField(label="End date", value=end.isoformat(), width=150)

        self.start_picker = ft.DatePicker(
            first_date=date(2000, 1, 1),
            last_date=date(2100, 12, 31),
            on_change=lambda e: self._set_date(self.start_tf, e.control.value),
        )
        self.end_picker = ft.DatePicker(
            first_date=date(2000, 1, 1),
            last_date=date(2100, 12, 31),
            on_change=lambda e: self._set_date(self.end_tf, e.control.value),
        )

        self.generate_btn = ft.FilledButton(
            "Generate", icon=ft.Icons.INSERT_CHART, on_click=self.run_report
        )
        self.label_text = ft.Text("", size=12, color=UI.theme.text_subtle)
        self.summary_row = ft.Row(spacing=24)
        self.result_list = ft.ListView(expand=True, spacing=8)

        filters = ft.Row(
            [
                ft.Row(
                    [
                        self.start_tf,
                        ft.IconButton(
                            icon=ft.Icons.CALENDAR_MONTH,
                            tooltip="Pick date",
                            on_click=lambda e: self.app.page.open(self.start_picker),
                        ),
                    ],
                    spacing=6,
                ),
                ft.Row(
                    [
                        self.end_tf,
                        ft.IconButton(
                            icon=ft.Icons.CALENDAR_MONTH,
                            tooltip="Pick date",
                            on_click=lambda e: self.app.page.open(self.end_picker),
                        ),
                    ],
                    spacing=6,
                ),
                self.generate_btn,
            ],
            spacing=12,
            vertical_alignment=ft.CrossAxisAlignment.END,
        )

        self.view = ft.Container(
            content=ft.Column(
                [
                    ft.Text("Report", size=24, weight=ft.FontWeight.BOLD),
                    filters,
                    self.label_text,
                    self.summary_row,
                    ft.Container(content=self.result_list, expand=True),
                ],
                spacing=16,
                expand=True,
            ),
            expand=True,
            padding=20,
        )

    def activate_from_menu(self):
        self.run_report()

    def _set_date(self, tf: ft.TextField, value):
        if value is None:
            return
        tf.value = value.date().isoformat() if hasattr(value, "date") else str(value)[:10]
        self.app.page.update()

    # ---------- Data ----------
    def run_report(self, _=None):
        try:
            report = generate_report(self.svc.tasks, self.start_tf.value, self.end_tf.value)
        except ValidationError as exc:
            self.app.notify(str(exc), "error")
            return
        self._render(report_view(report))
        self.app.page.update()

    def _render(self, view: ReportView):
        self.label_text.value = view.label
        self.summary_row.controls = [
            self._stat("Total", view.total_time),
            self._stat("Tasks", view.tasks_label),
            self._stat("Sessions", view.sessions_label),
        ]
        self.result_list.controls.clear()
        if view.empty_message:
            self.result_list.controls.append(ft.Text(view.empty_message, color=UI.theme.text_subtle))
            return
        for card in view.cards:
            self.result_list.controls.append(self._card(card))

    def _stat(self, caption: str, value: str) -> ft.Control:
        return ft.Column(
            [
                ft.Text(caption, size=12, color=UI.theme.text_subtle),
                ft.Text(value, size=18, weight=ft.FontWeight.W_600),
            ],
            spacing=2,
        )

    def _card(self, card: ReportCard) -> ft.Control:
        meta: List[str] = [card.status_label]
        if card.jira_ticket:
            meta.append(card.jira_ticket)
        if card.is_recurring:
            meta.append("Recurring")
        if card.tags:
            meta.append(", ".join(card.tags))

        body: List[ft.Control] = [
            ft.Row(
                [
                    ft.Text(card.title, size=16, weight=ft.FontWeight.W_600, expand=True),
                    ft.Text(card.total, size=16, weight=ft.FontWeight.BOLD),
                ]
            ),
            ft.Text(" · ".join(meta), size=12, color=UI.theme.text_subtle),
        ]
        if card.description:
            body.append(ft.Text(card.description, size=12))
        for row in card.rows:
            suffix = " (running)" if row.live else ""
            body.append(
                ft.Text(f"{row.date}  {row.started} – {row.ended}  {row.duration}{suffix}", size=12)
            )
        for comment in card.comments:
            body.append(
                ft.Text(f"{comment.created}: {comment.text}", size=12, color=UI.theme.text_subtle)
            )

        return ft.Card(
            content=ft.Container(
                content=ft.Column(body, spacing=4),
                padding=16,
                bgcolor=UI.theme.safe_surface_bg,
            )
        )
