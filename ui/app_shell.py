# ui/app_shell.py
from __future__ import annotations

import asyncio
import logging

import flet as ft

from core.settings import JIRA, UI, UI_LOG_PATH
from core.statuses import IN_PROGRESS
from models.settings import JiraCredentials
from services.errors import TrackerError
from services.jira_client import check_connection
from services.jira_sync import JiraSync
from services.tasks import TaskService
from services.timer import confirmation_prompt
from utils.log import ensure_logger

from .dialogs import confirm_dialog, show_message
from .pages.report import ReportPage
from .pages.settings import SettingsPage
from .pages.tasks import TasksPage


class AppShell:
    def __init__(self, page: ft.Page):
        self.page = page
        self.logger = ensure_logger("timekeeper.ui", UI_LOG_PATH)

        self.page.title = UI.app_title
        self.page.horizontal_alignment = ft.CrossAxisAlignment.STRETCH
        self.page.vertical_alignment = ft.MainAxisAlignment.START

        self.tasks = TaskService(notify=self.notify)
        self.tasks.load()
        self.tasks.subscribe("after_status", self._on_status_changed)

        self._tasks_page = TasksPage(self)
        self._report = ReportPage(self)
        self._settings = SettingsPage(self)

        self.content = ft.Container(expand=True)
        self.nav = ft.NavigationRail(
            selected_index=0,
            label_type=ft.NavigationRailLabelType.ALL,
            min_width=90,
            group_alignment=-0.9,
            on_change=self.on_nav_change,
            destinations=[
                ft.NavigationRailDestination(
                    icon=ft.Icons.TIMER_OUTLINED,
                    selected_icon=ft.Icons.TIMER,
                    label="Tasks",
                ),
                ft.NavigationRailDestination(
                    icon=ft.Icons.INSERT_CHART_OUTLINED,
                    selected_icon=ft.Icons.INSERT_CHART,
                    label="Report",
                ),
                ft.NavigationRailDestination(
                    icon=ft.Icons.SETTINGS_OUTLINED,
                    selected_icon=ft.Icons.SETTINGS,
                    label="Settings",
                ),
            ],
        )
        self.root = ft.Row(
            controls=[
                ft.Container(self.nav, width=88, bgcolor=UI.theme.safe_surface_bg),
                ft.VerticalDivider(width=1),
                self.content,
            ],
            expand=True,
            spacing=0,
        )

        self._tick_task = None
        self._ticking = False
        self.page.on_disconnect = lambda e: self.stop_ticker()

    # ---------- notifications ----------
    def notify(self, message: str, level: str = "info") -> None:
        self.logger.log(logging.ERROR if level == "error" else logging.INFO, message)
        try:
            show_message(self.page, message, level)
        except Exception:
            self.logger.exception("Could not show notification")

    # ---------- Jira ----------
    def credentials(self) -> JiraCredentials:
        return self.tasks.store.load_settings()

    def save_credentials(self, credentials: JiraCredentials) -> None:
        self.tasks.store.save_settings(credentials)
        self.notify("Settings saved successfully", "success")

    def check_credentials(self, credentials: JiraCredentials) -> tuple[bool, str]:
        return check_connection(credentials)

    def sync_task(self, task_id: str) -> None:
        try:
            self.tasks.sync_task(task_id, JiraSync(self.credentials(), notify=self.notify))
        except TrackerError as exc:
            self.notify(f"Failed to sync with Jira: {exc}", "error")
        self._tasks_page.load()

    def _on_status_changed(self, task_id: str, old_status: str, new_status: str) -> None:
        self.refresh_ticker()
        if not JIRA.sync_on_stop or old_status != IN_PROGRESS:
            return
        task = self.tasks.get(task_id)
        if task is not None and task.jira_ticket and self.credentials().is_configured:
            self.sync_task(task_id)

    # ---------- status changes ----------
    def request_status(self, task_id: str, status: str) -> None:
        task = self.tasks.get(task_id)
        if task is None:
            return
        prompt = confirmation_prompt(task.status, status)

        def _apply(confirmed: bool = True):
            if confirmed:
                self.tasks.set_status(task_id, status, confirm=lambda _: True)
            self._tasks_page.load()

        if prompt:
            confirm_dialog(self.page, prompt, _apply)
        else:
            _apply()

    # ---------- timer refresh ----------
    def refresh_ticker(self) -> None:
        if self.tasks.ctx.active_task_id and self.content.content is self._tasks_page.view:
            self.start_ticker()
        else:
            self.stop_ticker()

    def start_ticker(self) -> None:
        if self._ticking:
            return
        self._ticking = True

        async def _loop():
            while self._ticking:
                await asyncio.sleep(UI.timer_refresh_sec)
                if not self._ticking:
                    break
                try:
                    self._tasks_page.refresh_timer()
                except Exception:
                    self.logger.exception("Timer refresh failed")

        self._tick_task = self.page.run_task(_loop)

    def stop_ticker(self) -> None:
        self._ticking = False
        if self._tick_task is not None:
            self._tick_task.cancel()
        self._tick_task = None

    # ---------- mount ----------
    def mount(self):
        self.page.controls.clear()
        self.page.add(self.root)
        self.content.content = self._tasks_page.view
        self._tasks_page.load()
        self.refresh_ticker()

    def on_nav_change(self, e: ft.ControlEvent):
        idx = int(e.control.selected_index)
        if idx == 0:
            self.content.content = self._tasks_page.view
            self._tasks_page.load()
        elif idx == 1:
            self.content.content = self._report.view
            self._report.activate_from_menu()
        else:
            self.content.content = self._settings.view
            self._settings.activate_from_menu()
        self.refresh_ticker()
        self.page.update()
