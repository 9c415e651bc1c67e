# ui/pages/settings.py
import flet as ft

from core.settings import SYNC_LOG_PATH
from models.settings import JiraCredentials
from utils.log import read_log_tail


class SettingsPage:
    def __init__(self, app):
        self.app = app

        self.url_tf = ft.TextField(label="Jira URL", hint_text="https://your-team.atlassian.net")
        self.email_tf = ft.TextField(label="Email")
        self.token_tf = ft.TextField(label="API token", password=True, can_reveal_password=True)
        self.connection_status = ft.Text("")

        self.save_btn = ft.FilledButton("Save", icon=ft.Icons.SAVE, on_click=self.save)
        self.test_btn = ft.OutlinedButton(
            "Test connection",
            icon=ft.Icons.LINK,
            on_click=self.check,
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
                ft.Text("Jira", size=18, weight=ft.FontWeight.W_600),
                self.url_tf,
                self.email_tf,
                self.token_tf,
                ft.Row([self.save_btn, self.test_btn], spacing=12),
                self.connection_status,
                ft.Column([
                    ft.Text("Sync log", size=18, weight=ft.FontWeight.W_600),
                    ft.Container(
                        ft.Column([self.log_view], scroll=ft.ScrollMode.AUTO),
                        height=200,
                        padding=10,
                        bgcolor=ft.Colors.SURFACE_CONTAINER_HIGHEST,
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
        creds = self.app.credentials()
        self.url_tf.value = creds.jira_url
        self.email_tf.value = creds.jira_email
        self.token_tf.value = creds.jira_token
        self.connection_status.value = ""
        self.refresh_log()

    def _form_credentials(self) -> JiraCredentials:
        return JiraCredentials(
            jira_url=(self.url_tf.value or "").strip(),
            jira_email=(self.email_tf.value or "").strip(),
            jira_token=(self.token_tf.value or "").strip(),
        )

    def save(self, _=None):
        self.app.save_credentials(self._form_credentials())

    def check(self, _=None):
        ok, message = self.app.check_credentials(self._form_credentials())
        self.connection_status.value = message
        self.connection_status.color = ft.Colors.GREEN if ok else ft.Colors.RED
        self.app.page.update()

    def refresh_log(self, _=None):
        self.log_view.value = read_log_tail(SYNC_LOG_PATH) or "Log is empty"
        self.app.page.update()
