"""Projects dashboard page — KPI cards and the project grid."""

from __future__ import annotations

from nicegui import ui

from hourglow.ui.components.forms import PROJECT_FIELDS, form_dialog
from hourglow.ui.components.project_card import render_project_card
from hourglow.ui.components.stat_card import project_stat_row
from hourglow.ui.deps import get_dashboard
from hourglow.ui.layout import error_banner, page_layout
from hourglow.ui.theme import COLORS


def setup() -> None:
    """Register the projects dashboard page."""

    @ui.page("/")
    async def dashboard_page() -> None:
        svc = get_dashboard()
        await svc.load()

        @ui.refreshable
        def content() -> None:
            state = svc.state
            for message in state.errors:
                error_banner(message)

            project_stat_row(svc.totals())

            views = svc.project_views()
            if not views:
                with ui.card().classes("w-full p-6").style(
                    f"background-color: {COLORS['surface']}"
                ):
                    ui.label("No projects yet. Create one to get started.").style(
                        f"color: {COLORS['text_muted']}"
                    )
                return

            with ui.grid(columns="repeat(auto-fill, minmax(24rem, 1fr))").classes("w-full gap-4"):
                for view in views:
                    render_project_card(view, svc, content.refresh)

        with page_layout("Projects"):
            create_dialog = form_dialog(
                "New project",
                PROJECT_FIELDS,
                svc.create_project,
                submit_label="Create",
                success_message="Project created",
                on_success=content.refresh,
            )
            with ui.row().classes("w-full items-center justify-between"):
                ui.label("Projects").classes("text-2xl font-bold")
                ui.button("New project", icon="add", on_click=create_dialog.open)
            content()
