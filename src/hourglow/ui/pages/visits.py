"""Commercial visits page."""

from __future__ import annotations

from nicegui import ui

from hourglow.ui.components.forms import VISIT_FIELDS, form_dialog
from hourglow.ui.components.stat_card import visit_stat_row
from hourglow.ui.components.visit_table import render_visit_table
from hourglow.ui.deps import get_dashboard
from hourglow.ui.layout import error_banner, page_layout


def setup() -> None:
    """Register the visits page."""

    @ui.page("/visits")
    async def visits_page() -> None:
        svc = get_dashboard()
        await svc.load()

        @ui.refreshable
        def content() -> None:
            for message in svc.state.errors:
                error_banner(message)
            visit_stat_row(svc.totals())
            render_visit_table(svc.state.visits, svc, content.refresh)

        with page_layout("Visits"):
            create_dialog = form_dialog(
                "New visit",
                VISIT_FIELDS,
                svc.create_visit,
                submit_label="Create",
                success_message="Visit created",
                on_success=content.refresh,
            )
            with ui.row().classes("w-full items-center justify-between"):
                ui.label("Commercial visits").classes("text-2xl font-bold")
                ui.button("New visit", icon="add", on_click=create_dialog.open)
            content()
