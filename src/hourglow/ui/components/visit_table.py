"""Commercial visits table with per-row actions."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from functools import partial

from nicegui import ui
from result import Err

from hourglow.models.visits import Visit
from hourglow.services.dashboard_service import DashboardService
from hourglow.ui.components.forms import VISIT_FIELDS, confirm_dialog, form_dialog
from hourglow.ui.layout import notify_result_error
from hourglow.ui.theme import COLORS, format_currency, format_date, format_hours


def _visit_row(visit: Visit, svc: DashboardService, on_changed: Callable[[], None]) -> None:
    async def toggle_finished() -> None:
        result = await svc.toggle_visit_finished(visit.id)
        if isinstance(result, Err):
            notify_result_error(result.err_value)
        on_changed()

    edit_dialog = form_dialog(
        f"Edit visit: {visit.product}",
        VISIT_FIELDS,
        partial(svc.edit_visit, visit.id),
        initial=visit.model_dump(),
        success_message="Visit updated",
        on_success=on_changed,
    )
    delete_dialog = confirm_dialog(
        "Delete visit",
        f"The visit for '{visit.product}' will be hidden.",
        partial(svc.delete_visit, visit.id),
        success_message="Visit deleted",
        on_success=on_changed,
    )

    with ui.row().classes("w-full items-center gap-4 py-2 no-wrap").style(
        f"border-bottom: 1px solid {COLORS['border']}"
    ):
        ui.checkbox(value=visit.finished, on_change=toggle_finished).tooltip("Finished")
        with ui.column().classes("gap-0 flex-1"):
            ui.label(visit.product).classes("font-semibold")
            details = [part for part in (visit.client_name, visit.consultant, visit.country) if part]
            if details:
                ui.label(" · ".join(details)).classes("text-xs").style(
                    f"color: {COLORS['text_muted']}"
                )
        ui.label(format_date(visit.date)).classes("text-sm w-28")
        ui.label(format_hours(visit.hours)).classes("text-sm w-16 text-right")
        ui.label(format_currency(visit.opportunity_value)).classes("text-sm w-28 text-right")
        with ui.row().classes("gap-0"):
            ui.button(icon="edit", on_click=edit_dialog.open).props("flat dense round")
            ui.button(icon="delete", on_click=delete_dialog.open).props(
                "flat dense round color=negative"
            )


def render_visit_table(
    visits: Sequence[Visit],
    svc: DashboardService,
    on_changed: Callable[[], None],
) -> None:
    """Render every visit as a row. Empty lists show a placeholder."""
    with (
        ui.card()
        .classes("w-full p-4")
        .style(f"background-color: {COLORS['surface']}; border: 1px solid {COLORS['border']}")
    ):
        if not visits:
            ui.label("No visits recorded yet").style(f"color: {COLORS['text_muted']}")
            return
        with ui.row().classes("w-full gap-4 pb-2 text-xs font-semibold no-wrap").style(
            f"color: {COLORS['text_muted']}"
        ):
            ui.label("Done").classes("w-10")
            ui.label("Product").classes("flex-1")
            ui.label("Date").classes("w-28")
            ui.label("Hours").classes("w-16 text-right")
            ui.label("Opportunity").classes("w-28 text-right")
            ui.label("").classes("w-20")
        for visit in visits:
            _visit_row(visit, svc, on_changed)
