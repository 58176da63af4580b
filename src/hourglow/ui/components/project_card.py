"""Project card — status badge, progress, budget, and per-project actions."""

from __future__ import annotations

from collections.abc import Callable
from functools import partial

from nicegui import ui
from result import Err

from hourglow.models.metrics import ProjectView
from hourglow.services.dashboard_service import DashboardService
from hourglow.ui.components.forms import (
    PROJECT_EDIT_FIELDS,
    confirm_dialog,
    form_dialog,
    prompt_dialog,
)
from hourglow.ui.layout import notify_result_error
from hourglow.ui.theme import (
    COLORS,
    format_currency,
    format_date,
    format_datetime,
    format_hours,
    format_percent,
    status_color,
)


def _metric(icon: str, label: str, value: str, color: str) -> None:
    with ui.row().classes("items-center gap-2"):
        ui.icon(icon).classes("text-lg").style(f"color: {color}")
        with ui.column().classes("gap-0"):
            ui.label(label).classes("text-xs").style(f"color: {COLORS['text_muted']}")
            ui.label(value).classes("text-sm font-semibold")


def render_project_card(
    view: ProjectView,
    svc: DashboardService,
    on_changed: Callable[[], None],
) -> None:
    """Render one project card. ``on_changed`` runs after a confirmed mutation."""
    project = view.project
    budget = view.budget

    hours_dialog = prompt_dialog(
        "Log hours",
        "Hours worked",
        partial(svc.log_hours, project.id),
        kind="number",
        submit_label="Add hours",
        success_message="Hours added",
        on_success=on_changed,
    )
    observation_dialog = prompt_dialog(
        "Add observation",
        "Observation",
        partial(svc.add_observation, project.id),
        kind="textarea",
        submit_label="Add",
        success_message="Observation added",
        on_success=on_changed,
    )
    edit_dialog = form_dialog(
        f"Edit {project.name}",
        PROJECT_EDIT_FIELDS,
        partial(svc.edit_project, project.id),
        initial=project.model_dump(),
        success_message="Project updated",
        on_success=on_changed,
    )
    delete_dialog = confirm_dialog(
        "Delete project",
        f"'{project.name}' will be hidden from the dashboard.",
        partial(svc.delete_project, project.id),
        success_message="Project deleted",
        on_success=on_changed,
    )

    async def toggle_lifecycle() -> None:
        if project.is_completed:
            result = await svc.reopen_project(project.id)
        else:
            result = await svc.complete_project(project.id)
        if isinstance(result, Err):
            notify_result_error(result.err_value)
            return
        on_changed()

    with (
        ui.card()
        .classes("p-4 w-full")
        .style(f"background-color: {COLORS['surface']}; border: 1px solid {COLORS['border']}")
    ):
        with ui.row().classes("w-full items-start justify-between no-wrap"):
            with ui.column().classes("gap-1"):
                with ui.row().classes("items-center gap-2"):
                    ui.label(project.name).classes("text-lg font-semibold")
                    ui.badge(view.status.label).style(
                        f"background-color: {status_color(view.status)}"
                    )
                    if project.is_completed:
                        ui.badge("Closed").props("outline")
                if project.description:
                    ui.label(project.description).classes("text-sm").style(
                        f"color: {COLORS['text_muted']}"
                    )
                details = [
                    part
                    for part in (project.client_name, project.consultant, project.pm, project.country)
                    if part
                ]
                if details:
                    ui.label(" · ".join(details)).classes("text-xs")
                ui.label(
                    f"{format_date(project.start_date)} → {format_date(project.end_date)}"
                ).classes("text-xs").style(f"color: {COLORS['text_muted']}")

            with ui.row().classes("gap-1"):
                ui.button(icon="add", on_click=hours_dialog.open).props("dense round").tooltip(
                    "Log hours"
                )
                with ui.button(icon="more_vert").props("flat dense round"):
                    with ui.menu():
                        ui.menu_item("Edit", on_click=edit_dialog.open)
                        ui.menu_item("Add observation", on_click=observation_dialog.open)
                        ui.menu_item(
                            "Reopen" if project.is_completed else "Mark completed",
                            on_click=toggle_lifecycle,
                        )
                        ui.menu_item("Delete", on_click=delete_dialog.open)

        with ui.row().classes("w-full justify-between text-sm mt-2"):
            ui.label(f"Progress {format_percent(view.hours_progress)}")
            ui.label(
                f"{format_hours(project.executed_hours)} / {format_hours(project.planned_hours)}"
            ).style(f"color: {COLORS['warning'] if budget.over_budget else COLORS['success']}")
        ui.linear_progress(value=view.progress_bar / 100, show_value=False).props("rounded")
        ui.label(f"Time elapsed {format_percent(view.time_progress)}").classes("text-xs").style(
            f"color: {COLORS['text_muted']}"
        )

        with ui.row().classes("w-full gap-6 mt-2"):
            _metric("schedule", "Planned", format_hours(project.planned_hours), COLORS["primary"])
            _metric(
                "trending_up", "Executed", format_hours(project.executed_hours), COLORS["success"]
            )
            _metric("attach_money", "Cost", format_currency(budget.executed_cost), COLORS["accent"])

        overage = budget.display_overage
        if overage is not None:
            with (
                ui.row()
                .classes("w-full items-center gap-2 p-2 mt-2 rounded")
                .style(f"background-color: {COLORS['warning']}22")
            ):
                ui.icon("warning").style(f"color: {COLORS['warning']}")
                ui.label(f"Over budget by {format_currency(overage)}").classes("text-xs")

        if project.observations:
            with ui.expansion(f"Observations ({len(project.observations)})").classes("w-full"):
                for observation in reversed(project.observations):
                    with ui.column().classes("gap-0 mb-2"):
                        ui.label(format_datetime(observation.timestamp)).classes("text-xs").style(
                            f"color: {COLORS['text_muted']}"
                        )
                        ui.label(observation.text).classes("text-sm")

