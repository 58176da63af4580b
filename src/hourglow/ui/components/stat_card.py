"""Stat card component."""

from __future__ import annotations

from nicegui import ui

from hourglow.models.metrics import DashboardTotals
from hourglow.ui.theme import COLORS, format_currency, format_hours


def stat_card(label: str, value: str | int, icon: str = "info", color: str = "") -> None:
    """Render a statistic card with icon, value, and label."""
    icon_color = color or COLORS["primary"]
    with (
        ui.card()
        .classes("p-4 flex-1 min-w-48")
        .style(f"background-color: {COLORS['surface']}; border: 1px solid {COLORS['border']}")
    ):
        with ui.row().classes("items-center gap-3"):
            ui.icon(icon).classes("text-3xl").style(f"color: {icon_color}")
            with ui.column().classes("gap-0"):
                ui.label(str(value)).classes("text-2xl font-bold")
                ui.label(label).classes("text-xs").style(f"color: {COLORS['text_muted']}")


def project_stat_row(totals: DashboardTotals) -> None:
    """KPI cards shown above the project grid."""
    with ui.row().classes("w-full gap-4 flex-wrap"):
        stat_card("Projects", f"{totals.total_projects:,}", "folder_open", COLORS["primary"])
        stat_card(
            "Planned Hours", format_hours(totals.total_planned_hours), "schedule", COLORS["accent"]
        )
        stat_card(
            "Executed Hours",
            format_hours(totals.total_executed_hours),
            "trending_up",
            COLORS["success"],
        )
        stat_card("Revenue", format_currency(totals.total_revenue), "attach_money", COLORS["warning"])
        stat_card("Visits", f"{totals.total_visits:,}", "work", COLORS["secondary"])


def visit_stat_row(totals: DashboardTotals) -> None:
    with ui.row().classes("w-full gap-4 flex-wrap"):
        stat_card("Visits", f"{totals.total_visits:,}", "work", COLORS["primary"])
        stat_card("Visit Hours", format_hours(totals.total_visit_hours), "schedule", COLORS["accent"])
        stat_card(
            "Opportunity Value",
            format_currency(totals.total_opportunity_value),
            "attach_money",
            COLORS["success"],
        )
