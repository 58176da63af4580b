"""Shared page layout with header navigation."""

from __future__ import annotations

from collections.abc import Generator
from contextlib import contextmanager

from nicegui import ui

from hourglow.ui.theme import COLORS

NAV_ITEMS = [
    ("Projects", "/", "folder_open"),
    ("Visits", "/visits", "work"),
]


@contextmanager
def page_layout(title: str = "Hourglow") -> Generator[None]:
    """Shared page shell with header and navigation buttons."""
    ui.colors(
        primary=COLORS["primary"],
        secondary=COLORS["secondary"],
        accent=COLORS["accent"],
        positive=COLORS["success"],
        warning=COLORS["warning"],
        negative=COLORS["error"],
    )
    ui.page_title(f"{title} · Hourglow")
    ui.query("body").style(f"background-color: {COLORS['bg']}")

    with (
        ui.header()
        .classes("items-center justify-between px-4 q-py-sm")
        .style(f"background-color: {COLORS['surface']}; color: {COLORS['text']}")
    ):
        with ui.row().classes("items-center gap-2"):
            ui.icon("hourglass_bottom").classes("text-2xl").style(
                f"color: {COLORS['primary']}"
            )
            ui.label("Hourglow").classes("text-lg font-bold")

        with ui.row().classes("items-center gap-1"):
            for label, path, icon in NAV_ITEMS:
                ui.button(
                    label, icon=icon, on_click=lambda _e=None, p=path: ui.navigate.to(p)
                ).props("flat dense").classes("text-xs")

    with ui.column().classes("w-full max-w-7xl mx-auto p-4 gap-4"):
        yield


def error_banner(message: str) -> None:
    """Display an error banner."""
    with (
        ui.card()
        .classes("w-full")
        .style(f"background-color: {COLORS['error']}22; border: 1px solid {COLORS['error']}")
    ):
        with ui.row().classes("items-center gap-2 p-2"):
            ui.icon("error").style(f"color: {COLORS['error']}")
            ui.label(message).style(f"color: {COLORS['error']}")


def notify_result_error(message: str) -> None:
    ui.notify(message, type="negative")
