"""Form dialogs for creating and editing projects and visits."""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass
from typing import Any

from nicegui import ui
from result import Err, Result

type SubmitHandler = Callable[[dict[str, str]], Awaitable[Result[Any, str]]]


@dataclass(frozen=True)
class FormField:
    key: str
    label: str
    kind: str = "text"  # text | number | date | textarea
    required: bool = False


PROJECT_FIELDS = [
    FormField("name", "Project name", required=True),
    FormField("description", "Description", "textarea"),
    FormField("client_name", "Client"),
    FormField("consultant", "Consultant"),
    FormField("pm", "Project manager"),
    FormField("country", "Country"),
    FormField("opportunity_number", "Opportunity number"),
    FormField("opportunity_value", "Opportunity value", "number"),
    FormField("planned_hours", "Planned hours", "number", required=True),
    FormField("hourly_rate", "Hourly rate", "number", required=True),
    FormField("start_date", "Start date", "date", required=True),
    FormField("end_date", "End date", "date", required=True),
]

PROJECT_EDIT_FIELDS = [
    *PROJECT_FIELDS[:9],
    FormField("executed_hours", "Executed hours", "number"),
    *PROJECT_FIELDS[9:],
]

VISIT_FIELDS = [
    FormField("product", "Product", required=True),
    FormField("client_name", "Client"),
    FormField("opportunity_number", "Opportunity number"),
    FormField("country", "Country"),
    FormField("consultant", "Consultant"),
    FormField("hours", "Hours", "number", required=True),
    FormField("date", "Date", "date", required=True),
    FormField("opportunity_value", "Opportunity value", "number", required=True),
]


def _field_input(field: FormField, value: str) -> ui.input | ui.textarea:
    label = f"{field.label} *" if field.required else field.label
    if field.kind == "textarea":
        return ui.textarea(label, value=value).classes("w-full").props("outlined dense autogrow")
    element = ui.input(label, value=value).classes("w-full").props("outlined dense")
    if field.kind == "number":
        element.props("type=number step=any min=0")
    elif field.kind == "date":
        element.props("type=date stack-label")
    return element


def form_dialog(
    title: str,
    fields: list[FormField],
    on_submit: SubmitHandler,
    *,
    initial: Mapping[str, object] | None = None,
    submit_label: str = "Save",
    success_message: str = "Saved",
    on_success: Callable[[], None] | None = None,
) -> ui.dialog:
    """Build a dialog that collects ``fields`` and hands raw strings to ``on_submit``.

    The dialog stays open and shows a notification when the submit
    handler returns ``Err``. ``on_success`` runs after the dialog closed.
    """
    values = initial or {}
    inputs: dict[str, ui.input | ui.textarea] = {}

    with ui.dialog() as dialog, ui.card().classes("w-[32rem] max-w-full"):
        ui.label(title).classes("text-lg font-bold")
        with ui.column().classes("w-full gap-2"):
            for field in fields:
                raw = values.get(field.key)
                inputs[field.key] = _field_input(field, "" if raw is None else str(raw))

        async def submit() -> None:
            form = {key: str(element.value or "") for key, element in inputs.items()}
            result = await on_submit(form)
            if isinstance(result, Err):
                ui.notify(result.err_value, type="negative")
                return
            ui.notify(success_message, type="positive")
            dialog.close()
            if on_success is not None:
                on_success()

        with ui.row().classes("w-full justify-end gap-2 mt-2"):
            ui.button("Cancel", on_click=dialog.close).props("flat")
            ui.button(submit_label, on_click=submit)

    return dialog


def prompt_dialog(
    title: str,
    label: str,
    on_submit: Callable[[str], Awaitable[Result[Any, str]]],
    *,
    kind: str = "text",
    submit_label: str = "Save",
    success_message: str = "Saved",
    on_success: Callable[[], None] | None = None,
) -> ui.dialog:
    """Single-field variant of :func:`form_dialog` (hours to log, observations)."""
    field = FormField("value", label, kind, required=True)

    async def handle(form: dict[str, str]) -> Result[Any, str]:
        return await on_submit(form["value"])

    return form_dialog(
        title,
        [field],
        handle,
        submit_label=submit_label,
        success_message=success_message,
        on_success=on_success,
    )


def confirm_dialog(
    title: str,
    message: str,
    on_confirm: Callable[[], Awaitable[Result[Any, str]]],
    *,
    confirm_label: str = "Delete",
    success_message: str = "Deleted",
    on_success: Callable[[], None] | None = None,
) -> ui.dialog:
    with ui.dialog() as dialog, ui.card():
        ui.label(title).classes("text-lg font-bold")
        ui.label(message)

        async def confirm() -> None:
            result = await on_confirm()
            if isinstance(result, Err):
                ui.notify(result.err_value, type="negative")
                return
            ui.notify(success_message, type="positive")
            dialog.close()
            if on_success is not None:
                on_success()

        with ui.row().classes("w-full justify-end gap-2 mt-2"):
            ui.button("Cancel", on_click=dialog.close).props("flat")
            ui.button(confirm_label, on_click=confirm).props("color=negative")
    return dialog
