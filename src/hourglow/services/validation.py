"""Parsing and validation of dashboard form input.

Forms hand over raw strings. The parsers here turn them into numbers,
dates and drafts, raising :class:`ValidationError` with a message fit for a
toast. Entity invariants are checked once more by the pydantic models.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from datetime import date, datetime

import pydantic

from hourglow.models.projects import ProjectDraft
from hourglow.models.visits import VisitDraft

DATE_FORMATS = ("%Y-%m-%d", "%d.%m.%Y", "%d/%m/%Y")

type FormData = Mapping[str, object]


class ValidationError(ValueError):
    """Invalid user input; the message is shown to the user as is."""


def _as_text(value: object) -> str:
    return "" if value is None else str(value).strip()


def require_text(value: object, *, field: str) -> str:
    text = _as_text(value)
    if not text:
        raise ValidationError(f"{field} is required")
    return text


def optional_text(value: object) -> str:
    return _as_text(value)


def parse_number(value: object, *, field: str, allow_zero: bool = False) -> float:
    """Parse a positive number (or non-negative with ``allow_zero``).

    Accepts a comma as decimal separator. NaN and infinities are rejected.
    """
    if isinstance(value, bool):
        raise ValidationError(f"{field} must be a number")
    if isinstance(value, int | float):
        number = float(value)
    else:
        text = _as_text(value).replace(",", ".")
        if not text:
            raise ValidationError(f"{field} is required")
        try:
            number = float(text)
        except ValueError:
            raise ValidationError(f"{field} must be a number") from None
    if not math.isfinite(number):
        raise ValidationError(f"{field} must be a number")
    if number < 0 or (number == 0 and not allow_zero):
        bound = "zero or more" if allow_zero else "greater than zero"
        raise ValidationError(f"{field} must be {bound}")
    return number


def parse_date(value: object, *, field: str) -> date:
    """Parse a date given as ``YYYY-MM-DD``, ``DD.MM.YYYY`` or ``DD/MM/YYYY``."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = _as_text(value)
    if not text:
        raise ValidationError(f"{field} is required")
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    raise ValidationError(f"{field} must be a date like 2025-01-31")


def parse_hours_to_log(value: object) -> float:
    return parse_number(value, field="Hours", allow_zero=False)


def parse_observation(value: object) -> str:
    return require_text(value, field="Observation")


def parse_project_form(form: FormData) -> ProjectDraft:
    """Build a :class:`ProjectDraft` from raw form values."""
    name = require_text(form.get("name"), field="Project name")
    planned_hours = parse_number(form.get("planned_hours"), field="Planned hours")
    hourly_rate = parse_number(form.get("hourly_rate"), field="Hourly rate")
    start_date = parse_date(form.get("start_date"), field="Start date")
    end_date = parse_date(form.get("end_date"), field="End date")
    if start_date > end_date:
        raise ValidationError("Start date must not be after end date")

    opportunity_value = 0.0
    if optional_text(form.get("opportunity_value")):
        opportunity_value = parse_number(
            form.get("opportunity_value"), field="Opportunity value", allow_zero=True
        )

    return _build(
        ProjectDraft,
        name=name,
        description=optional_text(form.get("description")),
        client_name=optional_text(form.get("client_name")),
        consultant=optional_text(form.get("consultant")),
        pm=optional_text(form.get("pm")),
        country=optional_text(form.get("country")),
        opportunity_number=optional_text(form.get("opportunity_number")),
        opportunity_value=opportunity_value,
        planned_hours=planned_hours,
        hourly_rate=hourly_rate,
        start_date=start_date,
        end_date=end_date,
    )


def parse_project_edit_form(form: FormData) -> dict[str, object]:
    """Validate a full project edit and return the fields to update.

    Same rules as creation, plus ``executed_hours`` which may be zero.
    """
    draft = parse_project_form(form)
    fields: dict[str, object] = draft.model_dump()
    if optional_text(form.get("executed_hours")):
        fields["executed_hours"] = parse_number(
            form.get("executed_hours"), field="Executed hours", allow_zero=True
        )
    return fields


def parse_visit_form(form: FormData) -> VisitDraft:
    """Build a :class:`VisitDraft` from raw form values."""
    product = require_text(form.get("product"), field="Product")
    hours = parse_number(form.get("hours"), field="Hours")
    opportunity_value = parse_number(form.get("opportunity_value"), field="Opportunity value")
    visit_date = parse_date(form.get("date"), field="Date")
    return _build(
        VisitDraft,
        product=product,
        client_name=optional_text(form.get("client_name")),
        opportunity_number=optional_text(form.get("opportunity_number")),
        country=optional_text(form.get("country")),
        consultant=optional_text(form.get("consultant")),
        hours=hours,
        date=visit_date,
        opportunity_value=opportunity_value,
    )


def _build[M: pydantic.BaseModel](model: type[M], **values: object) -> M:
    try:
        return model(**values)
    except pydantic.ValidationError as exc:
        first = exc.errors()[0]
        raise ValidationError(str(first.get("msg", exc))) from exc
