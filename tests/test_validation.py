"""Tests for form parsing and validation."""

from __future__ import annotations

from datetime import date, datetime

import pytest

from hourglow.services.validation import (
    ValidationError,
    parse_date,
    parse_hours_to_log,
    parse_number,
    parse_observation,
    parse_project_edit_form,
    parse_project_form,
    parse_visit_form,
)


def _project_form(**overrides: str) -> dict[str, str]:
    form = {
        "name": "  ERP rollout ",
        "description": "Phase one",
        "client_name": "Acme",
        "consultant": "Ana",
        "pm": "Marta",
        "country": "AR",
        "opportunity_number": "OPP-12",
        "opportunity_value": "",
        "planned_hours": "120",
        "hourly_rate": "95,5",
        "start_date": "2025-01-01",
        "end_date": "31/03/2025",
    }
    form.update(overrides)
    return form


def _visit_form(**overrides: str) -> dict[str, str]:
    form = {
        "product": "Analytics suite",
        "client_name": "Globex",
        "opportunity_number": "",
        "country": "CL",
        "consultant": "Luis",
        "hours": "1.5",
        "date": "03.02.2025",
        "opportunity_value": "5000",
    }
    form.update(overrides)
    return form


def test_parse_number_accepts_comma_decimal() -> None:
    assert parse_number("2,5", field="Hours") == 2.5
    assert parse_number(" 10 ", field="Hours") == 10.0
    assert parse_number(3, field="Hours") == 3.0


@pytest.mark.parametrize(
    ("value", "message"),
    [
        ("", "Hours is required"),
        (None, "Hours is required"),
        ("abc", "Hours must be a number"),
        ("nan", "Hours must be a number"),
        ("inf", "Hours must be a number"),
        (True, "Hours must be a number"),
        ("0", "Hours must be greater than zero"),
        ("-1", "Hours must be greater than zero"),
    ],
)
def test_parse_number_rejects(value: object, message: str) -> None:
    with pytest.raises(ValidationError, match=message):
        parse_number(value, field="Hours")


def test_parse_number_allow_zero() -> None:
    assert parse_number("0", field="Executed hours", allow_zero=True) == 0.0
    assert parse_number(0, field="Executed hours", allow_zero=True) == 0.0
    with pytest.raises(ValidationError, match="must be zero or more"):
        parse_number("-0.5", field="Executed hours", allow_zero=True)


def test_parse_date_formats() -> None:
    assert parse_date("2025-01-31", field="Date") == date(2025, 1, 31)
    assert parse_date("31.01.2025", field="Date") == date(2025, 1, 31)
    assert parse_date("31/01/2025", field="Date") == date(2025, 1, 31)
    assert parse_date(date(2025, 1, 31), field="Date") == date(2025, 1, 31)
    assert parse_date(datetime(2025, 1, 31, 10, 30), field="Date") == date(2025, 1, 31)


def test_parse_date_rejects() -> None:
    with pytest.raises(ValidationError, match="Date is required"):
        parse_date("", field="Date")
    with pytest.raises(ValidationError, match="Date must be a date like"):
        parse_date("2025-02-30", field="Date")


def test_parse_hours_and_observation() -> None:
    assert parse_hours_to_log("4") == 4.0
    with pytest.raises(ValidationError, match="Hours must be greater than zero"):
        parse_hours_to_log("0")
    assert parse_observation("  Kickoff done  ") == "Kickoff done"
    with pytest.raises(ValidationError, match="Observation is required"):
        parse_observation("   ")


def test_parse_project_form() -> None:
    draft = parse_project_form(_project_form())
    assert draft.name == "ERP rollout"
    assert draft.hourly_rate == 95.5
    assert draft.planned_hours == 120.0
    assert draft.opportunity_value == 0.0
    assert draft.start_date == date(2025, 1, 1)
    assert draft.end_date == date(2025, 3, 31)
    assert draft.pm == "Marta"


@pytest.mark.parametrize(
    ("overrides", "message"),
    [
        ({"name": " "}, "Project name is required"),
        ({"planned_hours": "0"}, "Planned hours must be greater than zero"),
        ({"hourly_rate": ""}, "Hourly rate is required"),
        ({"start_date": "soon"}, "Start date must be a date like"),
        ({"start_date": "2025-04-01"}, "Start date must not be after end date"),
        ({"opportunity_value": "-5"}, "Opportunity value must be zero or more"),
    ],
)
def test_parse_project_form_rejects(overrides: dict[str, str], message: str) -> None:
    with pytest.raises(ValidationError, match=message):
        parse_project_form(_project_form(**overrides))


def test_parse_project_form_allows_single_day_window() -> None:
    draft = parse_project_form(_project_form(start_date="2025-01-01", end_date="2025-01-01"))
    assert draft.start_date == draft.end_date


def test_parse_project_edit_form_includes_executed_hours() -> None:
    fields = parse_project_edit_form(_project_form(executed_hours="0"))
    assert fields["executed_hours"] == 0.0
    assert fields["name"] == "ERP rollout"

    without = parse_project_edit_form(_project_form())
    assert "executed_hours" not in without


def test_parse_visit_form() -> None:
    draft = parse_visit_form(_visit_form())
    assert draft.product == "Analytics suite"
    assert draft.hours == 1.5
    assert draft.date == date(2025, 2, 3)
    assert draft.opportunity_value == 5000.0
    assert draft.opportunity_number == ""


@pytest.mark.parametrize(
    ("overrides", "message"),
    [
        ({"product": ""}, "Product is required"),
        ({"hours": "0"}, "Hours must be greater than zero"),
        ({"opportunity_value": "0"}, "Opportunity value must be greater than zero"),
        ({"date": ""}, "Date is required"),
    ],
)
def test_parse_visit_form_rejects(overrides: dict[str, str], message: str) -> None:
    with pytest.raises(ValidationError, match=message):
        parse_visit_form(_visit_form(**overrides))
