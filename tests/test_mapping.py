"""Tests for model <-> record translation."""

from __future__ import annotations

from datetime import UTC, date, datetime

import pytest

from hourglow.data.mapping import (
    OBSERVATIONS_KEY,
    project_fields_from_record,
    project_fields_to_record,
    project_from_record,
    project_to_record,
    visit_fields_to_record,
    visit_from_record,
    visit_to_record,
)
from hourglow.models.projects import Observation, ProjectLifecycle


def test_project_record_uses_storage_names(make_project) -> None:
    note = Observation(text="Kickoff", timestamp=datetime(2025, 1, 2, 10, tzinfo=UTC))
    record = project_to_record(make_project(executed_hours=12.5, observations=[note]))
    assert record["nombre"] == "ERP rollout"
    assert record["horas_planificadas"] == 100.0
    assert record["horas_ejecutadas"] == 12.5
    assert record["fecha_inicio"] == "2025-01-01"
    assert record["estado"] == "active"
    assert record["visible"] is True
    assert record[OBSERVATIONS_KEY] == [
        {"id": note.id, "texto": "Kickoff", "fecha": "2025-01-02T10:00:00Z"}
    ]


def test_project_from_record_restores_model(make_project) -> None:
    project = make_project(
        lifecycle=ProjectLifecycle.COMPLETED,
        observations=[Observation(text="Closed")],
    )
    restored = project_from_record(project_to_record(project))
    assert restored == project


def test_project_from_storage_row_with_integer_flags() -> None:
    row = {
        "id": "p1",
        "nombre": "Audit",
        "descripcion": "",
        "cliente": None,
        "horas_planificadas": 10,
        "horas_ejecutadas": 0,
        "tarifa_hora": 80,
        "fecha_inicio": "2025-05-01",
        "fecha_fin": "2025-05-31",
        "estado": "active",
        "visible": 1,
        "fecha_creacion": "2025-04-30T12:00:00+00:00",
    }
    project = project_from_record(row)
    assert project.visible is True
    assert project.client_name == ""
    assert project.start_date == date(2025, 5, 1)
    assert project.observations == []


@pytest.mark.parametrize(("terminado", "visible"), [(True, False), (False, True), (1, False)])
def test_legacy_terminado_flag_maps_to_visibility(terminado: object, visible: bool) -> None:
    fields = project_fields_from_record({"nombre": "Old", "terminado": terminado})
    assert fields["visible"] is visible


def test_explicit_visible_wins_over_legacy_flag() -> None:
    fields = project_fields_from_record({"visible": True, "terminado": True})
    assert fields["visible"] is True


def test_project_fields_to_record() -> None:
    record = project_fields_to_record(
        {"executed_hours": 30.0, "lifecycle": ProjectLifecycle.COMPLETED, "end_date": date(2025, 2, 1)}
    )
    assert record == {
        "horas_ejecutadas": 30.0,
        "estado": "completed",
        "fecha_fin": "2025-02-01",
    }


def test_project_fields_to_record_rejects_unknown_fields() -> None:
    with pytest.raises(ValueError, match="Unknown project fields: colour"):
        project_fields_to_record({"colour": "red"})


def test_visit_round_trip_and_names(make_visit) -> None:
    visit = make_visit(finished=True)
    record = visit_to_record(visit)
    assert record["producto"] == "Analytics suite"
    assert record["hora"] == 2.0
    assert record["fecha"] == "2025-02-03"
    assert record["terminado"] is True
    assert record["activo"] is True
    assert visit_from_record(record) == visit


def test_visit_fields_to_record() -> None:
    assert visit_fields_to_record({"finished": True, "hours": 3.0}) == {
        "terminado": True,
        "hora": 3.0,
    }
    with pytest.raises(ValueError, match="Unknown visit fields"):
        visit_fields_to_record({"observations": []})
