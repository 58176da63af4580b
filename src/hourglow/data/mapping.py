"""Translation between canonical models and storage/wire records.

The endpoint tables and the JSON exchanged with the store client share one
set of column names. This module is the only place that knows them.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel

from hourglow.models.projects import Observation, Project
from hourglow.models.visits import Visit

PROJECT_COLUMNS: dict[str, str] = {
    "id": "id",
    "name": "nombre",
    "description": "descripcion",
    "client_name": "cliente",
    "consultant": "consultor",
    "pm": "pm",
    "country": "pais",
    "opportunity_number": "numero_oportunidad",
    "opportunity_value": "monto_oportunidad",
    "planned_hours": "horas_planificadas",
    "executed_hours": "horas_ejecutadas",
    "hourly_rate": "tarifa_hora",
    "start_date": "fecha_inicio",
    "end_date": "fecha_fin",
    "lifecycle": "estado",
    "visible": "visible",
    "created_at": "fecha_creacion",
}

OBSERVATION_COLUMNS: dict[str, str] = {
    "id": "id",
    "text": "texto",
    "timestamp": "fecha",
}

VISIT_COLUMNS: dict[str, str] = {
    "id": "id",
    "product": "producto",
    "client_name": "client_name",
    "opportunity_number": "numero_oportunidad",
    "country": "pais",
    "consultant": "consultor",
    "hours": "hora",
    "date": "fecha",
    "opportunity_value": "monto_oportunidad",
    "finished": "terminado",
    "visible": "activo",
    "created_at": "fecha_creacion",
}

OBSERVATIONS_KEY = "observaciones"

# Older project payloads used one flag for "hidden" and "done".
_LEGACY_PROJECT_HIDDEN = "terminado"


def _rename(values: Mapping[str, Any], columns: Mapping[str, str]) -> dict[str, Any]:
    return {columns[key]: value for key, value in values.items() if key in columns}


def _unrename(record: Mapping[str, Any], columns: Mapping[str, str]) -> dict[str, Any]:
    reverse = {column: field for field, column in columns.items()}
    return {
        reverse[key]: value
        for key, value in record.items()
        if key in reverse and value is not None
    }


def _dump(model: BaseModel, columns: Mapping[str, str]) -> dict[str, Any]:
    return _rename(model.model_dump(mode="json"), columns)


# ── Projects ──


def project_to_record(project: Project) -> dict[str, Any]:
    """Full wire record of a project, observations included."""
    record = _dump(project, PROJECT_COLUMNS)
    record[OBSERVATIONS_KEY] = [observation_to_record(o) for o in project.observations]
    return record


def project_from_record(record: Mapping[str, Any]) -> Project:
    """Build a project from a storage row or wire record.

    Raises:
        pydantic.ValidationError: If the record violates the model.
    """
    values = project_fields_from_record(record)
    raw_observations = record.get(OBSERVATIONS_KEY) or []
    values["observations"] = [observation_from_record(o) for o in raw_observations]
    return Project.model_validate(values)


def project_fields_from_record(record: Mapping[str, Any]) -> dict[str, Any]:
    """Model field values carried by a (possibly partial) project record."""
    values = _unrename(record, PROJECT_COLUMNS)
    legacy_hidden = record.get(_LEGACY_PROJECT_HIDDEN)
    if "visible" not in values and legacy_hidden is not None:
        values["visible"] = not bool(legacy_hidden)
    return values


def project_fields_to_record(fields: Mapping[str, Any]) -> dict[str, Any]:
    """Wire record for a partial update given in model field names."""
    unknown = sorted(set(fields) - set(PROJECT_COLUMNS))
    if unknown:
        msg = f"Unknown project fields: {', '.join(unknown)}"
        raise ValueError(msg)
    return _rename(_json_safe(fields), PROJECT_COLUMNS)


def observation_to_record(observation: Observation) -> dict[str, Any]:
    return _dump(observation, OBSERVATION_COLUMNS)


def observation_from_record(record: Mapping[str, Any]) -> Observation:
    return Observation.model_validate(_unrename(record, OBSERVATION_COLUMNS))


# ── Visits ──


def visit_to_record(visit: Visit) -> dict[str, Any]:
    return _dump(visit, VISIT_COLUMNS)


def visit_from_record(record: Mapping[str, Any]) -> Visit:
    return Visit.model_validate(visit_fields_from_record(record))


def visit_fields_from_record(record: Mapping[str, Any]) -> dict[str, Any]:
    return _unrename(record, VISIT_COLUMNS)


def visit_fields_to_record(fields: Mapping[str, Any]) -> dict[str, Any]:
    unknown = sorted(set(fields) - set(VISIT_COLUMNS))
    if unknown:
        msg = f"Unknown visit fields: {', '.join(unknown)}"
        raise ValueError(msg)
    return _rename(_json_safe(fields), VISIT_COLUMNS)


def _json_safe(fields: Mapping[str, Any]) -> dict[str, Any]:
    out: dict[str, Any] = {}
    for key, value in fields.items():
        if hasattr(value, "isoformat"):
            out[key] = value.isoformat()
        elif isinstance(value, BaseModel):
            out[key] = value.model_dump(mode="json")
        elif isinstance(value, str):
            out[key] = str(value)
        else:
            out[key] = value
    return out
