"""Dashboard state and its pure transition function.

The view layer never mutates collections in place. Each confirmed change
becomes an action, and ``reduce`` returns the next state.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from hourglow.models.projects import Observation, Project
from hourglow.models.visits import Visit


class DashboardState(BaseModel):
    """Entities currently shown by the dashboard."""

    model_config = ConfigDict(frozen=True)

    projects: tuple[Project, ...] = ()
    visits: tuple[Visit, ...] = ()
    loaded: bool = False
    errors: tuple[str, ...] = Field(default_factory=tuple)

    def project(self, project_id: str) -> Project | None:
        return next((p for p in self.projects if p.id == project_id), None)

    def visit(self, visit_id: str) -> Visit | None:
        return next((v for v in self.visits if v.id == visit_id), None)


@dataclass(frozen=True)
class LoadStarted:
    """A fresh load begins; errors from earlier loads are cleared."""


@dataclass(frozen=True)
class ProjectsLoaded:
    projects: tuple[Project, ...]


@dataclass(frozen=True)
class VisitsLoaded:
    visits: tuple[Visit, ...]


@dataclass(frozen=True)
class LoadFailed:
    """Initial load failed; the dashboard keeps running with what it has."""

    message: str


@dataclass(frozen=True)
class ProjectAdded:
    project: Project


@dataclass(frozen=True)
class ProjectChanged:
    project_id: str
    fields: dict[str, Any]


@dataclass(frozen=True)
class ObservationAdded:
    project_id: str
    observation: Observation


@dataclass(frozen=True)
class ProjectRemoved:
    project_id: str


@dataclass(frozen=True)
class VisitAdded:
    visit: Visit


@dataclass(frozen=True)
class VisitChanged:
    visit_id: str
    fields: dict[str, Any]


@dataclass(frozen=True)
class VisitRemoved:
    visit_id: str


type Action = (
    LoadStarted
    | ProjectsLoaded
    | VisitsLoaded
    | LoadFailed
    | ProjectAdded
    | ProjectChanged
    | ObservationAdded
    | ProjectRemoved
    | VisitAdded
    | VisitChanged
    | VisitRemoved
)


def _merge_project(project: Project, fields: dict[str, Any]) -> Project:
    # Re-validate so a merged project still satisfies the model invariants.
    return Project.model_validate({**project.model_dump(), **fields, "id": project.id})


def _merge_visit(visit: Visit, fields: dict[str, Any]) -> Visit:
    return Visit.model_validate({**visit.model_dump(), **fields, "id": visit.id})


def reduce(state: DashboardState, action: Action) -> DashboardState:
    """Return the state that follows ``action``. ``state`` is left untouched.

    Actions that name an unknown id return ``state`` unchanged.
    """
    match action:
        case LoadStarted():
            return state.model_copy(update={"errors": ()})
        case ProjectsLoaded(projects=projects):
            visible = tuple(p for p in projects if p.visible)
            return state.model_copy(update={"projects": visible, "loaded": True})
        case VisitsLoaded(visits=visits):
            visible = tuple(v for v in visits if v.visible)
            return state.model_copy(update={"visits": visible, "loaded": True})
        case LoadFailed(message=message):
            return state.model_copy(update={"errors": (*state.errors, message), "loaded": True})
        case ProjectAdded(project=project):
            if state.project(project.id) is not None or not project.visible:
                return state
            return state.model_copy(update={"projects": (project, *state.projects)})
        case ProjectChanged(project_id=project_id, fields=fields):
            if state.project(project_id) is None:
                return state
            updated = tuple(
                _merge_project(p, fields) if p.id == project_id else p for p in state.projects
            )
            return state.model_copy(update={"projects": updated})
        case ObservationAdded(project_id=project_id, observation=observation):
            if state.project(project_id) is None:
                return state
            updated = tuple(
                p.model_copy(update={"observations": [*p.observations, observation]})
                if p.id == project_id
                else p
                for p in state.projects
            )
            return state.model_copy(update={"projects": updated})
        case ProjectRemoved(project_id=project_id):
            remaining = tuple(p for p in state.projects if p.id != project_id)
            if len(remaining) == len(state.projects):
                return state
            return state.model_copy(update={"projects": remaining})
        case VisitAdded(visit=visit):
            if state.visit(visit.id) is not None or not visit.visible:
                return state
            return state.model_copy(update={"visits": (visit, *state.visits)})
        case VisitChanged(visit_id=visit_id, fields=fields):
            if state.visit(visit_id) is None:
                return state
            updated_visits = tuple(
                _merge_visit(v, fields) if v.id == visit_id else v for v in state.visits
            )
            return state.model_copy(update={"visits": updated_visits})
        case VisitRemoved(visit_id=visit_id):
            remaining_visits = tuple(v for v in state.visits if v.id != visit_id)
            if len(remaining_visits) == len(state.visits):
                return state
            return state.model_copy(update={"visits": remaining_visits})
    return state
