"""Dashboard service — validated, confirm-then-merge mutations.

Every mutation validates its input, sends it to the store, and only after
the store confirmed it dispatches an action to the local state. A failed
call leaves the state exactly as it was.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from datetime import date, datetime
from typing import TYPE_CHECKING, Any

import pydantic
from result import Err, Ok, Result

from hourglow.models.projects import Observation, Project, ProjectLifecycle
from hourglow.models.visits import Visit
from hourglow.services import metrics
from hourglow.services.state import (
    Action,
    DashboardState,
    LoadFailed,
    LoadStarted,
    ObservationAdded,
    ProjectAdded,
    ProjectChanged,
    ProjectRemoved,
    ProjectsLoaded,
    VisitAdded,
    VisitChanged,
    VisitRemoved,
    VisitsLoaded,
    reduce,
)
from hourglow.services.validation import (
    FormData,
    ValidationError,
    parse_hours_to_log,
    parse_observation,
    parse_project_edit_form,
    parse_project_form,
    parse_visit_form,
)

if TYPE_CHECKING:
    from hourglow.client.store import ProjectStoreClient, VisitStoreClient
    from hourglow.models.metrics import DashboardTotals, ProjectView

logger = logging.getLogger(__name__)


class DashboardService:
    """Holds the dashboard state and performs user actions against the store."""

    def __init__(
        self,
        projects: ProjectStoreClient,
        visits: VisitStoreClient,
        state: DashboardState | None = None,
    ) -> None:
        self._projects = projects
        self._visits = visits
        self._state = state or DashboardState()

    @property
    def state(self) -> DashboardState:
        return self._state

    def dispatch(self, action: Action) -> DashboardState:
        self._state = reduce(self._state, action)
        return self._state

    # ── Loading ──

    async def load(self) -> DashboardState:
        """Load both collections.

        A collection that fails to load stays empty and the error is kept
        in the state, so the dashboard still opens.
        """
        self.dispatch(LoadStarted())
        projects = await self._projects.list_active()
        if isinstance(projects, Ok):
            self.dispatch(ProjectsLoaded(tuple(projects.ok_value)))
        else:
            logger.warning("Loading projects failed: %s", projects.err_value)
            self.dispatch(ProjectsLoaded(()))
            self.dispatch(LoadFailed(f"Projects could not be loaded: {projects.err_value}"))

        visits = await self._visits.list_active()
        if isinstance(visits, Ok):
            self.dispatch(VisitsLoaded(tuple(visits.ok_value)))
        else:
            logger.warning("Loading visits failed: %s", visits.err_value)
            self.dispatch(VisitsLoaded(()))
            self.dispatch(LoadFailed(f"Visits could not be loaded: {visits.err_value}"))
        return self._state

    # ── Derived values ──

    def totals(self) -> DashboardTotals:
        return metrics.aggregate(self._state.projects, self._state.visits)

    def project_views(self, now: date | datetime | None = None) -> list[ProjectView]:
        moment = now or datetime.now()
        return [metrics.project_view(p, moment) for p in self._state.projects]

    # ── Projects ──

    async def create_project(self, form: FormData) -> Result[Project, str]:
        try:
            project = Project.from_draft(parse_project_form(form))
        except ValidationError as exc:
            return Err(str(exc))
        result = await self._projects.create(project)
        if isinstance(result, Err):
            return result
        self.dispatch(ProjectAdded(project))
        return Ok(project)

    async def edit_project(self, project_id: str, form: FormData) -> Result[Project, str]:
        try:
            fields = parse_project_edit_form(form)
        except ValidationError as exc:
            return Err(str(exc))
        return await self._change_project(project_id, fields)

    async def log_hours(self, project_id: str, hours: object) -> Result[Project, str]:
        """Add worked hours to a project's executed hours."""
        project = self._state.project(project_id)
        if project is None:
            return Err(f"Project {project_id} not found")
        try:
            added = parse_hours_to_log(hours)
        except ValidationError as exc:
            return Err(str(exc))
        return await self._change_project(
            project_id, {"executed_hours": project.executed_hours + added}
        )

    async def complete_project(self, project_id: str) -> Result[Project, str]:
        return await self._change_project(
            project_id, {"lifecycle": ProjectLifecycle.COMPLETED}
        )

    async def reopen_project(self, project_id: str) -> Result[Project, str]:
        return await self._change_project(project_id, {"lifecycle": ProjectLifecycle.ACTIVE})

    async def add_observation(self, project_id: str, text: object) -> Result[Observation, str]:
        if self._state.project(project_id) is None:
            return Err(f"Project {project_id} not found")
        try:
            observation = Observation(text=parse_observation(text))
        except ValidationError as exc:
            return Err(str(exc))
        result = await self._projects.append_observation(project_id, observation)
        if isinstance(result, Err):
            return result
        self.dispatch(ObservationAdded(project_id, observation))
        return Ok(observation)

    async def delete_project(self, project_id: str) -> Result[None, str]:
        result = await self._projects.soft_delete(project_id)
        if isinstance(result, Err):
            return result
        self.dispatch(ProjectRemoved(project_id))
        return Ok(None)

    async def _change_project(
        self, project_id: str, fields: Mapping[str, Any]
    ) -> Result[Project, str]:
        current = self._state.project(project_id)
        if current is None:
            return Err(f"Project {project_id} not found")
        try:
            Project.model_validate({**current.model_dump(), **fields})
        except pydantic.ValidationError as exc:
            return Err(_first_error(exc))
        result = await self._projects.update(project_id, fields)
        if isinstance(result, Err):
            return result
        self.dispatch(ProjectChanged(project_id, dict(fields)))
        changed = self._state.project(project_id)
        assert changed is not None
        return Ok(changed)

    # ── Visits ──

    async def create_visit(self, form: FormData) -> Result[Visit, str]:
        try:
            visit = Visit.from_draft(parse_visit_form(form))
        except ValidationError as exc:
            return Err(str(exc))
        result = await self._visits.create(visit)
        if isinstance(result, Err):
            return result
        self.dispatch(VisitAdded(visit))
        return Ok(visit)

    async def edit_visit(self, visit_id: str, form: FormData) -> Result[Visit, str]:
        try:
            fields: dict[str, Any] = parse_visit_form(form).model_dump()
        except ValidationError as exc:
            return Err(str(exc))
        return await self._change_visit(visit_id, fields)

    async def toggle_visit_finished(self, visit_id: str) -> Result[Visit, str]:
        visit = self._state.visit(visit_id)
        if visit is None:
            return Err(f"Visit {visit_id} not found")
        return await self._change_visit(visit_id, {"finished": not visit.finished})

    async def delete_visit(self, visit_id: str) -> Result[None, str]:
        result = await self._visits.soft_delete(visit_id)
        if isinstance(result, Err):
            return result
        self.dispatch(VisitRemoved(visit_id))
        return Ok(None)

    async def _change_visit(self, visit_id: str, fields: Mapping[str, Any]) -> Result[Visit, str]:
        if self._state.visit(visit_id) is None:
            return Err(f"Visit {visit_id} not found")
        result = await self._visits.update(visit_id, fields)
        if isinstance(result, Err):
            return result
        self.dispatch(VisitChanged(visit_id, dict(fields)))
        changed = self._state.visit(visit_id)
        assert changed is not None
        return Ok(changed)


def _first_error(exc: pydantic.ValidationError) -> str:
    first = exc.errors()[0]
    return str(first.get("msg", exc))
