"""Entity store client — talks to the persistence endpoint over HTTP.

Every operation is a single POST with a request envelope. Nothing is
retried; failures come back as ``Err`` with a message for the user.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

import httpx
import pydantic
from result import Err, Ok, Result

from hourglow.data.mapping import (
    observation_to_record,
    project_fields_to_record,
    project_from_record,
    project_to_record,
    visit_fields_to_record,
    visit_from_record,
    visit_to_record,
)
from hourglow.models.projects import Observation, Project, ProjectDraft
from hourglow.models.requests import StoreMethod, StoreRequest
from hourglow.models.visits import Visit, VisitDraft

logger = logging.getLogger(__name__)


class StoreClient:
    """Posts request envelopes to one collection route of the endpoint."""

    route = "/"
    label = "store"

    def __init__(
        self,
        base_url: str,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._transport = transport

    async def call(self, request: StoreRequest) -> Result[Any, str]:
        """Send one envelope and return the decoded JSON body."""
        try:
            async with httpx.AsyncClient(
                base_url=self._base_url, transport=self._transport
            ) as client:
                response = await client.post(self.route, json=request.to_wire())
        except httpx.HTTPError as exc:
            logger.warning("%s %s failed: %s", self.label, request.method, exc)
            return Err(f"Could not reach the {self.label} store: {exc}")

        if not response.is_success:
            message = _error_message(response)
            logger.warning(
                "%s %s rejected (%s): %s",
                self.label,
                request.method,
                response.status_code,
                message,
            )
            return Err(message)
        try:
            return Ok(response.json())
        except ValueError:
            return Err(f"The {self.label} store sent an unreadable response")


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and body.get("error"):
        return str(body["error"])
    return f"Request failed with status {response.status_code}"


class ProjectStoreClient(StoreClient):
    """Store operations on the project collection."""

    route = "/projects"
    label = "project"

    async def list_active(self) -> Result[list[Project], str]:
        result = await self.call(StoreRequest(method=StoreMethod.GET_ALL))
        if isinstance(result, Err):
            return result
        try:
            return Ok([project_from_record(record) for record in result.ok_value])
        except (pydantic.ValidationError, TypeError) as exc:
            return Err(f"Received an invalid project record: {exc}")

    async def create(self, draft: ProjectDraft | Project) -> Result[str, str]:
        """Store a new project and return its id.

        A draft is turned into a project with a fresh id first.
        """
        project = draft if isinstance(draft, Project) else Project.from_draft(draft)
        result = await self.call(
            StoreRequest(method=StoreMethod.CREATE, project_data=project_to_record(project))
        )
        if isinstance(result, Err):
            return result
        return Ok(project.id)

    async def update(self, project_id: str, fields: Mapping[str, Any]) -> Result[None, str]:
        try:
            data = project_fields_to_record(fields)
        except ValueError as exc:
            return Err(str(exc))
        result = await self.call(
            StoreRequest(method=StoreMethod.UPDATE, project_id=project_id, project_data=data)
        )
        return result if isinstance(result, Err) else Ok(None)

    async def soft_delete(self, project_id: str) -> Result[None, str]:
        result = await self.call(StoreRequest(method=StoreMethod.DELETE, project_id=project_id))
        return result if isinstance(result, Err) else Ok(None)

    async def append_observation(
        self, project_id: str, note: str | Observation
    ) -> Result[str, str]:
        """Attach an observation and return its id."""
        try:
            observation = note if isinstance(note, Observation) else Observation(text=note)
        except pydantic.ValidationError:
            return Err("Observation is required")
        result = await self.call(
            StoreRequest(
                method=StoreMethod.ADD_OBSERVATION,
                project_id=project_id,
                project_data=observation_to_record(observation),
            )
        )
        if isinstance(result, Err):
            return result
        return Ok(observation.id)


class VisitStoreClient(StoreClient):
    """Store operations on the visit collection."""

    route = "/visits"
    label = "visit"

    async def list_active(self) -> Result[list[Visit], str]:
        result = await self.call(StoreRequest(method=StoreMethod.GET_ALL))
        if isinstance(result, Err):
            return result
        try:
            return Ok([visit_from_record(record) for record in result.ok_value])
        except (pydantic.ValidationError, TypeError) as exc:
            return Err(f"Received an invalid visit record: {exc}")

    async def create(self, draft: VisitDraft | Visit) -> Result[str, str]:
        visit = draft if isinstance(draft, Visit) else Visit.from_draft(draft)
        result = await self.call(
            StoreRequest(method=StoreMethod.CREATE, visit_data=visit_to_record(visit))
        )
        if isinstance(result, Err):
            return result
        return Ok(visit.id)

    async def update(self, visit_id: str, fields: Mapping[str, Any]) -> Result[None, str]:
        try:
            data = visit_fields_to_record(fields)
        except ValueError as exc:
            return Err(str(exc))
        result = await self.call(
            StoreRequest(method=StoreMethod.UPDATE, visit_id=visit_id, visit_data=data)
        )
        return result if isinstance(result, Err) else Ok(None)

    async def soft_delete(self, visit_id: str) -> Result[None, str]:
        result = await self.call(StoreRequest(method=StoreMethod.DELETE, visit_id=visit_id))
        return result if isinstance(result, Err) else Ok(None)
