"""Tag-dispatched handlers behind the two persistence routes."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import pydantic

from hourglow.data.errors import InvalidRequestError, NotFoundError
from hourglow.data.mapping import (
    observation_from_record,
    project_fields_from_record,
    project_from_record,
    project_to_record,
    visit_fields_from_record,
    visit_from_record,
    visit_to_record,
)
from hourglow.models.projects import Project
from hourglow.models.requests import StoreMethod, StoreRequest
from hourglow.models.visits import Visit

if TYPE_CHECKING:
    from hourglow.data.repositories import ProjectRepository, VisitRepository

logger = logging.getLogger(__name__)

SUCCESS: dict[str, Any] = {"success": True}


def _validation_message(exc: pydantic.ValidationError) -> str:
    first = exc.errors()[0]
    location = ".".join(str(part) for part in first.get("loc", ()))
    message = first.get("msg", "invalid value")
    return f"{location}: {message}" if location else message


def _require(value: str | None, name: str) -> str:
    if not value:
        msg = f"{name} is required"
        raise InvalidRequestError(msg)
    return value


def _require_data(data: dict[str, Any] | None, name: str) -> dict[str, Any]:
    if data is None:
        msg = f"{name} is required"
        raise InvalidRequestError(msg)
    return data


def _parse_method(raw: str) -> StoreMethod:
    try:
        return StoreMethod(raw)
    except ValueError:
        raise InvalidRequestError("Invalid method") from None


class ProjectEndpoint:
    """Handles requests against the project collection."""

    def __init__(self, repository: ProjectRepository) -> None:
        self._repo = repository

    async def handle(self, request: StoreRequest) -> Any:
        try:
            match _parse_method(request.method):
                case StoreMethod.GET_ALL:
                    projects = await self._repo.list_visible()
                    return [project_to_record(p) for p in projects]
                case StoreMethod.CREATE:
                    return await self._create(_require_data(request.project_data, "projectData"))
                case StoreMethod.UPDATE:
                    return await self._update(
                        _require(request.project_id, "projectId"),
                        _require_data(request.project_data, "projectData"),
                    )
                case StoreMethod.DELETE:
                    project_id = _require(request.project_id, "projectId")
                    await self._repo.soft_delete(project_id)
                    logger.info("Soft-deleted project %s", project_id)
                    return SUCCESS
                case StoreMethod.ADD_OBSERVATION:
                    return await self._add_observation(
                        _require(request.project_id, "projectId"),
                        _require_data(request.project_data, "projectData"),
                    )
        except pydantic.ValidationError as exc:
            raise InvalidRequestError(_validation_message(exc)) from exc

    async def _create(self, data: dict[str, Any]) -> dict[str, Any]:
        project = project_from_record(data)
        await self._repo.insert(project)
        logger.info("Created project %s (%s)", project.id, project.name)
        return {**SUCCESS, "id": project.id}

    async def _update(self, project_id: str, data: dict[str, Any]) -> dict[str, Any]:
        existing = await self._repo.get(project_id)
        if existing is None:
            msg = f"Project {project_id} not found"
            raise NotFoundError(msg)
        fields = project_fields_from_record(data)
        fields.pop("id", None)
        merged = Project.model_validate({**existing.model_dump(), **fields})
        await self._repo.save(merged)
        logger.info("Updated project %s: %s", project_id, ", ".join(sorted(fields)) or "-")
        return SUCCESS

    async def _add_observation(self, project_id: str, data: dict[str, Any]) -> dict[str, Any]:
        observation = observation_from_record(data)
        await self._repo.add_observation(project_id, observation)
        logger.info("Added observation %s to project %s", observation.id, project_id)
        return {**SUCCESS, "id": observation.id}


class VisitEndpoint:
    """Handles requests against the visit collection."""

    def __init__(self, repository: VisitRepository) -> None:
        self._repo = repository

    async def handle(self, request: StoreRequest) -> Any:
        try:
            match _parse_method(request.method):
                case StoreMethod.GET_ALL:
                    visits = await self._repo.list_visible()
                    return [visit_to_record(v) for v in visits]
                case StoreMethod.CREATE:
                    visit = visit_from_record(_require_data(request.visit_data, "visitData"))
                    await self._repo.insert(visit)
                    logger.info("Created visit %s (%s)", visit.id, visit.product)
                    return {**SUCCESS, "id": visit.id}
                case StoreMethod.UPDATE:
                    return await self._update(
                        _require(request.visit_id, "visitId"),
                        _require_data(request.visit_data, "visitData"),
                    )
                case StoreMethod.DELETE:
                    visit_id = _require(request.visit_id, "visitId")
                    await self._repo.soft_delete(visit_id)
                    logger.info("Deactivated visit %s", visit_id)
                    return SUCCESS
                case StoreMethod.ADD_OBSERVATION:
                    raise InvalidRequestError("Invalid method")
        except pydantic.ValidationError as exc:
            raise InvalidRequestError(_validation_message(exc)) from exc

    async def _update(self, visit_id: str, data: dict[str, Any]) -> dict[str, Any]:
        existing = await self._repo.get(visit_id)
        if existing is None:
            msg = f"Visit {visit_id} not found"
            raise NotFoundError(msg)
        fields = visit_fields_from_record(data)
        fields.pop("id", None)
        merged = Visit.model_validate({**existing.model_dump(), **fields})
        await self._repo.save(merged)
        logger.info("Updated visit %s: %s", visit_id, ", ".join(sorted(fields)) or "-")
        return SUCCESS
