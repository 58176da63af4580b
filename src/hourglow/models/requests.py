"""Request envelope shared by the persistence endpoint and the store client."""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class StoreMethod(StrEnum):
    GET_ALL = "GET_ALL"
    CREATE = "CREATE"
    UPDATE = "UPDATE"
    DELETE = "DELETE"
    ADD_OBSERVATION = "ADD_OBSERVATION"


class StoreRequest(BaseModel):
    """One tag-dispatched operation against an entity collection.

    ``method`` is kept as a plain string so that unknown tags reach the
    dispatcher and are answered with a regular error body.
    """

    model_config = ConfigDict(populate_by_name=True)

    method: str
    project_id: str | None = Field(default=None, alias="projectId")
    visit_id: str | None = Field(default=None, alias="visitId")
    project_data: dict[str, Any] | None = Field(default=None, alias="projectData")
    visit_data: dict[str, Any] | None = Field(default=None, alias="visitData")

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)
