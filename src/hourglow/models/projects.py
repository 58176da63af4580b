"""Project-level models."""

from __future__ import annotations

import uuid
from datetime import UTC, date, datetime
from enum import StrEnum

from pydantic import BaseModel, Field, model_validator


def new_id() -> str:
    """Opaque identifier for a new entity or observation."""
    return uuid.uuid4().hex


def utc_now() -> datetime:
    return datetime.now(tz=UTC)


class ProjectLifecycle(StrEnum):
    """Whether the work on a project is still going on."""

    ACTIVE = "active"
    COMPLETED = "completed"


class Observation(BaseModel):
    """A timestamped free-text note."""

    id: str = Field(default_factory=new_id)
    text: str = Field(min_length=1)
    timestamp: datetime = Field(default_factory=utc_now)


class ProjectDraft(BaseModel):
    """User-entered fields of a project that does not exist yet."""

    name: str = Field(min_length=1)
    description: str = ""
    client_name: str = ""
    consultant: str = ""
    pm: str = ""
    country: str = ""
    opportunity_number: str = ""
    opportunity_value: float = Field(default=0.0, ge=0)
    planned_hours: float = Field(gt=0)
    hourly_rate: float = Field(gt=0)
    start_date: date
    end_date: date

    @model_validator(mode="after")
    def _check_date_range(self) -> ProjectDraft:
        if self.start_date > self.end_date:
            msg = "Start date must not be after end date"
            raise ValueError(msg)
        return self


class Project(ProjectDraft):
    """A tracked unit of consulting work.

    ``planned_hours`` is strictly positive, so the progress ratios of the
    metrics engine are always finite.
    """

    id: str = Field(default_factory=new_id, min_length=1)
    executed_hours: float = Field(default=0.0, ge=0)
    lifecycle: ProjectLifecycle = ProjectLifecycle.ACTIVE
    visible: bool = True
    created_at: datetime = Field(default_factory=utc_now)
    observations: list[Observation] = Field(default_factory=list)

    @classmethod
    def from_draft(cls, draft: ProjectDraft) -> Project:
        """Create a new project with a fresh id and no executed hours."""
        return cls(**draft.model_dump())

    @property
    def is_completed(self) -> bool:
        return self.lifecycle is ProjectLifecycle.COMPLETED
