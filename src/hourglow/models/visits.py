"""Commercial visit models."""

from __future__ import annotations

import datetime as dt

from pydantic import BaseModel, Field

from hourglow.models.projects import new_id, utc_now


class VisitDraft(BaseModel):
    """User-entered fields of a visit that does not exist yet."""

    product: str = Field(min_length=1)
    client_name: str = ""
    opportunity_number: str = ""
    country: str = ""
    consultant: str = ""
    hours: float = Field(gt=0)
    date: dt.date
    opportunity_value: float = Field(gt=0)


class Visit(VisitDraft):
    """A logged commercial interaction."""

    id: str = Field(default_factory=new_id, min_length=1)
    finished: bool = False
    visible: bool = True
    created_at: dt.datetime = Field(default_factory=utc_now)

    @classmethod
    def from_draft(cls, draft: VisitDraft) -> Visit:
        return cls(**draft.model_dump())
