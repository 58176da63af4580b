"""Pydantic models for Hourglow."""

from hourglow.models.metrics import Budget, DashboardTotals, ProjectStatus, ProjectView
from hourglow.models.projects import (
    Observation,
    Project,
    ProjectDraft,
    ProjectLifecycle,
    new_id,
    utc_now,
)
from hourglow.models.requests import StoreMethod, StoreRequest
from hourglow.models.visits import Visit, VisitDraft

__all__ = [
    "Budget",
    "DashboardTotals",
    "Observation",
    "Project",
    "ProjectDraft",
    "ProjectLifecycle",
    "ProjectStatus",
    "ProjectView",
    "StoreMethod",
    "StoreRequest",
    "Visit",
    "VisitDraft",
    "new_id",
    "utc_now",
]
