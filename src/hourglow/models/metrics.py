"""Derived metrics models."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel

from hourglow.models.projects import Project


class ProjectStatus(StrEnum):
    """Schedule status of a project relative to its date window."""

    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    AHEAD = "ahead"
    BEHIND = "behind"
    COMPLETED = "completed"
    OVERDUE = "overdue"

    @property
    def label(self) -> str:
        return _STATUS_LABELS[self]

    @property
    def tone(self) -> str:
        """Badge tone used by the view layer: neutral, positive or negative."""
        return _STATUS_TONES[self]


_STATUS_LABELS = {
    ProjectStatus.PENDING: "Pending",
    ProjectStatus.IN_PROGRESS: "In Progress",
    ProjectStatus.AHEAD: "Ahead",
    ProjectStatus.BEHIND: "Behind",
    ProjectStatus.COMPLETED: "Completed",
    ProjectStatus.OVERDUE: "Overdue",
}

_STATUS_TONES = {
    ProjectStatus.PENDING: "neutral",
    ProjectStatus.IN_PROGRESS: "neutral",
    ProjectStatus.AHEAD: "positive",
    ProjectStatus.BEHIND: "negative",
    ProjectStatus.COMPLETED: "positive",
    ProjectStatus.OVERDUE: "negative",
}


class Budget(BaseModel):
    """Cost figures of a single project."""

    executed_cost: float
    planned_cost: float
    over_budget: bool
    overage: float

    @property
    def display_overage(self) -> float | None:
        """Overage to show, only when the project is over budget."""
        return self.overage if self.over_budget else None


class DashboardTotals(BaseModel):
    """Aggregate KPIs over the visible projects and visits."""

    total_projects: int = 0
    completed_projects: int = 0
    total_planned_hours: float = 0.0
    total_executed_hours: float = 0.0
    total_revenue: float = 0.0
    total_visits: int = 0
    total_visit_hours: float = 0.0
    total_opportunity_value: float = 0.0


class ProjectView(BaseModel):
    """A project together with the values derived for display."""

    project: Project
    status: ProjectStatus
    budget: Budget
    hours_progress: float
    time_progress: float
    progress_bar: float
