"""Project status and KPI rollups.

Everything here is pure arithmetic over already validated models. The
project model guarantees ``planned_hours > 0`` and ``start_date <=
end_date``, so none of these functions has to guard against them.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date, datetime, time

from hourglow.models.metrics import Budget, DashboardTotals, ProjectStatus, ProjectView
from hourglow.models.projects import Project, ProjectLifecycle
from hourglow.models.visits import Visit

# Percentage points hours progress may drift from time progress
# before a running project counts as ahead or behind.
SCHEDULE_TOLERANCE = 10.0


def _window(project: Project, now: datetime) -> tuple[datetime, datetime]:
    """Start/end instants of the project at midnight, in ``now``'s timezone."""
    start = datetime.combine(project.start_date, time.min, tzinfo=now.tzinfo)
    end = datetime.combine(project.end_date, time.min, tzinfo=now.tzinfo)
    return start, end


def _as_datetime(now: date | datetime) -> datetime:
    if isinstance(now, datetime):
        return now
    return datetime.combine(now, time.min)


def hours_progress(project: Project) -> float:
    """Executed hours as a percentage of planned hours (may exceed 100)."""
    return project.executed_hours / project.planned_hours * 100


def time_progress(project: Project, now: date | datetime) -> float:
    """Elapsed share of the date window as a percentage, clamped to 0..100."""
    current = _as_datetime(now)
    start, end = _window(project, current)
    duration = (end - start).total_seconds()
    if duration <= 0:
        return 100.0 if current >= start else 0.0
    elapsed = (current - start).total_seconds()
    return min(max(elapsed / duration * 100, 0.0), 100.0)


def progress_bar_value(project: Project) -> float:
    """Hours progress capped at 100 for progress bars."""
    return min(hours_progress(project), 100.0)


def compute_project_status(project: Project, now: date | datetime) -> ProjectStatus:
    """Classify a project by comparing hours progress to elapsed time."""
    current = _as_datetime(now)
    start, end = _window(project, current)
    progress = hours_progress(project)

    if current < start:
        return ProjectStatus.PENDING
    if current > end:
        return ProjectStatus.COMPLETED if progress >= 100 else ProjectStatus.OVERDUE

    elapsed = time_progress(project, current)
    if progress < elapsed - SCHEDULE_TOLERANCE:
        return ProjectStatus.BEHIND
    if progress > elapsed + SCHEDULE_TOLERANCE:
        return ProjectStatus.AHEAD
    return ProjectStatus.IN_PROGRESS


def compute_budget(project: Project) -> Budget:
    """Planned vs executed cost at the project's hourly rate."""
    executed_cost = project.executed_hours * project.hourly_rate
    planned_cost = project.planned_hours * project.hourly_rate
    return Budget(
        executed_cost=executed_cost,
        planned_cost=planned_cost,
        over_budget=project.executed_hours > project.planned_hours,
        overage=executed_cost - planned_cost,
    )


def aggregate(projects: Iterable[Project], visits: Iterable[Visit]) -> DashboardTotals:
    """Dashboard KPIs over the visible projects and visits.

    Soft-deleted records are skipped, so passing a freshly loaded
    collection and passing the local state give the same totals.
    """
    shown_projects = [p for p in projects if p.visible]
    shown_visits = [v for v in visits if v.visible]
    return DashboardTotals(
        total_projects=len(shown_projects),
        completed_projects=sum(
            1 for p in shown_projects if p.lifecycle is ProjectLifecycle.COMPLETED
        ),
        total_planned_hours=sum(p.planned_hours for p in shown_projects),
        total_executed_hours=sum(p.executed_hours for p in shown_projects),
        total_revenue=sum(p.executed_hours * p.hourly_rate for p in shown_projects),
        total_visits=len(shown_visits),
        total_visit_hours=sum(v.hours for v in shown_visits),
        total_opportunity_value=sum(v.opportunity_value for v in shown_visits),
    )


def project_view(project: Project, now: date | datetime) -> ProjectView:
    """Bundle a project with everything a project card displays."""
    return ProjectView(
        project=project,
        status=compute_project_status(project, now),
        budget=compute_budget(project),
        hours_progress=hours_progress(project),
        time_progress=time_progress(project, now),
        progress_bar=progress_bar_value(project),
    )
