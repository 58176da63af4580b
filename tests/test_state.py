"""Tests for the dashboard state reducer."""

from __future__ import annotations

from datetime import date

import pydantic
import pytest

from hourglow.models.projects import Observation, ProjectLifecycle
from hourglow.services import metrics
from hourglow.services.state import (
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


def test_loaded_actions_keep_only_visible(make_project, make_visit) -> None:
    shown = make_project(name="Shown")
    hidden = make_project(name="Hidden", visible=False)
    state = reduce(DashboardState(), ProjectsLoaded((shown, hidden)))
    state = reduce(state, VisitsLoaded((make_visit(), make_visit(visible=False))))
    assert state.loaded is True
    assert [p.name for p in state.projects] == ["Shown"]
    assert len(state.visits) == 1


def test_load_failure_is_recorded_and_cleared(make_project) -> None:
    state = reduce(DashboardState(), LoadFailed("Projects could not be loaded: boom"))
    assert state.loaded is True
    assert state.errors == ("Projects could not be loaded: boom",)
    assert reduce(state, LoadStarted()).errors == ()


def test_reduce_leaves_input_state_untouched(make_project) -> None:
    before = DashboardState(projects=(make_project(),))
    after = reduce(before, ProjectAdded(make_project(name="Second")))
    assert len(before.projects) == 1
    assert len(after.projects) == 2
    assert after.projects[0].name == "Second"


def test_project_added_ignores_duplicates_and_hidden(make_project) -> None:
    project = make_project()
    state = DashboardState(projects=(project,))
    assert reduce(state, ProjectAdded(project)) is state
    assert reduce(state, ProjectAdded(make_project(visible=False))) is state


def test_project_changed_merges_fields(make_project) -> None:
    project = make_project(executed_hours=10.0)
    state = DashboardState(projects=(project,))
    state = reduce(
        state,
        ProjectChanged(project.id, {"executed_hours": 25.0, "lifecycle": ProjectLifecycle.COMPLETED}),
    )
    changed = state.project(project.id)
    assert changed is not None
    assert changed.executed_hours == 25.0
    assert changed.is_completed
    assert changed.name == project.name


def test_project_changed_revalidates(make_project) -> None:
    project = make_project()
    state = DashboardState(projects=(project,))
    with pytest.raises(pydantic.ValidationError):
        reduce(state, ProjectChanged(project.id, {"end_date": date(2024, 1, 1)}))


def test_unknown_ids_return_same_state(make_project, make_visit) -> None:
    state = DashboardState(projects=(make_project(),), visits=(make_visit(),))
    assert reduce(state, ProjectChanged("missing", {"executed_hours": 1.0})) is state
    assert reduce(state, ProjectRemoved("missing")) is state
    assert reduce(state, ObservationAdded("missing", Observation(text="x"))) is state
    assert reduce(state, VisitChanged("missing", {"finished": True})) is state
    assert reduce(state, VisitRemoved("missing")) is state


def test_observation_appended_last(make_project) -> None:
    first = Observation(text="Kickoff")
    project = make_project(observations=[first])
    state = DashboardState(projects=(project,))
    state = reduce(state, ObservationAdded(project.id, Observation(text="Scope agreed")))
    changed = state.project(project.id)
    assert changed is not None
    assert [o.text for o in changed.observations] == ["Kickoff", "Scope agreed"]
    assert len(project.observations) == 1


def test_project_removed(make_project) -> None:
    keep, drop = make_project(name="Keep"), make_project(name="Drop")
    state = reduce(DashboardState(projects=(keep, drop)), ProjectRemoved(drop.id))
    assert [p.name for p in state.projects] == ["Keep"]


def test_visit_lifecycle(make_visit) -> None:
    visit = make_visit()
    state = reduce(DashboardState(), VisitAdded(visit))
    assert reduce(state, VisitAdded(visit)) is state
    state = reduce(state, VisitChanged(visit.id, {"finished": True}))
    changed = state.visit(visit.id)
    assert changed is not None and changed.finished is True
    state = reduce(state, VisitRemoved(visit.id))
    assert state.visits == ()


def test_totals_unchanged_by_failed_or_noop_transitions(make_project, make_visit) -> None:
    state = DashboardState(
        projects=(make_project(executed_hours=30.0),),
        visits=(make_visit(),),
        loaded=True,
    )
    snapshot = metrics.aggregate(state.projects, state.visits)
    for action in (
        ProjectRemoved("missing"),
        VisitChanged("missing", {"hours": 99.0}),
        ProjectAdded(make_project(visible=False)),
    ):
        state = reduce(state, action)
    assert metrics.aggregate(state.projects, state.visits) == snapshot
