"""Repository tests against a real SQLite database."""

from __future__ import annotations

import sqlite3
from datetime import UTC, datetime
from typing import Any

import pytest

from hourglow.data.db import SCHEMA_VERSION, Database
from hourglow.data.errors import ConflictError, NotFoundError
from hourglow.data.repositories import ProjectRepository, VisitRepository
from hourglow.models.projects import Observation, ProjectLifecycle


@pytest.mark.asyncio
async def test_schema_is_created_once(tmp_path) -> None:
    path = tmp_path / "store.db"
    async with Database(path) as db:
        row = await db.fetch_one("SELECT value FROM app_meta WHERE key = 'schema_version'")
        assert row is not None
        assert row["value"] == str(SCHEMA_VERSION)
        repo = ProjectRepository(db)
        assert await repo.list_visible() == []
    async with Database(path) as db:
        tables = await db.fetch_all("SELECT name FROM sqlite_master WHERE type = 'table'")
        assert {"projects", "observations", "visits", "app_meta"} <= {t["name"] for t in tables}


@pytest.mark.asyncio
async def test_database_requires_connection(tmp_path) -> None:
    db = Database(tmp_path / "x.db")
    with pytest.raises(RuntimeError, match="not connected"):
        _ = db.conn


@pytest.mark.asyncio
async def test_project_insert_get_and_list_order(in_memory_db, make_project) -> None:
    repo = ProjectRepository(in_memory_db)
    older = make_project(name="Older", created_at=datetime(2025, 1, 1, tzinfo=UTC))
    newer = make_project(
        name="Newer",
        created_at=datetime(2025, 2, 1, tzinfo=UTC),
        observations=[Observation(text="Kickoff")],
    )
    await repo.insert(older)
    await repo.insert(newer)

    listed = await repo.list_visible()
    assert [p.name for p in listed] == ["Newer", "Older"]
    assert [o.text for o in listed[0].observations] == ["Kickoff"]
    assert await repo.get(older.id) == older


@pytest.mark.asyncio
async def test_project_insert_duplicate_conflicts(in_memory_db, make_project) -> None:
    repo = ProjectRepository(in_memory_db)
    project = make_project()
    await repo.insert(project)
    with pytest.raises(ConflictError):
        await repo.insert(project)


@pytest.mark.asyncio
async def test_project_save_overwrites_scalars(in_memory_db, make_project) -> None:
    repo = ProjectRepository(in_memory_db)
    project = make_project()
    await repo.insert(project)
    changed = project.model_copy(
        update={"executed_hours": 55.0, "lifecycle": ProjectLifecycle.COMPLETED}
    )
    await repo.save(changed)
    stored = await repo.get(project.id)
    assert stored is not None
    assert stored.executed_hours == 55.0
    assert stored.is_completed

    with pytest.raises(NotFoundError):
        await repo.save(make_project())


@pytest.mark.asyncio
async def test_project_soft_delete_is_idempotent(in_memory_db, make_project) -> None:
    repo = ProjectRepository(in_memory_db)
    project = make_project()
    await repo.insert(project)

    await repo.soft_delete(project.id)
    await repo.soft_delete(project.id)

    assert await repo.list_visible() == []
    hidden = await repo.get(project.id)
    assert hidden is not None
    assert hidden.visible is False

    with pytest.raises(NotFoundError):
        await repo.soft_delete("missing")


@pytest.mark.asyncio
async def test_observations_are_kept_in_order(in_memory_db, make_project) -> None:
    repo = ProjectRepository(in_memory_db)
    project = make_project()
    await repo.insert(project)
    await repo.add_observation(
        project.id, Observation(text="First", timestamp=datetime(2025, 1, 2, tzinfo=UTC))
    )
    await repo.add_observation(
        project.id, Observation(text="Second", timestamp=datetime(2025, 1, 3, tzinfo=UTC))
    )
    stored = await repo.get(project.id)
    assert stored is not None
    assert [o.text for o in stored.observations] == ["First", "Second"]

    with pytest.raises(NotFoundError):
        await repo.add_observation("missing", Observation(text="x"))


@pytest.mark.asyncio
async def test_visit_repository_crud(in_memory_db, make_visit) -> None:
    repo = VisitRepository(in_memory_db)
    visit = make_visit()
    await repo.insert(visit)
    with pytest.raises(ConflictError):
        await repo.insert(visit)

    await repo.save(visit.model_copy(update={"finished": True}))
    stored = await repo.get(visit.id)
    assert stored is not None
    assert stored.finished is True

    await repo.soft_delete(visit.id)
    await repo.soft_delete(visit.id)
    assert await repo.list_visible() == []
    assert await repo.get("missing") is None
    with pytest.raises(NotFoundError):
        await repo.soft_delete("missing")


class _BatchWriteFails:
    """Wraps a connected Database so that batch inserts fail."""

    def __init__(self, db: Database) -> None:
        self._db = db

    def __getattr__(self, name: str) -> Any:
        return getattr(self._db, name)

    async def execute_many(self, sql: str, params_seq: list[tuple[Any, ...]]) -> None:
        msg = "disk I/O error"
        raise sqlite3.OperationalError(msg)


@pytest.mark.asyncio
async def test_failed_insert_is_rolled_back(in_memory_db, make_project, make_visit) -> None:
    failing = ProjectRepository(_BatchWriteFails(in_memory_db))  # type: ignore[arg-type]
    project = make_project(observations=[Observation(text="Kickoff")])
    with pytest.raises(sqlite3.OperationalError):
        await failing.insert(project)

    await VisitRepository(in_memory_db).insert(make_visit())

    projects = ProjectRepository(in_memory_db)
    assert await projects.list_visible() == []
    assert await projects.get(project.id) is None


@pytest.mark.asyncio
async def test_duplicate_observation_ids_conflict(in_memory_db, make_project) -> None:
    repo = ProjectRepository(in_memory_db)
    twins = [Observation(id="dup", text="One"), Observation(id="dup", text="Two")]
    rejected = make_project(observations=twins)
    with pytest.raises(ConflictError, match="Observation dup already exists"):
        await repo.insert(rejected)
    assert await repo.get(rejected.id) is None

    project = make_project()
    await repo.insert(project)
    await repo.add_observation(project.id, Observation(id="o1", text="First"))
    with pytest.raises(ConflictError):
        await repo.add_observation(project.id, Observation(id="o1", text="Again"))
    stored = await repo.get(project.id)
    assert stored is not None
    assert [o.text for o in stored.observations] == ["First"]
