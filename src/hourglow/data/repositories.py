"""Repository layer for SQL persistence of projects and visits."""

from __future__ import annotations

from collections import defaultdict
from typing import TYPE_CHECKING, Any

from hourglow.data.errors import ConflictError, NotFoundError
from hourglow.data.mapping import (
    OBSERVATIONS_KEY,
    PROJECT_COLUMNS,
    VISIT_COLUMNS,
    observation_to_record,
    project_from_record,
    project_to_record,
    visit_from_record,
    visit_to_record,
)

if TYPE_CHECKING:
    from hourglow.data.protocols import DatabaseProtocol
    from hourglow.models.projects import Observation, Project
    from hourglow.models.visits import Visit

_PROJECT_COLUMN_NAMES = list(PROJECT_COLUMNS.values())
_VISIT_COLUMN_NAMES = list(VISIT_COLUMNS.values())
_OBSERVATION_INSERT = (
    "INSERT INTO observations (id, project_id, texto, fecha) VALUES (?, ?, ?, ?)"
)


def _insert_sql(table: str, columns: list[str]) -> str:
    placeholders = ", ".join("?" for _ in columns)
    return f"INSERT INTO {table} ({', '.join(columns)}) VALUES ({placeholders})"


def _update_sql(table: str, columns: list[str]) -> str:
    assignments = ", ".join(f"{column} = ?" for column in columns if column != "id")
    return f"UPDATE {table} SET {assignments} WHERE id = ?"


def _insert_params(record: dict[str, Any], columns: list[str]) -> tuple[Any, ...]:
    return tuple(record[column] for column in columns)


def _update_params(record: dict[str, Any], columns: list[str]) -> tuple[Any, ...]:
    return (*(record[column] for column in columns if column != "id"), record["id"])


class ProjectRepository:
    """SQL repository for projects and their observations."""

    def __init__(self, db: DatabaseProtocol) -> None:
        self._db = db

    async def list_visible(self) -> list[Project]:
        """Visible projects, newest first, each with its observations oldest first."""
        rows = await self._db.fetch_all(
            "SELECT * FROM projects WHERE visible = 1 ORDER BY fecha_creacion DESC"
        )
        if not rows:
            return []
        ids = [row["id"] for row in rows]
        placeholders = ",".join("?" for _ in ids)
        observation_rows = await self._db.fetch_all(
            f"""SELECT * FROM observations
                WHERE project_id IN ({placeholders})
                ORDER BY fecha, rowid""",
            tuple(ids),
        )
        by_project: dict[str, list[dict[str, Any]]] = defaultdict(list)
        for obs in observation_rows:
            by_project[obs["project_id"]].append(dict(obs))
        return [
            project_from_record({**dict(row), OBSERVATIONS_KEY: by_project[row["id"]]})
            for row in rows
        ]

    async def get(self, project_id: str) -> Project | None:
        """Fetch a project by id, soft-deleted ones included."""
        row = await self._db.fetch_one("SELECT * FROM projects WHERE id = ?", (project_id,))
        if row is None:
            return None
        observation_rows = await self._db.fetch_all(
            "SELECT * FROM observations WHERE project_id = ? ORDER BY fecha, rowid",
            (project_id,),
        )
        return project_from_record(
            {**dict(row), OBSERVATIONS_KEY: [dict(o) for o in observation_rows]}
        )

    async def insert(self, project: Project) -> None:
        if await self._exists(project.id):
            msg = f"Project {project.id} already exists"
            raise ConflictError(msg)
        record = project_to_record(project)
        observations = record[OBSERVATIONS_KEY]
        await self._check_new_observation_ids([o["id"] for o in observations])
        async with self._db.transaction():
            await self._db.execute(
                _insert_sql("projects", _PROJECT_COLUMN_NAMES),
                _insert_params(record, _PROJECT_COLUMN_NAMES),
            )
            await self._db.execute_many(
                _OBSERVATION_INSERT,
                [(o["id"], project.id, o["texto"], o["fecha"]) for o in observations],
            )

    async def save(self, project: Project) -> None:
        """Overwrite the scalar columns of an existing project."""
        if not await self._exists(project.id):
            msg = f"Project {project.id} not found"
            raise NotFoundError(msg)
        record = project_to_record(project)
        async with self._db.transaction():
            await self._db.execute(
                _update_sql("projects", _PROJECT_COLUMN_NAMES),
                _update_params(record, _PROJECT_COLUMN_NAMES),
            )

    async def soft_delete(self, project_id: str) -> None:
        """Hide a project. Hiding an already hidden project is a no-op."""
        if not await self._exists(project_id):
            msg = f"Project {project_id} not found"
            raise NotFoundError(msg)
        async with self._db.transaction():
            await self._db.execute("UPDATE projects SET visible = 0 WHERE id = ?", (project_id,))

    async def add_observation(self, project_id: str, observation: Observation) -> None:
        if not await self._exists(project_id):
            msg = f"Project {project_id} not found"
            raise NotFoundError(msg)
        record = observation_to_record(observation)
        await self._check_new_observation_ids([record["id"]])
        async with self._db.transaction():
            await self._db.execute(
                _OBSERVATION_INSERT,
                (record["id"], project_id, record["texto"], record["fecha"]),
            )

    async def _exists(self, project_id: str) -> bool:
        row = await self._db.fetch_one("SELECT 1 FROM projects WHERE id = ?", (project_id,))
        return row is not None

    async def _check_new_observation_ids(self, observation_ids: list[str]) -> None:
        """Raise ConflictError for an id repeated in the batch or already stored."""
        seen: set[str] = set()
        for observation_id in observation_ids:
            stored = await self._db.fetch_one(
                "SELECT 1 FROM observations WHERE id = ?", (observation_id,)
            )
            if observation_id in seen or stored is not None:
                msg = f"Observation {observation_id} already exists"
                raise ConflictError(msg)
            seen.add(observation_id)


class VisitRepository:
    """SQL repository for commercial visits."""

    def __init__(self, db: DatabaseProtocol) -> None:
        self._db = db

    async def list_visible(self) -> list[Visit]:
        rows = await self._db.fetch_all(
            "SELECT * FROM visits WHERE activo = 1 ORDER BY fecha_creacion DESC"
        )
        return [visit_from_record(dict(row)) for row in rows]

    async def get(self, visit_id: str) -> Visit | None:
        row = await self._db.fetch_one("SELECT * FROM visits WHERE id = ?", (visit_id,))
        return visit_from_record(dict(row)) if row is not None else None

    async def insert(self, visit: Visit) -> None:
        if await self._exists(visit.id):
            msg = f"Visit {visit.id} already exists"
            raise ConflictError(msg)
        record = visit_to_record(visit)
        async with self._db.transaction():
            await self._db.execute(
                _insert_sql("visits", _VISIT_COLUMN_NAMES),
                _insert_params(record, _VISIT_COLUMN_NAMES),
            )

    async def save(self, visit: Visit) -> None:
        if not await self._exists(visit.id):
            msg = f"Visit {visit.id} not found"
            raise NotFoundError(msg)
        record = visit_to_record(visit)
        async with self._db.transaction():
            await self._db.execute(
                _update_sql("visits", _VISIT_COLUMN_NAMES),
                _update_params(record, _VISIT_COLUMN_NAMES),
            )

    async def soft_delete(self, visit_id: str) -> None:
        """Deactivate a visit. Deactivating twice is a no-op."""
        if not await self._exists(visit_id):
            msg = f"Visit {visit_id} not found"
            raise NotFoundError(msg)
        async with self._db.transaction():
            await self._db.execute("UPDATE visits SET activo = 0 WHERE id = ?", (visit_id,))

    async def _exists(self, visit_id: str) -> bool:
        row = await self._db.fetch_one("SELECT 1 FROM visits WHERE id = ?", (visit_id,))
        return row is not None
