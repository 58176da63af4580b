"""Async SQLite connection manager using aiosqlite."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path
from types import TracebackType
from typing import Any

import aiosqlite

logger = logging.getLogger(__name__)

SCHEMA_VERSION = 1

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS projects (
    id TEXT PRIMARY KEY,
    nombre TEXT NOT NULL,
    descripcion TEXT NOT NULL DEFAULT '',
    cliente TEXT NOT NULL DEFAULT '',
    consultor TEXT NOT NULL DEFAULT '',
    pm TEXT NOT NULL DEFAULT '',
    pais TEXT NOT NULL DEFAULT '',
    numero_oportunidad TEXT NOT NULL DEFAULT '',
    monto_oportunidad REAL NOT NULL DEFAULT 0,
    horas_planificadas REAL NOT NULL CHECK (horas_planificadas > 0),
    horas_ejecutadas REAL NOT NULL DEFAULT 0 CHECK (horas_ejecutadas >= 0),
    tarifa_hora REAL NOT NULL CHECK (tarifa_hora > 0),
    fecha_inicio TEXT NOT NULL,
    fecha_fin TEXT NOT NULL,
    estado TEXT NOT NULL DEFAULT 'active' CHECK (estado IN ('active', 'completed')),
    visible INTEGER NOT NULL DEFAULT 1,
    fecha_creacion TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS observations (
    id TEXT PRIMARY KEY,
    project_id TEXT NOT NULL REFERENCES projects(id) ON DELETE CASCADE,
    texto TEXT NOT NULL,
    fecha TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS visits (
    id TEXT PRIMARY KEY,
    producto TEXT NOT NULL,
    client_name TEXT NOT NULL DEFAULT '',
    numero_oportunidad TEXT NOT NULL DEFAULT '',
    pais TEXT NOT NULL DEFAULT '',
    consultor TEXT NOT NULL DEFAULT '',
    hora REAL NOT NULL CHECK (hora > 0),
    fecha TEXT NOT NULL,
    monto_oportunidad REAL NOT NULL CHECK (monto_oportunidad > 0),
    terminado INTEGER NOT NULL DEFAULT 0,
    activo INTEGER NOT NULL DEFAULT 1,
    fecha_creacion TEXT NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_projects_visible ON projects(visible);
CREATE INDEX IF NOT EXISTS idx_projects_created ON projects(fecha_creacion);
CREATE INDEX IF NOT EXISTS idx_observations_project ON observations(project_id);
CREATE INDEX IF NOT EXISTS idx_visits_active ON visits(activo);
CREATE INDEX IF NOT EXISTS idx_visits_created ON visits(fecha_creacion);
"""


class Database:
    """Async SQLite connection manager using aiosqlite."""

    def __init__(self, db_path: Path) -> None:
        self._db_path = db_path
        self._conn: aiosqlite.Connection | None = None

    async def __aenter__(self) -> Database:
        await self.connect()
        return self

    async def connect(self) -> Database:
        """Connect to SQLite and ensure schema."""
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._conn = await aiosqlite.connect(str(self._db_path))
        self._conn.row_factory = aiosqlite.Row
        await self._conn.execute("PRAGMA journal_mode=WAL")
        await self._conn.execute("PRAGMA synchronous=NORMAL")
        await self._conn.execute("PRAGMA foreign_keys=ON")
        await self._ensure_schema()
        await self._conn.commit()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.close()

    async def close(self) -> None:
        """Close the SQLite connection."""
        if self._conn is not None:
            await self._conn.close()
            self._conn = None

    @property
    def conn(self) -> aiosqlite.Connection:
        if self._conn is None:
            msg = "Database not connected. Use 'async with Database(path) as db:'"
            raise RuntimeError(msg)
        return self._conn

    async def execute(self, sql: str, params: tuple[Any, ...] = ()) -> aiosqlite.Cursor:
        """Execute a SQL statement."""
        return await self.conn.execute(sql, params)

    async def execute_many(self, sql: str, params_seq: list[tuple[Any, ...]]) -> None:
        """Execute a SQL statement with many parameter sets."""
        await self.conn.executemany(sql, params_seq)

    async def fetch_all(self, sql: str, params: tuple[Any, ...] = ()) -> list[aiosqlite.Row]:
        """Fetch all rows from a query."""
        cursor = await self.conn.execute(sql, params)
        return await cursor.fetchall()  # type: ignore[return-value]

    async def fetch_one(self, sql: str, params: tuple[Any, ...] = ()) -> aiosqlite.Row | None:
        """Fetch a single row from a query."""
        cursor = await self.conn.execute(sql, params)
        return await cursor.fetchone()  # type: ignore[return-value]

    async def commit(self) -> None:
        """Commit the current transaction."""
        await self.conn.commit()

    async def rollback(self) -> None:
        """Discard the current transaction."""
        await self.conn.rollback()

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[None]:
        """Commit the writes made inside the block, or roll all of them back."""
        try:
            yield
        except BaseException:
            await self.rollback()
            raise
        await self.commit()

    async def _ensure_schema(self) -> None:
        """Create missing tables; existing data is never touched."""
        await self.conn.execute("""
            CREATE TABLE IF NOT EXISTS app_meta (
                key TEXT PRIMARY KEY,
                value TEXT NOT NULL
            )
        """)
        row = await self.fetch_one("SELECT value FROM app_meta WHERE key = 'schema_version'")
        await self.conn.executescript(SCHEMA_SQL)
        if row is None:
            logger.info("Created database schema version %s at %s", SCHEMA_VERSION, self._db_path)
            await self.conn.execute(
                "INSERT OR REPLACE INTO app_meta (key, value) VALUES ('schema_version', ?)",
                (str(SCHEMA_VERSION),),
            )
