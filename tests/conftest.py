"""Shared fixtures for Hourglow tests."""

from __future__ import annotations

from collections.abc import AsyncGenerator, Callable
from datetime import UTC, date, datetime
from pathlib import Path
from typing import Any

import pytest

from hourglow.config import Config
from hourglow.data.db import Database
from hourglow.models.projects import Project
from hourglow.models.visits import Visit

CREATED_AT = datetime(2025, 1, 1, 9, 0, tzinfo=UTC)


@pytest.fixture
def make_project() -> Callable[..., Project]:
    """Factory for valid projects; keyword arguments override defaults."""

    def factory(**overrides: Any) -> Project:
        values: dict[str, Any] = {
            "name": "ERP rollout",
            "client_name": "Acme",
            "consultant": "Ana",
            "planned_hours": 100.0,
            "executed_hours": 0.0,
            "hourly_rate": 100.0,
            "start_date": date(2025, 1, 1),
            "end_date": date(2025, 1, 11),
            "created_at": CREATED_AT,
        }
        values.update(overrides)
        return Project(**values)

    return factory


@pytest.fixture
def make_visit() -> Callable[..., Visit]:
    """Factory for valid visits; keyword arguments override defaults."""

    def factory(**overrides: Any) -> Visit:
        values: dict[str, Any] = {
            "product": "Analytics suite",
            "client_name": "Globex",
            "consultant": "Luis",
            "country": "CL",
            "hours": 2.0,
            "date": date(2025, 2, 3),
            "opportunity_value": 5000.0,
            "created_at": CREATED_AT,
        }
        values.update(overrides)
        return Visit(**values)

    return factory


@pytest.fixture
def test_config(tmp_path: Path) -> Config:
    """Config pointing at a temporary database."""
    return Config(db_path=tmp_path / "cache" / "hourglow.db")


@pytest.fixture
async def test_db(tmp_path: Path) -> AsyncGenerator[Database]:
    """A fresh file-backed test database."""
    db = Database(tmp_path / "test.db")
    await db.__aenter__()
    yield db  # type: ignore[misc]
    await db.__aexit__(None, None, None)


@pytest.fixture
async def in_memory_db() -> AsyncGenerator[Database]:
    """SQLite in-memory database for fast unit/integration tests."""
    db = Database(Path(":memory:"))
    await db.__aenter__()
    yield db  # type: ignore[misc]
    await db.__aexit__(None, None, None)
