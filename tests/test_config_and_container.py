"""Config parsing and service container wiring."""

from __future__ import annotations

from pathlib import Path

import httpx
import pytest
from result import Ok

from hourglow.config import Config
from hourglow.data.mapping import project_to_record
from hourglow.server.app import create_app
from hourglow.services.container import ServiceContainer


def test_config_defaults() -> None:
    config = Config.from_env({})
    assert config.api_port == 8770
    assert config.ui_port == 8765
    assert config.log_level == "INFO"
    assert config.endpoint_url == "http://127.0.0.1:8770"
    assert config.db_path.name == "hourglow.db"


def test_config_from_env() -> None:
    config = Config.from_env(
        {
            "HOURGLOW_DB_PATH": "/tmp/hg/store.db",
            "HOURGLOW_API_HOST": "0.0.0.0",
            "HOURGLOW_API_PORT": "9000",
            "HOURGLOW_UI_PORT": "9100",
            "LOG_LEVEL": "debug",
        }
    )
    assert config.db_path == Path("/tmp/hg/store.db")
    assert config.api_host == "0.0.0.0"
    assert config.api_port == 9000
    assert config.ui_port == 9100
    assert config.log_level == "DEBUG"
    assert config.endpoint_url == "http://0.0.0.0:9000"


def test_config_api_url_wins() -> None:
    config = Config.from_env({"HOURGLOW_API_URL": "https://store.example.com/api/"})
    assert config.endpoint_url == "https://store.example.com/api"


def test_config_rejects_bad_port() -> None:
    with pytest.raises(ValueError, match="Expected an integer port"):
        Config.from_env({"HOURGLOW_API_PORT": "eighty"})


@pytest.mark.asyncio
async def test_service_container_loads_initial_state(in_memory_db, make_project) -> None:
    app = create_app(Config(), db=in_memory_db)
    transport = httpx.ASGITransport(app=app)
    project = make_project()
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        await client.post(
            "/projects", json={"method": "CREATE", "projectData": project_to_record(project)}
        )

    container = await ServiceContainer.create(
        Config(api_url="http://test"), transport=transport
    )
    state = container.dashboard.state
    assert state.loaded is True
    assert [p.id for p in state.projects] == [project.id]
    assert state.errors == ()

    changed = await container.dashboard.log_hours(project.id, "8")
    assert isinstance(changed, Ok)
    listed = await container.project_client.list_active()
    assert isinstance(listed, Ok)
    assert listed.ok_value[0].executed_hours == 8.0
