"""NiceGUI application bootstrap — service init, page registration, run_app()."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from nicegui import app, ui

from hourglow.services.container import ServiceContainer
from hourglow.ui.deps import set_services
from hourglow.ui.pages import dashboard, visits

if TYPE_CHECKING:
    from hourglow.config import Config

logger = logging.getLogger(__name__)


def register_pages() -> None:
    dashboard.setup()
    visits.setup()


def run_app(config: Config) -> None:
    """Start the dashboard web UI against the configured persistence endpoint."""

    async def startup() -> None:
        logger.info("Connecting to persistence endpoint at %s", config.endpoint_url)
        set_services(await ServiceContainer.create(config))

    def shutdown() -> None:
        set_services(None)

    app.on_startup(startup)
    app.on_shutdown(shutdown)
    register_pages()

    ui.run(
        host=config.ui_host,
        port=config.ui_port,
        title="Hourglow",
        reload=False,
        show=False,
    )
