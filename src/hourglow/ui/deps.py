"""Dependency access for UI pages."""

from __future__ import annotations

from nicegui import app

from hourglow.services.container import ServiceContainer
from hourglow.services.dashboard_service import DashboardService

_CONTAINER_KEY = "hourglow_services"


def set_services(container: ServiceContainer | None) -> None:
    """Store (or clear) the service container in NiceGUI app state."""
    setattr(app.state, _CONTAINER_KEY, container)


def get_dashboard() -> DashboardService:
    """Dashboard service of the container built at startup."""
    container = getattr(app.state, _CONTAINER_KEY, None)
    if container is None:
        msg = "ServiceContainer not initialized"
        raise RuntimeError(msg)
    return container.dashboard  # type: ignore[no-any-return]
