"""Service container with DI wiring."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from hourglow.client.store import ProjectStoreClient, VisitStoreClient
from hourglow.services.dashboard_service import DashboardService

if TYPE_CHECKING:
    import httpx

    from hourglow.config import Config


@dataclass
class ServiceContainer:
    """Holds the dashboard's services. Built once at startup."""

    project_client: ProjectStoreClient
    visit_client: VisitStoreClient
    dashboard: DashboardService

    @classmethod
    async def create(
        cls,
        config: Config,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> ServiceContainer:
        """Async factory that wires the clients and performs the initial load."""
        project_client = ProjectStoreClient(config.endpoint_url, transport=transport)
        visit_client = VisitStoreClient(config.endpoint_url, transport=transport)
        dashboard = DashboardService(project_client, visit_client)
        await dashboard.load()
        return cls(
            project_client=project_client,
            visit_client=visit_client,
            dashboard=dashboard,
        )
