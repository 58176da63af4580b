"""Persistence endpoint — FastAPI application.

Two POST routes, one per entity collection, each taking a tag-dispatched
request envelope. Errors always answer with ``{"error": "..."}``.
"""

from __future__ import annotations

import json
import logging
from contextlib import asynccontextmanager
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

import pydantic
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from hourglow import __version__
from hourglow.config import Config
from hourglow.data.db import Database
from hourglow.data.errors import StoreError
from hourglow.data.repositories import ProjectRepository, VisitRepository
from hourglow.models.requests import StoreRequest
from hourglow.server.dispatch import ProjectEndpoint, VisitEndpoint

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

logger = logging.getLogger(__name__)


class _BadEnvelope(Exception):
    """The request body is not a usable envelope."""


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


async def _read_envelope(request: Request) -> StoreRequest:
    try:
        body = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        msg = "Request body must be JSON"
        raise _BadEnvelope(msg) from exc
    try:
        return StoreRequest.model_validate(body)
    except pydantic.ValidationError as exc:
        msg = "Request body must be an object with a 'method' string"
        raise _BadEnvelope(msg) from exc


async def _dispatch(endpoint: ProjectEndpoint | VisitEndpoint, request: Request) -> Any:
    try:
        envelope = await _read_envelope(request)
        return await endpoint.handle(envelope)
    except _BadEnvelope as exc:
        return _error(400, str(exc))
    except StoreError as exc:
        if exc.status_code >= 500:
            logger.error("Store failure: %s", exc)
        return _error(exc.status_code, str(exc))
    except Exception as exc:
        logger.exception("Unhandled error in %s", request.url.path)
        return _error(500, str(exc) or exc.__class__.__name__)


def create_app(config: Config | None = None, db: Database | None = None) -> FastAPI:
    """Build the endpoint application.

    When ``db`` is given it is used as is and left open on shutdown;
    otherwise a database at ``config.db_path`` is opened for the app's
    lifetime.
    """
    config = config or Config.from_env()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        owned: Database | None = None
        if getattr(app.state, "db", None) is None:
            owned = await Database(config.db_path).connect()
            _bind(app, owned)
        logger.info("Hourglow endpoint v%s started", app.version)
        try:
            yield
        finally:
            if owned is not None:
                await owned.close()
                app.state.db = None
            logger.info("Shutting down")

    app = FastAPI(
        title="Hourglow persistence endpoint",
        description="CRUD and soft-delete for projects and visits",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.db = None
    if db is not None:
        _bind(app, db)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["POST", "GET", "OPTIONS"],
        allow_headers=["*"],
    )

    @app.get("/health")
    async def health() -> dict[str, Any]:
        return {
            "status": "healthy",
            "service": "hourglow-endpoint",
            "version": app.version,
            "timestamp": datetime.now(UTC).isoformat(),
            "database": "connected" if app.state.db is not None else "not initialized",
        }

    @app.post("/projects")
    async def projects(request: Request) -> Any:
        return await _dispatch(app.state.project_endpoint, request)

    @app.post("/visits")
    async def visits(request: Request) -> Any:
        return await _dispatch(app.state.visit_endpoint, request)

    return app


def _bind(app: FastAPI, db: Database) -> None:
    app.state.db = db
    app.state.project_endpoint = ProjectEndpoint(ProjectRepository(db))
    app.state.visit_endpoint = VisitEndpoint(VisitRepository(db))
