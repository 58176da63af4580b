"""Typer CLI for Hourglow — dashboard, persistence endpoint, and init-db commands."""

from __future__ import annotations

import asyncio
import dataclasses
import logging
from pathlib import Path
from typing import Annotated

import typer

from hourglow.config import LOG_FORMAT, Config

app = typer.Typer(
    name="hourglow",
    help="Hourglow — consulting projects and commercial visits dashboard.",
    invoke_without_command=True,
)


def _configure_logging(config: Config) -> None:
    logging.basicConfig(level=config.log_level, format=LOG_FORMAT)


@app.callback(invoke_without_command=True)
def serve(
    ctx: typer.Context,
    api_url: Annotated[
        str | None,
        typer.Option("--api-url", help="Base URL of the persistence endpoint"),
    ] = None,
    port: Annotated[int | None, typer.Option("--port", help="Port for the web UI")] = None,
) -> None:
    """Start the dashboard web UI."""
    if ctx.invoked_subcommand is not None:
        return
    config = Config.from_env()
    if api_url:
        config = dataclasses.replace(config, api_url=api_url)
    if port:
        config = dataclasses.replace(config, ui_port=port)
    _configure_logging(config)
    from hourglow.ui.app import run_app

    run_app(config)


@app.command()
def api(
    db_path: Annotated[
        Path | None,
        typer.Option("--db-path", help="SQLite database file"),
    ] = None,
    host: Annotated[str | None, typer.Option("--host", help="Interface to bind")] = None,
    port: Annotated[int | None, typer.Option("--port", help="Port to bind")] = None,
) -> None:
    """Run the persistence endpoint."""
    config = Config.from_env()
    overrides: dict[str, object] = {}
    if db_path:
        overrides["db_path"] = db_path
    if host:
        overrides["api_host"] = host
    if port:
        overrides["api_port"] = port
    config = dataclasses.replace(config, **overrides)
    _configure_logging(config)

    import uvicorn

    from hourglow.server.app import create_app

    uvicorn.run(
        create_app(config),
        host=config.api_host,
        port=config.api_port,
        log_level=config.log_level.lower(),
    )


@app.command("init-db")
def init_db(
    db_path: Annotated[
        Path | None,
        typer.Option("--db-path", help="SQLite database file"),
    ] = None,
) -> None:
    """Create the SQLite schema if it does not exist yet."""
    config = Config.from_env()
    if db_path:
        config = dataclasses.replace(config, db_path=db_path)
    asyncio.run(_do_init_db(config))


async def _do_init_db(config: Config) -> None:
    """Open the database once so its schema is created."""
    from hourglow.data.db import Database

    async with Database(config.db_path):
        pass
    typer.echo(f"Database ready at {config.db_path}")
