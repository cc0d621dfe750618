"""JobHub CLI — run the server, create tables, check a running instance.

Usage:
    jobhub serve                     # uvicorn jobhub.main:app
    jobhub serve --reload            # dev mode
    jobhub init-db                   # create tables from the models (no Alembic)
    jobhub health                    # GET /api/health on a running server
"""

from __future__ import annotations

import asyncio
import json
import os
import sys

import click
import httpx

DEFAULT_API_URL = "http://localhost:5000"


def _api_url() -> str:
    return os.environ.get("JOBHUB_API_URL", DEFAULT_API_URL).rstrip("/")


@click.group()
def cli() -> None:
    """JobHub API operator commands."""


@cli.command()
@click.option("--host", default=None, help="Bind address (default: JOBHUB_HOST)")
@click.option("--port", default=None, type=int, help="Port (default: JOBHUB_PORT)")
@click.option("--reload", is_flag=True, help="Auto-reload on code changes")
def serve(host: str | None, port: int | None, reload: bool) -> None:
    """Run the API server."""
    import uvicorn

    from jobhub.config import settings

    uvicorn.run(
        "jobhub.main:app",
        host=host or settings.host,
        port=port or settings.port,
        reload=reload,
    )


async def _create_tables() -> list[str]:
    from jobhub.db.engine import engine
    from jobhub.db.models import Base

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    await engine.dispose()
    return sorted(Base.metadata.tables)


@cli.command("init-db")
def init_db() -> None:
    """Create all tables (and unique constraints) in JOBHUB_DATABASE_URL."""
    tables = asyncio.run(_create_tables())
    click.secho(f"Created/verified {len(tables)} tables: {', '.join(tables)}", fg="green")


@cli.command()
def health() -> None:
    """Query a running server's health endpoint."""
    try:
        r = httpx.get(f"{_api_url()}/api/health", timeout=10.0)
    except httpx.HTTPError as e:
        click.secho(f"Error: cannot reach {_api_url()}: {e}", fg="red", err=True)
        sys.exit(1)

    data = r.json()
    color = "green" if data.get("status") == "healthy" else "yellow"
    click.secho(data.get("status", "unknown"), fg=color, bold=True)
    click.echo(json.dumps(data, indent=2, default=str))


if __name__ == "__main__":
    cli()
