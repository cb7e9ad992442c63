from __future__ import annotations

import asyncio

import typer
import uvicorn

from reconcile.shared.logging import get_logger, setup_logging

from .app import create_app
from .config import get_settings
from .db import get_connection
from .repository import ensure_schema

cli = typer.Typer(help="Identity Service entrypoint")
logger = get_logger("identity.main")


@cli.command()
def serve(host: str = "0.0.0.0", port: int = 8080) -> None:
    """Start the Identity Service using uvicorn."""

    settings = get_settings()
    app = create_app()
    uvicorn.run(app, host=host, port=port, log_level=settings.log_level.lower(), lifespan="on")


@cli.command("init-db")
def init_db() -> None:
    """Create the contacts table and indexes."""

    setup_logging(get_settings().log_level)

    async def _apply() -> None:
        async with get_connection() as conn:
            await ensure_schema(conn)
            await conn.commit()

    asyncio.run(_apply())
    logger.info("schema_applied")


if __name__ == "__main__":
    cli()
