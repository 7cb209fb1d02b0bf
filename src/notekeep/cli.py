"""Command-line interface for NoteKeep.

This module provides the CLI commands for running and managing
the NoteKeep application.
"""

import asyncio
import base64
import secrets
from typing import NoReturn

import click

from notekeep.core.config import MIN_SIGNING_KEY_BYTES, get_settings
from notekeep.core.logging import configure_logging, get_logger


@click.group()
@click.version_option(version="0.1.0", prog_name="NoteKeep")
def cli() -> None:
    """NoteKeep - personal notes behind JWT authentication.

    Configuration is read from NOTEKEEP_* environment variables and .env.
    """


@cli.command()
@click.option("--host", type=str, default=None, help="Host to bind to (overrides config)")
@click.option("--port", type=int, default=None, help="Port to bind to (overrides config)")
@click.option(
    "--workers",
    type=int,
    default=None,
    help="Number of worker processes (overrides config)",
)
@click.option(
    "--reload",
    is_flag=True,
    default=False,
    help="Enable auto-reload for development",
)
def serve(host: str | None, port: int | None, workers: int | None, reload: bool) -> None:
    """Start the NoteKeep server."""
    import uvicorn

    settings = get_settings()

    bind_host = host or settings.host
    bind_port = port or settings.port
    bind_workers = workers or settings.workers

    if bind_workers > 1 and settings.database_url.startswith("sqlite"):
        click.echo(
            "Error: SQLite does not support multiple worker processes. "
            "Use PostgreSQL or run with --workers 1.",
            err=True,
        )
        raise SystemExit(1)

    configure_logging(settings)

    logger = get_logger(__name__)
    logger.info(
        "Starting NoteKeep server",
        host=bind_host,
        port=bind_port,
        workers=bind_workers,
        reload=reload,
        environment=settings.environment,
    )

    uvicorn.run(
        "notekeep.infrastructure.api.app:app",
        host=bind_host,
        port=bind_port,
        workers=1 if reload else bind_workers,
        reload=reload,
        log_level=settings.log_level.lower(),
        access_log=True,
    )


@cli.command()
@click.option(
    "--force",
    is_flag=True,
    help="Skip confirmation prompt",
)
def init_db(force: bool) -> None:
    """Initialize the database.

    Creates all database tables. Use this only in development.
    In production, use migrations instead.
    """
    from notekeep.infrastructure.persistence.database import (
        get_db_manager,
        init_database,
    )

    settings = get_settings()
    configure_logging(settings)

    if settings.is_production and not force:
        click.echo(
            "ERROR: Running in production mode. Use migrations instead of init-db.",
            err=True,
        )
        raise SystemExit(1)

    if not force:
        click.confirm(
            "This will create all database tables. Continue?",
            abort=True,
            default=False,
        )

    async def initialize() -> None:
        try:
            await init_database()
            click.echo("Database initialized successfully.")
        finally:
            await get_db_manager().disconnect()

    asyncio.run(initialize())


@cli.command()
def purge_tokens() -> None:
    """Delete expired refresh tokens once and exit."""
    from notekeep.infrastructure.persistence.database import get_db_manager
    from notekeep.infrastructure.persistence.token_sweeper import RefreshTokenSweeper

    settings = get_settings()
    configure_logging(settings)

    async def purge() -> int:
        db = get_db_manager()
        try:
            sweeper = RefreshTokenSweeper(db.session_factory, interval_seconds=0)
            return await sweeper.sweep_once()
        finally:
            await db.disconnect()

    count = asyncio.run(purge())
    click.echo(f"Purged {count} expired refresh token(s).")


@cli.command()
@click.option(
    "--bytes",
    "num_bytes",
    type=click.IntRange(min=MIN_SIGNING_KEY_BYTES),
    default=64,
    show_default=True,
    help="Length of the raw key",
)
def generate_secret(num_bytes: int) -> None:
    """Print a random base64 signing key for NOTEKEEP_JWT_SECRET_BASE64."""
    click.echo(base64.b64encode(secrets.token_bytes(num_bytes)).decode("ascii"))


@cli.command()
def info() -> None:
    """Display NoteKeep configuration."""
    settings = get_settings()

    click.echo(f"""
NoteKeep v{settings.app_version}
{'=' * 40}

Configuration:
  Environment:  {settings.environment}
  Debug:        {settings.debug}

Server:
  Host:         {settings.host}
  Port:         {settings.port}
  Workers:      {settings.workers}

Database:
  URL:          {settings.database_url}
  Pool Size:    {settings.db_pool_size}
  Echo:         {settings.db_echo}

Tokens:
  Purge Every:  {settings.token_purge_interval_seconds} seconds

Logging:
  Level:        {settings.log_level}
  Format:       {settings.log_format}
""")


def main() -> NoReturn:
    """Main entry point for the CLI.

    Called when the `notekeep` command is run or when using
    `python -m notekeep`.
    """
    cli()


if __name__ == "__main__":
    main()
