"""Command-line interface for the Acquisitions API.

This module provides the CLI commands for running and managing
the Acquisitions API.
"""

import asyncio
from typing import NoReturn

import click

from acquisitions import __version__
from acquisitions.core.config import get_settings
from acquisitions.core.logging import configure_logging, get_logger


@click.group()
@click.version_option(version=__version__, prog_name="acquisitions")
def cli() -> None:
    """Acquisitions API - user registration and cookie-based sessions."""


@cli.command()
@click.option("--host", type=str, default=None, help="Host to bind to (overrides HOST)")
@click.option("--port", type=int, default=None, help="Port to bind to (overrides PORT)")
@click.option(
    "--reload",
    is_flag=True,
    default=False,
    help="Enable auto-reload for development",
)
def serve(host: str | None, port: int | None, reload: bool) -> None:
    """Start the API server."""
    import uvicorn

    settings = get_settings()

    bind_host = host or settings.host
    bind_port = port or settings.port

    configure_logging(settings)

    logger = get_logger(__name__)
    logger.info(
        "Starting Acquisitions server",
        host=bind_host,
        port=bind_port,
        reload=reload,
        environment=settings.environment,
    )

    uvicorn.run(
        "acquisitions.infrastructure.api.app:app",
        host=bind_host,
        port=bind_port,
        reload=reload,
        log_level=settings.log_level.lower(),
        access_log=True,
    )


@cli.command("init-db")
@click.option(
    "--force",
    is_flag=True,
    help="Skip confirmation prompt",
)
def init_db(force: bool) -> None:
    """Create the database tables.

    Use this only in development. In production, run ``alembic upgrade head``.
    """
    from acquisitions.infrastructure.persistence.database import get_db_manager

    settings = get_settings()
    configure_logging(settings)

    if settings.is_production:
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
        db = get_db_manager()
        try:
            await db.create_tables()
            click.echo("Database initialized successfully.")
        finally:
            await db.disconnect()

    asyncio.run(initialize())


@cli.command()
def info() -> None:
    """Display the effective configuration."""
    settings = get_settings()

    click.echo(f"""
Acquisitions API v{settings.app_version}
{'=' * 40}

Configuration:
  Environment:  {settings.environment}
  Debug:        {settings.debug}
  API Prefix:   {settings.api_prefix}

Server:
  Host:         {settings.host}
  Port:         {settings.port}

Database:
  Backend:      {settings.database_url.split("://", 1)[0]}
  Pool Size:    {settings.db_pool_size}

Security:
  Token Expiry: {settings.jwt_expires_in}
  Cookie Age:   {settings.cookie_max_age_seconds} seconds
  Placeholder:  {settings.uses_default_secret}

Logging:
  Level:        {settings.log_level}
  Format:       {settings.log_format}
""")


def main() -> NoReturn:
    """Main entry point for the CLI.

    Called by the ``acquisitions`` command and ``python -m acquisitions``.
    """
    cli()


if __name__ == "__main__":
    main()
