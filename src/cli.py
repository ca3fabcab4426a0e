"""
Command-line interface for the feedback intake service.

Provides commands to run the API server, initialize the database,
and run diagnostic checks.

Usage:
    feedback-intake serve    # Run the API server
    feedback-intake init-db  # Create the feedback table
    feedback-intake health   # Check database connectivity
"""

import asyncio
import sys

import click
from pydantic import ValidationError

from src.config.settings import Settings, get_settings
from src.observability.logging import setup_logging
from src.observability.metrics import get_metrics


def _load_settings() -> Settings:
    """Load settings, exiting with a clear message when required values are missing."""
    try:
        return get_settings()
    except ValidationError as e:
        missing = ", ".join(str(err["loc"][0]).upper() for err in e.errors())
        click.echo(click.style(f"FATAL: invalid or missing configuration: {missing}", fg="red"), err=True)
        sys.exit(1)


@click.group()
@click.option("--debug", is_flag=True, help="Enable debug logging")
def main(debug: bool) -> None:
    """Feedback Intake - validated, rate-limited feedback collection."""
    settings = _load_settings()
    setup_logging(
        log_level="DEBUG" if debug else settings.log_level,
        json_logs=settings.is_production,
    )


@main.command()
@click.option("--host", default=None, help="API server host")
@click.option("--port", default=None, type=int, help="API server port")
@click.option("--reload", is_flag=True, help="Enable auto-reload (dev only)")
def serve(host: str | None, port: int | None, reload: bool) -> None:
    """Start the feedback API server."""
    import uvicorn

    settings = get_settings()
    host = host or settings.api_host
    port = port or settings.port

    # With --reload the app runs in a child process, so a registry served
    # from here would never see its samples.
    if settings.metrics_enabled and reload:
        click.echo("Metrics server disabled with --reload")
    elif settings.metrics_enabled:
        get_metrics().start_server(port=settings.metrics_port)
        click.echo(f"Metrics available on http://localhost:{settings.metrics_port}/metrics")

    click.echo(f"Starting API server on {host}:{port}")
    click.echo(f"API docs available on http://localhost:{port}/docs")

    uvicorn.run(
        "src.api.app:create_app",
        factory=True,
        host=host,
        port=port,
        reload=reload,
        log_level="info",
    )


@main.command("init-db")
def init_db() -> None:
    """Create the feedback table if it does not exist."""
    from src.feedback.repository import FeedbackRepository
    from src.storage.database import Database, StoreUnavailable

    async def run() -> int:
        db = Database()
        try:
            await db.connect()
            await FeedbackRepository(db).ensure_schema()
        except StoreUnavailable as e:
            click.echo(click.style(f"Database initialization failed: {e}", fg="red"), err=True)
            return 1
        finally:
            await db.close()

        click.echo("Database initialized successfully")
        return 0

    sys.exit(asyncio.run(run()))


@main.command()
def health() -> None:
    """Check database connectivity."""
    import structlog

    from src.storage.database import Database, StoreUnavailable

    logger = structlog.get_logger()

    async def check() -> bool:
        db = Database()
        try:
            await db.connect()
            return await db.health_check()
        except StoreUnavailable as e:
            logger.error("Postgres health check failed", error=str(e))
            return False
        finally:
            await db.close()

    healthy = asyncio.run(check())

    click.echo("\nHealth Check Results:")
    click.echo("-" * 40)
    icon = "✓" if healthy else "✗"
    color = "green" if healthy else "red"
    click.echo(click.style(f"  {icon} postgres: {healthy}", fg=color))
    click.echo("-" * 40)

    sys.exit(0 if healthy else 1)


if __name__ == "__main__":
    main()
