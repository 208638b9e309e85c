"""CLI entry point for studentdir.

Commands:
- serve: run the REST API with uvicorn
- init-db: create the students table
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

import click
import uvicorn
from sqlalchemy.exc import SQLAlchemyError

from studentdir.config import CONFIG_ENV_VAR, ConfigError, Settings, load_settings
from studentdir.logging import setup_logging
from studentdir.store import Database, mask_url

APP_FACTORY = "studentdir.api:create_app"

config_option = click.option(
    "-c",
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Path to studentdir.yaml (auto-detected if not specified)",
)


def _load(config_path: Path | None) -> Settings:
    try:
        return load_settings(config_path)
    except ConfigError as e:
        click.echo(f"Configuration error: {e}", err=True)
        sys.exit(1)


@click.group()
@click.version_option(package_name="studentdir")
def main() -> None:
    """studentdir - student directory and matriculation numbering service."""
    pass


@main.command()
@config_option
@click.option("--host", default=None, help="Bind address (default: from config)")
@click.option("--port", type=int, default=None, help="Port (default: from config)")
@click.option("--reload", is_flag=True, help="Restart the server when source files change")
def serve(config_path: Path | None, host: str | None, port: int | None, reload: bool) -> None:
    """Run the REST API server."""
    from studentdir.api import create_app  # noqa: PLC0415

    settings = _load(config_path)
    if host is not None:
        settings.host = host
    if port is not None:
        settings.port = port

    logger = setup_logging(settings)
    logger.info("Using database %s", mask_url(settings.database_url))
    click.echo(f"Server running on http://{settings.host}:{settings.port}")

    if reload:
        # The reloaded worker rebuilds its settings from the environment.
        if config_path is not None:
            os.environ[CONFIG_ENV_VAR] = str(config_path.resolve())
        os.environ["STUDENTDIR_HOST"] = settings.host
        os.environ["STUDENTDIR_PORT"] = str(settings.port)
        uvicorn.run(
            APP_FACTORY,
            factory=True,
            reload=True,
            host=settings.host,
            port=settings.port,
            log_level=settings.log_level.lower(),
        )
        return

    app = create_app(settings)
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())


@main.command("init-db")
@config_option
def init_db(config_path: Path | None) -> None:
    """Create database tables if they don't exist."""
    settings = _load(config_path)

    db = Database(settings.database_url, pool_size=settings.pool_size)
    try:
        db.create_tables()
    except SQLAlchemyError as e:
        click.echo(f"Failed to initialize {mask_url(settings.database_url)}: {e}", err=True)
        sys.exit(1)
    finally:
        db.close()

    click.echo(f"Tables ready in {mask_url(settings.database_url)}")


if __name__ == "__main__":
    main()
