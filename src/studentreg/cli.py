"""CLI entry point for the student registration server."""

from __future__ import annotations

import dataclasses
import sys
from pathlib import Path

import click
import uvicorn

from studentreg import __version__
from studentreg.config import ConfigError, Settings
from studentreg.logging import setup_logging
from studentreg.student_store import StoreError, StudentStore


def _load_settings(**overrides: object) -> Settings:
    """Read settings from the environment and apply CLI overrides."""
    try:
        settings = Settings.from_env()
        changes = {key: value for key, value in overrides.items() if value is not None}
        return dataclasses.replace(settings, **changes)
    except ConfigError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


@click.group()
@click.version_option(__version__)
def main() -> None:
    """Student registration server."""
    pass


@main.command()
@click.option("--host", default=None, help="Interface to bind (env: STUDENTREG_HOST)")
@click.option("--port", type=int, default=None, help="Port to bind (env: PORT)")
@click.option(
    "--db-path",
    default=None,
    help="SQLite database file (env: STUDENTREG_DB_PATH)",
)
@click.option(
    "--static-dir",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=None,
    help="Directory with the browser client (env: STUDENTREG_STATIC_DIR)",
)
@click.option("--log-dir", default=None, help="Log directory (env: STUDENTREG_LOG_DIR)")
@click.option("--log-level", default=None, help="Log level (env: STUDENTREG_LOG_LEVEL)")
def serve(
    host: str | None,
    port: int | None,
    db_path: str | None,
    static_dir: Path | None,
    log_dir: str | None,
    log_level: str | None,
) -> None:
    """Run the registration API."""
    from studentreg.api.app import create_app  # noqa: PLC0415

    settings = _load_settings(
        host=host,
        port=port,
        db_path=db_path,
        static_dir=str(static_dir) if static_dir else None,
    )
    logger = setup_logging(log_dir=log_dir, level=log_level)

    app = create_app(settings)
    logger.info("Server running on http://%s:%d", settings.host, settings.port)
    # The store is opened by the app lifespan; uvicorn exits if that fails
    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)


@main.command("init-db")
@click.option("--db-path", default=None, help="SQLite database file (env: STUDENTREG_DB_PATH)")
def init_db(db_path: str | None) -> None:
    """Create the students table if it does not exist."""
    settings = _load_settings(db_path=db_path)
    try:
        store = StudentStore(settings.db_path)
    except StoreError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    try:
        click.echo(f"Database ready at {settings.db_path} ({store.count_students()} students)")
    finally:
        store.close()


if __name__ == "__main__":
    main()
