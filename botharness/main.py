from __future__ import annotations

import sys
from pathlib import Path

import typer

from botharness.config import get_settings
from botharness.errors import HarnessError
from botharness.infrastructure.db_factory import store_connection
from botharness.reset import reset_all
from botharness.utils.logging import configure_logging

app = typer.Typer(help="Bot fixture store CLI.")

DEFAULT_SCHEMA = Path(__file__).resolve().parent.parent / "db" / "init.sql"


@app.callback()
def _setup() -> None:
    configure_logging()


@app.command()
def info() -> None:
    """
    Show effective configuration values.
    """
    settings = get_settings()
    typer.echo(
        f"DB={settings.db_user}@{settings.db_host}:{settings.db_port}/{settings.db_name} | "
        f"bot=@{settings.bot_username} env={settings.app_env} "
        f"pool=({settings.pool_min_size},{settings.pool_max_size})"
    )


@app.command("init-schema")
def init_schema(
    schema: Path = typer.Option(
        DEFAULT_SCHEMA,
        "--schema",
        help="SQL file creating the fixture tables.",
    ),
) -> None:
    """
    Create the fixture tables in the configured store.
    """
    sql = schema.read_text(encoding="utf-8")
    try:
        with store_connection(get_settings().credentials()) as conn:
            conn.execute(sql)
            conn.commit()
    except HarnessError as exc:
        typer.echo(f"Schema not applied: {exc}", err=True)
        raise typer.Exit(code=1)
    typer.echo(f"Schema applied from {schema}.")


@app.command()
def reset(
    yes: bool = typer.Option(
        False,
        "--yes",
        "-y",
        help="Skip the confirmation prompt.",
    ),
) -> None:
    """
    Delete every row from every fixture table.
    """
    settings = get_settings()
    if not yes:
        typer.confirm(
            f"Delete all fixture rows in {settings.db_host}/{settings.db_name}?", abort=True
        )
    try:
        cleared = reset_all(settings.credentials())
    except HarnessError as exc:
        typer.echo(f"Reset failed: {exc}", err=True)
        raise typer.Exit(code=1)
    typer.echo("Cleared: " + ", ".join(cleared))


def main() -> None:
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)


if __name__ == "__main__":
    main()
