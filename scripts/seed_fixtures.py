"""
Fixture seeding script for the bot fixture harness.

Bootstraps a number of fake conversations in the configured store and prints
the generated identifiers, optionally clearing the store first.
"""

from __future__ import annotations

import sys
import time
from typing import Optional

import typer

from botharness.bootstrap import ConversationBootstrapper
from botharness.config import get_settings
from botharness.errors import HarnessError
from botharness.factory import seed_random
from botharness.infrastructure.database import MessageDatabase
from botharness.reset import reset_all
from botharness.utils.logging import configure_logging

app = typer.Typer(help="Seed fake conversations into the fixture store.")


def _seed(db: MessageDatabase, conversations: int) -> int:
    bootstrapper = ConversationBootstrapper(db)
    stored = 0
    for _ in range(conversations):
        result = bootstrapper.start_conversation()
        if not result:
            typer.echo(f"  skipped: {result.reason}", err=True)
            continue
        ids = result.ids
        typer.echo(f"  message={ids.message_id} user={ids.user_id} chat={ids.chat_id}")
        stored += 1
    return stored


@app.command()
def main(
    conversations: int = typer.Option(
        10,
        "--conversations",
        "-n",
        help="Number of conversations to bootstrap.",
    ),
    seed: Optional[int] = typer.Option(
        None,
        "--seed",
        help="Deterministic RNG seed for generated identifiers.",
    ),
    reset_first: bool = typer.Option(
        False,
        "--reset",
        help="Clear every fixture table before seeding.",
    ),
) -> None:
    """
    Bootstrap fake conversations and report the identifiers that were stored.
    """
    settings = get_settings()
    configure_logging()
    seed_random(seed)
    start = time.perf_counter()

    try:
        if reset_first:
            typer.echo("Clearing fixture store...")
            reset_all(settings.credentials())
        with MessageDatabase.connect(settings.credentials()) as db:
            stored = _seed(db, conversations)
    except HarnessError as exc:
        typer.echo(f"Seeding failed: {exc}", err=True)
        raise typer.Exit(code=1)

    duration = time.perf_counter() - start
    typer.echo(f"Stored {stored}/{conversations} conversations in {duration:.2f}s.")


if __name__ == "__main__":
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)
