"""Rundeck notifier CLI -- configure, test, notify, and list badges.

This module is NEVER imported from rundeck_notifier/__init__.py.
It is only loaded via the ``rundeck-notifier`` entry point defined in
pyproject.toml.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import TYPE_CHECKING

try:
    import click
    from dotenv import load_dotenv
except ImportError:
    raise ImportError(
        "CLI dependencies not installed. Install with: pip install rundeck-notifier[cli]"
    ) from None

from rundeck_notifier.cli.formatting import format_error, get_console

if TYPE_CHECKING:
    from collections.abc import Iterator

    from rich.console import Console

    from rundeck_notifier.store import NotifierStore


@click.group()
@click.option(
    "--db",
    default=".rundeck-notifier.db",
    envvar="RUNDECK_NOTIFIER_DB",
    help="Path to the notifier database.",
)
@click.pass_context
def cli(ctx: click.Context, db: str) -> None:
    """Schedule RunDeck jobs when CI builds complete."""
    load_dotenv()
    ctx.ensure_object(dict)
    ctx.obj["db_path"] = db


@contextmanager
def _store_session(ctx: click.Context) -> Iterator[tuple[NotifierStore, Console]]:
    """Open the store, yield (store, console), and format failures.

    Commands with special exception handling can catch specific errors
    inside the ``with`` block before this generic handler runs.
    """
    from rundeck_notifier.store import NotifierStore

    console = get_console()
    try:
        store = NotifierStore.open(ctx.obj["db_path"])
        try:
            yield store, console
        finally:
            store.close()
    except SystemExit:
        raise
    except Exception as e:
        format_error(str(e), console)
        raise SystemExit(1) from None


# Register subcommands after cli group is defined
from rundeck_notifier.cli.commands.badges import badges  # noqa: E402
from rundeck_notifier.cli.commands.configure import configure  # noqa: E402
from rundeck_notifier.cli.commands.connection import test_connection  # noqa: E402
from rundeck_notifier.cli.commands.notify import notify  # noqa: E402

cli.add_command(configure)
cli.add_command(test_connection)
cli.add_command(notify)
cli.add_command(badges)
