"""rundeck-notifier badges -- list recorded RunDeck executions."""

from __future__ import annotations

import click


@click.command()
@click.option("--project", "-p", default=None, help="Only show this project.")
@click.pass_context
def badges(ctx: click.Context, project: str | None) -> None:
    """List the RunDeck executions scheduled for builds."""
    from rundeck_notifier.cli import _store_session
    from rundeck_notifier.cli.formatting import format_badges

    with _store_session(ctx) as (store, console):
        format_badges(store.list_badges(project), console)
