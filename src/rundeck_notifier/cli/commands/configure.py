"""rundeck-notifier configure -- save the RunDeck connection settings."""

from __future__ import annotations

import click

from rundeck_notifier.models.config import DEFAULT_TIMEOUT


@click.command()
@click.option("--url", required=True, envvar="RUNDECK_URL", help="RunDeck base url.")
@click.option("--login", required=True, envvar="RUNDECK_LOGIN", help="RunDeck user.")
@click.option(
    "--password",
    required=True,
    envvar="RUNDECK_PASSWORD",
    help="RunDeck password.",
)
@click.option(
    "--timeout",
    type=float,
    default=DEFAULT_TIMEOUT,
    show_default=True,
    help="Network timeout in seconds.",
)
@click.pass_context
def configure(
    ctx: click.Context, url: str, login: str, password: str, timeout: float
) -> None:
    """Save the RunDeck instance used by every notification."""
    from rundeck_notifier.cli import _store_session
    from rundeck_notifier.models.config import RundeckConfig

    with _store_session(ctx) as (store, console):
        config = RundeckConfig(url=url, login=login, password=password, timeout=timeout)
        store.save_config(config)
        console.print(f"Saved RunDeck configuration for [cyan]{config.url}[/cyan]")
        if not config.is_valid():
            console.print("[yellow]Warning:[/yellow] RunDeck configuration is not valid !")
