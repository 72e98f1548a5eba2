"""rundeck-notifier test-connection -- check a RunDeck configuration."""

from __future__ import annotations

import click


@click.command("test-connection")
@click.option("--url", default=None, help="RunDeck base url (defaults to saved).")
@click.option("--login", default=None, help="RunDeck user (defaults to saved).")
@click.option("--password", default=None, help="RunDeck password (defaults to saved).")
@click.pass_context
def test_connection(
    ctx: click.Context,
    url: str | None,
    login: str | None,
    password: str | None,
) -> None:
    """Check the configuration, liveness, and credentials of RunDeck."""
    from rundeck_notifier.cli import _store_session
    from rundeck_notifier.cli.formatting import format_connection_check
    from rundeck_notifier.models.config import RundeckConfig
    from rundeck_notifier.notifier import check_connection
    from rundeck_notifier.rundeck.client import RundeckInstance

    with _store_session(ctx) as (store, console):
        saved = store.load_config() or RundeckConfig.from_env()
        overrides = {
            key: value
            for key, value in (("url", url), ("login", login), ("password", password))
            if value is not None
        }
        config = RundeckConfig(**{**saved.model_dump(), **overrides})

        with RundeckInstance(config) as rundeck:
            check = check_connection(rundeck)
        format_connection_check(check, config.url, config.login, console)
        if not check.ok:
            raise SystemExit(1)
