"""rundeck-notifier notify -- run the notifier for one completed build."""

from __future__ import annotations

import json

import click


def _load_json(path: str) -> dict:
    with open(path, encoding="utf-8") as fh:
        return json.load(fh)


@click.command()
@click.argument("build_json", type=click.Path(exists=True, dir_okay=False))
@click.option("--group-path", default="", help="RunDeck job group path.")
@click.option("--job-name", required=True, help="RunDeck job name.")
@click.option(
    "--options",
    default="",
    help="Job options, one key=value per line; ${VAR} expands from the build.",
)
@click.option("--tag", default=None, help="Only notify when a changelog message contains TAG.")
@click.option(
    "--fail-build/--no-fail-build",
    default=False,
    help="Fail the build when the notification fails.",
)
@click.option(
    "--registry",
    "registry_json",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="JSON file of known builds, used to resolve upstream causes.",
)
@click.pass_context
def notify(
    ctx: click.Context,
    build_json: str,
    group_path: str,
    job_name: str,
    options: str,
    tag: str | None,
    fail_build: bool,
    registry_json: str | None,
) -> None:
    """Decide whether BUILD_JSON notifies RunDeck, and schedule the job."""
    from rundeck_notifier.cli import _store_session
    from rundeck_notifier.cli.formatting import format_outcome
    from rundeck_notifier.lifecycle import BuildCompletion
    from rundeck_notifier.listeners import ConsoleListener, InMemoryBuildRegistry
    from rundeck_notifier.models.build import Build, BuildResult
    from rundeck_notifier.models.config import NotificationConfig
    from rundeck_notifier.notifier import RundeckNotifier
    from rundeck_notifier.rundeck.client import RundeckInstance

    with _store_session(ctx) as (store, console):
        build = Build.from_dict(_load_json(build_json))
        registry = (
            InMemoryBuildRegistry.from_dict(_load_json(registry_json))
            if registry_json
            else None
        )
        notifier = RundeckNotifier(
            NotificationConfig(
                group_path=group_path,
                job_name=job_name,
                options=options,
                tag=tag,
                should_fail_the_build=fail_build,
            ),
            registry=registry,
        )
        completion = BuildCompletion(notifier, store=store)
        listener = ConsoleListener(console)

        config = store.load_config()
        if config is None:
            outcome = completion.on_completed(build, None, listener)
        else:
            with RundeckInstance(config) as rundeck:
                outcome = completion.on_completed(build, rundeck, listener)
        completion.on_finalized(build, listener)

        format_outcome(outcome, build, console)
        if build.result is not BuildResult.SUCCESS:
            raise SystemExit(1)
