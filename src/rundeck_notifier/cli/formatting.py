"""Rich formatting helpers for the notifier CLI.

Rich auto-detects TTY and degrades gracefully when piped (no ANSI codes).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from rundeck_notifier.models.outcome import ConnectionCheck, OutcomeKind

if TYPE_CHECKING:
    from rundeck_notifier.models.build import Build
    from rundeck_notifier.models.outcome import NotificationOutcome
    from rundeck_notifier.store import BadgeRecord

_OUTCOME_STYLES = {
    OutcomeKind.SUCCESS: "green",
    OutcomeKind.SKIPPED_BUILD_NOT_SUCCESSFUL: "dim",
    OutcomeKind.SKIPPED_NOT_TRIGGERED: "dim",
    OutcomeKind.SKIPPED_ALREADY_NOTIFIED: "dim",
}


def get_console() -> Console:
    """Create a Rich Console that auto-detects TTY for graceful pipe degradation."""
    return Console(stderr=False)


def format_error(message: str, console: Console) -> None:
    """Display an error message in red."""
    console.print(f"[red]Error:[/red] {escape(message)}")


def format_outcome(outcome: NotificationOutcome, build: Build, console: Console) -> None:
    """Display the outcome of a notification attempt and the build verdict."""
    style = _OUTCOME_STYLES.get(outcome.kind, "red")
    console.print(f"Outcome:  [{style}]{outcome.kind.value}[/{style}]")
    if outcome.execution_url:
        console.print(f"Execution: [cyan]{escape(outcome.execution_url)}[/cyan]")
    if outcome.message:
        console.print(f"Message:  {escape(outcome.message)}")
    console.print(f"Build:    {escape(build.full_display_name)} {build.result.value.upper()}")
    for failure in build.step_failures:
        console.print(f"[yellow]Step failure:[/yellow] {escape(failure)}")


def format_connection_check(
    check: ConnectionCheck, url: str, login: str, console: Console
) -> None:
    """Display a connection test result."""
    style = "green" if check.ok else "red"
    console.print(f"[{style}]{escape(check.describe(url=url, login=login))}[/{style}]")


def format_badges(records: list[BadgeRecord], console: Console) -> None:
    """Display persisted execution badges in a table."""
    if not records:
        console.print("[dim]No executions.[/dim]")
        return

    table = Table(show_header=True, header_style="bold", box=None, pad_edge=False)
    table.add_column("Project", style="yellow")
    table.add_column("Build", justify="right")
    table.add_column("Time", style="dim")
    table.add_column("Execution")

    for record in records:
        table.add_row(
            escape(record.project),
            f"#{record.build_number}",
            record.created_at.strftime("%Y-%m-%d %H:%M"),
            escape(record.execution_url),
        )

    console.print(table)
