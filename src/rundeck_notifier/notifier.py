"""RundeckNotifier -- the post-build step that notifies Rundeck.

``perform`` walks the decision chain for one completed build:

1. build not successful   -> skipped, step succeeds
2. build already notified -> skipped, step succeeds
3. Rundeck not configured -> step fails
4. Rundeck not alive      -> step fails
5. tag not matched        -> skipped, step succeeds
6. otherwise resolve the options and dispatch the job

Every branch writes one line to the build listener. The Rundeck
connection is passed in explicitly rather than read from global state.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from rundeck_notifier.dispatch import NotificationDispatcher
from rundeck_notifier.exceptions import OptionsParseError
from rundeck_notifier.listeners import NullListener
from rundeck_notifier.models.build import Build, BuildResult, ExecutionBadge
from rundeck_notifier.models.config import NotificationConfig
from rundeck_notifier.models.outcome import (
    ConnectionCheck,
    NotificationOutcome,
    OutcomeKind,
)
from rundeck_notifier.options import resolve_options
from rundeck_notifier.triggers.evaluator import TriggerEvaluator

if TYPE_CHECKING:
    from rundeck_notifier.protocols import BuildListener, BuildRegistry
    from rundeck_notifier.rundeck.protocols import RundeckClient

logger = logging.getLogger(__name__)


class RundeckNotifier:
    """Post-build step scheduling a Rundeck job execution.

    Args:
        config: Per-step settings (job, options, tag, failure policy).
        registry: Build lookup for upstream tag matching.
        evaluator: Override the trigger evaluator (defaults to one
            built on *registry*).
        dispatcher: Override the notification dispatcher.
    """

    def __init__(
        self,
        config: NotificationConfig,
        *,
        registry: BuildRegistry | None = None,
        evaluator: TriggerEvaluator | None = None,
        dispatcher: NotificationDispatcher | None = None,
    ) -> None:
        self.config = config
        self._evaluator = evaluator or TriggerEvaluator(registry)
        self._dispatcher = dispatcher or NotificationDispatcher()

    @property
    def needs_to_run_after_finalized(self) -> bool:
        """When the step may not fail the build, its verdict is applied late."""
        return not self.config.should_fail_the_build

    def perform(
        self,
        build: Build,
        rundeck: RundeckClient | None,
        listener: BuildListener | None = None,
    ) -> NotificationOutcome:
        """Run the notification decision chain for *build*.

        On success the execution badge is attached to *build*.
        """
        listener = listener or NullListener()

        if build.result is not BuildResult.SUCCESS:
            logger.debug(
                "Build %s is %s, not notifying",
                build.full_display_name,
                build.result.value,
            )
            listener.log(
                f"Build result is {build.result.value.upper()} - not notifying RunDeck"
            )
            return NotificationOutcome.skipped(OutcomeKind.SKIPPED_BUILD_NOT_SUCCESSFUL)

        if build.badges:
            return already_notified(build.badges[0].execution_url, listener)

        if rundeck is None or not rundeck.is_configuration_valid():
            message = f"RunDeck configuration is not valid ! {rundeck}"
            listener.log(message)
            return NotificationOutcome.skipped(OutcomeKind.SKIPPED_NOT_CONFIGURED, message)

        if not rundeck.is_alive():
            message = "RunDeck is not running !"
            listener.log(message)
            return NotificationOutcome.skipped(OutcomeKind.SKIPPED_NOT_ALIVE, message)

        if not self._evaluator.should_notify(build, self.config.tag, listener):
            return NotificationOutcome.skipped(OutcomeKind.SKIPPED_NOT_TRIGGERED)

        try:
            options = resolve_options(self.config.options, build.environment, listener)
        except OptionsParseError:
            options = None

        outcome = self._dispatcher.dispatch(
            rundeck,
            self.config.group_path,
            self.config.job_name,
            options,
            listener,
        )
        if outcome.kind is OutcomeKind.SUCCESS and outcome.execution_url:
            build.add_badge(ExecutionBadge(outcome.execution_url))
        return outcome


def check_connection(rundeck: RundeckClient) -> ConnectionCheck:
    """Test a Rundeck configuration: validity, liveness, then credentials."""
    if not rundeck.is_configuration_valid():
        return ConnectionCheck.CONFIG_INVALID
    if not rundeck.is_alive():
        return ConnectionCheck.NOT_ALIVE
    if not rundeck.is_login_valid():
        return ConnectionCheck.LOGIN_INVALID
    return ConnectionCheck.OK


def already_notified(execution_url: str, listener: BuildListener) -> NotificationOutcome:
    """Outcome for a build that already has its RunDeck execution."""
    listener.log(
        f"Build already notified RunDeck (execution {execution_url}) - not notifying again"
    )
    return NotificationOutcome.skipped(
        OutcomeKind.SKIPPED_ALREADY_NOTIFIED,
        f"Execution already scheduled: {execution_url}",
    )
