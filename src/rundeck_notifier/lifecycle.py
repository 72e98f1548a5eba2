"""Two-phase build completion for the notifier step.

Phase 1 (``on_completed``) runs inline when the build's steps complete:
it performs the notification, persists the badge and records the
outcome per build. If the step is allowed to fail the build, a failed
outcome sets the build result to FAILURE right away.

Phase 2 (``on_finalized``) runs once the build result is fixed. A failed
outcome of a step that must not fail the build is applied here, as a
step failure that leaves ``build.result`` untouched.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from rundeck_notifier.listeners import NullListener
from rundeck_notifier.models.build import Build, BuildResult
from rundeck_notifier.models.outcome import NotificationOutcome, OutcomeKind
from rundeck_notifier.notifier import RundeckNotifier, already_notified

if TYPE_CHECKING:
    from rundeck_notifier.protocols import BuildListener
    from rundeck_notifier.rundeck.protocols import RundeckClient
    from rundeck_notifier.store import NotifierStore

logger = logging.getLogger(__name__)


class BuildCompletion:
    """Completion hook pairing a notifier with its deferred verdicts.

    Outcomes are kept per build identity between the two phases, so one
    hook can serve many builds.
    """

    def __init__(
        self,
        notifier: RundeckNotifier,
        *,
        store: NotifierStore | None = None,
    ) -> None:
        self._notifier = notifier
        self._store = store
        self._pending: dict[tuple[str, int], NotificationOutcome] = {}

    @property
    def pending_builds(self) -> list[tuple[str, int]]:
        return list(self._pending)

    def on_completed(
        self,
        build: Build,
        rundeck: RundeckClient | None,
        listener: BuildListener | None = None,
    ) -> NotificationOutcome:
        """Phase 1: notify and record the outcome for *build*.

        A build whose badge is already stored is not notified again.
        """
        listener = listener or NullListener()
        record = (
            self._store.get_badge(*build.key) if self._store is not None else None
        )
        if record is not None:
            logger.info(
                "%s already has execution %s, skipping",
                build.full_display_name,
                record.execution_url,
            )
            outcome = already_notified(record.execution_url, listener)
        else:
            outcome = self._notifier.perform(build, rundeck, listener)

        if outcome.kind is OutcomeKind.SUCCESS and self._store is not None:
            self._store.record_badge(build, build.badges[-1])

        self._pending[build.key] = outcome

        if not outcome.step_succeeded and not self._notifier.needs_to_run_after_finalized:
            logger.info(
                "RunDeck notification failed for %s, failing the build",
                build.full_display_name,
            )
            listener.log("RunDeck notification failed - marking the build as FAILURE")
            build.result = BuildResult.FAILURE
        return outcome

    def on_finalized(
        self,
        build: Build,
        listener: BuildListener | None = None,
    ) -> NotificationOutcome | None:
        """Phase 2: apply a deferred failure once *build*'s result is fixed.

        Returns the outcome recorded in phase 1, or None if phase 1 never
        ran for this build.
        """
        listener = listener or NullListener()
        build.finalized = True
        outcome = self._pending.pop(build.key, None)
        if outcome is None:
            return None

        if not outcome.step_succeeded and self._notifier.needs_to_run_after_finalized:
            detail = f": {outcome.message}" if outcome.message else ""
            failure = f"RunDeck notification {outcome.kind.value}{detail}"
            build.step_failures.append(failure)
            logger.info(
                "RunDeck notification failed for %s after finalization (%s)",
                build.full_display_name,
                outcome.kind.value,
            )
            listener.log(
                "RunDeck notification failed - build result "
                f"{build.result.value.upper()} is kept"
            )
        return outcome
