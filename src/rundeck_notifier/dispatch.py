"""NotificationDispatcher -- one scheduling attempt, classified.

Calls the Rundeck client once and converts whatever happens into a
NotificationOutcome. Login and scheduling errors are reported
separately and never retried.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING

from rundeck_notifier.models.outcome import NotificationOutcome
from rundeck_notifier.rundeck.errors import RundeckLoginError, RundeckSchedulingError

if TYPE_CHECKING:
    from rundeck_notifier.protocols import BuildListener
    from rundeck_notifier.rundeck.protocols import RundeckClient

logger = logging.getLogger(__name__)


class NotificationDispatcher:
    """Schedules a Rundeck job and classifies the result."""

    def dispatch(
        self,
        rundeck: RundeckClient,
        group_path: str,
        job_name: str,
        options: Mapping[str, str] | None,
        listener: BuildListener | None = None,
    ) -> NotificationOutcome:
        """Schedule *job_name* in *group_path* with *options*.

        ``options=None`` means the options failed to parse: Rundeck is not
        called and a PARSE_FAILURE outcome is returned.
        """
        job_path = f"{group_path}/{job_name}" if group_path else job_name

        if options is None:
            message = f"Options for job {job_path} could not be parsed"
            _log(listener, f"{message} - not notifying RunDeck")
            return NotificationOutcome.parse_failure(message)

        try:
            execution_url = rundeck.schedule_job_execution(
                group_path, job_name, options
            )
        except RundeckLoginError as exc:
            logger.warning("Login failed on %s: %s", rundeck, exc)
            _log(listener, f"Login failed on {rundeck} : {exc}")
            return NotificationOutcome.login_failure(str(exc))
        except RundeckSchedulingError as exc:
            logger.warning("Scheduling failed for job %s: %s", job_path, exc)
            _log(
                listener,
                f"Scheduling failed for job {job_path} on {rundeck} : {exc}",
            )
            return NotificationOutcome.scheduling_failure(str(exc))

        _log(listener, f"Notification succeeded ! Execution url : {execution_url}")
        return NotificationOutcome.success(execution_url)


def _log(listener: BuildListener | None, message: str) -> None:
    if listener is not None:
        listener.log(message)
