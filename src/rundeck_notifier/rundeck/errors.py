"""Rundeck-specific error hierarchy.

All Rundeck errors inherit from NotifierError for consistent exception
handling. The dispatcher turns them into notification outcomes.
"""

from __future__ import annotations

from rundeck_notifier.exceptions import NotifierError


class RundeckError(NotifierError):
    """Base for all errors raised by a Rundeck instance."""


class RundeckLoginError(RundeckError):
    """Authentication against the Rundeck instance failed."""


class RundeckSchedulingError(RundeckError):
    """Rundeck refused or failed to schedule the job execution.

    Covers unknown jobs, rejected options, and transport failures
    while the scheduling request is in flight.
    """
