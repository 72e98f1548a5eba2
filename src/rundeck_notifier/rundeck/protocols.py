"""Rundeck client protocol.

Defines the pluggable interface the notifier uses to talk to a Rundeck
instance. The built-in RundeckInstance implements it over HTTP; tests
use fakes.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Protocol, runtime_checkable


@runtime_checkable
class RundeckClient(Protocol):
    """Protocol for Rundeck instances.

    ``schedule_job_execution`` returns the execution url, and raises
    RundeckLoginError when authentication fails or
    RundeckSchedulingError when the job could not be scheduled.
    """

    def is_configuration_valid(self) -> bool:
        """Structural check of url/login/password."""
        ...

    def is_alive(self) -> bool:
        """Reachability probe."""
        ...

    def is_login_valid(self) -> bool:
        """Credential probe."""
        ...

    def schedule_job_execution(
        self,
        group_path: str,
        job_name: str,
        options: Mapping[str, str],
    ) -> str:
        """Schedule a job run, return its execution url."""
        ...
