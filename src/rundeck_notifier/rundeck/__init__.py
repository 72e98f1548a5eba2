"""Rundeck package -- client protocol, httpx implementation, errors."""

from rundeck_notifier.rundeck.client import RundeckInstance
from rundeck_notifier.rundeck.errors import (
    RundeckError,
    RundeckLoginError,
    RundeckSchedulingError,
)
from rundeck_notifier.rundeck.protocols import RundeckClient

__all__ = [
    "RundeckClient",
    "RundeckError",
    "RundeckInstance",
    "RundeckLoginError",
    "RundeckSchedulingError",
]
