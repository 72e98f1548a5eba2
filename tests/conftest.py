"""Shared test fixtures for the Rundeck notifier.

Provides an in-memory store, a fake Rundeck instance that records
scheduling calls, and a listener that records build log lines.
"""

from __future__ import annotations

import pytest

from rundeck_notifier.models.build import Build, BuildResult, ChangeLogEntry
from rundeck_notifier.store import NotifierStore

EXECUTION_URL = "http://rundeck.local/execution/follow/42"


class FakeRundeck:
    """A RundeckClient fake with switchable health and canned results."""

    def __init__(
        self,
        *,
        valid: bool = True,
        alive: bool = True,
        login_valid: bool = True,
        execution_url: str = EXECUTION_URL,
        error: Exception | None = None,
    ) -> None:
        self.valid = valid
        self.alive = alive
        self.login_valid = login_valid
        self.execution_url = execution_url
        self.error = error
        self.calls: list[tuple[str, str, dict[str, str]]] = []

    def is_configuration_valid(self) -> bool:
        return self.valid

    def is_alive(self) -> bool:
        return self.alive

    def is_login_valid(self) -> bool:
        return self.login_valid

    def schedule_job_execution(self, group_path, job_name, options) -> str:
        self.calls.append((group_path, job_name, dict(options)))
        if self.error is not None:
            raise self.error
        return self.execution_url

    def __str__(self) -> str:
        return "FakeRundeck"


class RecordingListener:
    """Collects build log lines."""

    def __init__(self) -> None:
        self.lines: list[str] = []

    def log(self, message: str) -> None:
        self.lines.append(message)

    @property
    def text(self) -> str:
        return "\n".join(self.lines)


def make_build(
    project: str = "app",
    number: int = 1,
    *,
    messages: list[str] | None = None,
    result: BuildResult = BuildResult.SUCCESS,
    **kwargs,
) -> Build:
    """Create a Build whose change set holds *messages* (author 'dev')."""
    change_set = [ChangeLogEntry(message=m, author_id="dev") for m in messages or []]
    return Build(project=project, number=number, result=result, change_set=change_set, **kwargs)


@pytest.fixture
def rundeck() -> FakeRundeck:
    return FakeRundeck()


@pytest.fixture
def listener() -> RecordingListener:
    return RecordingListener()


@pytest.fixture
def store():
    """In-memory NotifierStore, closed after the test."""
    s = NotifierStore.open(":memory:")
    yield s
    s.close()
