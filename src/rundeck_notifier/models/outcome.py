"""Outcome models for a notification attempt.

A notification attempt always ends in exactly one NotificationOutcome.
Failures are distinguished by ``kind`` rather than by exception type,
so callers can switch on the kind and log a single explanation.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass


class OutcomeKind(str, enum.Enum):
    """Every way a notification attempt can end."""

    SUCCESS = "success"
    LOGIN_FAILURE = "login_failure"
    SCHEDULING_FAILURE = "scheduling_failure"
    PARSE_FAILURE = "parse_failure"
    SKIPPED_BUILD_NOT_SUCCESSFUL = "skipped_build_not_successful"
    SKIPPED_NOT_CONFIGURED = "skipped_not_configured"
    SKIPPED_NOT_ALIVE = "skipped_not_alive"
    SKIPPED_NOT_TRIGGERED = "skipped_not_triggered"
    SKIPPED_ALREADY_NOTIFIED = "skipped_already_notified"


# Outcomes that leave the build step successful.
_NEUTRAL_KINDS = frozenset({
    OutcomeKind.SUCCESS,
    OutcomeKind.SKIPPED_BUILD_NOT_SUCCESSFUL,
    OutcomeKind.SKIPPED_NOT_TRIGGERED,
    OutcomeKind.SKIPPED_ALREADY_NOTIFIED,
})


@dataclass(frozen=True)
class NotificationOutcome:
    """Result of one notification attempt.

    Immutable: produced once per build completion.
    """

    kind: OutcomeKind
    execution_url: str | None = None
    message: str | None = None

    @property
    def step_succeeded(self) -> bool:
        """Whether the build step should report success."""
        return self.kind in _NEUTRAL_KINDS

    @classmethod
    def success(cls, execution_url: str) -> NotificationOutcome:
        return cls(OutcomeKind.SUCCESS, execution_url=execution_url)

    @classmethod
    def login_failure(cls, message: str) -> NotificationOutcome:
        return cls(OutcomeKind.LOGIN_FAILURE, message=message)

    @classmethod
    def scheduling_failure(cls, message: str) -> NotificationOutcome:
        return cls(OutcomeKind.SCHEDULING_FAILURE, message=message)

    @classmethod
    def parse_failure(cls, message: str) -> NotificationOutcome:
        return cls(OutcomeKind.PARSE_FAILURE, message=message)

    @classmethod
    def skipped(cls, kind: OutcomeKind, message: str | None = None) -> NotificationOutcome:
        return cls(kind, message=message)


class ConnectionCheck(str, enum.Enum):
    """Result of testing a Rundeck configuration."""

    CONFIG_INVALID = "config_invalid"
    NOT_ALIVE = "not_alive"
    LOGIN_INVALID = "login_invalid"
    OK = "ok"

    @property
    def ok(self) -> bool:
        return self is ConnectionCheck.OK

    def describe(self, url: str = "", login: str = "") -> str:
        """Operator-facing message for this check result."""
        if self is ConnectionCheck.CONFIG_INVALID:
            return "RunDeck configuration is not valid !"
        if self is ConnectionCheck.NOT_ALIVE:
            return f"We couldn't find a live RunDeck instance at {url}"
        if self is ConnectionCheck.LOGIN_INVALID:
            return f"Your credentials for the user {login} are not valid !"
        return "Your RunDeck instance is alive, and your credentials are valid !"
