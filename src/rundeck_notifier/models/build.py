"""Domain models for the host build system.

These are read-mostly views of a CI build as the notifier sees it:
result status, change log, trigger causes, environment, and the
execution badges attached once a Rundeck job has been scheduled.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field

from rundeck_notifier.exceptions import DuplicateBadgeError

BADGE_DISPLAY_NAME = "RunDeck Execution Result"
BADGE_ICON_FILE_NAME = "/plugin/rundeck/images/rundeck_24x24.png"


class BuildResult(str, enum.Enum):
    """Final (or current) status of a build."""

    SUCCESS = "success"
    UNSTABLE = "unstable"
    FAILURE = "failure"
    ABORTED = "aborted"
    NOT_BUILT = "not_built"


@dataclass(frozen=True)
class ChangeLogEntry:
    """A single change (commit) that went into a build."""

    message: str
    author_id: str = ""


@dataclass(frozen=True)
class Cause:
    """Why a build was started. Subclassed for specific cause types."""

    description: str = ""


@dataclass(frozen=True)
class UserCause(Cause):
    """Build started manually by a user."""

    user_id: str = ""


@dataclass(frozen=True)
class UpstreamCause(Cause):
    """Build started by the completion of another project's build."""

    upstream_project: str = ""
    upstream_build: int = 0


@dataclass(frozen=True)
class ExecutionBadge:
    """Per-build record pointing at the Rundeck execution it scheduled.

    Immutable: created once per successful notification.
    """

    execution_url: str

    @property
    def display_name(self) -> str:
        return BADGE_DISPLAY_NAME

    @property
    def icon_file_name(self) -> str:
        return BADGE_ICON_FILE_NAME

    @property
    def url_name(self) -> str:
        return self.execution_url


@dataclass
class Build:
    """A build record of the host CI system.

    Only ``result``, ``badges``, ``finalized`` and ``step_failures`` are
    written after construction, and only by the completion hook.
    """

    project: str
    number: int
    result: BuildResult = BuildResult.SUCCESS
    change_set: list[ChangeLogEntry] = field(default_factory=list)
    causes: list[Cause] = field(default_factory=list)
    environment: dict[str, str] = field(default_factory=dict)
    badges: list[ExecutionBadge] = field(default_factory=list)
    finalized: bool = False
    step_failures: list[str] = field(default_factory=list)

    @property
    def full_display_name(self) -> str:
        return f"{self.project} #{self.number}"

    @property
    def key(self) -> tuple[str, int]:
        """Identity of the build across projects."""
        return (self.project, self.number)

    def add_badge(self, badge: ExecutionBadge) -> None:
        """Attach an execution badge. A build carries at most one."""
        if self.badges:
            raise DuplicateBadgeError(self.project, self.number)
        self.badges.append(badge)

    @classmethod
    def from_dict(cls, data: dict) -> Build:
        """Build a Build from its JSON form (as used by the CLI).

        Example::

            Build.from_dict({
                "project": "app",
                "number": 12,
                "result": "success",
                "change_set": [{"msg": "deploy please", "author": "alice"}],
                "causes": [{"type": "upstream", "project": "lib", "build": 4}],
                "environment": {"VERSION": "1.2"},
            })
        """
        causes: list[Cause] = []
        for raw in data.get("causes") or []:
            kind = raw.get("type", "")
            if kind == "upstream":
                causes.append(
                    UpstreamCause(
                        description=raw.get("description", ""),
                        upstream_project=raw.get("project", ""),
                        upstream_build=int(raw.get("build", 0)),
                    )
                )
            elif kind == "user":
                causes.append(
                    UserCause(
                        description=raw.get("description", ""),
                        user_id=raw.get("user", ""),
                    )
                )
            else:
                causes.append(Cause(description=raw.get("description", kind)))

        return cls(
            project=data["project"],
            number=int(data["number"]),
            result=BuildResult(data.get("result", BuildResult.SUCCESS.value)),
            change_set=[
                ChangeLogEntry(
                    message=entry.get("msg", ""),
                    author_id=entry.get("author", ""),
                )
                for entry in data.get("change_set") or []
            ],
            causes=causes,
            environment={
                str(k): str(v) for k, v in (data.get("environment") or {}).items()
            },
        )
