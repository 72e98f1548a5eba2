"""Host-side protocols consumed by the notifier.

The host build system is not implemented here. The notifier only needs
a place to write build log lines and a way to look up upstream builds.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from rundeck_notifier.models.build import Build


@runtime_checkable
class BuildListener(Protocol):
    """Sink for human-readable build log lines."""

    def log(self, message: str) -> None:
        """Write one line to the build log."""
        ...


@runtime_checkable
class BuildRegistry(Protocol):
    """Lookup of builds by project and build number.

    Returns None when the project no longer exists, is not a buildable
    project, or the build has been pruned.
    """

    def resolve_upstream_build(self, project: str, number: int) -> Build | None:
        ...
