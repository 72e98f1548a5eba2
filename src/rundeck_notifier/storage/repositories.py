"""Abstract repository interfaces for notifier storage.

No SQLAlchemy imports here -- pure abstract contracts.
Concrete implementations are in sqlite.py.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Sequence

if TYPE_CHECKING:
    from rundeck_notifier.storage.schema import ExecutionBadgeRow, RundeckConfigRow


class ConfigRepository(ABC):
    """Abstract interface for the Rundeck configuration row."""

    @abstractmethod
    def get(self) -> RundeckConfigRow | None:
        """Get the stored configuration. Returns None if never configured."""
        ...

    @abstractmethod
    def replace(self, row: RundeckConfigRow) -> None:
        """Replace the stored configuration with *row*."""
        ...


class BadgeRepository(ABC):
    """Abstract interface for execution badge storage."""

    @abstractmethod
    def get(self, project: str, build_number: int) -> ExecutionBadgeRow | None:
        """Get the badge of a build. Returns None if none recorded."""
        ...

    @abstractmethod
    def save(self, badge: ExecutionBadgeRow) -> None:
        """Record a badge.

        Raises:
            DuplicateBadgeError: If the build already has a badge.
        """
        ...

    @abstractmethod
    def list(self, project: str | None = None) -> Sequence[ExecutionBadgeRow]:
        """List badges, newest first, optionally for one project."""
        ...
