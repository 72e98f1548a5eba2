"""Build listener implementations and an in-memory build registry."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from rundeck_notifier.models.build import Build

if TYPE_CHECKING:
    from rich.console import Console

logger = logging.getLogger(__name__)


class NullListener:
    """Discards build log lines."""

    def log(self, message: str) -> None:
        pass


class LoggingListener:
    """Forwards build log lines to a stdlib logger."""

    def __init__(self, log: logging.Logger | None = None) -> None:
        self._logger = log or logger

    def log(self, message: str) -> None:
        self._logger.info(message)


class ConsoleListener:
    """Writes build log lines to a Rich console."""

    def __init__(self, console: Console) -> None:
        self._console = console

    def log(self, message: str) -> None:
        from rich.markup import escape

        self._console.print(f"[dim]\\[rundeck][/dim] {escape(message)}")


class InMemoryBuildRegistry:
    """BuildRegistry backed by a dict of project -> builds.

    Unknown projects and pruned build numbers resolve to None.
    """

    def __init__(self, builds: list[Build] | None = None) -> None:
        self._builds: dict[tuple[str, int], Build] = {}
        for build in builds or []:
            self.add(build)

    def add(self, build: Build) -> None:
        self._builds[build.key] = build

    def resolve_upstream_build(self, project: str, number: int) -> Build | None:
        return self._builds.get((project, number))

    @classmethod
    def from_dict(cls, data: dict) -> InMemoryBuildRegistry:
        """Load from ``{"<project>": [<build json>, ...]}``."""
        registry = cls()
        for project, builds in data.items():
            for raw in builds:
                raw = dict(raw)
                raw.setdefault("project", project)
                registry.add(Build.from_dict(raw))
        return registry
