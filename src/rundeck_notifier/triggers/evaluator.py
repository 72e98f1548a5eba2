"""TriggerEvaluator -- decides whether a completed build notifies Rundeck.

With no tag configured every build notifies. With a tag, the build
notifies only when a change log message mentions the tag (ignoring
case), either in the build itself or in a build of an upstream project
that directly triggered it.

Upstream lookup goes one level deep: the causes of an upstream build
are not followed.

The evaluator never mutates the build; it only reads the change log and
causes, and writes one explanation line to the build listener.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from rundeck_notifier.models.build import Build, ChangeLogEntry, UpstreamCause

if TYPE_CHECKING:
    from rundeck_notifier.protocols import BuildListener, BuildRegistry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TagMatch:
    """Where a tag was found."""

    entry: ChangeLogEntry
    build: Build
    upstream: bool = False


def _find_tag(entries: Iterable[ChangeLogEntry], tag: str) -> ChangeLogEntry | None:
    needle = tag.lower()
    for entry in entries:
        if needle in (entry.message or "").lower():
            return entry
    return None


class TriggerEvaluator:
    """Evaluates the tag trigger for a build.

    Args:
        registry: Lookup used to resolve upstream causes into builds.
            Without a registry, upstream causes are never inspected.
    """

    def __init__(self, registry: BuildRegistry | None = None) -> None:
        self._registry = registry

    def find_match(self, build: Build, tag: str) -> TagMatch | None:
        """Locate the first change log entry mentioning *tag*.

        The build's own change log is scanned first, then the change log
        of each directly upstream build, in cause order.
        """
        entry = _find_tag(build.change_set, tag)
        if entry is not None:
            return TagMatch(entry=entry, build=build)

        if self._registry is None:
            return None

        for cause in build.causes:
            if not isinstance(cause, UpstreamCause):
                continue
            upstream = self._registry.resolve_upstream_build(
                cause.upstream_project, cause.upstream_build
            )
            if upstream is None:
                logger.debug(
                    "Upstream build %s #%s not found, skipping",
                    cause.upstream_project,
                    cause.upstream_build,
                )
                continue
            entry = _find_tag(upstream.change_set, tag)
            if entry is not None:
                return TagMatch(entry=entry, build=upstream, upstream=True)
        return None

    def should_notify(
        self,
        build: Build,
        tag: str | None,
        listener: BuildListener | None = None,
    ) -> bool:
        """Whether *build* should notify Rundeck given the configured *tag*."""
        if tag is None or not tag.strip():
            if listener is not None:
                listener.log("Notifying RunDeck...")
            return True

        match = self.find_match(build, tag)
        if match is None:
            logger.debug("Tag %r not found for %s", tag, build.full_display_name)
            if listener is not None:
                listener.log(
                    f"Tag {tag} not found in changelog - not notifying RunDeck"
                )
            return False

        if listener is not None:
            if match.upstream:
                listener.log(
                    f"Found {tag} in changelog (from {match.entry.author_id}) "
                    f"in upstream build ({match.build.full_display_name}) "
                    "- Notifying RunDeck..."
                )
            else:
                listener.log(
                    f"Found {tag} in changelog (from {match.entry.author_id}) "
                    "- Notifying RunDeck..."
                )
        return True
