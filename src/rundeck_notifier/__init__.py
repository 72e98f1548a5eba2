"""Rundeck notifier: schedule RunDeck jobs when CI builds complete.

A build step decides, from the build result and an optional change log
tag, whether to schedule a job on a RunDeck instance, and reports login
and scheduling failures distinctly.
"""

from rundeck_notifier._version import __version__

# Entry points
from rundeck_notifier.notifier import RundeckNotifier, check_connection
from rundeck_notifier.lifecycle import BuildCompletion
from rundeck_notifier.dispatch import NotificationDispatcher
from rundeck_notifier.triggers import TagMatch, TriggerEvaluator
from rundeck_notifier.options import (
    dump_properties,
    expand_macros,
    parse_properties,
    resolve_options,
)

# Models
from rundeck_notifier.models.build import (
    Build,
    BuildResult,
    Cause,
    ChangeLogEntry,
    ExecutionBadge,
    UpstreamCause,
    UserCause,
)
from rundeck_notifier.models.config import NotificationConfig, RundeckConfig
from rundeck_notifier.models.outcome import (
    ConnectionCheck,
    NotificationOutcome,
    OutcomeKind,
)

# Collaborators
from rundeck_notifier.protocols import BuildListener, BuildRegistry
from rundeck_notifier.listeners import (
    ConsoleListener,
    InMemoryBuildRegistry,
    LoggingListener,
    NullListener,
)
from rundeck_notifier.rundeck import (
    RundeckClient,
    RundeckError,
    RundeckInstance,
    RundeckLoginError,
    RundeckSchedulingError,
)
from rundeck_notifier.store import BadgeRecord, NotifierStore

# Exceptions
from rundeck_notifier.exceptions import (
    DuplicateBadgeError,
    NotifierError,
    OptionsParseError,
)

__all__ = [
    "__version__",
    "BadgeRecord",
    "Build",
    "BuildCompletion",
    "BuildListener",
    "BuildRegistry",
    "BuildResult",
    "Cause",
    "ChangeLogEntry",
    "ConnectionCheck",
    "ConsoleListener",
    "DuplicateBadgeError",
    "ExecutionBadge",
    "InMemoryBuildRegistry",
    "LoggingListener",
    "NotificationConfig",
    "NotificationDispatcher",
    "NotificationOutcome",
    "NotifierError",
    "NotifierStore",
    "NullListener",
    "OptionsParseError",
    "OutcomeKind",
    "RundeckClient",
    "RundeckConfig",
    "RundeckError",
    "RundeckInstance",
    "RundeckLoginError",
    "RundeckNotifier",
    "RundeckSchedulingError",
    "TagMatch",
    "TriggerEvaluator",
    "UpstreamCause",
    "UserCause",
    "check_connection",
    "dump_properties",
    "expand_macros",
    "parse_properties",
    "resolve_options",
]
