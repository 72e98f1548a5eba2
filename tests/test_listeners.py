"""Tests for build listeners and the in-memory build registry."""

from __future__ import annotations

import logging

from rich.console import Console

from rundeck_notifier.listeners import (
    ConsoleListener,
    InMemoryBuildRegistry,
    LoggingListener,
    NullListener,
)
from rundeck_notifier.protocols import BuildListener, BuildRegistry
from tests.conftest import make_build


def test_listeners_satisfy_protocol():
    console = Console(record=True)
    for listener in (NullListener(), LoggingListener(), ConsoleListener(console)):
        assert isinstance(listener, BuildListener)


def test_logging_listener(caplog):
    with caplog.at_level(logging.INFO, logger="rundeck_notifier.listeners"):
        LoggingListener().log("Notifying RunDeck...")
    assert "Notifying RunDeck..." in caplog.text


def test_console_listener_escapes_markup():
    console = Console(record=True, width=120)
    ConsoleListener(console).log("Found [bold] in changelog")
    assert "[rundeck] Found [bold] in changelog" in console.export_text()


class TestInMemoryBuildRegistry:
    def test_resolve(self):
        upstream = make_build("lib", 4)
        registry = InMemoryBuildRegistry([upstream])
        assert isinstance(registry, BuildRegistry)
        assert registry.resolve_upstream_build("lib", 4) is upstream
        assert registry.resolve_upstream_build("lib", 5) is None
        assert registry.resolve_upstream_build("other", 4) is None

    def test_from_dict_defaults_project(self):
        registry = InMemoryBuildRegistry.from_dict(
            {"lib": [{"number": 2, "change_set": [{"msg": "#deploy", "author": "bob"}]}]}
        )
        build = registry.resolve_upstream_build("lib", 2)
        assert build.project == "lib"
        assert build.change_set[0].author_id == "bob"
