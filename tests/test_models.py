"""Tests for domain and configuration models."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from rundeck_notifier.exceptions import DuplicateBadgeError
from rundeck_notifier.models.build import (
    Build,
    BuildResult,
    Cause,
    ExecutionBadge,
    UpstreamCause,
    UserCause,
)
from rundeck_notifier.models.config import DEFAULT_TIMEOUT, NotificationConfig, RundeckConfig
from rundeck_notifier.models.outcome import ConnectionCheck, NotificationOutcome, OutcomeKind


class TestRundeckConfig:
    def test_normalizes_fields(self):
        config = RundeckConfig(url=" http://rd:4440/ ", login=" admin ", password=None)
        assert config.url == "http://rd:4440"
        assert config.login == "admin"
        assert config.password == ""
        assert not config.is_valid()

    def test_is_frozen(self):
        config = RundeckConfig(url="http://rd", login="a", password="b")
        with pytest.raises(ValidationError):
            config.url = "http://other"

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("RUNDECK_URL", "https://rd.example")
        monkeypatch.setenv("RUNDECK_LOGIN", "ci")
        monkeypatch.setenv("RUNDECK_PASSWORD", "pw")
        monkeypatch.setenv("RUNDECK_TIMEOUT", "not-a-number")
        config = RundeckConfig.from_env()
        assert config.is_valid()
        assert config.timeout == DEFAULT_TIMEOUT


class TestNotificationConfig:
    def test_defaults(self):
        config = NotificationConfig(job_name="deploy")
        assert config.group_path == ""
        assert config.options == ""
        assert config.tag is None
        assert config.should_fail_the_build is False

    def test_none_options_become_blank(self):
        assert NotificationConfig(job_name="deploy", options=None).options == ""


class TestBuild:
    def test_from_dict(self):
        build = Build.from_dict({
            "project": "app",
            "number": "12",
            "result": "unstable",
            "change_set": [{"msg": "deploy please", "author": "alice"}],
            "causes": [
                {"type": "upstream", "project": "lib", "build": 4},
                {"type": "user", "user": "bob"},
                {"type": "timer"},
            ],
            "environment": {"VERSION": 1.2},
        })
        assert build.number == 12
        assert build.result is BuildResult.UNSTABLE
        assert build.change_set[0].author_id == "alice"
        assert build.causes[0] == UpstreamCause(upstream_project="lib", upstream_build=4)
        assert isinstance(build.causes[1], UserCause)
        assert type(build.causes[2]) is Cause
        assert build.environment == {"VERSION": "1.2"}

    def test_add_badge_only_once(self):
        build = Build(project="app", number=1)
        build.add_badge(ExecutionBadge("http://rd/e/1"))
        with pytest.raises(DuplicateBadgeError):
            build.add_badge(ExecutionBadge("http://rd/e/2"))
        assert len(build.badges) == 1

    def test_badge_view(self):
        badge = ExecutionBadge("http://rd/e/1")
        assert badge.display_name == "RunDeck Execution Result"
        assert badge.icon_file_name.endswith("rundeck_24x24.png")
        assert badge.url_name == "http://rd/e/1"


class TestOutcome:
    @pytest.mark.parametrize(
        ("kind", "succeeded"),
        [
            (OutcomeKind.SUCCESS, True),
            (OutcomeKind.SKIPPED_BUILD_NOT_SUCCESSFUL, True),
            (OutcomeKind.SKIPPED_NOT_TRIGGERED, True),
            (OutcomeKind.SKIPPED_ALREADY_NOTIFIED, True),
            (OutcomeKind.SKIPPED_NOT_CONFIGURED, False),
            (OutcomeKind.SKIPPED_NOT_ALIVE, False),
            (OutcomeKind.LOGIN_FAILURE, False),
            (OutcomeKind.SCHEDULING_FAILURE, False),
            (OutcomeKind.PARSE_FAILURE, False),
        ],
    )
    def test_step_succeeded(self, kind, succeeded):
        assert NotificationOutcome(kind).step_succeeded is succeeded

    def test_connection_check_messages(self):
        assert ConnectionCheck.NOT_ALIVE.describe(url="http://rd") == (
            "We couldn't find a live RunDeck instance at http://rd"
        )
        assert ConnectionCheck.LOGIN_INVALID.describe(login="ci") == (
            "Your credentials for the user ci are not valid !"
        )
