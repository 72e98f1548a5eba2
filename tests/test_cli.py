"""CLI tests for the Rundeck notifier -- all 4 commands via Click's CliRunner.

Each test uses runner.isolated_filesystem() with a file-backed database
since every CLI invocation opens its own store.
"""

from __future__ import annotations

import json

import pytest
from click.testing import CliRunner

from rundeck_notifier.cli import cli
from rundeck_notifier.models.config import RundeckConfig
from rundeck_notifier.store import NotifierStore
from tests.conftest import EXECUTION_URL, FakeRundeck


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def runner():
    """Create a Click test runner."""
    return CliRunner()


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in ("RUNDECK_URL", "RUNDECK_LOGIN", "RUNDECK_PASSWORD", "RUNDECK_TIMEOUT"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.delenv("RUNDECK_NOTIFIER_DB", raising=False)


class _FakeInstance(FakeRundeck):
    """FakeRundeck usable where the CLI builds a RundeckInstance."""

    created: list[_FakeInstance] = []

    def __init__(self, config: RundeckConfig) -> None:
        super().__init__()
        self.config = config
        _FakeInstance.created.append(self)

    def __enter__(self) -> _FakeInstance:
        return self

    def __exit__(self, *args: object) -> None:
        pass


@pytest.fixture
def fake_instance(monkeypatch):
    _FakeInstance.created = []
    monkeypatch.setattr("rundeck_notifier.rundeck.client.RundeckInstance", _FakeInstance)
    return _FakeInstance


def _write_build(path: str = "build.json", **overrides) -> str:
    data = {
        "project": "app",
        "number": 7,
        "result": "success",
        "change_set": [{"msg": "release #deploy", "author": "alice"}],
        "environment": {"VERSION": "1.4"},
    }
    data.update(overrides)
    with open(path, "w", encoding="utf-8") as fh:
        json.dump(data, fh)
    return path


def _save_config(db_path: str = ".rundeck-notifier.db") -> None:
    with NotifierStore.open(db_path) as store:
        store.save_config(RundeckConfig(url="http://rd:4440", login="ci", password="pw"))


# ---------------------------------------------------------------------------
# configure
# ---------------------------------------------------------------------------

class TestConfigure:
    def test_saves_config(self, runner):
        with runner.isolated_filesystem():
            result = runner.invoke(
                cli,
                ["configure", "--url", "http://rd:4440/", "--login", "ci", "--password", "pw"],
            )
            assert result.exit_code == 0, result.output
            assert "Saved RunDeck configuration for http://rd:4440" in result.output
            with NotifierStore.open(".rundeck-notifier.db") as store:
                assert store.load_config().login == "ci"

    def test_invalid_url_warns(self, runner):
        with runner.isolated_filesystem():
            result = runner.invoke(
                cli,
                ["configure", "--url", "rd:4440", "--login", "ci", "--password", "pw"],
            )
            assert result.exit_code == 0
            assert "not valid" in result.output

    def test_reads_environment(self, runner):
        with runner.isolated_filesystem():
            result = runner.invoke(
                cli,
                ["--db", "env.db", "configure"],
                env={
                    "RUNDECK_URL": "http://rd",
                    "RUNDECK_LOGIN": "ci",
                    "RUNDECK_PASSWORD": "pw",
                },
            )
            assert result.exit_code == 0, result.output
            with NotifierStore.open("env.db") as store:
                assert store.load_config().url == "http://rd"


# ---------------------------------------------------------------------------
# test-connection
# ---------------------------------------------------------------------------

class TestTestConnection:
    def test_invalid_config_exits_nonzero(self, runner):
        with runner.isolated_filesystem():
            result = runner.invoke(cli, ["test-connection"])
            assert result.exit_code == 1
            assert "RunDeck configuration is not valid !" in result.output

    def test_ok(self, runner, fake_instance):
        with runner.isolated_filesystem():
            _save_config()
            result = runner.invoke(cli, ["test-connection"])
            assert result.exit_code == 0, result.output
            assert "alive" in result.output

    def test_overrides_layer_on_saved(self, runner, fake_instance):
        with runner.isolated_filesystem():
            _save_config()
            runner.invoke(cli, ["test-connection", "--login", "other"])
            config = fake_instance.created[-1].config
            assert (config.url, config.login, config.password) == ("http://rd:4440", "other", "pw")


# ---------------------------------------------------------------------------
# notify
# ---------------------------------------------------------------------------

class TestNotify:
    def test_not_configured_keeps_build_result(self, runner):
        with runner.isolated_filesystem():
            build_json = _write_build()
            result = runner.invoke(cli, ["notify", build_json, "--job-name", "deploy"])
            assert result.exit_code == 0, result.output
            assert "skipped_not_configured" in result.output
            assert "Step failure:" in result.output

    def test_not_configured_fails_build_when_requested(self, runner):
        with runner.isolated_filesystem():
            build_json = _write_build()
            result = runner.invoke(
                cli, ["notify", build_json, "--job-name", "deploy", "--fail-build"]
            )
            assert result.exit_code == 1
            assert "app #7 FAILURE" in result.output

    def test_success_persists_badge(self, runner, fake_instance):
        with runner.isolated_filesystem():
            _save_config()
            build_json = _write_build()
            result = runner.invoke(
                cli,
                [
                    "notify", build_json,
                    "--group-path", "ops",
                    "--job-name", "deploy",
                    "--options", "version=${VERSION}",
                    "--tag", "#DEPLOY",
                ],
            )
            assert result.exit_code == 0, result.output
            assert EXECUTION_URL in result.output
            assert fake_instance.created[-1].calls == [("ops", "deploy", {"version": "1.4"})]

            listing = runner.invoke(cli, ["badges", "--project", "app"])
            assert EXECUTION_URL in listing.output
            assert "#7" in listing.output

    def test_rerun_does_not_schedule_twice(self, runner, fake_instance):
        with runner.isolated_filesystem():
            _save_config()
            build_json = _write_build()
            args = ["notify", build_json, "--job-name", "deploy", "--fail-build"]
            assert runner.invoke(cli, args).exit_code == 0

            result = runner.invoke(cli, args)
            assert result.exit_code == 0, result.output
            assert "skipped_already_notified" in result.output
            assert fake_instance.created[-1].calls == []
            with NotifierStore.open(".rundeck-notifier.db") as store:
                assert len(store.list_badges("app")) == 1

    def test_tag_not_found_skips(self, runner, fake_instance):
        with runner.isolated_filesystem():
            _save_config()
            build_json = _write_build()
            result = runner.invoke(
                cli, ["notify", build_json, "--job-name", "deploy", "--tag", "#nope"]
            )
            assert result.exit_code == 0
            assert "skipped_not_triggered" in result.output
            assert fake_instance.created[-1].calls == []

    def test_upstream_registry(self, runner, fake_instance):
        with runner.isolated_filesystem():
            _save_config()
            build_json = _write_build(
                change_set=[],
                causes=[{"type": "upstream", "project": "lib", "build": 3}],
            )
            with open("registry.json", "w", encoding="utf-8") as fh:
                json.dump(
                    {"lib": [{"number": 3, "change_set": [{"msg": "#deploy lib"}]}]},
                    fh,
                )
            result = runner.invoke(
                cli,
                [
                    "notify", build_json,
                    "--job-name", "deploy",
                    "--tag", "#deploy",
                    "--registry", "registry.json",
                ],
            )
            assert result.exit_code == 0, result.output
            assert "upstream build (lib #3)" in result.output


# ---------------------------------------------------------------------------
# badges
# ---------------------------------------------------------------------------

def test_badges_empty(runner):
    with runner.isolated_filesystem():
        result = runner.invoke(cli, ["badges"])
        assert result.exit_code == 0
        assert "No executions." in result.output
