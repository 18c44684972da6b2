"""Tests for configuration, event dispatch and action outputs."""

import asyncio
import json
import logging
import sys
from unittest.mock import AsyncMock, MagicMock

import pytest

from gitflow_release import main as entry
from gitflow_release.config import GitflowConfig, get_input
from gitflow_release.errors import ConfigurationError, CredentialMissingError
from gitflow_release.models import Classification, Result
from gitflow_release.tools import ActionEvent, set_outputs
from gitflow_release.utils import get_logger, resolve_level, setup_logging

BASE_ENV = {
    "GITHUB_TOKEN": "ghp_test",
    "GITHUB_REPOSITORY": "octo/app",
    "DEVELOP_BRANCH": "develop",
    "MAIN_BRANCH": "main",
}


class TestGitflowConfig:
    """Tests for configuration resolution."""

    def test_from_env(self):
        """Given plain environment variables, should resolve every setting."""
        # Given
        environ = dict(
            BASE_ENV,
            MERGE_BACK_FROM_MAIN="true",
            VERSION_INCREMENT="minor",
            DRY_RUN="true",
            RELEASE_SUMMARY="Spring release",
            SLACK_OPTIONS='{"channel": "releases"}',
            SLACK_TOKEN="xoxb-test",
        )

        # When
        config = GitflowConfig.from_env(environ)

        # Then
        assert config.repo == "octo/app"
        assert config.owner == "octo"
        assert config.repo_name == "app"
        assert config.merge_back_from_main is True
        assert config.version_increment == "minor"
        assert config.dry_run is True
        assert config.release_summary == "Spring release"
        assert config.slack == '{"channel": "releases"}'
        assert config.slack_token == "xoxb-test"
        assert config.release_branch_prefix == "release/"
        assert config.hotfix_branch_prefix == "hotfix/"

    def test_action_input_takes_precedence(self):
        """Given both an action input and an env var, should prefer the input."""
        environ = {"INPUT_DEVELOP_BRANCH": "dev", "DEVELOP_BRANCH": "other"}
        assert get_input("develop_branch", "DEVELOP_BRANCH", environ) == "dev"
        assert get_input("main_branch", "MAIN_BRANCH", {"MAIN_BRANCH": "prod"}) == "prod"
        assert get_input("version", "VERSION", {"INPUT_VERSION": "", "VERSION": "1.0.0"}) == "1.0.0"

    def test_booleans_need_literal_true(self):
        """Given boolean inputs other than "true", should treat them as false."""
        config = GitflowConfig.from_env(dict(BASE_ENV, DRY_RUN="yes", MERGE_BACK_FROM_MAIN="True"))
        assert config.dry_run is False
        assert config.merge_back_from_main is False

    def test_missing_token(self):
        """Given no GITHUB_TOKEN, should fail before anything else."""
        with pytest.raises(CredentialMissingError, match="GITHUB_TOKEN"):
            GitflowConfig.from_env({"DEVELOP_BRANCH": "develop", "MAIN_BRANCH": "main"})

    def test_slack_without_token(self):
        """Given Slack options but no SLACK_TOKEN, should fail at startup."""
        with pytest.raises(CredentialMissingError, match="SLACK_TOKEN"):
            GitflowConfig.from_env(dict(BASE_ENV, SLACK_OPTIONS='{"channel": "releases"}'))
        with pytest.raises(CredentialMissingError, match="SLACK_TOKEN"):
            GitflowConfig.from_env(dict(BASE_ENV, INPUT_SLACK='{"channel": "releases"}', SLACK_TOKEN=""))

    def test_slack_token_optional_without_slack(self):
        """Given no Slack options, should not require SLACK_TOKEN."""
        config = GitflowConfig.from_env(BASE_ENV)
        assert config.slack == ""
        assert config.slack_token is None

    def test_missing_branch(self):
        """Given no main branch, should reject the configuration."""
        environ = dict(BASE_ENV)
        del environ["MAIN_BRANCH"]
        with pytest.raises(ConfigurationError):
            GitflowConfig.from_env(environ)

    def test_config_is_immutable(self):
        """Given a config, should not allow mutation."""
        config = GitflowConfig.from_env(BASE_ENV)
        with pytest.raises(AttributeError):
            config.dry_run = True


class TestActionEvent:
    """Tests for reading the triggering event."""

    def test_reads_payload(self, tmp_path):
        """Given an event file, should expose the closed pull request."""
        # Given
        event_path = tmp_path / "event.json"
        event_path.write_text(json.dumps({"action": "closed", "pull_request": {"number": 5, "merged": True}}))

        # When
        event = ActionEvent.from_env({"GITHUB_EVENT_NAME": "pull_request", "GITHUB_EVENT_PATH": str(event_path)})

        # Then
        assert event.is_pull_request_closed is True
        assert event.is_dispatch is False
        assert event.pull_request == {"number": 5, "merged": True}

    def test_missing_payload(self):
        """Given no event file, should default to an empty payload."""
        event = ActionEvent.from_env({"GITHUB_EVENT_NAME": "workflow_dispatch"})
        assert event.is_dispatch is True
        assert event.payload == {}


class TestOutputs:
    """Tests for writing step outputs."""

    def test_writes_output_file(self, tmp_path):
        """Given GITHUB_OUTPUT, should append key=value lines."""
        # Given
        output = tmp_path / "output"
        result = Result(type=Classification.RELEASE, version="1.3.0", pull_numbers_in_release="7,12")

        # When
        set_outputs(result.to_outputs(), {"GITHUB_OUTPUT": str(output)})

        # Then
        assert output.read_text() == "type=release\nversion=1.3.0\npull_numbers_in_release=7,12\n"

    def test_multiline_values_use_delimiter(self, tmp_path):
        """Given a multi-line value, should use the heredoc form."""
        output = tmp_path / "output"
        set_outputs({"warnings": "one\ntwo"}, {"GITHUB_OUTPUT": str(output)})

        lines = output.read_text().splitlines()
        assert lines[0].startswith("warnings<<ghadelimiter_")
        assert lines[1:3] == ["one", "two"]
        assert lines[3] == lines[0].split("<<", 1)[1]

    def test_without_output_file(self, tmp_path):
        """Given no GITHUB_OUTPUT, should not fail."""
        set_outputs({"type": "none"}, {})


class TestDispatch:
    """Tests for routing events to workflows."""

    def test_unrelated_event_is_noop(self):
        """Given a push event, should return no result."""
        config = GitflowConfig.from_env(BASE_ENV)
        assert asyncio.run(entry.dispatch(config, ActionEvent(name="push"))) is None

    def test_open_pull_request_is_noop(self):
        """Given a pull request that is only opened, should return no result."""
        config = GitflowConfig.from_env(BASE_ENV)
        event = ActionEvent(name="pull_request", payload={"action": "opened"})
        assert asyncio.run(entry.dispatch(config, event)) is None

    def test_dispatch_routes_to_release_pr(self, monkeypatch):
        """Given workflow_dispatch, should open a release pull request."""
        # Given
        orchestrator = MagicMock()
        orchestrator.create_release_pr = AsyncMock(return_value=Result(type=Classification.RELEASE))
        monkeypatch.setattr(entry, "build_release_pr_orchestrator", lambda config: orchestrator)
        config = GitflowConfig.from_env(BASE_ENV)

        # When
        result = asyncio.run(entry.dispatch(config, ActionEvent(name="workflow_dispatch")))

        # Then
        assert result.type is Classification.RELEASE
        orchestrator.create_release_pr.assert_awaited_once()

    def test_closed_pull_request_routes_to_finalizer(self, monkeypatch):
        """Given a closed pull request, should finalize it."""
        # Given
        finalizer = MagicMock()
        finalizer.execute_on_release = AsyncMock(return_value=Result())
        monkeypatch.setattr(entry, "build_finalizer", lambda config: finalizer)
        config = GitflowConfig.from_env(BASE_ENV)
        event = ActionEvent(name="pull_request", payload={"action": "closed", "pull_request": {"number": 5}})

        # When
        asyncio.run(entry.dispatch(config, event))

        # Then
        finalizer.execute_on_release.assert_awaited_once_with({"number": 5})


class TestMain:
    """Tests for the CLI exit behaviour."""

    def _set_env(self, monkeypatch, tmp_path, **extra):
        for key in list(BASE_ENV) + [
            "GITHUB_EVENT_PATH", "SLACK_OPTIONS", "INPUT_SLACK", "SLACK_TOKEN", "VERSION", "VERSION_INCREMENT",
        ]:
            monkeypatch.delenv(key, raising=False)
        monkeypatch.setenv("GITHUB_OUTPUT", str(tmp_path / "output"))
        for key, value in dict(BASE_ENV, **extra).items():
            monkeypatch.setenv(key, value)

    def test_missing_token_exits_1(self, monkeypatch, tmp_path, capsys):
        """Given no GITHUB_TOKEN, should report the error and exit 1."""
        # Given
        self._set_env(monkeypatch, tmp_path, GITHUB_EVENT_NAME="push")
        monkeypatch.delenv("GITHUB_TOKEN")
        monkeypatch.setattr(sys, "argv", ["gitflow-release", "run"])

        # When
        with pytest.raises(SystemExit) as exc:
            entry.main()

        # Then
        assert exc.value.code == 1
        assert "::error::GITHUB_TOKEN is not defined" in capsys.readouterr().out

    def test_missing_slack_token_exits_1(self, monkeypatch, tmp_path, capsys):
        """Given Slack options without SLACK_TOKEN, should exit 1 before any workflow runs."""
        # Given
        self._set_env(monkeypatch, tmp_path, GITHUB_EVENT_NAME="workflow_dispatch",
                      SLACK_OPTIONS='{"channel": "releases"}')
        build = MagicMock()
        monkeypatch.setattr(entry, "build_release_pr_orchestrator", build)
        monkeypatch.setattr(sys, "argv", ["gitflow-release", "run"])

        # When
        with pytest.raises(SystemExit) as exc:
            entry.main()

        # Then
        assert exc.value.code == 1
        assert "::error::SLACK_TOKEN is not defined" in capsys.readouterr().out
        build.assert_not_called()

    def test_unhandled_event_exits_0(self, monkeypatch, tmp_path):
        """Given an event that matches no workflow, should exit 0 without outputs."""
        # Given
        self._set_env(monkeypatch, tmp_path, GITHUB_EVENT_NAME="push")
        monkeypatch.setattr(sys, "argv", ["gitflow-release"])

        # When
        with pytest.raises(SystemExit) as exc:
            entry.main()

        # Then
        assert exc.value.code == 0
        assert not (tmp_path / "output").exists()

    def test_release_pr_writes_outputs(self, monkeypatch, tmp_path):
        """Given release-pr --dry-run, should run dry and write outputs."""
        # Given
        self._set_env(monkeypatch, tmp_path)
        seen = {}

        def build(config):
            seen["dry_run"] = config.dry_run
            orchestrator = MagicMock()
            orchestrator.create_release_pr = AsyncMock(return_value=Result(
                type=Classification.RELEASE, version="1.3.0", release_branch="release/1.3.0"
            ))
            return orchestrator

        monkeypatch.setattr(entry, "build_release_pr_orchestrator", build)
        monkeypatch.setattr(sys, "argv", ["gitflow-release", "release-pr", "--dry-run"])

        # When
        with pytest.raises(SystemExit) as exc:
            entry.main()

        # Then
        assert exc.value.code == 0
        assert seen["dry_run"] is True
        assert (tmp_path / "output").read_text() == (
            "type=release\nversion=1.3.0\nrelease_branch=release/1.3.0\n"
        )


class TestLogging:
    """Tests for log level selection."""

    def test_info_by_default(self):
        """Given no debug flag, should log at INFO."""
        assert resolve_level(False, {}) == logging.INFO

    def test_debug_flag(self):
        """Given --debug, should log at DEBUG."""
        assert resolve_level(True, {}) == logging.DEBUG

    def test_runner_debug(self):
        """Given a workflow re-run with debug logging, should log at DEBUG."""
        assert resolve_level(False, {"RUNNER_DEBUG": "1"}) == logging.DEBUG
        assert resolve_level(False, {"RUNNER_DEBUG": "0"}) == logging.INFO

    def test_setup_sets_package_logger_level(self):
        """Given RUNNER_DEBUG, should set the package logger to DEBUG."""
        logger = get_logger()
        previous = logger.level
        try:
            assert setup_logging(environ={"RUNNER_DEBUG": "1"}).level == logging.DEBUG
            assert logger.level == logging.DEBUG
        finally:
            logger.setLevel(previous)
