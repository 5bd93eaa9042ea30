"""Tests for the GitHub Actions entry point."""

import argparse
import json
import pytest
from unittest.mock import AsyncMock, patch

from src import main
from src.commands.command import CommandResult


def _args(**overrides) -> argparse.Namespace:
    values = {"event": None, "event_path": None, "repo": None, "config": None}
    values.update(overrides)
    return argparse.Namespace(**values)


class TestSetOutputs:
    """Tests for writing step outputs."""

    def test_writes_command_and_args(self, tmp_path):
        output = tmp_path / "output.txt"

        main.set_outputs(CommandResult(status="completed", command="label", input="bug -triage"), str(output))

        assert output.read_text() == "command=label\nargs=bug -triage\n"

    def test_no_output_file_is_noop(self, monkeypatch):
        monkeypatch.delenv("GITHUB_OUTPUT", raising=False)

        main.set_outputs(CommandResult(status="completed", command="x"))


class TestCmdRun:
    """Tests for the `run` sub-command."""

    @pytest.fixture
    def event_file(self, tmp_path, comment_event):
        path = tmp_path / "event.json"
        path.write_text(json.dumps(comment_event("/close")))
        return path

    def test_reads_actions_environment(self, monkeypatch, tmp_path, event_file):
        output = tmp_path / "output.txt"
        monkeypatch.setenv("GITHUB_EVENT_NAME", "issue_comment")
        monkeypatch.setenv("GITHUB_EVENT_PATH", str(event_file))
        monkeypatch.setenv("GITHUB_REPOSITORY", "octo/repo")
        monkeypatch.setenv("INPUT_CONFIG_FILE", ".github/commands.yml")
        monkeypatch.setenv("GITHUB_OUTPUT", str(output))

        result = CommandResult(status="completed", command="close", input="")
        with patch.object(main, "run_action", new_callable=AsyncMock, return_value=result) as mock_run:
            assert main.cmd_run(_args()) == 0

        event_name, payload, repository, config_path = mock_run.call_args.args
        assert event_name == "issue_comment"
        assert payload["comment"]["body"] == "/close"
        assert repository == "octo/repo"
        assert config_path == ".github/commands.yml"
        assert output.read_text() == "command=close\nargs=\n"

    def test_ignored_event_writes_no_outputs(self, monkeypatch, tmp_path, event_file):
        output = tmp_path / "output.txt"
        monkeypatch.setenv("GITHUB_OUTPUT", str(output))

        result = CommandResult(status="ignored", message="Not a slash command")
        with patch.object(main, "run_action", new_callable=AsyncMock, return_value=result):
            assert main.cmd_run(_args(event="issue_comment", event_path=str(event_file), repo="octo/repo")) == 0

        assert not output.exists()

    def test_failure_exits_non_zero(self, event_file, capsys):
        with patch.object(main, "run_action", new_callable=AsyncMock, side_effect=RuntimeError("Bad credentials")):
            code = main.cmd_run(_args(event="issue_comment", event_path=str(event_file), repo="octo/repo"))

        assert code == 1
        assert "::error::Bad credentials" in capsys.readouterr().out


class TestLoadEvent:
    """Tests for reading the event payload."""

    def test_missing_path_is_empty(self, tmp_path):
        assert main.load_event(None) == {}
        assert main.load_event(str(tmp_path / "nope.json")) == {}
