"""Tests for command config loading and resolution."""

import pytest

from src.commands.config import ConfigError, get_actions, load_config, parse_config


DOCUMENT = {
    "issues": {"close": {"close": True}},
    "pulls": {"ship": {"comment": "Shipping!"}},
    "open": {"open": True},
    "close": {"comment": "flat close"},
}


class TestGetActions:
    """Tests for the two-level action lookup."""

    def test_context_section_wins(self):
        assert get_actions(DOCUMENT, "issues", "close") == {"close": True}

    def test_falls_back_to_flat_entry(self):
        assert get_actions(DOCUMENT, "pulls", "open") == {"open": True}

    def test_flat_entry_used_when_other_section_has_command(self):
        # `close` only exists under issues; pulls falls back to the flat entry
        assert get_actions(DOCUMENT, "pulls", "close") == {"comment": "flat close"}

    def test_missing_command_is_empty(self):
        assert get_actions(DOCUMENT, "issues", "missing") == {}

    def test_levels_are_not_merged(self):
        doc = {"issues": {"x": {"close": True}}, "x": {"comment": "hi"}}

        assert get_actions(doc, "issues", "x") == {"close": True}

    def test_section_names_are_not_commands(self):
        assert get_actions(DOCUMENT, "issues", "pulls") == {}

    def test_same_input_same_result(self):
        first = get_actions(DOCUMENT, "issues", "close")
        second = get_actions(DOCUMENT, "issues", "close")

        assert first == second

    def test_empty_document(self):
        assert get_actions({}, "issues", "close") == {}


class TestParseConfig:
    """Tests for YAML parsing."""

    def test_parses_mapping(self):
        content = """
issues:
  close:
    close: true
label:
  label: bug -triage
"""
        config = parse_config(content)

        assert config["issues"]["close"] == {"close": True}
        assert config["label"] == {"label": "bug -triage"}

    def test_empty_content_is_empty_config(self):
        assert parse_config("") == {}

    def test_non_mapping_is_empty_config(self):
        assert parse_config("- a\n- b\n") == {}
        assert parse_config("just text") == {}

    def test_syntax_error_raises(self):
        with pytest.raises(ConfigError):
            parse_config("issues: [unclosed\n  close: {")


class TestLoadConfig:
    """Tests for fetching the config from the repository."""

    @pytest.mark.asyncio
    async def test_no_path_is_empty(self, fake_client):
        assert await load_config(fake_client, None) == {}
        assert await load_config(fake_client, "") == {}
        assert fake_client.calls == []

    @pytest.mark.asyncio
    async def test_missing_file_is_empty(self, fake_client):
        config = await load_config(fake_client, ".github/commands.yml")

        assert config == {}
        assert fake_client.calls == [("get_file_content", ".github/commands.yml")]

    @pytest.mark.asyncio
    async def test_loads_file(self):
        from conftest import FakeGitHubClient

        client = FakeGitHubClient(files={"cmd.yml": "open:\n  open: true\n"})

        assert await load_config(client, "cmd.yml") == {"open": {"open": True}}

    @pytest.mark.asyncio
    async def test_fetch_errors_propagate(self):
        from unittest.mock import AsyncMock, MagicMock
        from src.github import GitHubError

        client = MagicMock()
        client.get_file_content = AsyncMock(side_effect=GitHubError("boom", status=500))

        with pytest.raises(GitHubError):
            await load_config(client, "cmd.yml")
