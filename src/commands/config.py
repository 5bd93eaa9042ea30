"""Command configuration: loading the YAML file and resolving actions."""

from typing import TYPE_CHECKING

import yaml

from src.console import debug

if TYPE_CHECKING:
    from src.github import GitHubClient


CONTEXT_TYPES = ("issues", "pulls")


class ConfigError(Exception):
    """The configuration file exists but its content is invalid."""


def parse_config(content: str) -> dict:
    """Parse the YAML document.

    Content that parses to something other than a mapping (empty file, a list,
    a scalar) gives an empty config. A YAML syntax error raises ConfigError.
    """
    try:
        config = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid command config: {e}") from e
    return config if isinstance(config, dict) else {}


async def load_config(client: "GitHubClient", path: str | None) -> dict:
    """Fetch and parse the config file from the repository.

    No path or a missing file gives an empty config. Other fetch errors propagate.
    """
    if not path:
        return {}

    content = await client.get_file_content(path)
    if content is None:
        debug(f"Config file \"{path}\" not found, using empty config")
        return {}

    return parse_config(content)


def get_actions(config: dict, context_type: str, command: str) -> dict:
    """Resolve the action set for a command.

    Looks in ``config[context_type][command]`` first, then in the flat top-level
    ``config[command]``. The first level that has the command wins; levels are
    never merged. Returns ``{}`` when neither has it.
    """
    section = config.get(context_type)
    if isinstance(section, dict) and section.get(command) is not None:
        return section[command]

    if command in CONTEXT_TYPES:
        return {}
    return config.get(command) or {}
