"""Slash command system for GitHub issue and pull request comments."""

from .actions import ActionSet
from .command import Command, CommandResult, InvocationContext, Target
from .config import ConfigError, get_actions, load_config
from .dispatch import dispatch_command
from .executor import ActionExecutor, unlocked
from .tokenizer import tokenize_command

__all__ = [
    "ActionSet",
    "ActionExecutor",
    "Command",
    "CommandResult",
    "ConfigError",
    "InvocationContext",
    "Target",
    "dispatch_command",
    "get_actions",
    "load_config",
    "tokenize_command",
    "unlocked",
]
