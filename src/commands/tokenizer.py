"""Split a command line into a command name and arguments."""

import re

from src.commands.command import Command

# key="quoted value" | "quoted value" | bare-word. Quoted parts may contain \" escapes.
TOKEN_PATTERN = re.compile(r'\S+="[^"\\]*(?:\\.[^"\\]*)*"|"[^"\\]*(?:\\.[^"\\]*)*"|\S+')


def tokenize_command(line: str) -> Command:
    """Tokenize a command line whose trigger character was already stripped.

    Quoted tokens are kept verbatim, quotes included:

        >>> tokenize_command('foo bar "baz qux" key="a b"')
        Command(name='foo', args=('bar', '"baz qux"', 'key="a b"'))

    An empty line gives ``Command(name=None)``, which callers treat as no command.
    """
    tokens = TOKEN_PATTERN.findall(line)
    if not tokens:
        return Command(name=None)
    return Command(name=tokens[0], args=tuple(tokens[1:]))
