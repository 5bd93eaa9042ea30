"""Normalized action sets and specifier parsing."""

import random
from dataclasses import dataclass

from src.commands.config import ConfigError
from src.commands.template import render


# Reaction contents accepted by the GitHub reactions API
REACTIONS = ("+1", "-1", "laugh", "confused", "heart", "hooray", "rocket", "eyes")

# Config spelling -> GitHub API value
LOCK_REASONS = {
    "off-topic": "off-topic",
    "too-heated": "too heated",
    "too heated": "too heated",
    "resolved": "resolved",
    "spam": "spam",
}

_BOOL_FIELDS = ("open", "close", "lock", "unlock", "pin", "unpin", "dispatch")


def _as_tuple(value, field_name: str) -> tuple[str, ...]:
    """Normalize a "string or list of strings" field."""
    if value is None:
        return ()
    if isinstance(value, (list, tuple)):
        items = value
    else:
        items = [value]
    for item in items:
        if isinstance(item, (dict, list)):
            raise ConfigError(f"Invalid value for '{field_name}': {item!r}")
    return tuple(str(item) for item in items)


def normalize_lock_reason(value) -> str | None:
    """Map a configured lock reason to the API value (None when unset)."""
    if value is None:
        return None
    reason = LOCK_REASONS.get(str(value).strip().lower())
    if reason is None:
        raise ConfigError(f"Invalid lockReason: {value!r}")
    return reason


@dataclass(frozen=True)
class ActionSet:
    """Effects configured for one command. An empty ActionSet does nothing."""
    comments: tuple[str, ...] = ()
    reactions: tuple[str, ...] = ()
    open: bool = False
    close: bool = False
    lock: bool = False
    unlock: bool = False
    lock_reason: str | None = None
    labels: tuple[str, ...] = ()
    assign: tuple[str, ...] = ()
    pin: bool = False
    unpin: bool = False
    dispatch: bool = False

    @classmethod
    def from_config(cls, raw) -> "ActionSet":
        """Normalize a raw config entry. Single strings become 1-tuples."""
        if not raw:
            return cls()
        if not isinstance(raw, dict):
            raise ConfigError(f"Command actions must be a mapping, got {type(raw).__name__}")

        flags = {name: bool(raw.get(name)) for name in _BOOL_FIELDS}
        return cls(
            comments=_as_tuple(raw.get("comment"), "comment"),
            reactions=_as_tuple(raw.get("reactions"), "reactions"),
            lock_reason=normalize_lock_reason(raw.get("lockReason")),
            # `label` and `labels` are aliases; both are applied in one pass
            labels=_as_tuple(raw.get("label"), "label") + _as_tuple(raw.get("labels"), "labels"),
            assign=_as_tuple(raw.get("assign"), "assign"),
            **flags,
        )

    @property
    def empty(self) -> bool:
        return self == ActionSet()


def pick_comment(choices: tuple[str, ...]) -> str:
    """Pick one comment body, uniformly at random when several are configured."""
    if len(choices) == 1:
        return choices[0]
    return random.choice(choices)


def _strip_at(name: str) -> str:
    return name[1:] if name.startswith("@") else name


def parse_specifiers(
    specs: tuple[str, ...],
    context: dict,
    strip_at: bool = False,
) -> tuple[list[str], list[str]]:
    """Render specifiers and split them into (to_add, to_remove).

    Each rendered specifier is split on whitespace. A name prefixed with ``-``
    is a removal, any other non-empty name is an addition. ``*`` and ``-*``
    both request wildcard removal. With ``strip_at``, a leading ``@`` is
    dropped (``-@bob`` removes ``bob``).

        >>> parse_specifiers(("@alice -@bob",), {}, strip_at=True)
        (['alice'], ['bob'])
    """
    to_add: list[str] = []
    to_remove: list[str] = []
    for spec in specs:
        for item in render(spec, context).split():
            if item == "*":
                to_remove.append(item)
            elif item.startswith("-"):
                name = item[1:]
                if strip_at:
                    name = _strip_at(name)
                if name:
                    to_remove.append(name)
            else:
                name = _strip_at(item) if strip_at else item
                if name:
                    to_add.append(name)
    return to_add, to_remove


def resolve_removals(to_remove: list[str], current: list[str]) -> list[str]:
    """Expand the ``*`` wildcard to every current item.

    The wildcard replaces the explicit removals instead of adding to them.
    """
    if "*" in to_remove:
        return list(current)
    return to_remove
