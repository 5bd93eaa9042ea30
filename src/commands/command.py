"""Data passed between the tokenizer, resolver and executor."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Command:
    """A tokenized command line (without the trigger character)."""
    name: str | None
    args: tuple[str, ...] = ()

    @property
    def input(self) -> str:
        """Arguments joined by a single space."""
        return " ".join(self.args)


@dataclass(frozen=True)
class Target:
    """The issue or pull request a command was posted on."""
    number: int
    node_id: str = ""
    state: str = "open"
    locked: bool = False
    active_lock_reason: str | None = None
    labels: list[str] = field(default_factory=list)
    assignees: list[str] = field(default_factory=list)
    author: str = ""

    @classmethod
    def from_github(cls, data: dict) -> "Target":
        """Build a target from a GitHub issue or pull request object."""
        return cls(
            number=data["number"],
            node_id=data.get("node_id") or "",
            state=data.get("state") or "open",
            locked=bool(data.get("locked")),
            active_lock_reason=data.get("active_lock_reason"),
            labels=[label["name"] for label in data.get("labels") or []],
            assignees=[user["login"] for user in data.get("assignees") or []],
            author=(data.get("user") or {}).get("login", ""),
        )


@dataclass(frozen=True)
class InvocationContext:
    """Everything one command run needs, passed explicitly."""
    command: Command
    target: Target
    context_type: str  # "issues" or "pulls"
    sender: str = ""


@dataclass
class CommandResult:
    """Result of handling one comment event."""
    status: str  # "completed", "ignored", "error"
    command: str = ""
    input: str = ""
    message: str = ""
