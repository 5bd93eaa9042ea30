"""Entry point: turn one comment event into applied effects."""

import os
from typing import TYPE_CHECKING

from src.commands.actions import ActionSet
from src.commands.command import CommandResult, InvocationContext, Target
from src.commands.config import get_actions, load_config
from src.commands.executor import ActionExecutor
from src.commands.tokenizer import tokenize_command
from src.console import debug, log, truncate, warning

if TYPE_CHECKING:
    from src.github import GitHubClient


TRIGGER_CHAR = os.getenv("TRIGGER_CHAR", "/")

TRIGGER_EVENT = "issue_comment"
TRIGGER_ACTION = "created"


def get_command_line(comment_body: str) -> str | None:
    """Return the first line of a comment if it is a command, without the trigger."""
    lines = comment_body.splitlines()
    first_line = lines[0].strip() if lines else ""
    if len(first_line) < 2 or not first_line.startswith(TRIGGER_CHAR):
        return None
    return first_line[len(TRIGGER_CHAR):]


def get_context_type(payload: dict) -> str:
    """Comments on pull requests resolve against the ``pulls`` config section."""
    issue = payload.get("issue")
    if issue is not None:
        return "pulls" if issue.get("pull_request") else "issues"
    return "pulls" if payload.get("pull_request") else "issues"


async def dispatch_command(
    event_name: str,
    payload: dict,
    client: "GitHubClient",
    config_path: str | None = None,
) -> CommandResult:
    """Handle one webhook/Actions event.

    Args:
        event_name: GitHub event name (only "issue_comment" is handled)
        payload: The event payload
        client: GitHub client scoped to the event's repository
        config_path: Path of the command config file in the repository

    Returns:
        CommandResult with status "ignored" for events that aren't commands,
        "completed" after the effects were applied. API and config errors
        are raised to the caller.
    """
    action = payload.get("action")
    subject = payload.get("issue") or payload.get("pull_request")

    if event_name != TRIGGER_EVENT or action != TRIGGER_ACTION or not subject:
        warning(f"{event_name}/{action} → ignored (only comment created events are handled)")
        return CommandResult(status="ignored", message=f"Unhandled event: {event_name}/{action}")

    if subject.get("number") is None:
        warning("Missing issue number in payload → ignored")
        return CommandResult(status="ignored", message="Missing issue number")

    comment = payload.get("comment") or {}
    comment_body = comment.get("body") or ""
    line = get_command_line(comment_body)
    if line is None:
        debug(f"Comment \"{truncate(comment_body)}\" is not a slash command")
        return CommandResult(status="ignored", message="Not a slash command")

    command = tokenize_command(line)
    if not command.name:
        return CommandResult(status="ignored", message="Not a slash command")

    log("▶", f"Command /{command.name} on #{subject.get('number')}")
    debug(f"Command args: {list(command.args)}")

    config = await load_config(client, config_path)
    context_type = get_context_type(payload)
    raw_actions = get_actions(config, context_type, command.name)
    debug(f"Actions ({context_type}): {raw_actions}")
    actions = ActionSet.from_config(raw_actions)

    # Guards use the current state, not the (possibly stale) webhook copy
    target = Target.from_github(subject)
    if not actions.empty:
        target = Target.from_github(await client.get_issue(target.number))

    ctx = InvocationContext(
        command=command,
        target=target,
        context_type=context_type,
        sender=(payload.get("sender") or comment.get("user") or {}).get("login", ""),
    )

    applied = await ActionExecutor(client, ctx).run(actions)
    log("✅", f"/{command.name} done" + (f": {', '.join(applied)}" if applied else " (nothing to do)"))

    return CommandResult(
        status="completed",
        command=command.name,
        input=command.input,
        message=", ".join(applied),
    )
