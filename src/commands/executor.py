"""Apply a resolved action set to the target issue or pull request."""

import asyncio
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from src.commands.actions import (
    REACTIONS,
    ActionSet,
    parse_specifiers,
    pick_comment,
    resolve_removals,
)
from src.commands.command import InvocationContext, Target
from src.commands.template import build_render_context, render
from src.console import debug, log, warning

if TYPE_CHECKING:
    from src.github import GitHubClient


@asynccontextmanager
async def unlocked(client: "GitHubClient", target: Target):
    """Temporarily unlock a locked target.

    GitHub rejects new comments on locked conversations. If the target is
    locked, unlock it, run the block, then lock it again with the reason that
    was active before. If the block raises, the target stays unlocked.
    """
    if not target.locked:
        yield
        return

    reason = target.active_lock_reason
    await client.unlock(target.number)
    yield
    await client.lock(target.number, reason)


class ActionExecutor:
    """Runs the effects of one ActionSet in a fixed order.

    Order: pin/unpin, comment (+ reactions), open/close, lock/unlock, labels,
    assignees, repository dispatch. Guards read the target state fetched
    before execution. The first failing API call aborts the remaining steps.
    """

    def __init__(self, client: "GitHubClient", ctx: InvocationContext):
        self.client = client
        self.ctx = ctx
        self.applied: list[str] = []

    @property
    def target(self) -> Target:
        return self.ctx.target

    @property
    def number(self) -> int:
        return self.ctx.target.number

    async def run(self, actions: ActionSet) -> list[str]:
        """Apply every configured effect. Returns the names of effects applied."""
        if actions.empty:
            debug(f"No actions configured for /{self.ctx.command.name} ({self.ctx.context_type})")
            return self.applied

        await self._apply_pin(actions)
        await self._apply_comment(actions)
        await self._apply_state(actions)
        await self._apply_lock(actions)
        await self._apply_labels(actions)
        await self._apply_assignees(actions)
        await self._apply_dispatch(actions)
        return self.applied

    def _render_context(self, with_author: bool = False) -> dict:
        author = self.target.author if with_author else None
        return build_render_context(self.ctx.command.args, author=author)

    async def _apply_pin(self, actions: ActionSet):
        if actions.pin:
            log("📌", f"Pinning #{self.number}")
            await self.client.pin(self.target.node_id)
            self.applied.append("pin")

        if actions.unpin:
            log("📌", f"Unpinning #{self.number}")
            await self.client.unpin(self.target.node_id)
            self.applied.append("unpin")

    async def _apply_comment(self, actions: ActionSet):
        if not actions.comments:
            return

        body = render(pick_comment(actions.comments), self._render_context(with_author=True))
        log("💬", f"Commenting on #{self.number}")

        async with unlocked(self.client, self.target):
            comment_id = await self.client.create_comment(self.number, body)
            self.applied.append("comment")

            for content in actions.reactions:
                if content not in REACTIONS:
                    warning(f"Unknown reaction \"{content}\", skipped")
                    continue
                await self.client.add_reaction(comment_id, content)
                self.applied.append(f"reaction:{content}")

    async def _apply_state(self, actions: ActionSet):
        if actions.open and self.target.state == "closed":
            log("🔓", f"Reopening #{self.number}")
            await self.client.set_state(self.number, "open")
            self.applied.append("open")

        if actions.close and self.target.state == "open":
            log("🔒", f"Closing #{self.number}")
            await self.client.set_state(self.number, "closed")
            self.applied.append("close")

    async def _apply_lock(self, actions: ActionSet):
        if actions.lock and not self.target.locked:
            log("🔒", f"Locking #{self.number}" + (f" ({actions.lock_reason})" if actions.lock_reason else ""))
            await self.client.lock(self.number, actions.lock_reason)
            self.applied.append("lock")

        if actions.unlock and self.target.locked:
            log("🔓", f"Unlocking #{self.number}")
            await self.client.unlock(self.number)
            self.applied.append("unlock")

    async def _apply_labels(self, actions: ActionSet):
        if not actions.labels:
            return

        to_add, to_remove = parse_specifiers(actions.labels, self._render_context())
        to_remove = resolve_removals(to_remove, self.target.labels)

        if to_add:
            log("🏷️", f"Adding labels to #{self.number}: {', '.join(to_add)}")
            await self.client.add_labels(self.number, to_add)
            self.applied.append("labels:add")

        if to_remove:
            # Each label has its own endpoint; no ordering between removals
            names = list(dict.fromkeys(to_remove))
            log("🏷️", f"Removing labels from #{self.number}: {', '.join(names)}")
            # Let every removal settle before surfacing the first failure
            results = await asyncio.gather(
                *(self.client.remove_label(self.number, name) for name in names),
                return_exceptions=True,
            )
            for result in results:
                if isinstance(result, BaseException):
                    raise result
            self.applied.append("labels:remove")

    async def _apply_assignees(self, actions: ActionSet):
        if not actions.assign:
            return

        to_add, to_remove = parse_specifiers(actions.assign, self._render_context(), strip_at=True)
        to_remove = resolve_removals(to_remove, self.target.assignees)

        if to_remove:
            log("👤", f"Unassigning from #{self.number}: {', '.join(to_remove)}")
            await self.client.remove_assignees(self.number, to_remove)
            self.applied.append("assignees:remove")

        if to_add:
            log("👤", f"Assigning #{self.number} to {', '.join(to_add)}")
            await self.client.add_assignees(self.number, to_add)
            self.applied.append("assignees:add")

    async def _apply_dispatch(self, actions: ActionSet):
        if not actions.dispatch:
            return

        command = self.ctx.command
        payload = {
            "command": command.name,
            "args": list(command.args),
            "input": command.input,
            "number": self.number,
            "author": self.target.author,
            "sender": self.ctx.sender,
        }
        log("🚀", f"Dispatching repository event \"{command.name}\"")
        await self.client.dispatch_event(command.name, payload)
        self.applied.append("dispatch")
