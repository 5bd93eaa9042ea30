"""Pytest configuration and shared fixtures."""

import os
import pytest

# Set dummy env vars before importing modules that require them
os.environ.setdefault("GITHUB_TOKEN", "test-token")


def make_issue(number=7, **overrides) -> dict:
    """A GitHub issue object as returned by the REST API."""
    issue = {
        "number": number,
        "node_id": f"I_node{number}",
        "state": "open",
        "locked": False,
        "active_lock_reason": None,
        "labels": [],
        "assignees": [],
        "user": {"login": "octocat"},
    }
    issue.update(overrides)
    return issue


class FakeGitHubClient:
    """Records every API call in order instead of talking to GitHub."""

    def __init__(self, issue: dict | None = None, files: dict | None = None):
        self.issue = issue or make_issue()
        self.files = files or {}
        self.calls: list[tuple] = []
        self._next_comment_id = 1000

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        pass

    async def get_file_content(self, path):
        self.calls.append(("get_file_content", path))
        return self.files.get(path)

    async def get_issue(self, number):
        self.calls.append(("get_issue", number))
        return self.issue

    async def create_comment(self, number, body):
        self.calls.append(("create_comment", number, body))
        self._next_comment_id += 1
        return self._next_comment_id

    async def add_reaction(self, comment_id, content):
        self.calls.append(("add_reaction", comment_id, content))

    async def set_state(self, number, state):
        self.calls.append(("set_state", number, state))

    async def lock(self, number, reason=None):
        self.calls.append(("lock", number, reason))

    async def unlock(self, number):
        self.calls.append(("unlock", number))

    async def add_labels(self, number, names):
        self.calls.append(("add_labels", number, list(names)))

    async def remove_label(self, number, name):
        self.calls.append(("remove_label", number, name))

    async def add_assignees(self, number, names):
        self.calls.append(("add_assignees", number, list(names)))

    async def remove_assignees(self, number, names):
        self.calls.append(("remove_assignees", number, list(names)))

    async def pin(self, node_id):
        self.calls.append(("pin", node_id))

    async def unpin(self, node_id):
        self.calls.append(("unpin", node_id))

    async def dispatch_event(self, event_type, payload):
        self.calls.append(("dispatch_event", event_type, payload))

    def effects(self) -> list[tuple]:
        """Calls that change something (reads filtered out)."""
        return [c for c in self.calls if c[0] not in ("get_file_content", "get_issue")]


@pytest.fixture
def fake_client():
    return FakeGitHubClient()


@pytest.fixture
def comment_event():
    """Build an issue_comment/created payload."""
    def _build(body: str, issue: dict | None = None, action: str = "created") -> dict:
        return {
            "action": action,
            "issue": issue or make_issue(),
            "comment": {"id": 55, "body": body, "user": {"login": "commenter"}},
            "sender": {"login": "commenter"},
            "repository": {"full_name": "octo/repo"},
        }
    return _build
