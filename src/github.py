"""GitHub API client for the effects a command can apply."""

import base64
import os
from urllib.parse import quote

import httpx


GITHUB_API_URL = os.getenv("GITHUB_API_URL", "https://api.github.com").rstrip("/")
GITHUB_GRAPHQL_URL = os.getenv("GITHUB_GRAPHQL_URL", f"{GITHUB_API_URL}/graphql")

PIN_MUTATION = """
mutation PinIssue($input: PinIssueInput!) {
    pinIssue(input: $input) {
        issue {
            title
        }
    }
}
"""

UNPIN_MUTATION = """
mutation UnpinIssue($input: UnpinIssueInput!) {
    unpinIssue(input: $input) {
        issue {
            title
        }
    }
}
"""


class GitHubError(Exception):
    """A GitHub API call failed."""

    def __init__(self, message: str, status: int | None = None):
        super().__init__(message)
        self.status = status


def get_token() -> str:
    token = os.getenv("INPUT_GITHUB_TOKEN") or os.getenv("GITHUB_TOKEN")
    if not token:
        raise ValueError("GITHUB_TOKEN environment variable is not set")
    return token


class GitHubClient:
    """Async client scoped to one repository (``owner/name``).

    Use as an async context manager so the underlying connection pool is closed:

        async with GitHubClient("octo/repo", token) as client:
            await client.create_comment(1, "hello")
    """

    def __init__(
        self,
        repository: str,
        token: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.repository = repository
        self._http = httpx.AsyncClient(
            base_url=GITHUB_API_URL,
            headers={
                "Authorization": f"Bearer {token or get_token()}",
                "Accept": "application/vnd.github+json",
                "X-GitHub-Api-Version": "2022-11-28",
                "User-Agent": "slash-command-bot",
            },
            timeout=30,
            transport=transport,
        )

    async def __aenter__(self) -> "GitHubClient":
        return self

    async def __aexit__(self, *exc_info):
        await self.aclose()

    async def aclose(self):
        await self._http.aclose()

    # ----- Helpers -----
    def _repo_path(self, path: str) -> str:
        return f"/repos/{self.repository}{path}"

    async def _request(self, method: str, path: str, **kwargs) -> httpx.Response:
        response = await self._http.request(method, self._repo_path(path), **kwargs)
        if response.is_error:
            raise GitHubError(
                f"GitHub API error: {method} {path} returned {response.status_code}: {response.text}",
                status=response.status_code,
            )
        return response

    async def _graphql(self, query: str, variables: dict | None = None) -> dict:
        """Execute a GraphQL query against the GitHub API."""
        response = await self._http.post(
            GITHUB_GRAPHQL_URL,
            json={"query": query, "variables": variables or {}},
        )
        if response.is_error:
            raise GitHubError(
                f"GitHub GraphQL error: {response.status_code}: {response.text}",
                status=response.status_code,
            )
        data = response.json()
        if data.get("errors"):
            raise GitHubError(f"GitHub GraphQL error: {data['errors']}")
        return data["data"]

    # ----- Reads -----
    async def get_file_content(self, path: str) -> str | None:
        """Read a file from the default branch. Returns None if it doesn't exist."""
        response = await self._http.get(self._repo_path(f"/contents/{path.lstrip('/')}"))
        if response.status_code == 404:
            return None
        if response.is_error:
            raise GitHubError(
                f"GitHub API error: fetching {path} returned {response.status_code}: {response.text}",
                status=response.status_code,
            )
        content = response.json().get("content") or ""
        return base64.b64decode(content).decode("utf-8")

    async def get_issue(self, number: int) -> dict:
        """Fetch an issue or pull request (as an issue object)."""
        response = await self._request("GET", f"/issues/{number}")
        return response.json()

    # ----- Comments and reactions -----
    async def create_comment(self, number: int, body: str) -> int:
        """Create a comment and return its ID."""
        response = await self._request("POST", f"/issues/{number}/comments", json={"body": body})
        return response.json()["id"]

    async def add_reaction(self, comment_id: int, content: str):
        await self._request("POST", f"/issues/comments/{comment_id}/reactions", json={"content": content})

    # ----- State and locking -----
    async def set_state(self, number: int, state: str):
        await self._request("PATCH", f"/issues/{number}", json={"state": state})

    async def lock(self, number: int, reason: str | None = None):
        payload = {"lock_reason": reason} if reason else None
        await self._request("PUT", f"/issues/{number}/lock", json=payload)

    async def unlock(self, number: int):
        await self._request("DELETE", f"/issues/{number}/lock")

    # ----- Labels and assignees -----
    async def add_labels(self, number: int, names: list[str]):
        await self._request("POST", f"/issues/{number}/labels", json={"labels": names})

    async def remove_label(self, number: int, name: str):
        await self._request("DELETE", f"/issues/{number}/labels/{quote(name, safe='')}")

    async def add_assignees(self, number: int, names: list[str]):
        await self._request("POST", f"/issues/{number}/assignees", json={"assignees": names})

    async def remove_assignees(self, number: int, names: list[str]):
        await self._request("DELETE", f"/issues/{number}/assignees", json={"assignees": names})

    # ----- Pinning (GraphQL only) -----
    async def pin(self, node_id: str):
        await self._graphql(PIN_MUTATION, {"input": {"issueId": node_id}})

    async def unpin(self, node_id: str):
        await self._graphql(UNPIN_MUTATION, {"input": {"issueId": node_id}})

    # ----- Repository dispatch -----
    async def dispatch_event(self, event_type: str, payload: dict):
        await self._request(
            "POST",
            "/dispatches",
            json={"event_type": event_type, "client_payload": payload},
        )
