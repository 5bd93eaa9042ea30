"""FastAPI webhook server for GitHub comment events."""

import hashlib
import hmac
import json
import os
import traceback

from dotenv import load_dotenv
from fastapi import BackgroundTasks, FastAPI, HTTPException, Request

load_dotenv(override=True)

from src.commands import dispatch_command, tokenize_command
from src.commands.dispatch import TRIGGER_ACTION, TRIGGER_EVENT, get_command_line
from src.console import error, log, truncate
from src.github import GitHubClient


GITHUB_WEBHOOK_SECRET = os.getenv("GITHUB_WEBHOOK_SECRET")
CONFIG_FILE = os.getenv("CONFIG_FILE", ".github/commands.yml")


app = FastAPI(
    title="Slash Command Bot",
    description="Applies configured actions for slash commands in GitHub comments",
)


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "ok"}


def _verify_signature(body: bytes, signature: str | None) -> bool:
    """Verify the X-Hub-Signature-256 header."""
    if not GITHUB_WEBHOOK_SECRET:
        return True  # Skip verification if no secret configured
    if not signature or not signature.startswith("sha256="):
        return False
    expected = hmac.new(
        GITHUB_WEBHOOK_SECRET.encode(),
        body,
        hashlib.sha256,
    ).hexdigest()
    return hmac.compare_digest(expected, signature.removeprefix("sha256="))


async def run_command(repository: str, event_name: str, payload: dict):
    """Resolve and apply a comment command (runs after the webhook response)."""
    try:
        async with GitHubClient(repository) as client:
            result = await dispatch_command(event_name, payload, client, CONFIG_FILE)
    except Exception as e:
        error(f"[WH] Command failed on {repository}: {e}")
        traceback.print_exc()
        return

    if result.status == "completed":
        log("✅", f"[WH] /{result.command} on {repository}: {result.message or 'nothing to apply'}")
    else:
        log("·", f"[WH] {result.message} → ignored")


@app.post("/webhook/github")
async def github_webhook(request: Request, background_tasks: BackgroundTasks):
    """Handle GitHub webhook events.

    Only cheap checks run inside the request. GitHub drops deliveries that
    take longer than 10 seconds, so the config fetch and the API effects run
    as a background task after the response is sent.
    """
    body = await request.body()
    signature = request.headers.get("x-hub-signature-256")

    if not _verify_signature(body, signature):
        error("[WH] Signature verification failed")
        raise HTTPException(status_code=401, detail="Invalid signature")

    event_name = request.headers.get("x-github-event", "")
    try:
        payload = json.loads(body)
    except ValueError:
        error("[WH] Request body is not valid JSON")
        raise HTTPException(status_code=400, detail="Invalid JSON payload")
    if not isinstance(payload, dict):
        raise HTTPException(status_code=400, detail="Invalid JSON payload")

    repository = (payload.get("repository") or {}).get("full_name")
    if not repository:
        log("·", f"[WH] {event_name} without repository → ignored")
        return {"status": "ignored", "reason": "Missing repository"}

    action = payload.get("action")
    if event_name != TRIGGER_EVENT or action != TRIGGER_ACTION:
        log("·", f"[WH] {event_name}/{action} → ignored")
        return {"status": "ignored", "reason": f"Unhandled event: {event_name}/{action}"}

    comment_body = (payload.get("comment") or {}).get("body") or ""
    line = get_command_line(comment_body)
    command = tokenize_command(line) if line is not None else None
    if command is None or not command.name:
        log("·", f"[WH] Comment \"{truncate(comment_body)}\" → not a slash command")
        return {"status": "ignored", "reason": "Not a slash command"}

    background_tasks.add_task(run_command, repository, event_name, payload)
    log("📥", f"[WH] Queued /{command.name} on {repository}")
    return {"status": "queued", "command": command.name, "input": command.input}


def run_server(host: str = "0.0.0.0", port: int = 8000):
    """Run the API server."""
    import uvicorn
    print(f"🚀 Starting server on {host}:{port}", flush=True)
    uvicorn.run(app, host=host, port=port, log_level="info")


if __name__ == "__main__":
    run_server()
