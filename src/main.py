import asyncio
import json
import os
import sys
import traceback

from dotenv import load_dotenv

load_dotenv(override=True)

from src.commands import CommandResult, dispatch_command
from src.console import error
from src.github import GitHubClient


def _config_path() -> str | None:
    return os.getenv("INPUT_CONFIG_FILE") or os.getenv("CONFIG_FILE") or None


def load_event(event_path: str | None) -> dict:
    """Read the event payload written by the Actions runner."""
    if not event_path or not os.path.exists(event_path):
        return {}
    with open(event_path, encoding="utf-8") as f:
        return json.load(f)


def set_outputs(result: CommandResult, output_path: str | None = None):
    """Expose the command name and joined arguments as step outputs."""
    output_path = output_path or os.getenv("GITHUB_OUTPUT")
    if not output_path:
        return
    with open(output_path, "a", encoding="utf-8") as f:
        f.write(f"command={result.command}\n")
        f.write(f"args={result.input}\n")


async def run_action(event_name: str, payload: dict, repository: str, config_path: str | None) -> CommandResult:
    async with GitHubClient(repository) as client:
        return await dispatch_command(event_name, payload, client, config_path)


def cmd_run(args) -> int:
    """Handle the event of the current GitHub Actions run."""
    event_name = args.event or os.getenv("GITHUB_EVENT_NAME", "")
    payload = load_event(args.event_path or os.getenv("GITHUB_EVENT_PATH"))
    repository = args.repo or os.getenv("GITHUB_REPOSITORY", "")
    config_path = args.config or _config_path()

    try:
        result = asyncio.run(run_action(event_name, payload, repository, config_path))
    except Exception as e:
        error(f"Command failed: {e}")
        traceback.print_exc()
        print(f"::error::{e}", flush=True)
        return 1

    if result.status == "completed":
        set_outputs(result)
    return 0


def cmd_serve(args) -> int:
    from src.api import run_server
    run_server(host=args.host, port=args.port)
    return 0


def main():
    import argparse

    parser = argparse.ArgumentParser(description="Slash command actions for GitHub issues and pull requests")
    subparsers = parser.add_subparsers(dest="command", required=True)

    # Run command (GitHub Actions mode)
    run_parser = subparsers.add_parser("run", help="Handle the event of the current GitHub Actions run")
    run_parser.add_argument("--event", "-e", help="Event name (default: $GITHUB_EVENT_NAME)")
    run_parser.add_argument("--event-path", help="Path to the event payload JSON (default: $GITHUB_EVENT_PATH)")
    run_parser.add_argument("--repo", "-r", help="Repository owner/name (default: $GITHUB_REPOSITORY)")
    run_parser.add_argument("--config", "-c", help="Path of the command config file in the repository (default: $INPUT_CONFIG_FILE)")

    # Serve command (webhook mode)
    serve_parser = subparsers.add_parser("serve", help="Run API server for GitHub webhooks")
    serve_parser.add_argument("--host", default="0.0.0.0", help="Host to bind to (default: 0.0.0.0)")
    serve_parser.add_argument("--port", "-p", type=int, default=8000, help="Port to listen on (default: 8000)")

    args = parser.parse_args()

    if args.command == "run":
        sys.exit(cmd_run(args))
    elif args.command == "serve":
        sys.exit(cmd_serve(args))


if __name__ == "__main__":
    main()
