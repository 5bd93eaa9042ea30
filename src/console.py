"""Real-time console logging for command runs."""

import os
from datetime import datetime


def _debug_enabled() -> bool:
    return os.getenv("RUNNER_DEBUG") == "1" or os.getenv("DEBUG") == "1"


def log(icon: str, message: str, dim: bool = False):
    """Print a timestamped status line."""
    timestamp = datetime.now().strftime("%H:%M:%S")
    # Skip ANSI codes in production (Actions runners/Docker) for cleaner logs
    use_ansi = os.getenv("TERM") is not None
    style = "\033[2m" if dim and use_ansi else ""
    reset = "\033[0m" if dim and use_ansi else ""
    print(f"{style}[{timestamp}] {icon} {message}{reset}", flush=True)


def debug(message: str):
    if _debug_enabled():
        log("·", message, dim=True)


def warning(message: str):
    log("⚠️", message)


def error(message: str):
    log("❌", message)


def truncate(text: str, limit: int = 50) -> str:
    """Shorten text for a single log line."""
    text = text.replace("\n", " ")
    return f"{text[:limit]}{'...' if len(text) > limit else ''}"
