"""CLI utilities for finding claude and building run requests."""

import os
import shutil
from typing import Optional

from ..config import SupervisorConfig
from .models import RunRequest

# Arguments that make claude emit one JSON event per line on stdout.
STREAM_JSON_ARGS: tuple[str, ...] = (
    "--output-format", "stream-json",
    "--verbose",
    "--dangerously-skip-permissions",
)


def find_claude(explicit_path: Optional[str] = None) -> Optional[str]:
    """Find the claude executable.

    Checks the following locations in order:
    1. explicit_path, if given and executable
    2. PATH via shutil.which("claude")
    3. ~/.claude/local/claude
    4. ~/.local/bin/claude
    5. /usr/local/bin/claude

    Returns:
        Path to claude or None if not found.
    """
    if explicit_path:
        if os.path.isfile(explicit_path) and os.access(explicit_path, os.X_OK):
            return explicit_path
        return shutil.which(explicit_path)

    path = shutil.which("claude")
    if path:
        return path

    common_paths = [
        os.path.expanduser("~/.claude/local/claude"),
        os.path.expanduser("~/.local/bin/claude"),
        "/usr/local/bin/claude",
    ]

    for candidate in common_paths:
        if os.path.isfile(candidate) and os.access(candidate, os.X_OK):
            return candidate

    return None


def check_claude_available(explicit_path: Optional[str] = None) -> tuple[bool, str]:
    """Check if claude CLI is available.

    Returns:
        Tuple of (is_available, message).
    """
    path = find_claude(explicit_path)
    if path:
        return True, f"claude found at: {path}"
    else:
        return False, (
            "claude CLI not found in PATH. "
            "Please install Claude Code: "
            "https://docs.anthropic.com/en/docs/claude-code"
        )


def build_run_request(
    config: SupervisorConfig,
    executable: str,
    prompt: str,
    cwd: str,
    system_prompt: str = "",
    model: Optional[str] = None,
    resume: Optional[str] = None,
    timeout: Optional[float] = None,
) -> RunRequest:
    """Build a RunRequest with the stream-json argument list."""
    args = [*STREAM_JSON_ARGS, "--model", model or config.model, *config.extra_args]
    return RunRequest(
        executable=executable,
        cwd=cwd,
        prompt=prompt,
        system_prompt=system_prompt,
        args=tuple(args),
        env=dict(config.env),
        resume=resume,
        timeout=timeout if timeout is not None else config.timeout,
    )
