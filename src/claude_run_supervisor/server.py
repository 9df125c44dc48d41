"""MCP Server for running claude under supervision.

This server provides tools for running the claude CLI with streaming
progress, outcome classification and session resume support.
"""

from typing import Annotated, Optional

from mcp.server.fastmcp import FastMCP

from .tools import (
    check_status as check_status_impl,
    run_claude as run_claude_impl,
)

# Initialize the MCP server
mcp = FastMCP("Claude Run Supervisor")


@mcp.tool()
async def run_claude(
    prompt: Annotated[
        str,
        "The task or instruction to give to claude",
    ],
    cwd: Annotated[
        str,
        "Working directory where the claude process runs. Prompt files are written here for the duration of the run.",
    ],
    system_prompt: Annotated[
        str,
        "System prompt for this run",
    ] = "",
    model: Annotated[
        Optional[str],
        "Override the configured model (optional)",
    ] = None,
    resume: Annotated[
        Optional[str],
        "Full session_id from a previous run_claude result to continue that session. If not provided, starts a new session.",
    ] = None,
    timeout: Annotated[
        Optional[float],
        "Timeout in seconds for the run (optional)",
    ] = None,
) -> dict:
    """Run claude on a task and report how it ended.

    The run streams claude's stream-json output, counting messages and tool
    uses, and classifies the result as success, rate_limited,
    context_exceeded or failed.

    Args:
        prompt: The task for claude.
        cwd: Working directory for the process.
        system_prompt: System prompt for the run.
        model: Override the configured model (optional).
        resume: Session id to resume (optional).
        timeout: Execution timeout in seconds (optional).

    Returns:
        A dictionary with:
        - success: Whether the run succeeded
        - outcome: success, rate_limited, context_exceeded or failed
        - session_id: Session id reported by claude (None if not available)
        - limit_reached: Whether a usage limit stopped the run
        - message_count / tool_use_count: Progress counters
        - exit_code / exit_signal: How the process ended
        - last_message: Last human-readable message from claude
        - error: Failure description if failed
        - resume_hint: How to continue the session, when possible
    """
    return await run_claude_impl(
        prompt=prompt,
        cwd=cwd,
        system_prompt=system_prompt,
        model=model,
        resume=resume,
        timeout=timeout,
    )


@mcp.tool()
def check_status() -> dict:
    """Check the status of the MCP server and its dependencies.

    Returns information about:
    - Whether claude CLI is available
    - Whether the configuration is loaded
    - The configured default model
    """
    return check_status_impl()


def main():
    """Entry point for the MCP server."""
    mcp.run()


if __name__ == "__main__":
    main()
