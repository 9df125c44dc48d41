"""Run tool: execute claude under supervision."""

from typing import Annotated, Optional

from ..config import get_config
from ..executor import ClaudeSupervisor, RunResult, build_run_request, find_claude
from ..executor.models import Outcome


def _error_response(error: str) -> dict:
    return {
        "success": False,
        "outcome": Outcome.FAILED.value,
        "session_id": None,
        "limit_reached": False,
        "message_count": 0,
        "tool_use_count": 0,
        "exit_code": None,
        "exit_signal": None,
        "last_message": error,
        "error": error,
        "timed_out": False,
        "resume_hint": None,
    }


def resume_hint(result: RunResult) -> Optional[str]:
    """Caller-facing guidance for continuing a failed run, if possible."""
    session_id = result.resume_session_id
    if not session_id:
        return None
    if result.limit_reached:
        return (
            "Rate limit reached. When the limit resets, call run_claude again "
            f"with resume='{session_id}' to continue the session."
        )
    return f"To resume this session, call run_claude again with resume='{session_id}'."


async def run_claude(
    prompt: Annotated[str, "The task or instruction to give to claude"],
    cwd: Annotated[str, "Working directory for the claude process"],
    system_prompt: Annotated[str, "System prompt appended for this run"] = "",
    model: Annotated[
        Optional[str],
        "Override the configured model (optional)",
    ] = None,
    resume: Annotated[
        Optional[str],
        "Session id from a previous run to resume (optional)",
    ] = None,
    timeout: Annotated[
        Optional[float],
        "Timeout in seconds for the run (optional)",
    ] = None,
) -> dict:
    """Run claude with the given prompt and report the outcome.

    Returns:
        A dictionary with the RunResult fields (success, outcome, session_id,
        limit_reached, message_count, tool_use_count, exit_code, exit_signal,
        last_message, error, timed_out) plus resume_hint.
    """
    try:
        config = get_config()
    except Exception as e:
        return _error_response(f"Failed to load config: {e}")

    executable = find_claude(config.claude_path)
    if not executable:
        return _error_response("claude CLI not found")

    request = build_run_request(
        config,
        executable=executable,
        prompt=prompt,
        cwd=cwd,
        system_prompt=system_prompt,
        model=model,
        resume=resume,
        timeout=timeout,
    )
    result = await ClaudeSupervisor(config).run(request)

    response = result.to_dict()
    response["resume_hint"] = resume_hint(result)
    return response
