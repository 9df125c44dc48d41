"""Executor package for supervising claude CLI runs."""

from .classifier import classify_outcome
from .cli import build_run_request, check_claude_available, find_claude
from .decoder import decode_line
from .framing import LineFramer, iter_lines
from .models import EventKind, Outcome, RunRequest, RunResult, RunState, StreamEvent
from .resources import ResourceSnapshot, get_resource_snapshot
from .runner import ClaudeSupervisor
from .tracker import SessionTracker

__all__ = [
    "ClaudeSupervisor",
    "build_run_request",
    "check_claude_available",
    "find_claude",
    "classify_outcome",
    "decode_line",
    "get_resource_snapshot",
    "iter_lines",
    "LineFramer",
    "SessionTracker",
    "EventKind",
    "Outcome",
    "ResourceSnapshot",
    "RunRequest",
    "RunResult",
    "RunState",
    "StreamEvent",
]
