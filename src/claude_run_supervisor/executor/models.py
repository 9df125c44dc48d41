"""Data models for executor module."""

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional


class EventKind(str, Enum):
    """Kind of a decoded stream-json line."""

    TEXT = "text"
    TOOL_USE = "tool_use"
    TOOL_RESULT = "tool_result"
    MESSAGE = "message"
    ERROR = "error"
    RAW = "raw"
    UNKNOWN = "unknown"


class Outcome(str, Enum):
    """Terminal classification of a run."""

    SUCCESS = "success"
    RATE_LIMITED = "rate_limited"
    CONTEXT_EXCEEDED = "context_exceeded"
    FAILED = "failed"


@dataclass(frozen=True)
class StreamEvent:
    """Event from claude stream."""

    kind: EventKind
    session_id: Optional[str] = None
    text: Optional[str] = None
    tool_name: Optional[str] = None
    tool_input: Optional[dict] = None
    output: Optional[str] = None
    error: Optional[str] = None
    role: Optional[str] = None
    raw: str = ""
    data: dict = field(default_factory=dict)

    def error_text(self) -> str:
        """Error text, or the whole event as compact JSON if it carries none."""
        if self.error:
            return self.error
        return json.dumps(self.data, separators=(",", ":"), ensure_ascii=False)


@dataclass(frozen=True)
class RunRequest:
    """Everything needed to launch one claude process.

    Prompts are never placed on a shell command line. The supervisor writes
    them to files and passes the paths as separate argv entries.
    """

    executable: str
    cwd: str
    prompt: str
    system_prompt: str = ""
    args: tuple[str, ...] = ()
    env: dict[str, str] = field(default_factory=dict)
    resume: Optional[str] = None
    payload_dir: Optional[str] = None
    timeout: Optional[float] = None

    def argv(self, prompt_file: str, system_prompt_file: str) -> list[str]:
        """Build the full argument vector for the child process."""
        cmd = [self.executable]
        if self.resume:
            cmd.extend(["--resume", self.resume])
        cmd.extend(self.args)
        cmd.extend(["--prompt-file", prompt_file])
        cmd.extend(["--system-prompt-file", system_prompt_file])
        return cmd


@dataclass
class RunState:
    """Running totals folded from the stdout event stream."""

    session_id: Optional[str] = None
    message_count: int = 0
    tool_use_count: int = 0
    last_message: str = ""
    ignored_session_ids: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class RunResult:
    """Result of a supervised claude run."""

    success: bool
    outcome: Outcome
    session_id: Optional[str] = None
    limit_reached: bool = False
    message_count: int = 0
    tool_use_count: int = 0
    exit_code: Optional[int] = None
    exit_signal: Optional[str] = None
    last_message: str = ""
    error: Optional[str] = None
    timed_out: bool = False

    @property
    def resume_session_id(self) -> Optional[str]:
        """Session id a caller can pass back as ``resume``, if any."""
        if self.success or not self.session_id:
            return None
        return self.session_id

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": self.success,
            "outcome": self.outcome.value,
            "session_id": self.session_id,
            "limit_reached": self.limit_reached,
            "message_count": self.message_count,
            "tool_use_count": self.tool_use_count,
            "exit_code": self.exit_code,
            "exit_signal": self.exit_signal,
            "last_message": self.last_message,
            "error": self.error,
            "timed_out": self.timed_out,
        }
