"""Decoding of claude stream-json lines into StreamEvents."""

import json
from typing import Any, Iterable, Optional

from .models import EventKind, StreamEvent

# Lines containing any of these are runtime internals (stack frames etc.),
# not agent output.
DIAGNOSTIC_NOISE_PATTERNS: tuple[str, ...] = ("node:internal",)

_KINDS = {
    "text": EventKind.TEXT,
    "tool_use": EventKind.TOOL_USE,
    "tool_result": EventKind.TOOL_RESULT,
    "message": EventKind.MESSAGE,
    "error": EventKind.ERROR,
}


def _as_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, str):
        return value
    return json.dumps(value, ensure_ascii=False)


def _from_object(line: str, data: dict) -> StreamEvent:
    tag = data.get("type")
    # type may be any JSON value; only strings name a kind
    kind = _KINDS.get(tag, EventKind.UNKNOWN) if isinstance(tag, str) else EventKind.UNKNOWN
    session_id = data.get("session_id")
    tool_input = data.get("input")

    return StreamEvent(
        kind=kind,
        session_id=session_id if isinstance(session_id, str) and session_id else None,
        text=_as_text(data.get("text")),
        tool_name=_as_text(data.get("name")),
        tool_input=tool_input if isinstance(tool_input, dict) else None,
        output=_as_text(data.get("output")),
        error=_as_text(data.get("error")),
        role=_as_text(data.get("role")),
        raw=line,
        data=data,
    )


def decode_line(
    line: str,
    noise_patterns: Iterable[str] = DIAGNOSTIC_NOISE_PATTERNS,
) -> Optional[StreamEvent]:
    """Decode one output line.

    Args:
        line: A single line without its trailing newline.
        noise_patterns: Substrings marking unparseable lines to drop.

    Returns:
        A StreamEvent, or None for blank lines and diagnostic noise.
        Lines that are not JSON objects come back as RAW events carrying
        the original text.
    """
    stripped = line.strip()
    if not stripped:
        return None

    try:
        data = json.loads(stripped)
    except (ValueError, RecursionError):
        if any(pattern in line for pattern in noise_patterns):
            return None
        return StreamEvent(kind=EventKind.RAW, raw=line)

    if not isinstance(data, dict):
        return StreamEvent(kind=EventKind.RAW, raw=line)

    return _from_object(line, data)
