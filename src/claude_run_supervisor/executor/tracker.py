"""Session state tracking and progress logging for the stdout event stream."""

import asyncio
from typing import Optional

from .logging import LogSink
from .models import EventKind, RunState, StreamEvent

# Tool results longer than this are not echoed in verbose mode.
_MAX_RESULT_PREVIEW = 200


class SessionTracker:
    """Folds StreamEvents into a RunState and reports progress.

    One tracker per run. ``apply`` is the pure state fold; ``handle`` wraps
    it under a lock and emits progress lines through the log sink.
    """

    def __init__(self, log: LogSink, state: Optional[RunState] = None):
        self._log = log
        self._lock = asyncio.Lock()
        self.state = state or RunState()

    def apply(self, event: StreamEvent) -> None:
        state = self.state

        if event.session_id:
            if state.session_id is None:
                state.session_id = event.session_id
            elif event.session_id != state.session_id:
                state.ignored_session_ids.append(event.session_id)

        if event.kind is EventKind.MESSAGE:
            state.message_count += 1
        elif event.kind is EventKind.TOOL_USE:
            state.tool_use_count += 1
        elif event.kind is EventKind.TEXT:
            if event.text:
                state.last_message = event.text
        elif event.kind is EventKind.ERROR:
            state.last_message = event.error_text()
        elif event.kind is EventKind.RAW:
            state.last_message = event.raw

    async def handle(self, event: StreamEvent) -> None:
        """Apply an event and log its progress line(s)."""
        async with self._lock:
            session_before = self.state.session_id
            ignored_before = len(self.state.ignored_session_ids)
            self.apply(event)

            if self.state.session_id != session_before:
                await self._log(f"📌 Session ID: {self.state.session_id}", verbose=True)
            if len(self.state.ignored_session_ids) != ignored_before:
                await self._log(
                    f"⚠️ Ignoring session ID {event.session_id} "
                    f"(already tracking {self.state.session_id})",
                    verbose=True,
                    level="warning",
                )
            await self._report(event)

    async def _report(self, event: StreamEvent) -> None:
        kind = event.kind

        if kind is EventKind.TEXT:
            if event.text:
                await self._log(event.text, stream="claude")
        elif kind is EventKind.TOOL_USE:
            if event.tool_name:
                await self._log(f"🔧 Using tool: {event.tool_name}", stream="tool", verbose=True)
                await self._report_tool_input(event)
        elif kind is EventKind.TOOL_RESULT:
            if event.error:
                await self._log(f"   ⚠️  Tool error: {event.error}", stream="tool-error", verbose=True)
            elif event.output and len(event.output) < _MAX_RESULT_PREVIEW:
                output = event.output.replace("\n", "\n   ")
                await self._log(f"   Result: {output}", stream="tool-result", verbose=True)
        elif kind is EventKind.ERROR:
            await self._log(f"❌ Error: {event.error_text()}", stream="error", level="error")
        elif kind is EventKind.MESSAGE:
            if event.role == "assistant":
                await self._log(
                    f"📨 Message {self.state.message_count} from assistant",
                    stream="meta",
                    verbose=True,
                )
        elif kind is EventKind.RAW:
            await self._log(event.raw, stream="raw")

    async def _report_tool_input(self, event: StreamEvent) -> None:
        tool_input = event.tool_input or {}
        detail = None
        if event.tool_name == "bash" and tool_input.get("command"):
            detail = f"   $ {tool_input['command']}"
        elif event.tool_name == "write" and tool_input.get("path"):
            detail = f"   Writing to: {tool_input['path']}"
        elif event.tool_name == "read" and tool_input.get("path"):
            detail = f"   Reading: {tool_input['path']}"
        if detail:
            await self._log(detail, stream="tool-detail", verbose=True)
