"""Supervised execution of the claude CLI.

Both output pipes are read in fixed-size chunks and framed into lines, so
events are processed as they arrive no matter how the child buffers its
output. stdout carries stream-json events; stderr is only logged.
"""

import asyncio
import os
import shlex
import signal
from pathlib import Path
from typing import Awaitable, Callable, Optional

from ..config import SupervisorConfig
from .classifier import Classification, classify_outcome
from .decoder import decode_line
from .framing import LineFramer
from .logging import LoggerSink, LogSink, get_logger
from .models import Outcome, RunRequest, RunResult, RunState
from .resources import ResourceSnapshotProvider, get_resource_snapshot
from .tracker import SessionTracker
from .utils import preview, strip_ansi


def split_returncode(returncode: Optional[int]) -> tuple[Optional[int], Optional[str]]:
    """Split an asyncio returncode into (exit code, signal name).

    asyncio reports death by signal N as returncode -N.
    """
    if returncode is None:
        return None, None
    if returncode < 0:
        try:
            return None, signal.Signals(-returncode).name
        except ValueError:
            return None, str(-returncode)
    return returncode, None


class ClaudeSupervisor:
    """Runs one claude process per ``run`` call and reports its outcome.

    Args:
        config: Supervisor settings. Defaults to SupervisorConfig().
        log: Progress sink. Defaults to a LoggerSink honouring config.verbose.
        resource_snapshot: Provider used for diagnostics around failures.
    """

    def __init__(
        self,
        config: Optional[SupervisorConfig] = None,
        log: Optional[LogSink] = None,
        resource_snapshot: Optional[ResourceSnapshotProvider] = None,
    ):
        self._config = config or SupervisorConfig()
        self._logger = get_logger()
        self._log = log or LoggerSink(self._logger, verbose=self._config.verbose)
        self._resource_snapshot = resource_snapshot or get_resource_snapshot

    async def run(self, request: RunRequest) -> RunResult:
        """Run claude to completion. Never raises; failures become results."""
        tracker = SessionTracker(self._log)
        payload_files: list[Path] = []
        try:
            await self._log_start(request)
            return await self._execute(request, tracker, payload_files)
        except Exception as e:
            self._logger.exception("Unexpected error while supervising claude")
            return await self._failure(tracker.state, f"Unexpected error: {e}")
        finally:
            self._remove_payloads(payload_files)

    async def _execute(
        self,
        request: RunRequest,
        tracker: SessionTracker,
        payload_files: list[Path],
    ) -> RunResult:
        try:
            self._write_payloads(request, payload_files)
        except OSError as e:
            return await self._failure(tracker.state, f"Failed to write prompt files: {e}")

        prompt_file, system_prompt_file = payload_files
        argv = request.argv(str(prompt_file), str(system_prompt_file))
        await self._emit(f"   Command: {shlex.join(argv)}", verbose=True)
        await self._emit("▶️ Streaming output:")

        try:
            process = await asyncio.create_subprocess_exec(
                *argv,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                cwd=request.cwd,
                env={**os.environ, **request.env},
            )
        except OSError as e:
            return await self._failure(
                tracker.state, f"Failed to start {request.executable}: {e}"
            )

        assert process.stdout and process.stderr

        tasks = {
            asyncio.create_task(self._pump(process.stdout, "stdout", self._stdout_line_handler(tracker))),
            asyncio.create_task(self._pump(process.stderr, "stderr", self._handle_stderr_line, partial_lines=True)),
            asyncio.create_task(process.wait()),
        }

        timeout = request.timeout if request.timeout is not None else self._config.timeout
        timed_out = False
        try:
            # stdout EOF, stderr EOF and process exit must all be seen:
            # output can still arrive after the exit status is known.
            _, pending = await asyncio.wait(tasks, timeout=timeout)
            if pending:
                timed_out = True
                await self._emit(
                    f"⏰ claude timed out after {timeout}s, killing process", level="error"
                )
                self._kill(process)
                _, stuck = await asyncio.wait(pending, timeout=self._config.drain_grace)
                for task in stuck:
                    task.cancel()
                await asyncio.gather(*stuck, return_exceptions=True)
        except asyncio.CancelledError:
            self._kill(process)
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            await process.wait()
            raise

        for task in tasks:
            if task.done() and not task.cancelled() and task.exception():
                self._logger.error(f"Stream task failed: {task.exception()!r}")

        exit_code, exit_signal = split_returncode(process.returncode)
        if timed_out:
            classification = Classification(Outcome.FAILED, f"timed out after {timeout}s")
        else:
            classification = classify_outcome(
                exit_code,
                exit_signal,
                tracker.state.last_message,
                self._config.rate_limit_markers,
                self._config.context_overflow_markers,
            )

        return await self._finish(tracker.state, classification, exit_code, exit_signal, timed_out)

    # ------------------------------------------------------------------ #
    # Streams
    # ------------------------------------------------------------------ #

    async def _pump(
        self,
        stream: asyncio.StreamReader,
        name: str,
        on_line: Callable[[str], Awaitable[None]],
        partial_lines: bool = False,
    ) -> None:
        """Read a pipe to EOF, passing each complete line to on_line.

        With ``partial_lines`` an unterminated fragment left after a read
        (a prompt, a progress bar) is passed on right away instead of
        waiting for its newline.
        """
        framer = LineFramer()
        try:
            while True:
                chunk = await stream.read(self._config.chunk_size)
                if not chunk:
                    break
                for line in framer.feed(chunk):
                    await on_line(line)
                if partial_lines and framer.pending.strip():
                    await on_line(framer.flush())
        except (BrokenPipeError, ConnectionError, OSError) as e:
            # A broken pipe is end of stream; keep what we have.
            self._logger.debug(f"{name} closed: {type(e).__name__}: {e}")
        finally:
            for line in framer.close():
                await on_line(line)

    def _stdout_line_handler(self, tracker: SessionTracker) -> Callable[[str], Awaitable[None]]:
        noise_patterns = tuple(self._config.diagnostic_noise_patterns)

        async def handle(line: str) -> None:
            # A bad line must never stop the pump: stdout would stop draining.
            try:
                event = decode_line(line, noise_patterns)
                if event is not None:
                    await tracker.handle(event)
            except Exception:
                self._logger.exception("Failed to process stream line")

        return handle

    async def _handle_stderr_line(self, line: str) -> None:
        text = strip_ansi(line).rstrip()
        if text.strip():
            await self._emit(text, stream="stderr")

    # ------------------------------------------------------------------ #
    # Reporting
    # ------------------------------------------------------------------ #

    async def _emit(
        self,
        message: str,
        *,
        verbose: bool = False,
        stream: Optional[str] = None,
        level: str = "info",
    ) -> None:
        """Send a message to the sink; sink failures never affect the run."""
        try:
            await self._log(message, verbose=verbose, stream=stream, level=level)
        except Exception:
            self._logger.exception("Log sink failed")

    async def _log_start(self, request: RunRequest) -> None:
        await self._emit(f"🤖 Executing Claude in {request.cwd}")
        await self._emit(f"   Prompt: {preview(request.prompt)}", verbose=True)
        await self._emit(f"   Prompt length: {len(request.prompt)} chars", verbose=True)
        await self._emit(
            f"   System prompt length: {len(request.system_prompt)} chars", verbose=True
        )
        if request.resume:
            await self._emit(f"🔄 Resuming from session: {request.resume}")
        await self._log_resources("before execution")

    async def _log_resources(self, label: str) -> None:
        try:
            snapshot = self._resource_snapshot()
        except Exception as e:
            self._logger.debug(f"Resource snapshot unavailable: {e}")
            return
        await self._emit(f"📈 System resources {label}:", verbose=True)
        await self._emit(f"   Memory: {snapshot.memory}", verbose=True)
        await self._emit(f"   Load: {snapshot.load}", verbose=True)

    async def _report_outcome(self, result: RunResult) -> None:
        if result.success:
            await self._emit("✅ Claude command completed")
            await self._emit(
                f"📊 Total messages: {result.message_count}, Tool uses: {result.tool_use_count}"
            )
            return

        if result.outcome is Outcome.RATE_LIMITED:
            await self._emit(
                "⏳ Rate limit reached. The session can be resumed later.", level="warning"
            )
        elif result.outcome is Outcome.CONTEXT_EXCEEDED:
            await self._emit(
                "❌ Context length exceeded. Try with a smaller task or split the work.",
                level="error",
            )
        else:
            await self._emit(f"❌ Claude command failed: {result.error}", level="error")

        if result.resume_session_id:
            await self._emit(f"📌 Session ID for resuming: {result.resume_session_id}")

    async def _finish(
        self,
        state: RunState,
        classification: Classification,
        exit_code: Optional[int],
        exit_signal: Optional[str],
        timed_out: bool,
    ) -> RunResult:
        if state.ignored_session_ids:
            self._logger.debug(
                f"Ignored divergent session ids: {', '.join(state.ignored_session_ids)}"
            )

        result = RunResult(
            success=classification.success,
            outcome=classification.outcome,
            session_id=state.session_id,
            limit_reached=classification.limit_reached,
            message_count=state.message_count,
            tool_use_count=state.tool_use_count,
            exit_code=exit_code,
            exit_signal=exit_signal,
            last_message=state.last_message,
            error=classification.reason,
            timed_out=timed_out,
        )
        await self._report_outcome(result)
        if not result.success:
            await self._log_resources("after execution")
        return result

    async def _failure(self, state: RunState, message: str) -> RunResult:
        """Result for a run that could not be carried through."""
        state.last_message = message
        return await self._finish(
            state, Classification(Outcome.FAILED, message), None, None, False
        )

    # ------------------------------------------------------------------ #
    # Process and files
    # ------------------------------------------------------------------ #

    @staticmethod
    def _kill(process: asyncio.subprocess.Process) -> None:
        if process.returncode is None:
            try:
                process.kill()
            except ProcessLookupError:
                pass

    def _write_payloads(self, request: RunRequest, written: list[Path]) -> None:
        directory = Path(request.payload_dir or request.cwd)
        payloads = (
            (self._config.prompt_file_name, request.prompt),
            (self._config.system_prompt_file_name, request.system_prompt),
        )
        for name, text in payloads:
            path = directory / name
            path.write_text(text, encoding="utf-8")
            written.append(path)

    def _remove_payloads(self, paths: list[Path]) -> None:
        for path in paths:
            try:
                path.unlink(missing_ok=True)
            except OSError as e:
                self._logger.debug(f"Could not remove {path}: {e}")
