"""Pytest fixtures for claude-run-supervisor tests."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from claude_run_supervisor.executor import logging
from claude_run_supervisor.executor.resources import ResourceSnapshot


class RecordingSink:
    """LogSink double that keeps every call."""

    def __init__(self):
        self.calls = []

    async def __call__(self, message, *, verbose=False, stream=None, level="info"):
        self.calls.append(
            {"message": message, "verbose": verbose, "stream": stream, "level": level}
        )

    def messages(self, stream=None):
        return [c["message"] for c in self.calls if stream is None or c["stream"] == stream]


def make_stream(*chunks):
    """StreamReader double returning the chunks, then EOF."""
    stream = MagicMock()
    stream.read = AsyncMock(side_effect=[*chunks, b""])
    return stream


def make_process(stdout=(), stderr=(), returncode=0):
    """asyncio Process double with the given output and exit status."""
    process = MagicMock()
    process.stdout = make_stream(*stdout)
    process.stderr = make_stream(*stderr)
    process.returncode = returncode
    process.wait = AsyncMock(return_value=returncode)
    process.kill = MagicMock()  # kill() is synchronous
    return process


@pytest.fixture
def sink():
    """A fresh RecordingSink."""
    return RecordingSink()


@pytest.fixture
def snapshot_provider():
    """Resource snapshot provider returning fixed values."""
    return MagicMock(return_value=ResourceSnapshot(memory="total 16.0G", load="0.10 0.20 0.30"))


@pytest.fixture
def reset_logger_singleton():
    """Reset logging._logger around a test.

    Saves the current value, sets it to None for the test and restores it
    afterwards.
    """
    original_value = logging._logger

    logging._logger = None

    yield

    logging._logger = original_value


@pytest.fixture
def temp_config_file(tmp_path):
    """Write a claude-supervisor.yaml into tmp_path and return its path."""
    config_file = tmp_path / "claude-supervisor.yaml"

    config_content = """model: opus
verbose: true
timeout: 600
extra_args:
  - "--max-turns"
  - "50"
env:
  CLAUDE_CODE_MAX_OUTPUT_TOKENS: "32000"
rate_limit_markers:
  - "usage limit reached"
"""

    config_file.write_text(config_content, encoding="utf-8")

    return config_file
