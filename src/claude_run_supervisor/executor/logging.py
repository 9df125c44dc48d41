"""Logging for the supervisor: the package logger and the progress sink."""

import logging
import os
from datetime import datetime
from pathlib import Path
from typing import Awaitable, Optional, Protocol

LOG_FILE_ENV = "CLAUDE_SUPERVISOR_LOG_FILE"

_FLAG_VALUES = frozenset({"1", "true", "yes", "on"})
_FILE_FORMAT = "%(asctime)s | %(levelname)s | %(message)s"

# Global logger instance (singleton)
_logger: Optional[logging.Logger] = None

_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


def get_logger() -> logging.Logger:
    """Get or create the supervisor logger."""
    global _logger
    if _logger is None:
        _logger = _setup_logger()
    return _logger


def _log_file_path(value: str) -> Path:
    """Map the env value to a log file: a flag means a dated file under ./logs."""
    if value.lower() in _FLAG_VALUES:
        return Path.cwd() / "logs" / f"supervisor_{datetime.now().strftime('%Y-%m-%d')}.log"
    return Path(value)


def _setup_logger() -> logging.Logger:
    """Configure the ``claude_run_supervisor`` logger.

    Nothing is written to disk unless CLAUDE_SUPERVISOR_LOG_FILE is set,
    either to a file path or to a flag ("1", "true", "yes", "on").
    """
    logger = logging.getLogger("claude_run_supervisor")
    logger.setLevel(logging.DEBUG)

    if logger.handlers:
        return logger

    log_env = os.environ.get(LOG_FILE_ENV)
    if not log_env:
        return logger

    log_path = _log_file_path(log_env)
    try:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handler: logging.Handler = logging.FileHandler(log_path, encoding="utf-8")
        handler.setFormatter(logging.Formatter(_FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    except OSError as e:
        handler = logging.StreamHandler()
        reason = f"Failed to open log file {log_path}: {e}".replace("%", "%%")
        handler.setFormatter(logging.Formatter(reason + " | %(message)s"))
    handler.setLevel(logging.DEBUG)
    logger.addHandler(handler)

    return logger


class LogSink(Protocol):
    """Async progress sink used by the supervisor."""

    def __call__(
        self,
        message: str,
        *,
        verbose: bool = False,
        stream: Optional[str] = None,
        level: str = "info",
    ) -> Awaitable[None]: ...


class LoggerSink:
    """LogSink that writes to a std logger.

    Verbose messages are demoted to DEBUG unless ``verbose`` is enabled.
    The stream name, when given, is prefixed as ``[stream]``.
    """

    def __init__(self, logger: Optional[logging.Logger] = None, verbose: bool = False):
        self._logger = logger or get_logger()
        self._verbose = verbose

    async def __call__(
        self,
        message: str,
        *,
        verbose: bool = False,
        stream: Optional[str] = None,
        level: str = "info",
    ) -> None:
        log_level = _LEVELS.get(level, logging.INFO)
        if verbose and not self._verbose:
            log_level = logging.DEBUG
        if stream:
            message = f"[{stream}] {message}"
        self._logger.log(log_level, message)
