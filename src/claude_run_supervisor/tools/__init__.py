"""Tools package for claude-run-supervisor."""

from .run import run_claude
from .status import check_status

__all__ = [
    "run_claude",
    "check_status",
]
