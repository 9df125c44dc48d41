"""Utility functions for executor module."""

import re

_ANSI_PATTERN = re.compile(r"\x1b\[[0-9;?]*[A-Za-z]|\x1b[^[]?")


def strip_ansi(text: str) -> str:
    """Remove ANSI escape codes from text.

    This removes color codes, cursor movement, and other terminal control sequences.

    Args:
        text: Text potentially containing ANSI escape codes.

    Returns:
        Clean text without ANSI codes.
    """
    return _ANSI_PATTERN.sub("", text)


def preview(text: str, limit: int = 80) -> str:
    """Shorten text to ``limit`` characters, marking the cut with ``...``."""
    text = " ".join(text.split())
    return text[:limit] + "..." if len(text) > limit else text
