"""Supervisor for streaming claude CLI runs."""

__version__ = "0.1.0"
