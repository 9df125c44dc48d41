"""Tests for executor.resources module."""

from types import SimpleNamespace
from unittest.mock import patch

from claude_run_supervisor.executor.resources import ResourceSnapshot, get_resource_snapshot

_GIB = 1024 ** 3


def _virtual_memory():
    return SimpleNamespace(
        total=16 * _GIB, used=6 * _GIB, available=10 * _GIB, percent=37.5
    )


class TestGetResourceSnapshot:
    """Tests for get_resource_snapshot() function."""

    def test_snapshot_strings(self):
        with patch("claude_run_supervisor.executor.resources.psutil.virtual_memory", return_value=_virtual_memory()), \
             patch("claude_run_supervisor.executor.resources.psutil.getloadavg", return_value=(0.5, 0.25, 0.125)):

            snapshot = get_resource_snapshot()

        assert isinstance(snapshot, ResourceSnapshot)
        assert snapshot.memory == "total 16.0G, used 6.0G, available 10.0G (38% used)"
        assert snapshot.load == "0.50 0.25 0.12"

    def test_load_unavailable(self):
        with patch("claude_run_supervisor.executor.resources.psutil.virtual_memory", return_value=_virtual_memory()), \
             patch("claude_run_supervisor.executor.resources.psutil.getloadavg", side_effect=OSError("no loadavg")):

            snapshot = get_resource_snapshot()

        assert snapshot.load == "unavailable"

    def test_real_snapshot(self):
        snapshot = get_resource_snapshot()

        assert snapshot.memory.startswith("total ")
        assert snapshot.load
