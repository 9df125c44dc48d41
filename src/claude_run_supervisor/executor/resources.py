"""System resource snapshots for failure diagnostics."""

from dataclasses import dataclass
from typing import Callable

import psutil

_GIB = 1024 ** 3


@dataclass(frozen=True)
class ResourceSnapshot:
    """Memory and load averages as display strings."""

    memory: str
    load: str


ResourceSnapshotProvider = Callable[[], ResourceSnapshot]


def _gib(value: float) -> str:
    return f"{value / _GIB:.1f}G"


def get_resource_snapshot() -> ResourceSnapshot:
    """Take a snapshot of system memory and load average."""
    mem = psutil.virtual_memory()
    memory = (
        f"total {_gib(mem.total)}, used {_gib(mem.used)}, "
        f"available {_gib(mem.available)} ({mem.percent:.0f}% used)"
    )

    try:
        load1, load5, load15 = psutil.getloadavg()
        load = f"{load1:.2f} {load5:.2f} {load15:.2f}"
    except (AttributeError, OSError):
        load = "unavailable"

    return ResourceSnapshot(memory=memory, load=load)
