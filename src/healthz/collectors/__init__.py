"""
Metric collectors for Healthz.

Each collector reads one kernel pseudo-file or syscall and derives a
single utilization figure. Collectors are registered by name.
"""

from __future__ import annotations

from healthz.collectors.base import PERCENT, BaseCollector
from healthz.collectors.cpu import CPUCollector, cpu_usage
from healthz.collectors.disk import DiskCollector, disk_usage
from healthz.collectors.load import LoadCollector, load_averages
from healthz.collectors.memory import MemoryCollector, memory_usage

# Registry of all available collectors, in snapshot order
COLLECTORS: dict[str, type[BaseCollector]] = {
    "cpu": CPUCollector,
    "memory": MemoryCollector,
    "disk": DiskCollector,
    "load": LoadCollector,
}


def get_all_collectors() -> dict[str, type[BaseCollector]]:
    """Return all registered collectors."""
    return COLLECTORS.copy()


def get_collector(name: str) -> type[BaseCollector] | None:
    """Get a specific collector by name."""
    return COLLECTORS.get(name)


def list_collectors() -> list[str]:
    """List all available collector names."""
    return list(COLLECTORS.keys())


__all__ = [
    "PERCENT",
    "BaseCollector",
    "CPUCollector",
    "MemoryCollector",
    "DiskCollector",
    "LoadCollector",
    "cpu_usage",
    "memory_usage",
    "disk_usage",
    "load_averages",
    "get_all_collectors",
    "get_collector",
    "list_collectors",
    "COLLECTORS",
]
