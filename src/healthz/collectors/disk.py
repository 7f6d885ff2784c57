"""
Disk utilization collector.

Uses statvfs on the filesystem holding the working directory.
"""

from __future__ import annotations

import os

from healthz.collectors.base import PERCENT, BaseCollector
from healthz.errors import InvalidMetric, MetricsIOError


class DiskCollector(BaseCollector):
    """Collects the used share of the filesystem holding a path."""

    name = "disk"
    description = "Used space of the working directory's filesystem (statvfs)"

    def __init__(self, path: str | None = None):
        super().__init__()
        self.path = path

    def collect(self) -> float:
        """Return (blocks - free) / blocks as a percentage."""
        path = self.path or self._working_directory()

        try:
            stat = os.statvfs(path)
        except OSError as e:
            raise MetricsIOError(f"unable to get file system statistics: {e}") from e

        total = stat.f_blocks
        if total == 0:
            raise InvalidMetric("total disk space is zero, invalid data")

        used = total - stat.f_bfree
        return used / total * PERCENT

    @staticmethod
    def _working_directory() -> str:
        try:
            return os.getcwd()
        except OSError as e:
            raise MetricsIOError(f"unable to get current working directory: {e}") from e


def disk_usage() -> float:
    """Return the used percentage of the working directory's filesystem."""
    return DiskCollector().collect()
