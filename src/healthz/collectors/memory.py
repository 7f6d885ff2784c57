"""
Process memory collector.

Compares the resident set size of the current process against its
virtual size, both read from /proc/self/status.
"""

from __future__ import annotations

from healthz.collectors.base import PERCENT, BaseCollector
from healthz.errors import InvalidMetric, ParseError

PROC_SELF_STATUS = "/proc/self/status"


class MemoryCollector(BaseCollector):
    """Collects resident memory as a share of the process's virtual size."""

    name = "memory"
    description = "Resident vs. virtual memory of this process from /proc/self/status"

    def __init__(self, status_path: str = PROC_SELF_STATUS):
        super().__init__()
        self.status_path = status_path

    def collect(self) -> float:
        """Return VmRSS / VmSize as a percentage."""
        values: dict[str, int] = {}

        for line in self.read_file_lines(self.status_path):
            key, sep, _ = line.partition(":")
            if sep and key in ("VmRSS", "VmSize"):
                values[key] = self._parse_kb(line, key)

        for key in ("VmRSS", "VmSize"):
            if key not in values:
                raise ParseError(f"{key} field missing from {self.status_path}")

        total = values["VmSize"]
        if total == 0:
            raise InvalidMetric("total memory is zero, invalid data")

        return values["VmRSS"] / total * PERCENT

    def _parse_kb(self, line: str, key: str) -> int:
        fields = line.split()
        if len(fields) < 2:
            raise ParseError(
                f"invalid format in {self.status_path}, expected >=2, got {len(fields)}"
            )
        return self.parse_uint(fields[1], key)


def memory_usage() -> float:
    """Return the memory utilization percentage of the current process."""
    return MemoryCollector().collect()
