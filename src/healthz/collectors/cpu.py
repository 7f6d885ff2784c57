"""
CPU utilization collector.

Reads the aggregate jiffie counters from /proc/stat.
"""

from __future__ import annotations

from healthz.collectors.base import PERCENT, BaseCollector
from healthz.errors import InvalidMetric, ParseError

PROC_STAT = "/proc/stat"

# "cpu" token plus at least user, nice, system, idle, iowait, irq, softirq
MIN_CPU_FIELDS = 8

CPU_FIELD_NAMES = ("user", "nice", "system", "idle")


class CPUCollector(BaseCollector):
    """Collects aggregate CPU utilization since boot."""

    name = "cpu"
    description = "Aggregate CPU utilization from /proc/stat"

    def __init__(self, stat_path: str = PROC_STAT):
        super().__init__()
        self.stat_path = stat_path

    def collect(self) -> float:
        """Return CPU utilization as a percentage."""
        for line in self.read_file_lines(self.stat_path):
            if line.startswith("cpu "):
                return self._parse_cpu_line(line)
        raise ParseError(f"could not find CPU usage in {self.stat_path}")

    def _parse_cpu_line(self, line: str) -> float:
        fields = line.split()
        if len(fields) < MIN_CPU_FIELDS:
            raise ParseError(
                f"invalid format in {self.stat_path}, expected >={MIN_CPU_FIELDS}, got {len(fields)}"
            )

        labels = CPU_FIELD_NAMES + tuple(f"field {i}" for i in range(5, len(fields)))
        counters = [self.parse_uint(value, label) for value, label in zip(fields[1:], labels)]
        user, nice, system, idle = counters[:4]

        busy = user + nice + system
        total = busy + idle
        if total == 0:
            raise InvalidMetric("total CPU time is zero, invalid data")

        return busy / total * PERCENT


def cpu_usage() -> float:
    """Return the CPU utilization percentage of the running system."""
    return CPUCollector().collect()
