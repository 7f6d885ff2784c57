"""
Load average collector.
"""

from __future__ import annotations

from healthz.collectors.base import BaseCollector
from healthz.errors import ParseError

PROC_LOADAVG = "/proc/loadavg"

LOAD_FIELD_NAMES = ("1-minute load", "5-minute load", "15-minute load")


class LoadCollector(BaseCollector):
    """Collects the 1, 5 and 15 minute load averages."""

    name = "load"
    description = "System load averages from /proc/loadavg"

    def __init__(self, loadavg_path: str = PROC_LOADAVG):
        super().__init__()
        self.loadavg_path = loadavg_path

    def collect(self) -> tuple[float, float, float]:
        fields = self.read_file(self.loadavg_path).split()
        if len(fields) < 3:
            raise ParseError(
                f"invalid format in {self.loadavg_path}, expected >=3, got {len(fields)}"
            )

        load1, load5, load15 = (
            self.parse_float(value, label) for value, label in zip(fields, LOAD_FIELD_NAMES)
        )
        return load1, load5, load15


def load_averages() -> tuple[float, float, float]:
    """Return the system's 1, 5 and 15 minute load averages."""
    return LoadCollector().collect()
