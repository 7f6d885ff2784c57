"""
Base collector class that all metric collectors inherit from.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any

from healthz.errors import MetricsIOError, ParseError

# cpu, memory and disk are all reported as percentages in [0, 100]
PERCENT = 100.0


class BaseCollector(ABC):
    """
    Abstract base class for all metric collectors.

    Subclasses must implement the `collect` method to read their
    pseudo-file or syscall and return the derived value. Failures are
    raised as `CollectorError` subclasses, never swallowed.
    """

    name: str = "base"
    description: str = "Base collector"

    def __init__(self):
        self.logger = logging.getLogger(f"{__name__}.{self.name}")

    @abstractmethod
    def collect(self) -> Any:
        """
        Collect and return the metric.

        Raises:
            CollectorError: If the metric cannot be read or derived.
        """
        pass

    def read_file(self, path: str) -> str:
        """
        Read a pseudo-file and return its contents.

        Raises:
            MetricsIOError: If the file cannot be read.
        """
        try:
            with open(path) as f:
                return f.read()
        except OSError as e:
            self.logger.debug(f"Could not read {path}: {e}")
            raise MetricsIOError(f"unable to read {path}: {e}") from e

    def read_file_lines(self, path: str) -> list[str]:
        """Read a pseudo-file and return lines as list."""
        return self.read_file(path).splitlines()

    @staticmethod
    def parse_uint(value: str, label: str) -> int:
        """Parse a non-negative integer counter."""
        # isdigit alone accepts non-ASCII digits that int() rejects
        if not (value.isascii() and value.isdigit()):
            raise ParseError(f"parse failure reading {label} field: {value!r}")
        return int(value)

    @staticmethod
    def parse_float(value: str, label: str) -> float:
        """Parse a floating point field."""
        try:
            return float(value)
        except ValueError as e:
            raise ParseError(f"parse failure reading {label} field: {value!r}") from e
