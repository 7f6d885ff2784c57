"""
Health snapshot record shared by the reporter and the prober.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any

from healthz.errors import DecodeError

ZERO = "0.00"

STRING_FIELDS = ("version", "uptime", "cpu", "memory", "disk", "load1", "load5", "load15")
INT_FIELDS = ("time", "status")


def format_metric(value: float) -> str:
    """Format a metric the way every snapshot field carries it."""
    return f"{value:.2f}"


@dataclass
class Snapshot:
    """Process health and resource utilization at one instant."""

    time: int
    status: int = 0
    version: str = ""
    uptime: str = ZERO
    cpu: str = ZERO
    memory: str = ZERO
    disk: str = ZERO
    load1: str = ZERO
    load5: str = ZERO
    load15: str = ZERO
    errors: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Convert snapshot to dictionary for serialization."""
        return {
            "time": self.time,
            "status": self.status,
            "version": self.version,
            "uptime": self.uptime,
            "cpu": self.cpu,
            "memory": self.memory,
            "disk": self.disk,
            "load1": self.load1,
            "load5": self.load5,
            "load15": self.load15,
            "errors": list(self.errors),
        }

    def to_json(self, indent: int | None = None) -> str:
        """Serialize snapshot to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    @property
    def healthy(self) -> bool:
        """True when every metric was collected."""
        return not self.errors

    @classmethod
    def from_dict(cls, data: Any) -> Snapshot:
        """
        Build a snapshot from decoded JSON.

        Every field except ``errors`` is required. Unknown keys are ignored.

        Raises:
            DecodeError: If the data does not have the snapshot shape.
        """
        if not isinstance(data, dict):
            raise DecodeError(f"expected a JSON object, got {type(data).__name__}")

        values: dict[str, Any] = {}
        for name in INT_FIELDS:
            value = data.get(name)
            # bool is an int subclass but never a valid counter
            if not isinstance(value, int) or isinstance(value, bool):
                raise DecodeError(f"field {name!r} must be an integer, got {value!r}")
            values[name] = value

        for name in STRING_FIELDS:
            value = data.get(name)
            if not isinstance(value, str):
                raise DecodeError(f"field {name!r} must be a string, got {value!r}")
            values[name] = value

        errors = data.get("errors")
        if errors is None:
            errors = []
        if not isinstance(errors, list) or not all(isinstance(e, str) for e in errors):
            raise DecodeError(f"field 'errors' must be a list of strings, got {errors!r}")
        values["errors"] = list(errors)

        return cls(**values)

    @classmethod
    def from_json(cls, text: str | bytes) -> Snapshot:
        """Decode a snapshot from a JSON document."""
        try:
            data = json.loads(text)
        except (ValueError, RecursionError) as e:
            raise DecodeError(f"unable to unmarshal healthz response: {e}") from e
        return cls.from_dict(data)
