"""
Reporter for Healthz.

Runs every metric collector, aggregates failures, and turns the result into
a snapshot and an HTTP response. The reporter keeps no per-request state;
the only shared state is the immutable configuration.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Callable

from healthz.collectors import BaseCollector, get_all_collectors
from healthz.config import Config
from healthz.snapshot import Snapshot, format_metric

JSON_HEADERS = {"Content-Type": "application/json"}

RATIO_FIELDS = ("cpu", "memory", "disk")


class Reporter:
    """
    Produces a health snapshot on demand.

    Every collector is invoked on each call; a failing metric is logged,
    recorded in the snapshot's ``errors`` list, and left at ``"0.00"``.
    """

    def __init__(
        self,
        config: Config | None = None,
        collectors: dict[str, BaseCollector] | None = None,
        logger: logging.Logger | None = None,
        clock: Callable[[], float] = time.time,
    ):
        self.config = config or Config()
        self.collectors = collectors if collectors is not None else {
            name: cls() for name, cls in get_all_collectors().items()
        }
        self.logger = logger or logging.getLogger(__name__)
        self.clock = clock

    def uptime_minutes(self, now: float) -> float:
        """Minutes elapsed since the process started."""
        return max(now - self.config.start_time, 0.0) / 60

    def collect(self) -> Snapshot:
        """Run all collectors and build a snapshot."""
        now = self.clock()
        snapshot = Snapshot(
            time=int(now),
            version=self.config.version,
            uptime=format_metric(self.uptime_minutes(now)),
        )

        for name, collector in self.collectors.items():
            try:
                value = collector.collect()
            except Exception as e:
                snapshot.errors.append(f"{name}: {e}")
                self.logger.error(f"healthz metric check failed target={name} error={e}")
                continue
            self._apply(snapshot, name, value)

        return snapshot

    def respond(self) -> tuple[int, dict[str, str], bytes]:
        """
        Build the HTTP response for one health request.

        Returns:
            Tuple of (status_code, headers, body). The status is always 200;
            partial failure is reported through the ``errors`` field.
        """
        snapshot = self.collect()
        self.logger.info(
            "responding to healthz "
            + " ".join(f"{key}={value}" for key, value in snapshot.to_dict().items())
        )
        return 200, dict(JSON_HEADERS), snapshot.to_json().encode("utf-8")

    @staticmethod
    def _apply(snapshot: Snapshot, name: str, value: Any) -> None:
        if name == "load":
            snapshot.load1, snapshot.load5, snapshot.load15 = (format_metric(v) for v in value)
        elif name in RATIO_FIELDS:
            setattr(snapshot, name, format_metric(value))
