"""
Error types for Healthz.

Collector errors describe a single metric that could not be read; the
reporter folds them into a snapshot's ``errors`` list. Probe errors escalate
to whoever called the prober.
"""

from __future__ import annotations


class HealthzError(Exception):
    """Base class for all Healthz errors."""


class CollectorError(HealthzError):
    """Raised when a metric cannot be collected."""


class ParseError(CollectorError):
    """Raised when pseudo-file content is malformed."""


class InvalidMetric(CollectorError):
    """Raised when raw counters make a ratio undefined (e.g. a zero total)."""


class MetricsIOError(CollectorError):
    """Raised when a pseudo-file or filesystem call fails."""


class ProbeError(HealthzError):
    """Raised when a remote health endpoint cannot be probed."""


class TransportError(ProbeError):
    """Raised when the request cannot be sent or the connection fails."""


class DecodeError(ProbeError):
    """Raised when a response body is not a valid snapshot."""


class RetryExhausted(ProbeError):
    """Raised when every probe attempt failed."""

    def __init__(self, attempts: int, last_error: str | None = None):
        self.attempts = attempts
        self.last_error = last_error
        message = f"Probe failed after {attempts} attempts"
        if last_error:
            message += f": {last_error}"
        super().__init__(message)


class Cancelled(ProbeError):
    """Raised when the caller cancels a probe between attempts."""

    def __init__(self, attempts: int):
        self.attempts = attempts
        super().__init__(f"Probe cancelled after {attempts} attempts")
