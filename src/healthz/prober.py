"""
Prober for Healthz.

Fetches a remote reporter's snapshot over HTTP, with bounded retries and
exponential backoff.
"""

from __future__ import annotations

import logging
import threading
import time
from typing import Any

import requests

from healthz import __version__
from healthz.config import Config
from healthz.errors import Cancelled, DecodeError, RetryExhausted, TransportError
from healthz.snapshot import Snapshot


class Prober:
    """
    Polls a health endpoint.

    Supports:
    - Per-request timeouts
    - Retries with exponential backoff
    - Cancellation between attempts via a threading.Event
    """

    def __init__(
        self,
        config: Config | None = None,
        session: Any = None,
        logger: logging.Logger | None = None,
    ):
        self.config = config or Config()
        self.logger = logger or logging.getLogger(__name__)

        if session is None:
            session = requests.Session()
            session.headers.update(
                {
                    "User-Agent": f"healthz/{__version__}",
                    "Accept": "application/json",
                }
            )
        self.session = session

    def probe(self, url: str, timeout: float | None = None) -> Snapshot:
        """
        Fetch one snapshot.

        The snapshot's ``status`` is replaced by the HTTP status code this
        client actually observed.

        Args:
            url: Health endpoint URL.
            timeout: Request timeout in seconds. Defaults to the configured one.

        Returns:
            The decoded snapshot, whatever the response status.

        Raises:
            TransportError: If the request cannot be sent or the connection fails.
            DecodeError: If the body is not a valid snapshot.
        """
        try:
            response = self.session.get(
                url,
                timeout=timeout if timeout is not None else self.config.probe_timeout,
            )
        except requests.exceptions.Timeout as e:
            raise TransportError(f"healthz request timed out: {e}") from e
        except requests.exceptions.RequestException as e:
            raise TransportError(f"unable to perform healthz request: {e}") from e

        snapshot = Snapshot.from_json(response.content)
        snapshot.status = response.status_code
        return snapshot

    def probe_with_retry(
        self,
        url: str,
        max_attempts: int | None = None,
        cancel: threading.Event | None = None,
    ) -> Snapshot:
        """
        Fetch a snapshot, retrying until an attempt returns HTTP 200.

        The wait doubles before every attempt, so the sleeps between attempts
        are ``backoff*2``, ``backoff*4``, ... capped at ``probe_backoff_max``.
        No sleep follows the final attempt.

        Raises:
            RetryExhausted: If no attempt succeeded.
            Cancelled: If ``cancel`` was set before an attempt or during a wait.
        """
        attempts = max_attempts if max_attempts is not None else self.config.probe_retries
        if attempts < 1:
            raise ValueError(f"max_attempts must be at least 1, got {attempts}")

        wait = self.config.probe_backoff
        last_error = None

        for attempt in range(1, attempts + 1):
            if cancel is not None and cancel.is_set():
                raise Cancelled(attempt - 1)

            wait = min(wait * 2, self.config.probe_backoff_max)

            try:
                snapshot = self.probe(url)
            except TransportError as e:
                last_error = str(e)
                self.logger.info(f"healthz ping failed attempt={attempt} cause=transport error={e}")
            except DecodeError as e:
                last_error = str(e)
                self.logger.info(f"healthz ping failed attempt={attempt} cause=decode error={e}")
            else:
                if snapshot.status == 200:
                    return snapshot
                last_error = f"HTTP {snapshot.status}"
                self.logger.info(
                    f"healthz ping failed attempt={attempt} cause=status={snapshot.status}"
                )

            if attempt < attempts:
                self.logger.debug(f"Retrying in {wait} seconds...")
                self._sleep(wait, cancel, attempt)

        raise RetryExhausted(attempts, last_error)

    @staticmethod
    def _sleep(wait: float, cancel: threading.Event | None, attempt: int) -> None:
        if cancel is None:
            time.sleep(wait)
        elif cancel.wait(wait):
            raise Cancelled(attempt)

    def close(self) -> None:
        """Close the underlying HTTP session."""
        self.session.close()

    def __enter__(self) -> Prober:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()


def probe(url: str, config: Config | None = None) -> Snapshot:
    """Probe a health endpoint once."""
    with Prober(config) as prober:
        return prober.probe(url)


def probe_with_retry(
    url: str,
    max_attempts: int | None = None,
    config: Config | None = None,
    cancel: threading.Event | None = None,
) -> Snapshot:
    """Probe a health endpoint with retry and backoff."""
    with Prober(config) as prober:
        return prober.probe_with_retry(url, max_attempts, cancel=cancel)

