"""
Error handling tests for probe retry logic.

Tests attempt counting, backoff timing, status-based retries and cancellation.
"""

from __future__ import annotations

import threading
import unittest
from unittest.mock import MagicMock, patch

import pytest
import requests

from healthz.config import Config
from healthz.errors import Cancelled, RetryExhausted
from healthz.prober import Prober
from healthz.snapshot import Snapshot

URL = "http://test.example.com/healthz"


def response(status_code: int, snapshot: Snapshot | None = None, body: bytes | None = None):
    mock_response = MagicMock()
    mock_response.status_code = status_code
    if body is None:
        body = (snapshot or Snapshot(time=1704067800, version="v1")).to_json().encode()
    mock_response.content = body
    return mock_response


@pytest.mark.integration
class TestProbeRetries(unittest.TestCase):
    """Test probe retry logic and exponential backoff."""

    def setUp(self):
        """Set up test configuration."""
        self.config = Config(probe_retries=3, probe_backoff=0.5, probe_timeout=5)
        self.session = MagicMock()
        self.prober = Prober(self.config, session=self.session)
        self.sleep_calls: list[float] = []
        patcher = patch("time.sleep", side_effect=self.sleep_calls.append)
        patcher.start()
        self.addCleanup(patcher.stop)

    def test_succeeds_on_third_attempt(self):
        """Test fail, fail, succeed returns the good snapshot after exactly 3 attempts."""
        good = Snapshot(time=1704067800, version="v1", cpu="12.00")
        self.session.get.side_effect = [
            requests.exceptions.ConnectionError("Connection refused"),
            response(500),
            response(200, good),
        ]

        snapshot = self.prober.probe_with_retry(URL, 3)

        self.assertEqual(self.session.get.call_count, 3)
        self.assertEqual(snapshot.cpu, "12.00")
        self.assertEqual(snapshot.status, 200)

    def test_retry_on_500_errors(self):
        """Test that a reachable endpoint answering 500 is never a success."""
        self.session.get.return_value = response(500)

        with self.assertRaises(RetryExhausted) as ctx:
            self.prober.probe_with_retry(URL, 4)

        self.assertEqual(ctx.exception.attempts, 4)
        self.assertEqual(self.session.get.call_count, 4)
        self.assertEqual(ctx.exception.last_error, "HTTP 500")

    def test_retry_on_404_errors(self):
        """Test that client errors are retried like any other non-200 status."""
        self.session.get.return_value = response(404, body=b"not found")

        with self.assertRaises(RetryExhausted) as ctx:
            self.prober.probe_with_retry(URL)

        self.assertEqual(ctx.exception.attempts, 3)

    def test_retry_on_connection_errors(self):
        self.session.get.side_effect = requests.exceptions.ConnectionError("Connection refused")

        with self.assertRaises(RetryExhausted) as ctx:
            self.prober.probe_with_retry(URL)

        self.assertEqual(ctx.exception.attempts, 3)
        self.assertIn("Connection refused", str(ctx.exception))

    def test_retry_on_timeout_errors(self):
        self.session.get.side_effect = requests.exceptions.Timeout("Request timed out")

        with self.assertRaises(RetryExhausted) as ctx:
            self.prober.probe_with_retry(URL)

        self.assertIn("timed out", ctx.exception.last_error)

    def test_retry_on_decode_errors(self):
        self.session.get.return_value = response(200, body=b"<html></html>")

        with self.assertRaises(RetryExhausted):
            self.prober.probe_with_retry(URL)

        self.assertEqual(self.session.get.call_count, 3)

    def test_retry_on_deeply_nested_body(self):
        """Test a body too deeply nested to decode is a decode failure."""
        self.session.get.return_value = response(200, body=b"[" * 200000 + b"]" * 200000)

        with self.assertRaises(RetryExhausted) as ctx:
            self.prober.probe_with_retry(URL, 2)

        self.assertEqual(ctx.exception.attempts, 2)
        self.assertIn("unable to unmarshal healthz response", ctx.exception.last_error)

    def test_no_retry_on_first_success(self):
        self.session.get.return_value = response(200)

        self.prober.probe_with_retry(URL)

        self.assertEqual(self.session.get.call_count, 1)
        self.assertEqual(self.sleep_calls, [])

    def test_exponential_backoff_timing(self):
        """Test the wait is doubled before every attempt, starting from the base."""
        self.session.get.return_value = response(500)

        with self.assertRaises(RetryExhausted):
            self.prober.probe_with_retry(URL, 4)

        # Sleeps only between attempts: base*2, base*4, base*8
        self.assertEqual(self.sleep_calls, [1.0, 2.0, 4.0])

    def test_no_sleep_after_final_success(self):
        self.session.get.side_effect = [response(500), response(200)]

        self.prober.probe_with_retry(URL, 5)

        self.assertEqual(self.sleep_calls, [1.0])

    def test_backoff_not_exceed_maximum(self):
        config = Config(probe_retries=10, probe_backoff=1.0, probe_backoff_max=30.0)
        prober = Prober(config, session=self.session)
        self.session.get.return_value = response(500)

        with self.assertRaises(RetryExhausted):
            prober.probe_with_retry(URL)

        self.assertEqual(len(self.sleep_calls), 9)
        self.assertEqual(self.sleep_calls[:4], [2.0, 4.0, 8.0, 16.0])
        for delay in self.sleep_calls:
            self.assertLessEqual(delay, 30.0)

    def test_single_attempt(self):
        self.session.get.return_value = response(503)

        with self.assertRaises(RetryExhausted) as ctx:
            self.prober.probe_with_retry(URL, 1)

        self.assertEqual(ctx.exception.attempts, 1)
        self.assertEqual(self.sleep_calls, [])

    def test_invalid_max_attempts(self):
        with self.assertRaises(ValueError):
            self.prober.probe_with_retry(URL, 0)

        self.session.get.assert_not_called()

    def test_failed_attempts_logged(self):
        logger = MagicMock()
        prober = Prober(self.config, session=self.session, logger=logger)
        self.session.get.side_effect = [
            requests.exceptions.ConnectionError("Connection refused"),
            response(502),
            response(200),
        ]

        prober.probe_with_retry(URL)

        messages = [call.args[0] for call in logger.info.call_args_list]
        self.assertEqual(len(messages), 2)
        self.assertIn("attempt=1 cause=transport", messages[0])
        self.assertIn("attempt=2 cause=status=502", messages[1])


@pytest.mark.integration
class TestProbeCancellation(unittest.TestCase):
    """Test cancellation between attempts."""

    def setUp(self):
        self.config = Config(probe_retries=5, probe_backoff=0.5)
        self.session = MagicMock()
        self.prober = Prober(self.config, session=self.session)

    def test_cancelled_before_first_attempt(self):
        cancel = threading.Event()
        cancel.set()

        with self.assertRaises(Cancelled) as ctx:
            self.prober.probe_with_retry(URL, cancel=cancel)

        self.assertEqual(ctx.exception.attempts, 0)
        self.session.get.assert_not_called()

    def test_cancelled_during_backoff(self):
        """Test a cancel during the wait aborts instead of exhausting attempts."""
        cancel = threading.Event()

        def fail_and_cancel(*args, **kwargs):
            cancel.set()
            return response(500)

        self.session.get.side_effect = fail_and_cancel

        with self.assertRaises(Cancelled) as ctx:
            self.prober.probe_with_retry(URL, cancel=cancel)

        self.assertEqual(ctx.exception.attempts, 1)
        self.assertEqual(self.session.get.call_count, 1)

    def test_cancel_is_not_retry_exhausted(self):
        self.assertFalse(issubclass(Cancelled, RetryExhausted))

    def test_uncancelled_event_waits_with_backoff(self):
        cancel = MagicMock()
        cancel.is_set.return_value = False
        cancel.wait.return_value = False
        self.session.get.side_effect = [response(500), response(500), response(200)]

        self.prober.probe_with_retry(URL, cancel=cancel)

        waits = [call.args[0] for call in cancel.wait.call_args_list]
        self.assertEqual(waits, [1.0, 2.0])
