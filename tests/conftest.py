"""
Pytest fixtures and configuration for Healthz tests.

Provides sample pseudo-file contents, configuration, snapshots, and HTTP
response mocks across the test suite.
"""

from __future__ import annotations

import json
from unittest.mock import MagicMock

import pytest

from healthz.config import Config
from healthz.snapshot import Snapshot


# Test Data Fixtures - Pseudo-file contents
@pytest.fixture
def sample_proc_stat_content():
    """Sample content for /proc/stat (user=300 nice=0 system=100 idle=600)."""
    return """cpu  300 0 100 600 10 0 5 0 0 0
cpu0 150 0 50 300 5 0 3 0 0 0
cpu1 150 0 50 300 5 0 2 0 0 0
intr 123456 0 0 0
ctxt 987654
btime 1704067200
processes 4242
procs_running 2
procs_blocked 0
softirq 5555 0 1 2 3 4 5 6 7 8 9"""


@pytest.fixture
def sample_proc_self_status_content():
    """Sample content for /proc/self/status (VmRSS is 25% of VmSize)."""
    return """Name:\tpython3
Umask:\t0022
State:\tR (running)
Tgid:\t4242
Pid:\t4242
PPid:\t1
VmPeak:\t  420000 kB
VmSize:\t  400000 kB
VmLck:\t       0 kB
VmHWM:\t  110000 kB
VmRSS:\t  100000 kB
RssAnon:\t   80000 kB
VmData:\t  200000 kB
Threads:\t4"""


@pytest.fixture
def sample_proc_loadavg_content():
    """Sample content for /proc/loadavg."""
    return "0.52 0.58 0.59 2/812 4242\n"


@pytest.fixture
def proc_files(tmp_path, sample_proc_stat_content, sample_proc_self_status_content,
               sample_proc_loadavg_content):
    """Write sample pseudo-files to a temporary directory and return their paths."""
    stat = tmp_path / "stat"
    stat.write_text(sample_proc_stat_content)
    status = tmp_path / "status"
    status.write_text(sample_proc_self_status_content)
    loadavg = tmp_path / "loadavg"
    loadavg.write_text(sample_proc_loadavg_content)
    return {"stat": str(stat), "status": str(status), "loadavg": str(loadavg)}


@pytest.fixture
def fake_statvfs():
    """Build a statvfs result with the given block counts."""

    def build(blocks: int, bfree: int):
        result = MagicMock()
        result.f_blocks = blocks
        result.f_bfree = bfree
        result.f_bavail = bfree
        result.f_frsize = 4096
        return result

    return build


# Configuration Fixtures
@pytest.fixture
def sample_config():
    """Sample configuration for testing."""
    return Config(
        version="v1.2.3-abcd",
        start_time=1704067200.0,
        probe_url="http://test.example.com/healthz",
        probe_timeout=5.0,
        probe_retries=3,
        probe_backoff=0.5,
    )


@pytest.fixture
def sample_snapshot():
    """Sample snapshot as a remote reporter would serve it."""
    return Snapshot(
        time=1704067800,
        status=0,
        version="v1.2.3-abcd",
        uptime="10.00",
        cpu="40.00",
        memory="25.00",
        disk="63.20",
        load1="0.52",
        load5="0.58",
        load15="0.59",
        errors=[],
    )


# HTTP Response Fixtures
@pytest.fixture
def make_response():
    """Build a mock requests.Response with a status code and body."""

    def build(status_code: int = 200, body=None):
        response = MagicMock()
        response.status_code = status_code
        response.ok = status_code < 400
        if isinstance(body, (dict, list)):
            response.content = json.dumps(body).encode("utf-8")
        elif isinstance(body, str):
            response.content = body.encode("utf-8")
        else:
            response.content = body if body is not None else b""
        return response

    return build


# Pytest Configuration
def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "integration: marks tests as integration tests")
    config.addinivalue_line("markers", "cli: marks tests as CLI tests")
