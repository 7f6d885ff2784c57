"""
Healthz - Process health reporting and probing for Linux.

Serves a JSON health snapshot with coarse resource metrics (CPU, memory,
disk, load averages, uptime) and polls such endpoints with retry/backoff.
"""

__version__ = "0.3.0"
__author__ = "Sluggisty"

__all__ = ["__version__"]
