"""
Configuration management for Healthz.

Supports configuration via YAML files, environment variables, and programmatic access.
The resolved configuration is immutable: it is built once at startup and shared
read-only by the reporter and the prober.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any

import psutil
import yaml

DEFAULT_CONFIG_PATHS = [
    Path("/etc/healthz/config.yaml"),
    Path.home() / ".config" / "healthz" / "config.yaml",
    Path("healthz-config.yaml"),
]

# Nested YAML sections and the field prefix they map onto
SECTION_PREFIXES = {
    "server": "server_",
    "probe": "probe_",
    "logging": "log_",
}

ENV_MAPPINGS = {
    "HEALTHZ_VERSION": "version",
    "HEALTHZ_HOST": "server_host",
    "HEALTHZ_PORT": "server_port",
    "HEALTHZ_PATH": "server_path",
    "HEALTHZ_PROBE_URL": "probe_url",
    "HEALTHZ_PROBE_TIMEOUT": "probe_timeout",
    "HEALTHZ_PROBE_RETRIES": "probe_retries",
    "HEALTHZ_PROBE_BACKOFF": "probe_backoff",
    "HEALTHZ_PROBE_BACKOFF_MAX": "probe_backoff_max",
    "HEALTHZ_LOG_LEVEL": "log_level",
    "HEALTHZ_LOG_FILE": "log_file",
}


def process_start_time() -> float:
    """Return the creation time of the current process as a Unix timestamp."""
    return psutil.Process(os.getpid()).create_time()


@dataclass(frozen=True)
class Config:
    """
    Configuration container for Healthz.

    Priority (highest to lowest):
    1. Programmatic values passed to __init__
    2. Environment variables (prefixed with HEALTHZ_)
    3. Config file values
    4. Default values
    """

    # Process-wide identity
    version: str = "dev"
    start_time: float = field(default_factory=process_start_time)

    # Reporter endpoint
    server_host: str = "127.0.0.1"
    server_port: int = 8080
    server_path: str = "/healthz"

    # Prober settings
    probe_url: str | None = None
    probe_timeout: float = 10.0
    probe_retries: int = 3
    probe_backoff: float = 0.5
    probe_backoff_max: float = 30.0

    # Logging
    log_level: str = "INFO"
    log_file: str | None = None

    @classmethod
    def from_file(cls, path: str | Path) -> Config:
        """Load configuration from a YAML file."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path) as f:
            data = yaml.safe_load(f) or {}

        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Config:
        """Create config from a dictionary."""
        return cls(**cls._known_fields(cls._flatten(data)))

    @classmethod
    def load(cls, config_path: str | Path | None = None, **overrides: Any) -> Config:
        """
        Load configuration with full resolution order.

        Args:
            config_path: Explicit path to config file. If None, searches
                        default locations.
            **overrides: Programmatic values that win over everything else.

        Returns:
            Fully resolved Config instance.
        """
        base_config: dict[str, Any] = {}

        if config_path:
            path = Path(config_path)
            if path.exists():
                with open(path) as f:
                    base_config = yaml.safe_load(f) or {}
        else:
            for path in DEFAULT_CONFIG_PATHS:
                if path.exists():
                    with open(path) as f:
                        base_config = yaml.safe_load(f) or {}
                    break

        values = cls._flatten(base_config)
        values.update(cls._env_overrides())
        values.update({k: v for k, v in overrides.items() if v is not None})

        return cls(**cls._known_fields(values))

    @staticmethod
    def _flatten(data: dict[str, Any]) -> dict[str, Any]:
        """Flatten nested sections (``server: {port: 80}`` -> ``server_port``)."""
        flat: dict[str, Any] = {}
        for key, value in data.items():
            if isinstance(value, dict):
                prefix = SECTION_PREFIXES.get(key, "")
                for subkey, subvalue in value.items():
                    flat[f"{prefix}{subkey}"] = subvalue
            else:
                flat[key] = value
        return flat

    @classmethod
    def _known_fields(cls, values: dict[str, Any]) -> dict[str, Any]:
        known = {f.name for f in fields(cls)}
        return {k: v for k, v in values.items() if k in known}

    @classmethod
    def _env_overrides(cls) -> dict[str, Any]:
        """Collect environment variable overrides, coerced to the default's type."""
        defaults = {f.name: f.default for f in fields(cls)}
        result: dict[str, Any] = {}

        for env_var, attr in ENV_MAPPINGS.items():
            value = os.environ.get(env_var)
            if value is None:
                continue
            current = defaults[attr]
            if isinstance(current, bool):
                result[attr] = value.lower() in ("true", "1", "yes")
            elif isinstance(current, int):
                result[attr] = int(value)
            elif isinstance(current, float):
                result[attr] = float(value)
            else:
                result[attr] = value

        return result

    def to_dict(self) -> dict[str, Any]:
        """Convert config to dictionary."""
        return {
            "version": self.version,
            "server": {
                "host": self.server_host,
                "port": self.server_port,
                "path": self.server_path,
            },
            "probe": {
                "url": self.probe_url,
                "timeout": self.probe_timeout,
                "retries": self.probe_retries,
                "backoff": self.probe_backoff,
                "backoff_max": self.probe_backoff_max,
            },
            "logging": {
                "level": self.log_level,
                "file": self.log_file,
            },
        }

    def save(self, path: str | Path) -> None:
        """Save configuration to a YAML file. The start time is never persisted."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, "w") as f:
            yaml.dump(self.to_dict(), f, default_flow_style=False, sort_keys=False)

