"""
User configuration file support.

Reads/writes ``~/.speedlog/config.json``.  Missing keys fall back to
``DEFAULTS``; a corrupt file is ignored.

Supported keys::

    log_dir = ""                 # where logs.csv / pings.csv go ("" = next to the executable)
    speed_interval = 10.0        # seconds between speed tests
    ping_interval = 3.0          # seconds between ping samples
    ping_hosts = [...]           # rotation order
    ping_attempts = 5
    ping_timeout_ms = 2048
    icmp_privileged = false      # raw sockets need root
    candidate_count = 10         # servers latency-probed per speed test
    catalog_size = 50            # servers requested from speedtest.net
    connections = 4
    download_duration = 10.0
    upload_duration = 10.0
    max_log_bytes = 104857600
    log_level = "INFO"
"""
from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Dict

from client.constants import MAX_CONNECTIONS, MAX_DURATION, MIN_CONNECTIONS, MIN_DURATION
from monitor.appender import MAX_LOG_BYTES
from monitor.sampler import DEFAULT_HOSTS

_CONFIG_DIR = os.path.join(Path.home(), ".speedlog")
_CONFIG_FILE = "config.json"


def _config_path() -> str:
    return os.path.join(_CONFIG_DIR, _CONFIG_FILE)


# ---------------------------------------------------------------------------
# Defaults
# ---------------------------------------------------------------------------

DEFAULTS: Dict[str, Any] = {
    "log_dir": "",
    "speed_interval": 10.0,
    "ping_interval": 3.0,
    "ping_hosts": list(DEFAULT_HOSTS),
    "ping_attempts": 5,
    "ping_timeout_ms": 2048,
    "icmp_privileged": False,
    "candidate_count": 10,
    "catalog_size": 50,
    "connections": 4,
    "download_duration": 10.0,
    "upload_duration": 10.0,
    "max_log_bytes": MAX_LOG_BYTES,
    "log_level": "INFO",
}

_POSITIVE = (
    "speed_interval",
    "ping_interval",
    "ping_attempts",
    "ping_timeout_ms",
    "candidate_count",
    "catalog_size",
    "connections",
    "download_duration",
    "upload_duration",
    "max_log_bytes",
)

# Used as loop counts and slice bounds, so they must be whole numbers.
_COUNTS = ("ping_attempts", "candidate_count", "catalog_size", "connections")


# ---------------------------------------------------------------------------
# Read / Write
# ---------------------------------------------------------------------------

def load_config() -> Dict[str, Any]:
    """Load config from disk, returning defaults for missing keys."""
    path = _config_path()
    config = dict(DEFAULTS)

    if not os.path.isfile(path):
        return config

    try:
        with open(path, encoding="utf-8") as fh:
            user = json.load(fh)
        if isinstance(user, dict):
            config.update(user)
    except (json.JSONDecodeError, IOError):
        pass  # corrupt file; use defaults

    return config


def validate_config(config: Dict[str, Any]) -> None:
    """Raise ``ValueError`` if any value is unusable."""
    for key in _POSITIVE:
        value = config.get(key)
        if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
            raise ValueError(f"{key} must be a positive number, got {value!r}")
    for key in _COUNTS:
        if not isinstance(config[key], int):
            raise ValueError(f"{key} must be a whole number, got {config[key]!r}")

    if not isinstance(config.get("icmp_privileged"), bool):
        raise ValueError(f"icmp_privileged must be true or false, got {config.get('icmp_privileged')!r}")

    if not MIN_CONNECTIONS <= config["connections"] <= MAX_CONNECTIONS:
        raise ValueError(f"connections must be between {MIN_CONNECTIONS} and {MAX_CONNECTIONS}")
    for key in ("download_duration", "upload_duration"):
        if not MIN_DURATION <= config[key] <= MAX_DURATION:
            raise ValueError(f"{key} must be between {MIN_DURATION} and {MAX_DURATION} s")

    hosts = config.get("ping_hosts")
    if not isinstance(hosts, list) or not hosts or not all(isinstance(h, str) and h for h in hosts):
        raise ValueError("ping_hosts must be a non-empty list of host names")


def save_config(config: Dict[str, Any]) -> str:
    """Write *config* to disk.  Returns the file path."""
    path = _config_path()
    os.makedirs(os.path.dirname(path), exist_ok=True)

    with open(path, "w", encoding="utf-8") as fh:
        json.dump(config, fh, indent=2, ensure_ascii=False)

    return path


def config_path() -> str:
    """Return the config file path (for display purposes)."""
    return _config_path()
