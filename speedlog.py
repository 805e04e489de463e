#!/usr/bin/env python3
"""
Speedlog -- unattended network quality logging.

Runs two measurement loops forever and appends their results to
``logs.csv`` (speed tests) and ``pings.csv`` (ICMP round-trips) next to
the executable, or in ``log_dir`` from ``~/.speedlog/config.json``::

    python speedlog.py
    python speedlog.py --log-dir /var/log/speedlog --ping-interval 5
    python speedlog.py --show-config
"""
from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys
from typing import Any, Dict, List, Optional

from client.icmp import IcmpEcho
from client.provider import SpeedtestProvider
from monitor.appender import RetryingAppender
from monitor.config import config_path, load_config, save_config, validate_config
from monitor.logging_config import configure_logging
from monitor.pipeline import MeasurementPipeline
from monitor.sampler import HostRotation, PingSampler
from monitor.scheduler import DualLoopScheduler
from monitor.selector import ServerSelector
from ui.dashboard import Dashboard, console

logger = logging.getLogger(__name__)


def _executable_dir() -> str:
    return os.path.dirname(os.path.abspath(sys.argv[0] or __file__))


def build_scheduler(config: Dict[str, Any]) -> DualLoopScheduler:
    """Wire the provider, sampler, appender and dashboard into a scheduler."""
    dashboard = Dashboard()
    provider = SpeedtestProvider(
        catalog_size=config["catalog_size"],
        connections=config["connections"],
        download_duration=config["download_duration"],
        upload_duration=config["upload_duration"],
    )
    selector = ServerSelector(provider, dashboard, candidate_count=config["candidate_count"])
    sampler = PingSampler(
        IcmpEcho(privileged=config["icmp_privileged"]),
        attempts=config["ping_attempts"],
        timeout_ms=config["ping_timeout_ms"],
    )

    return DualLoopScheduler(
        pipeline=MeasurementPipeline(provider, selector, dashboard),
        sampler=sampler,
        rotation=HostRotation(config["ping_hosts"]),
        appender=RetryingAppender(max_bytes=config["max_log_bytes"]),
        dashboard=dashboard,
        log_dir=config["log_dir"] or _executable_dir(),
        speed_interval=config["speed_interval"],
        ping_interval=config["ping_interval"],
    )


# ---------------------------------------------------------------------------
# CLI
# ---------------------------------------------------------------------------

def _parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Speedlog -- unattended speed test and ping logging",
    )
    # Overrides for values from the config file
    parser.add_argument("--log-dir", type=str, metavar="DIR", help="Directory for logs.csv and pings.csv")
    parser.add_argument("--speed-interval", type=float, metavar="SECS", help="Seconds between speed tests (default: 10)")
    parser.add_argument("--ping-interval", type=float, metavar="SECS", help="Seconds between ping samples (default: 3)")
    parser.add_argument("--connections", type=int, metavar="N", help="Concurrent download/upload connections (default: 4)")
    parser.add_argument("--log-level", type=str, metavar="LEVEL", help="Diagnostic log level (default: INFO)")

    # Config file
    parser.add_argument("--show-config", action="store_true", help="Print the effective configuration and exit")
    parser.add_argument("--save-config", action="store_true", help="Persist the given overrides to the config file and exit")

    return parser.parse_args(argv)


def _apply_overrides(config: Dict[str, Any], args: argparse.Namespace) -> Dict[str, Any]:
    overrides = {
        "log_dir": args.log_dir,
        "speed_interval": args.speed_interval,
        "ping_interval": args.ping_interval,
        "connections": args.connections,
        "log_level": args.log_level,
    }
    config.update({k: v for k, v in overrides.items() if v is not None})
    return config


def main(argv: Optional[List[str]] = None) -> None:
    args = _parse_args(argv)
    config = _apply_overrides(load_config(), args)
    configure_logging(config["log_level"])

    try:
        validate_config(config)
    except ValueError as exc:
        console.print(f"[red]Error: {exc}[/red]")
        sys.exit(1)

    if args.show_config:
        console.print(f"[dim]{config_path()}[/dim]")
        console.print_json(data=config)
        return

    if args.save_config:
        path = save_config(config)
        console.print(f"[green]Configuration saved to {path}[/green]")
        return

    scheduler = build_scheduler(config)

    try:
        asyncio.run(scheduler.run())
    except KeyboardInterrupt:
        console.print("\n[yellow]Stopped by user[/yellow]")
        return
    except Exception as exc:
        logger.debug("Measurement loop terminated", exc_info=True)
        console.print(f"\n[red]Error: {exc}[/red]")
        sys.exit(1)

    # A loop only returns when its results can no longer be logged.
    sys.exit(1)


if __name__ == "__main__":
    main()
