"""
Rich-based console output for the measurement loops.

All formatting helpers live in ``client.stats`` -- this module only does
presentation via the ``rich`` library.  Both loops print through one
:class:`Dashboard`, and only while holding the scheduler's lock, so the
lines of one measurement are never split by the other loop.
"""
from __future__ import annotations

from typing import Optional

from rich.console import Console
from rich.markup import escape

from client.api import Server
from client.stats import format_speed

console = Console()


class Dashboard:
    def __init__(self, out: Optional[Console] = None) -> None:
        self.console = out or console

    # -- Speed test ---------------------------------------------------------

    def fetching_settings(self) -> None:
        self.console.print("[dim]Getting speedtest.net settings and server list...[/dim]")

    def selecting_servers(self) -> None:
        self.console.print()
        self.console.print("[bold]Selecting best server by distance...[/bold]")

    def server_details(self, server: Server) -> None:
        self.console.print(
            f"Hosted by {server.sponsor} ({server.name}/{server.country}), "
            f"distance: {server.distance_km}km, latency: {server.latency_ms}ms",
            markup=False,
            highlight=False,
        )

    def best_server(self, server: Server) -> None:
        self.console.print()
        self.console.print("[green]Best server by latency:[/green]")
        self.server_details(server)
        self.console.print()

    def testing_speed(self) -> None:
        self.console.print("[bold]Testing speed...[/bold]")

    def speed(self, kind: str, speed_kbps: float) -> None:
        self.console.print(f"{kind} speed: [bold cyan]{format_speed(speed_kbps)}[/bold cyan]")

    def log_failure(self, exc: BaseException) -> None:
        self.console.print(f"[red]Exception while trying to log result: {escape(str(exc))}[/red]")

    # -- Ping ---------------------------------------------------------------

    def ping_started(self, host: str) -> None:
        self.console.print()
        self.console.print(f"Ping test, host: {host}")

    def ping_result(self, average_ms: Optional[int]) -> None:
        result = "inconclusive" if average_ms is None else f"{average_ms}"
        self.console.print(f"Ping test, result: [bold yellow]{result}[/bold yellow]")

    # -- Lifecycle ----------------------------------------------------------

    def loop_ended(self, name: str) -> None:
        self.console.print(f"[bold red]The {name} loop has stopped; shutting down.[/bold red]")
