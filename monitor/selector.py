"""Server selection: latency-probe the first few catalog entries, keep the fastest."""
from __future__ import annotations

import logging

from client.api import Server, Settings
from monitor.models import MeasurementProvider
from ui.dashboard import Dashboard

logger = logging.getLogger(__name__)


class NoServersError(RuntimeError):
    """The catalog had no candidates to rank."""


class ServerSelector:
    """Picks the lowest-latency server among the first ``candidate_count``.

    Candidates are taken in the order the provider lists them; they are not
    re-sorted by distance.
    """

    def __init__(
        self,
        provider: MeasurementProvider,
        dashboard: Dashboard,
        candidate_count: int = 10,
    ) -> None:
        self.provider = provider
        self.dashboard = dashboard
        self.candidate_count = candidate_count

    async def select_best(self, settings: Settings) -> Server:
        self.dashboard.selecting_servers()
        candidates = settings.servers[: self.candidate_count]
        if not candidates:
            raise NoServersError("No servers available to select from")

        for server in candidates:
            server.latency_ms = await self.provider.test_server_latency(server)
            self.dashboard.server_details(server)

        # min() keeps the first of equal keys, so ties go to catalog order.
        best = min(candidates, key=lambda s: s.latency_ms)
        logger.debug("Selected %s %s (%d ms)", best.sponsor, best.name, best.latency_ms)

        self.dashboard.best_server(best)
        return best
