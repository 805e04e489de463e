"""One speed-test run: settings, server selection, download, upload."""
from __future__ import annotations

from datetime import datetime

from monitor.models import MeasurementProvider, SpeedTestOutcome
from monitor.selector import ServerSelector
from ui.dashboard import Dashboard


class MeasurementPipeline:
    def __init__(
        self,
        provider: MeasurementProvider,
        selector: ServerSelector,
        dashboard: Dashboard,
    ) -> None:
        self.provider = provider
        self.selector = selector
        self.dashboard = dashboard

    async def run(self, timestamp: datetime) -> SpeedTestOutcome:
        """Measure once; any stage's error propagates to the caller."""
        self.dashboard.fetching_settings()
        settings = await self.provider.get_settings()

        server = await self.selector.select_best(settings)

        self.dashboard.testing_speed()
        download = await self.provider.test_download_speed(server, settings.download_threads)
        self.dashboard.speed("Download", download)
        upload = await self.provider.test_upload_speed(server, settings.upload_threads)
        self.dashboard.speed("Upload", upload)

        return SpeedTestOutcome(
            timestamp=timestamp,
            download_kbps=download,
            upload_kbps=upload,
            server=server,
        )
