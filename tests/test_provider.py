"""Tests for client.provider and the latency result penalty."""

import unittest
from unittest import mock

from client.api import Server
from client.latency import ServerLatencyResult
from client.provider import SpeedtestProvider
from client.stats import TransferResult

SERVER = Server(id=3, name="City", sponsor="ISP", country="DE", distance=0.0)


class FakeAPI:
    instances = 0
    limits = []

    def __init__(self):
        FakeAPI.instances += 1

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        return False

    async def fetch_servers(self, limit):
        FakeAPI.limits.append(limit)
        return [SERVER]


class TestServerLatencyResult(unittest.TestCase):
    def test_mean_truncated(self):
        result = ServerLatencyResult(server=SERVER, pings=[10.2, 11.9, 12.4])
        self.assertEqual(result.latency_ms, 11)

    def test_failure_charged_the_timeout(self):
        result = ServerLatencyResult(server=SERVER, pings=[3.0], success=False, error="boom")
        self.assertEqual(result.latency_ms, 5000)

    def test_no_pongs_charged_the_timeout(self):
        self.assertEqual(ServerLatencyResult(server=SERVER).latency_ms, 5000)


class TestSpeedtestProvider(unittest.IsolatedAsyncioTestCase):
    def setUp(self):
        FakeAPI.instances = 0
        FakeAPI.limits = []
        patcher = mock.patch("client.provider.SpeedtestAPI", FakeAPI)
        patcher.start()
        self.addCleanup(patcher.stop)

    async def test_settings_fetched_fresh_each_call(self):
        provider = SpeedtestProvider(catalog_size=20, connections=6)

        first = await provider.get_settings()
        await provider.get_settings()

        self.assertEqual(FakeAPI.instances, 2)
        self.assertEqual(FakeAPI.limits, [20, 20])
        self.assertEqual(first.servers, [SERVER])
        self.assertEqual(first.download_threads, 6)
        self.assertEqual(first.upload_threads, 6)

    async def test_latency_in_whole_ms(self):
        provider = SpeedtestProvider()
        provider._latency = mock.AsyncMock()
        provider._latency.test_server.return_value = ServerLatencyResult(SERVER, pings=[7.5, 8.5])

        self.assertEqual(await provider.test_server_latency(SERVER), 8)
        provider._latency.test_server.assert_awaited_once_with(SERVER)

    async def test_download_and_upload_return_kbps(self):
        provider = SpeedtestProvider(download_duration=4.0, upload_duration=2.0)

        with mock.patch("client.provider.DownloadTester") as dl, \
                mock.patch("client.provider.UploadTester") as ul:
            dl.return_value.test = mock.AsyncMock(return_value=TransferResult(speed_kbps=5000.0))
            ul.return_value.test = mock.AsyncMock(return_value=TransferResult(speed_kbps=1200.0))

            self.assertEqual(await provider.test_download_speed(SERVER, 8), 5000.0)
            self.assertEqual(await provider.test_upload_speed(SERVER, 2), 1200.0)

        dl.assert_called_once_with(4.0)
        ul.assert_called_once_with(2.0)
        dl.return_value.test.assert_awaited_once_with(SERVER, connections=8)
        ul.return_value.test.assert_awaited_once_with(SERVER, connections=2)


if __name__ == "__main__":
    unittest.main()
