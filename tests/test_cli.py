"""Tests for the speedlog entry point -- wiring, overrides, and exit codes."""

import os
import unittest
from unittest import mock

import speedlog
from monitor.config import DEFAULTS


def config(**overrides):
    cfg = dict(DEFAULTS)
    cfg.update(overrides)
    return cfg


class TestBuildScheduler(unittest.TestCase):
    def test_wires_config_values(self):
        s = speedlog.build_scheduler(config(
            log_dir="/data/logs",
            speed_interval=30.0,
            ping_interval=5.0,
            ping_hosts=["9.9.9.9", "1.1.1.1"],
            ping_attempts=3,
            ping_timeout_ms=1000,
            candidate_count=4,
            max_log_bytes=1024,
        ))

        self.assertEqual(s.speed_path, os.path.join("/data/logs", "logs.csv"))
        self.assertEqual(s.ping_path, os.path.join("/data/logs", "pings.csv"))
        self.assertEqual(s.speed_interval, 30.0)
        self.assertEqual(s.ping_interval, 5.0)
        self.assertEqual(s.rotation.hosts, ("9.9.9.9", "1.1.1.1"))
        self.assertEqual(s.sampler.attempts, 3)
        self.assertEqual(s.sampler.timeout_ms, 1000)
        self.assertEqual(s.pipeline.selector.candidate_count, 4)
        self.assertEqual(s.appender.max_bytes, 1024)

    def test_one_dashboard_shared(self):
        s = speedlog.build_scheduler(config())
        self.assertIs(s.pipeline.dashboard, s.dashboard)
        self.assertIs(s.pipeline.selector.dashboard, s.dashboard)

    def test_log_dir_defaults_to_executable_dir(self):
        with mock.patch.object(speedlog.sys, "argv", ["/opt/speedlog/speedlog.py"]):
            s = speedlog.build_scheduler(config(log_dir=""))
        self.assertEqual(s.speed_path, os.path.join("/opt/speedlog", "logs.csv"))


class TestMain(unittest.TestCase):
    def setUp(self):
        self.config = config()
        patches = {
            "load_config": mock.patch("speedlog.load_config", side_effect=lambda: dict(self.config)),
            "configure_logging": mock.patch("speedlog.configure_logging"),
            "build_scheduler": mock.patch("speedlog.build_scheduler"),
            "run": mock.patch("speedlog.asyncio.run"),
            "console": mock.patch("speedlog.console"),
        }
        self.mocks = {}
        for name, p in patches.items():
            self.mocks[name] = p.start()
            self.addCleanup(p.stop)

    def test_loop_ending_exits_nonzero(self):
        with self.assertRaises(SystemExit) as cm:
            speedlog.main([])
        self.assertEqual(cm.exception.code, 1)
        self.mocks["run"].assert_called_once()

    def test_keyboard_interrupt_returns(self):
        self.mocks["run"].side_effect = KeyboardInterrupt
        speedlog.main([])
        self.mocks["console"].print.assert_called_with("\n[yellow]Stopped by user[/yellow]")

    def test_loop_error_exits_nonzero(self):
        self.mocks["run"].side_effect = OSError("disk full")
        with self.assertRaises(SystemExit) as cm:
            speedlog.main([])
        self.assertEqual(cm.exception.code, 1)
        self.mocks["console"].print.assert_called_with("\n[red]Error: disk full[/red]")

    def test_invalid_config_never_starts(self):
        self.config["ping_interval"] = -1
        with self.assertRaises(SystemExit) as cm:
            speedlog.main([])
        self.assertEqual(cm.exception.code, 1)
        self.mocks["build_scheduler"].assert_not_called()

    def test_logging_configured_with_level(self):
        self.mocks["run"].side_effect = KeyboardInterrupt
        speedlog.main(["--log-level", "DEBUG"])
        self.mocks["configure_logging"].assert_called_once_with("DEBUG")

    def test_command_line_overrides_file(self):
        self.config["speed_interval"] = 60.0
        self.mocks["run"].side_effect = KeyboardInterrupt

        speedlog.main(["--ping-interval", "5", "--log-dir", "/tmp/x", "--connections", "8"])

        cfg = self.mocks["build_scheduler"].call_args.args[0]
        self.assertEqual(cfg["ping_interval"], 5.0)
        self.assertEqual(cfg["log_dir"], "/tmp/x")
        self.assertEqual(cfg["connections"], 8)
        self.assertEqual(cfg["speed_interval"], 60.0)

    def test_show_config(self):
        with mock.patch("speedlog.config_path", return_value="/home/u/.speedlog/config.json"):
            speedlog.main(["--show-config"])
        self.mocks["run"].assert_not_called()
        self.mocks["console"].print_json.assert_called_once()

    def test_save_config(self):
        with mock.patch("speedlog.save_config", return_value="/tmp/config.json") as save:
            speedlog.main(["--save-config", "--ping-interval", "7"])
        self.assertEqual(save.call_args.args[0]["ping_interval"], 7.0)
        self.mocks["run"].assert_not_called()


if __name__ == "__main__":
    unittest.main()
