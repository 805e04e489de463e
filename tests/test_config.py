"""Tests for monitor.config -- configuration persistence and validation."""

import json
import os
import tempfile
import unittest
from unittest import mock

from monitor.config import DEFAULTS, config_path, load_config, save_config, validate_config


class TestConfigDefaults(unittest.TestCase):
    def test_defaults_have_required_keys(self):
        for key in ("log_dir", "speed_interval", "ping_interval", "ping_hosts",
                    "ping_attempts", "ping_timeout_ms", "candidate_count",
                    "connections", "max_log_bytes", "log_level"):
            self.assertIn(key, DEFAULTS)

    def test_default_values(self):
        self.assertEqual(DEFAULTS["speed_interval"], 10.0)
        self.assertEqual(DEFAULTS["ping_interval"], 3.0)
        self.assertEqual(DEFAULTS["ping_timeout_ms"], 2048)
        self.assertEqual(DEFAULTS["max_log_bytes"], 104_857_600)
        self.assertEqual(DEFAULTS["ping_hosts"], ["1.1.1.1", "8.8.8.8", "1.0.0.1", "8.8.4.4"])

    def test_defaults_are_valid(self):
        validate_config(dict(DEFAULTS))


class TestLoadSaveConfig(unittest.TestCase):
    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmpdir.cleanup)
        self.path = os.path.join(self.tmpdir.name, "sub", "config.json")
        patcher = mock.patch("monitor.config._config_path", return_value=self.path)
        patcher.start()
        self.addCleanup(patcher.stop)

    def test_load_defaults_when_missing(self):
        cfg = load_config()
        self.assertEqual(cfg, DEFAULTS)
        self.assertIsNot(cfg, DEFAULTS)

    def test_save_and_load(self):
        returned = save_config({"ping_interval": 5, "log_dir": "/tmp/logs"})
        self.assertEqual(returned, self.path)

        cfg = load_config()
        self.assertEqual(cfg["ping_interval"], 5)
        self.assertEqual(cfg["log_dir"], "/tmp/logs")
        # Defaults still present
        self.assertEqual(cfg["connections"], 4)

    def test_saved_file_is_json(self):
        save_config({"candidate_count": 3})
        with open(self.path, encoding="utf-8") as fh:
            self.assertEqual(json.load(fh), {"candidate_count": 3})

    def test_corrupt_file_returns_defaults(self):
        os.makedirs(os.path.dirname(self.path))
        with open(self.path, "w") as f:
            f.write("NOT JSON")
        self.assertEqual(load_config(), DEFAULTS)

    def test_non_object_ignored(self):
        os.makedirs(os.path.dirname(self.path))
        with open(self.path, "w") as f:
            f.write("[1, 2, 3]")
        self.assertEqual(load_config(), DEFAULTS)

    def test_config_path(self):
        self.assertEqual(config_path(), self.path)


class TestValidateConfig(unittest.TestCase):
    def _validate(self, **overrides):
        cfg = dict(DEFAULTS)
        cfg.update(overrides)
        validate_config(cfg)

    def test_non_positive_numbers(self):
        for key in ("speed_interval", "ping_interval", "ping_attempts",
                    "ping_timeout_ms", "candidate_count", "max_log_bytes"):
            with self.subTest(key=key):
                with self.assertRaises(ValueError):
                    self._validate(**{key: 0})

    def test_wrong_types(self):
        with self.assertRaises(ValueError):
            self._validate(speed_interval="10")
        with self.assertRaises(ValueError):
            self._validate(ping_attempts=True)

    def test_counts_must_be_whole_numbers(self):
        for key in ("ping_attempts", "candidate_count", "catalog_size", "connections"):
            with self.subTest(key=key):
                with self.assertRaises(ValueError):
                    self._validate(**{key: 2.5})
                with self.assertRaises(ValueError):
                    self._validate(**{key: 3.0})

    def test_fractional_intervals_allowed(self):
        self._validate(speed_interval=0.5, ping_interval=2.5, download_duration=1.5)

    def test_icmp_privileged_must_be_bool(self):
        self._validate(icmp_privileged=True)
        for value in ("no", 0, None):
            with self.subTest(value=value):
                with self.assertRaises(ValueError):
                    self._validate(icmp_privileged=value)

    def test_connections_range(self):
        self._validate(connections=1)
        self._validate(connections=32)
        with self.assertRaises(ValueError):
            self._validate(connections=33)

    def test_duration_range(self):
        with self.assertRaises(ValueError):
            self._validate(download_duration=0.5)
        with self.assertRaises(ValueError):
            self._validate(upload_duration=301.0)

    def test_ping_hosts(self):
        for hosts in ([], "1.1.1.1", ["1.1.1.1", ""], [1]):
            with self.subTest(hosts=hosts):
                with self.assertRaises(ValueError):
                    self._validate(ping_hosts=hosts)


if __name__ == "__main__":
    unittest.main()
