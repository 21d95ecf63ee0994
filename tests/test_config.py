"""
Tests for config loading and validation.
"""

import os
import shutil
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from vpnctl.core.configs import (
    DEFAULT_RECONNECT_INTERVAL,
    DEFAULT_SOCKET_PATH,
    DEFAULT_TIMEOUT,
    get_client_config,
    load_raw_config,
)


class TestClientConfig(unittest.TestCase):
    """Test cases for configuration helpers."""

    def setUp(self):
        """Set up test environment with temporary directories."""
        self.temp_dir = tempfile.mkdtemp()
        self.config_file = Path(self.temp_dir) / "config.cfg"
        self.env_file = Path(self.temp_dir) / ".env"
        env = {k: v for k, v in os.environ.items() if not k.startswith("VPNCTL_")}
        self.env_patch = patch.dict(os.environ, env, clear=True)
        self.env_patch.start()

    def tearDown(self):
        """Clean up temporary files."""
        self.env_patch.stop()
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def _write_config(self, defaults: dict) -> None:
        import configparser

        cfg = configparser.ConfigParser()
        cfg["DEFAULT"] = defaults
        with open(self.config_file, "w") as handle:
            cfg.write(handle)

    def test_load_raw_config_lowercases_keys(self):
        self._write_config({"SOCKET_PATH": "/run/vpn.sock", "Timeout": "2.5"})

        raw = load_raw_config(self.config_file, self.env_file)
        self.assertEqual(raw["socket_path"], "/run/vpn.sock")
        self.assertEqual(raw["timeout"], "2.5")

    def test_load_raw_config_falls_back_to_env_file(self):
        self.env_file.write_text("SOCKET_PATH=/tmp/from-env.sock\nTIMEOUT=7\n")

        raw = load_raw_config(self.config_file, self.env_file)
        self.assertEqual(raw["socket_path"], "/tmp/from-env.sock")
        self.assertEqual(raw["timeout"], "7")

    def test_config_file_wins_over_env_file(self):
        self._write_config({"timeout": "2"})
        self.env_file.write_text("TIMEOUT=9\n")

        raw = load_raw_config(self.config_file, self.env_file)
        self.assertEqual(raw["timeout"], "2")

    def test_missing_files_give_empty_config(self):
        self.assertEqual(load_raw_config(self.config_file, self.env_file), {})

    def test_defaults(self):
        config = get_client_config({})
        self.assertEqual(config.socket_path, DEFAULT_SOCKET_PATH)
        self.assertEqual(config.timeout, DEFAULT_TIMEOUT)
        self.assertEqual(config.reconnect_interval, DEFAULT_RECONNECT_INTERVAL)

    def test_values_from_raw_config(self):
        config = get_client_config(
            {"socket_path": "/run/vpn.sock", "timeout": "2.5", "reconnect_interval": "0.1"}
        )
        self.assertEqual(config.socket_path, Path("/run/vpn.sock"))
        self.assertEqual(config.timeout, 2.5)
        self.assertEqual(config.reconnect_interval, 0.1)

    def test_environment_overrides(self):
        with patch.dict(os.environ, {"VPNCTL_SOCKET_PATH": "/env.sock", "VPNCTL_TIMEOUT_S": "12"}):
            config = get_client_config({"socket_path": "/file.sock", "timeout": "3"})
        self.assertEqual(config.socket_path, Path("/env.sock"))
        self.assertEqual(config.timeout, 12.0)

    def test_invalid_timeout_raises(self):
        with self.assertRaises(ValueError):
            get_client_config({"timeout": "soon"})
        with self.assertRaises(ValueError):
            get_client_config({"timeout": "0"})


if __name__ == "__main__":
    unittest.main()
