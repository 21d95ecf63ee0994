"""Configuration management for vpnctl.

Loads client settings from ~/.config/vpnctl/config.cfg, falling back to
~/.config/vpnctl/.env when no config file exists. Environment variables
override both.
"""

import configparser
from dataclasses import dataclass
import os
from pathlib import Path
from typing import Dict, Optional

from dotenv import dotenv_values

CONFIG_DIR = Path.home() / ".config" / "vpnctl"
CONFIG_PATH = CONFIG_DIR / "config.cfg"
ENV_PATH = CONFIG_DIR / ".env"

DEFAULT_SOCKET_PATH = CONFIG_DIR / "daemon.sock"
# Local IPC only, so the bound is generous rather than tight.
DEFAULT_TIMEOUT = 5.0
DEFAULT_RECONNECT_INTERVAL = 0.5


@dataclass
class ClientConfig:
    socket_path: Path = DEFAULT_SOCKET_PATH
    timeout: float = DEFAULT_TIMEOUT
    reconnect_interval: float = DEFAULT_RECONNECT_INTERVAL


def load_raw_config(path: Path = CONFIG_PATH, env_path: Path = ENV_PATH) -> Dict[str, str]:
    """
    Load configuration values from the standard config path.
    Values are returned with lowercase keys for convenience.
    """
    data: Dict[str, str] = {}

    if path.exists():
        cfg = configparser.ConfigParser()
        cfg.read(path)
        if "DEFAULT" in cfg:
            data.update({k.lower(): v for k, v in cfg["DEFAULT"].items()})
        return data

    if env_path.exists():
        data.update(
            {k.lower(): v for k, v in dotenv_values(env_path).items() if v is not None}
        )

    return data


def _get_duration(raw: Dict[str, str], key: str, env_var: Optional[str], default: float) -> float:
    value = os.environ.get(env_var) if env_var else None
    if value is None or str(value).strip() == "":
        value = raw.get(key, "")
    if value is None or str(value).strip() == "":
        return default

    try:
        seconds = float(value)
    except ValueError:
        raise ValueError(f"Invalid value for '{key}': {value!r} is not a number.") from None
    if seconds <= 0:
        raise ValueError(f"Invalid value for '{key}': must be greater than zero.")
    return seconds


def get_client_config(raw: Optional[Dict[str, str]] = None) -> ClientConfig:
    """
    Build a ClientConfig from raw configuration values.
    Raises ValueError if a duration is malformed.
    """
    if raw is None:
        raw = load_raw_config()

    socket_path = os.environ.get("VPNCTL_SOCKET_PATH") or raw.get("socket_path", "").strip()

    return ClientConfig(
        socket_path=Path(socket_path).expanduser() if socket_path else DEFAULT_SOCKET_PATH,
        timeout=_get_duration(raw, "timeout", "VPNCTL_TIMEOUT_S", DEFAULT_TIMEOUT),
        reconnect_interval=_get_duration(
            raw, "reconnect_interval", None, DEFAULT_RECONNECT_INTERVAL
        ),
    )
