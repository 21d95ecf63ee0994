"""vpnctl - command-line control for the VPN daemon."""

__version__ = "0.1.0"
