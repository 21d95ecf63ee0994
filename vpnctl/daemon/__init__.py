"""Client-side access to the VPN daemon.

- DaemonSession: Unix socket connection with one-time activation
- PendingCall: single-assignment result of one remote call
- Snapshot: read-only daemon state
- protocol: newline-delimited JSON messages
"""

from vpnctl.daemon.pending import CallState, PendingCall
from vpnctl.daemon.protocol import (
    ProtocolError,
    deserialize_message,
    serialize_request,
    serialize_response,
    serialize_state,
)
from vpnctl.daemon.session import DaemonSession, SessionState
from vpnctl.daemon.snapshot import LOCATION_AUTO, Location, Snapshot

__all__ = [
    "CallState",
    "DaemonSession",
    "LOCATION_AUTO",
    "Location",
    "PendingCall",
    "ProtocolError",
    "SessionState",
    "Snapshot",
    "deserialize_message",
    "serialize_request",
    "serialize_response",
    "serialize_state",
]
