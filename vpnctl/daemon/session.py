"""Client side of the daemon connection.

DaemonSession owns the Unix socket to the daemon for the lifetime of one
CLI run. It keeps retrying until the daemon answers, tracks the latest
state push as a Snapshot, and matches call results to PendingCalls.

Usage:
    session = DaemonSession(socket_path)
    session.on_first_active(lambda: ...)   # fires once, on the loop
    session.connect()
    ...
    await session.close()
"""

import asyncio
import logging
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Sequence

from vpnctl.core.configs import ClientConfig, DEFAULT_RECONNECT_INTERVAL
from vpnctl.core.errors import CliError, ErrorKind, InternalError
from vpnctl.daemon.pending import PendingCall
from vpnctl.daemon.protocol import (
    MSG_RESULT,
    MSG_STATE,
    ProtocolError,
    deserialize_message,
    serialize_request,
)
from vpnctl.daemon.snapshot import Snapshot

logger = logging.getLogger(__name__)

# Upper bound for a single message line from the daemon.
MAX_MESSAGE_SIZE = 1024 * 1024


class SessionState(Enum):
    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    ACTIVE_FIRST = "active_first"
    ACTIVE_SUBSEQUENT = "active_subsequent"
    CLOSED = "closed"


class DaemonSession:
    """
    Connection lifecycle to the daemon.

    Only the first activation is announced to subscribers. When the daemon
    restarts the session reconnects quietly and moves to ACTIVE_SUBSEQUENT.

    Thread safety: none needed. Everything here runs on the single asyncio
    loop that drives the CLI run.
    """

    def __init__(
        self,
        socket_path: Path,
        reconnect_interval: float = DEFAULT_RECONNECT_INTERVAL,
    ):
        """
        Initialize session.

        Args:
            socket_path: Path to the daemon's Unix socket
            reconnect_interval: Seconds between connection attempts
        """
        self.socket_path = Path(socket_path)
        self.reconnect_interval = reconnect_interval

        self.state = SessionState.DISCONNECTED
        self.connect_attempts = 0

        self._has_been_active = False
        self._first_active_subscribers: List[Callable[[], None]] = []
        self._snapshot: Optional[Snapshot] = None
        self._writer: Optional[asyncio.StreamWriter] = None
        self._pending: Dict[int, PendingCall] = {}
        self._next_call_id = 1
        self._task: Optional[asyncio.Task] = None

    @classmethod
    def from_config(cls, config: ClientConfig) -> "DaemonSession":
        return cls(config.socket_path, config.reconnect_interval)

    @property
    def is_active(self) -> bool:
        return self.state in (SessionState.ACTIVE_FIRST, SessionState.ACTIVE_SUBSEQUENT)

    @property
    def has_been_active(self) -> bool:
        return self._has_been_active

    def on_first_active(self, callback: Callable[[], None]) -> None:
        """
        Subscribe to the one-time "became active" notification.

        Subscribing after the session already became active schedules the
        callback on the loop right away.
        """
        if self._has_been_active:
            asyncio.get_running_loop().call_soon(callback)
        else:
            self._first_active_subscribers.append(callback)

    def connect(self) -> None:
        """Start connecting in the background. Returns immediately."""
        if self._task is not None or self.state is not SessionState.DISCONNECTED:
            raise InternalError(f"connect() called on a session that is {self.state.value}")
        self._task = asyncio.get_running_loop().create_task(self._maintain_connection())

    def snapshot(self) -> Snapshot:
        """
        Current daemon state.

        Raises:
            InternalError: If the session has never been active
        """
        if not self._has_been_active or self._snapshot is None:
            raise InternalError("snapshot() used before the daemon connection became active")
        return self._snapshot

    def call(self, method: str, args: Sequence[Any]) -> PendingCall:
        """
        Send a remote call to the daemon.

        Returns a PendingCall; it is already failed with UNREACHABLE when
        the session is not connected.
        """
        if not self.is_active or self._writer is None:
            return PendingCall.failed(
                CliError(ErrorKind.UNREACHABLE, "Not connected to the daemon")
            )

        call_id = self._next_call_id
        self._next_call_id += 1

        pending = PendingCall()
        self._pending[call_id] = pending
        logger.debug("Calling %s (id %d)", method, call_id)
        self._writer.write(serialize_request(call_id, method, args))
        return pending

    async def close(self) -> None:
        """Disconnect and stop reconnecting. Calls in flight are dropped."""
        if self.state is SessionState.CLOSED:
            return
        self.state = SessionState.CLOSED
        self._first_active_subscribers.clear()
        self._pending.clear()

        if self._task is not None:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            except Exception:
                logger.debug("Connection task failed", exc_info=True)
            self._task = None

        writer = self._close_writer()
        if writer is not None:
            try:
                await writer.wait_closed()
            except OSError as e:
                logger.debug("Error while closing the daemon connection: %s", e)

    async def _maintain_connection(self) -> None:
        """Connect, serve one connection until it drops, repeat."""
        while self.state is not SessionState.CLOSED:
            self.state = SessionState.CONNECTING
            self.connect_attempts += 1
            try:
                reader, writer = await asyncio.open_unix_connection(
                    str(self.socket_path), limit=MAX_MESSAGE_SIZE
                )
            except OSError as e:
                logger.debug("Connection attempt %d failed: %s", self.connect_attempts, e)
                self.state = SessionState.DISCONNECTED
                await asyncio.sleep(self.reconnect_interval)
                continue

            logger.debug("Connected to %s", self.socket_path)
            self._writer = writer
            try:
                await self._read_messages(reader)
            finally:
                self._connection_lost()

            await asyncio.sleep(self.reconnect_interval)

    async def _read_messages(self, reader: asyncio.StreamReader) -> None:
        while True:
            try:
                line = await reader.readline()
            except (OSError, ValueError) as e:
                # ValueError: line longer than MAX_MESSAGE_SIZE
                logger.debug("Daemon connection failed: %s", e)
                return
            if not line:
                logger.debug("Daemon closed the connection")
                return

            try:
                message = deserialize_message(line)
                self._handle_message(message)
            except ProtocolError as e:
                logger.debug("Dropping daemon connection: %s", e)
                return

    def _handle_message(self, message: Dict[str, Any]) -> None:
        kind = message["type"]
        if kind == MSG_STATE:
            self._handle_state(message.get("data") or {})
        elif kind == MSG_RESULT:
            self._handle_result(message)
        else:
            logger.debug("Ignoring message of type %r", kind)

    def _handle_state(self, data: Dict[str, Any]) -> None:
        try:
            self._snapshot = Snapshot.from_dict(data)
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise ProtocolError(f"Invalid state message: {e}") from e

        if self.state is not SessionState.CONNECTING:
            return

        if self._has_been_active:
            self.state = SessionState.ACTIVE_SUBSEQUENT
            logger.debug("Reconnected to daemon")
            return

        self.state = SessionState.ACTIVE_FIRST
        self._has_been_active = True
        logger.debug("Daemon connection active")

        loop = asyncio.get_running_loop()
        subscribers = self._first_active_subscribers
        self._first_active_subscribers = []
        for callback in subscribers:
            loop.call_soon(callback)

    def _handle_result(self, message: Dict[str, Any]) -> None:
        call_id = message.get("id")
        # bool is an int subclass; JSON true must not match call 1
        pending = self._pending.pop(call_id, None) if type(call_id) is int else None
        if pending is None:
            logger.debug("Ignoring result for unknown call %r", call_id)
            return

        error = message.get("error")
        if error is not None:
            if not isinstance(error, dict):
                error = {"message": str(error)}
            pending.fail(CliError(
                ErrorKind.RPC_FAILURE,
                error.get("message") or "Daemon returned an error",
                code=error.get("code"),
            ))
        else:
            pending.resolve(message.get("result"))

    def _connection_lost(self) -> None:
        self._close_writer()
        if self.state is not SessionState.CLOSED:
            self.state = SessionState.DISCONNECTED

        pending = self._pending
        self._pending = {}
        for call in pending.values():
            call.fail(CliError(ErrorKind.UNREACHABLE, "Connection to the daemon was lost"))

    def _close_writer(self) -> Optional[asyncio.StreamWriter]:
        writer = self._writer
        if writer is not None:
            writer.close()
            self._writer = None
        return writer
