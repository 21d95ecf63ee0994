"""
Test doubles for vpnctl.

FakeSession stands in for DaemonSession when testing commands and the
runner; FakeDaemon is a real Unix-socket server speaking the wire protocol,
for testing DaemonSession itself.
"""

import asyncio
import io
import shutil
import tempfile
from pathlib import Path

from vpnctl.core.configs import ClientConfig
from vpnctl.core.errors import InternalError
from vpnctl.daemon.pending import PendingCall
from vpnctl.daemon.protocol import deserialize_message, serialize_response, serialize_state
from vpnctl.daemon.snapshot import Snapshot
from vpnctl.ui.output import UIManager

LOCATIONS = [
    {"id": "us_california", "displayName": "US California"},
    {"id": "de-frankfurt", "displayName": "DE Frankfurt"},
    {"id": "de_berlin", "displayName": "DE Berlin"},
]

STATE = {
    "settings": {"location": "de-frankfurt", "debugLogging": None},
    "locations": LOCATIONS,
}


def make_snapshot(settings=None, locations=None) -> Snapshot:
    return Snapshot.from_dict({
        "settings": STATE["settings"] if settings is None else settings,
        "locations": LOCATIONS if locations is None else locations,
    })


def make_ui():
    """UIManager writing to StringIO buffers: (ui, stdout, stderr)."""
    stdout, stderr = io.StringIO(), io.StringIO()
    return UIManager(stdout=stdout, stderr=stderr), stdout, stderr


class FakeSession:
    """In-memory DaemonSession double that counts connections and calls."""

    def __init__(self, snapshot=None, activate=True, respond=True, reply=None, error=None):
        self._snapshot = snapshot if snapshot is not None else make_snapshot()
        self.activate = activate
        self.respond = respond
        self.reply = reply
        self.error = error

        self.connect_attempts = 0
        self.calls = []
        self.closed = False
        self.has_been_active = False
        self._subscribers = []

    def on_first_active(self, callback):
        self._subscribers.append(callback)

    def connect(self):
        self.connect_attempts += 1
        if self.activate:
            asyncio.get_running_loop().call_soon(self._become_active)

    def _become_active(self):
        self.has_been_active = True
        subscribers, self._subscribers = self._subscribers, []
        for callback in subscribers:
            callback()

    def snapshot(self):
        if not self.has_been_active:
            raise InternalError("snapshot() before activation")
        return self._snapshot

    def call(self, method, args):
        self.calls.append((method, tuple(args)))
        pending = PendingCall()
        if self.respond:
            loop = asyncio.get_running_loop()
            if self.error is not None:
                loop.call_soon(pending.fail, self.error)
            else:
                loop.call_soon(pending.resolve, self.reply)
        return pending

    async def close(self):
        self.closed = True


class SessionFactory:
    """Creates FakeSessions and remembers them."""

    def __init__(self, **kwargs):
        self.kwargs = kwargs
        self.sessions = []

    def __call__(self, config):
        session = FakeSession(**self.kwargs)
        self.sessions.append(session)
        return session

    @property
    def session(self):
        return self.sessions[-1]


def fast_config(socket_path=None, timeout=1.0) -> ClientConfig:
    return ClientConfig(
        socket_path=Path(socket_path or "/nonexistent/vpnctl.sock"),
        timeout=timeout,
        reconnect_interval=0.02,
    )


async def wait_until(predicate, timeout=2.0):
    """Poll predicate on the loop until it holds."""
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while not predicate():
        if loop.time() > deadline:
            raise AssertionError("Condition not met in time")
        await asyncio.sleep(0.01)


class FakeDaemon:
    """
    Minimal daemon on a Unix socket.

    Sends `state` (or `greeting`, when set) on every new connection,
    records every call it receives,
    and answers with respond(message), which returns bytes or None (no
    answer).
    """

    def __init__(self, state=None, respond=None):
        self.temp_dir = tempfile.mkdtemp(prefix="vpnctl")
        self.socket_path = Path(self.temp_dir) / "daemon.sock"
        self.state = STATE if state is None else state
        self.respond = respond or (lambda message: serialize_response(message["id"], result=True))
        self.received = []
        self.connections = 0
        self.send_state = True
        # Raw bytes sent in place of the state push, e.g. a malformed line
        self.greeting = None
        self.server = None
        self._writers = []

    async def start(self):
        self.server = await asyncio.start_unix_server(self._handle, path=str(self.socket_path))

    async def _handle(self, reader, writer):
        self.connections += 1
        self._writers.append(writer)
        try:
            if self.greeting is not None:
                writer.write(self.greeting)
                await writer.drain()
            elif self.send_state:
                writer.write(serialize_state(self.state))
                await writer.drain()
            while True:
                line = await reader.readline()
                if not line:
                    break
                message = deserialize_message(line)
                self.received.append(message)
                response = self.respond(message)
                if response is not None:
                    writer.write(response)
                    await writer.drain()
        except ConnectionError:
            pass
        finally:
            writer.close()

    def send(self, data: bytes):
        for writer in self._writers:
            if not writer.is_closing():
                writer.write(data)

    def drop_connections(self):
        for writer in self._writers:
            writer.close()
        self._writers = []

    async def stop(self):
        self.drop_connections()
        if self.server is not None:
            self.server.close()
            await self.server.wait_closed()
        shutil.rmtree(self.temp_dir, ignore_errors=True)
